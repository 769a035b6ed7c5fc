"""
Game State - Immutable session value for one play-through.

Design principles:
- Immutable: every transition returns a new GameSession
- Serializable: to_dict() feeds the API and the CLI
- Owned by the caller: there is no module-level session
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

DEFAULT_MAX_QUESTIONS = 20

GIVE_UP_TEXT = "I give up. What was the answer?"


class GamePhase(Enum):
    """High-level game phases."""
    INTRO = "intro"
    AWAITING_ITEM = "awaiting-item"  # Oracle is choosing the secret item
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


TERMINAL_PHASES = frozenset({GamePhase.WON, GamePhase.LOST})


class EntryKind(Enum):
    """What the player did in a turn."""
    QUESTION = "question"
    GUESS = "guess"


class BudgetPressure(Enum):
    """How close the player is to running out of questions."""
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class Entry:
    """
    One user turn plus its resolution.

    Clarification turns have no question_number: they do not consume budget.
    is_correct is only set on guesses.
    """
    entry_id: int
    kind: EntryKind
    user_text: str
    response_text: str
    question_number: int | None = None
    is_correct: bool | None = None

    @property
    def counts_against_budget(self) -> bool:
        return self.question_number is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "kind": self.kind.value,
            "user_text": self.user_text,
            "response_text": self.response_text,
            "question_number": self.question_number,
            "is_correct": self.is_correct,
        }


@dataclass(frozen=True)
class GameSession:
    """
    Complete state of one session at a point in time.

    All state changes go through the reducer. The transcript is a tuple so
    entries can never be reordered or edited in place.
    """
    phase: GamePhase = GamePhase.INTRO
    max_questions: int = DEFAULT_MAX_QUESTIONS
    secret_item: str | None = None
    questions_used: int = 0
    transcript: tuple[Entry, ...] = field(default_factory=tuple)
    pending: bool = False

    # Identifies the game a pending oracle call belongs to
    game_id: str | None = None

    def __post_init__(self):
        if self.max_questions < 1:
            raise ValueError("max_questions must be >= 1")

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def questions_remaining(self) -> int:
        return self.max_questions - self.questions_used

    @property
    def can_submit(self) -> bool:
        """Whether a new submission would be accepted right now."""
        return (
            self.phase == GamePhase.PLAYING
            and not self.pending
            and self.questions_used < self.max_questions
        )

    @property
    def budget_pressure(self) -> BudgetPressure:
        """
        Pressure level for display, scaled to the budget.

        With the default budget of 20 the thresholds are 10 and 15 questions.
        """
        if self.questions_used * 4 >= self.max_questions * 3:
            return BudgetPressure.CRITICAL
        if self.questions_used * 2 >= self.max_questions:
            return BudgetPressure.WARNING
        return BudgetPressure.NORMAL

    @property
    def last_entry(self) -> Entry | None:
        return self.transcript[-1] if self.transcript else None

    def next_entry_id(self) -> int:
        return len(self.transcript) + 1

    def with_entry(self, entry: Entry) -> GameSession:
        """Return new session with entry appended to the transcript."""
        return self._copy_with(transcript=self.transcript + (entry,))

    def _copy_with(self, **kwargs) -> GameSession:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self, reveal_secret: bool = True) -> dict[str, Any]:
        """
        Serialize the read state exposed to presentation layers.

        With reveal_secret=False the item is only included once the game
        is over.
        """
        show_item = reveal_secret or self.is_terminal
        return {
            "phase": self.phase.value,
            "questions_used": self.questions_used,
            "max_questions": self.max_questions,
            "questions_remaining": self.questions_remaining,
            "budget_pressure": self.budget_pressure.value,
            "pending": self.pending,
            "secret_item": self.secret_item if show_item else None,
            "transcript": [entry.to_dict() for entry in self.transcript],
        }
