"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player operations (start a game, submit, give up, reset)
2. Oracle resolutions (secret item chosen, verdict recorded, call failed)

Every oracle call is bracketed by two actions: one that sets `pending`
and one that resolves it. All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from ..oracle.verdict import Verdict
    from .state import GameSession


class ActionType(Enum):
    """Types of actions in the system."""
    # Player operations
    START_NEW_GAME = "start_new_game"
    SUBMIT = "submit"
    GIVE_UP = "give_up"
    RESET = "reset"

    # Oracle resolutions
    SECRET_ITEM_SELECTED = "secret_item_selected"
    SECRET_ITEM_FAILED = "secret_item_failed"
    RECORD_VERDICT = "record_verdict"
    SUBMIT_FAILED = "submit_failed"


class Effect(Enum):
    """
    Observable outcome of an accepted action.

    Presentation layers map these to feedback (sounds, banners);
    the engine never does.
    """
    CLARIFICATION = "clarification"  # No question consumed
    YES = "yes"
    NO = "no"
    WRONG_GUESS = "wrong_guess"
    WIN = "win"
    LOSE = "lose"
    CONTINUE = "continue"  # Game still running


INVALID_TRANSITION = "INVALID_TRANSITION"
UNSUPPORTED_VERDICT = "UNSUPPORTED_VERDICT"


@dataclass
class ActionPayload:
    """
    Payload for an action.

    Different action types use different fields; validation happens
    in the reducer.
    """
    user_text: str | None = None
    secret_item: str | None = None
    verdict: Verdict | None = None
    game_id: str | None = None
    reason: str | None = None


@dataclass
class Action:
    """A complete action to be applied to a GameSession."""
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def start_new_game(cls, game_id: str) -> Action:
        return cls(ActionType.START_NEW_GAME, ActionPayload(game_id=game_id))

    @classmethod
    def secret_item_selected(cls, game_id: str | None, secret_item: str) -> Action:
        return cls(
            ActionType.SECRET_ITEM_SELECTED,
            ActionPayload(game_id=game_id, secret_item=secret_item),
        )

    @classmethod
    def secret_item_failed(cls, game_id: str | None, reason: str) -> Action:
        return cls(
            ActionType.SECRET_ITEM_FAILED,
            ActionPayload(game_id=game_id, reason=reason),
        )

    @classmethod
    def submit(cls, user_text: str) -> Action:
        return cls(ActionType.SUBMIT, ActionPayload(user_text=user_text))

    @classmethod
    def record_verdict(cls, game_id: str | None, user_text: str, verdict: Verdict) -> Action:
        return cls(
            ActionType.RECORD_VERDICT,
            ActionPayload(game_id=game_id, user_text=user_text, verdict=verdict),
        )

    @classmethod
    def submit_failed(cls, game_id: str | None, reason: str) -> Action:
        return cls(
            ActionType.SUBMIT_FAILED,
            ActionPayload(game_id=game_id, reason=reason),
        )

    @classmethod
    def give_up(cls) -> Action:
        return cls(ActionType.GIVE_UP)

    @classmethod
    def reset(cls) -> Action:
        return cls(ActionType.RESET)


@dataclass
class ActionResult:
    """
    Result of applying an action.

    An ignored action is not an error: new_state is the unchanged session
    and accepted is False.
    """
    accepted: bool
    new_state: GameSession
    error: str | None = None
    error_code: str | None = None

    # For UI/presentation
    effects: list[Effect] = field(default_factory=list)
    changes: list[str] = field(default_factory=list)  # Human-readable changes

    @classmethod
    def ignored(cls, state: GameSession, reason: str) -> ActionResult:
        """Create a result for an action not permitted in the current phase."""
        return cls(
            accepted=False,
            new_state=state,
            error=reason,
            error_code=INVALID_TRANSITION,
        )

    @classmethod
    def success_with_state(
        cls,
        state: GameSession,
        effects: list[Effect] | None = None,
        changes: list[str] | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            accepted=True,
            new_state=state,
            effects=effects or [],
            changes=changes or [],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "accepted": self.accepted,
            "error": self.error,
            "error_code": self.error_code,
            "effects": [e.value for e in self.effects],
            "changes": list(self.changes),
        }
