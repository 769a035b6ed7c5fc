"""
Game Loop - Drives one session through the oracle.

Each operation that needs the oracle runs in three steps:
1. Dispatch a begin action (sets pending, or is ignored)
2. Call the oracle with no lock held
3. Dispatch the resolution (verdict / item) or the rollback on failure

A failed oracle call never consumes a question and never leaves
pending set. Unexpected exceptions roll back the same way and are
re-raised to the caller.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, TYPE_CHECKING
import logging
import uuid

from ..engine_core.action import Action, ActionResult, Effect, UNSUPPORTED_VERDICT
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameSession
from ..oracle.errors import OracleUnavailable

if TYPE_CHECKING:
    from .manager import Session
    from ..oracle.client import OracleClient

log = logging.getLogger("guessin20.game_loop")

ORACLE_UNAVAILABLE = "ORACLE_UNAVAILABLE"


@dataclass
class TurnResult:
    """
    Result of one player operation.

    accepted is False when the operation was ignored (wrong phase,
    pending call, blank input) or when the oracle failed.
    """
    accepted: bool
    state: GameSession

    effects: list[Effect] = field(default_factory=list)
    changes: list[str] = field(default_factory=list)

    error: str | None = None
    error_code: str | None = None

    @property
    def oracle_failed(self) -> bool:
        return self.error_code == ORACLE_UNAVAILABLE

    @classmethod
    def from_action(cls, result: ActionResult) -> TurnResult:
        return cls(
            accepted=result.accepted,
            state=result.new_state,
            effects=list(result.effects),
            changes=list(result.changes),
            error=result.error,
            error_code=result.error_code,
        )

    @classmethod
    def oracle_failure(cls, rollback: ActionResult, error: str) -> TurnResult:
        return cls(
            accepted=False,
            state=rollback.new_state,
            changes=list(rollback.changes),
            error=error,
            error_code=ORACLE_UNAVAILABLE,
        )

    def to_dict(self, reveal_secret: bool = True) -> dict[str, Any]:
        return {
            "accepted": self.accepted,
            "effects": [e.value for e in self.effects],
            "changes": list(self.changes),
            "error": self.error,
            "error_code": self.error_code,
            "state": self.state.to_dict(reveal_secret=reveal_secret),
        }


class GameLoop:
    """
    The game driver for one session.

    Usage:
        loop = GameLoop(session, oracle)

        result = loop.start_new_game()
        if result.oracle_failed:
            show_error(result.error)

        result = loop.submit("Is it a fruit?")
        play_feedback(result.effects)
    """

    def __init__(self, session: Session, oracle: OracleClient, reducer: Reducer | None = None):
        self.session = session
        self.oracle = oracle
        self.reducer = reducer or Reducer()

    @property
    def state(self) -> GameSession:
        return self.session.game

    def start_new_game(self) -> TurnResult:
        """Ask the oracle for a secret item and enter playing."""
        game_id = uuid.uuid4().hex
        begun = self._dispatch(Action.start_new_game(game_id))
        if not begun.accepted:
            return TurnResult.from_action(begun)

        try:
            secret_item = self.oracle.select_secret_item()
        except OracleUnavailable as e:
            log.warning("Session %s: could not start a game: %s", self.session.session_id, e)
            rollback = self._dispatch(Action.secret_item_failed(game_id, str(e)))
            return TurnResult.oracle_failure(rollback, str(e))
        except Exception as e:
            log.exception("Session %s: item selection raised", self.session.session_id)
            self._dispatch(Action.secret_item_failed(game_id, repr(e)))
            raise

        return TurnResult.from_action(
            self._dispatch(Action.secret_item_selected(game_id, secret_item))
        )

    def submit(self, user_text: str) -> TurnResult:
        """
        Submit a question or a guess.

        Ignored unless the game is playing, idle and has budget left.
        The text is recorded as typed; blank input is ignored.
        """
        text = user_text or ""
        begun = self._dispatch(Action.submit(text))
        if not begun.accepted:
            return TurnResult.from_action(begun)

        pending_state = begun.new_state
        try:
            verdict = self.oracle.evaluate(
                pending_state.secret_item,
                text,
                pending_state.questions_used,
            )
        except OracleUnavailable as e:
            log.warning("Session %s: evaluation failed: %s", self.session.session_id, e)
            rollback = self._dispatch(Action.submit_failed(pending_state.game_id, str(e)))
            return TurnResult.oracle_failure(rollback, str(e))
        except Exception as e:
            log.exception("Session %s: evaluation raised", self.session.session_id)
            self._dispatch(Action.submit_failed(pending_state.game_id, repr(e)))
            raise

        resolved = self._dispatch(Action.record_verdict(pending_state.game_id, text, verdict))
        if resolved.error_code == UNSUPPORTED_VERDICT:
            return TurnResult.oracle_failure(resolved, resolved.error)
        return TurnResult.from_action(resolved)

    def give_up(self) -> TurnResult:
        """Reveal the item and lose. No oracle call."""
        return TurnResult.from_action(self._dispatch(Action.give_up()))

    def reset(self) -> TurnResult:
        """Return to intro, discarding all game data."""
        return TurnResult.from_action(self._dispatch(Action.reset()))

    def _dispatch(self, action: Action) -> ActionResult:
        with self.session.lock:
            result = self.reducer.apply(self.session.game, action)
            if result.accepted:
                self.session.game = result.new_state
                self.session.touch()
        return result
