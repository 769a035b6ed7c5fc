"""
Reducer - Applies actions to a game session.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (session, action) -> ActionResult
- Validates the phase before applying
- An action that is not allowed is ignored, never raised
- No I/O: oracle calls happen in the game loop, between actions
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .state import GameSession, GamePhase, Entry, EntryKind, GIVE_UP_TEXT
from .action import Action, ActionType, ActionResult, Effect, UNSUPPORTED_VERDICT
from ..oracle.verdict import Verdict, Win, PlainAnswer, WrongGuess, NeedsClarification, Answer

log = logging.getLogger("guessin20.reducer")

NEW_GAME_PHASES = frozenset({GamePhase.INTRO, GamePhase.WON, GamePhase.LOST})


@dataclass
class Reducer:
    """
    Reducer applies actions to a GameSession.

    Stateless - all state is in GameSession.
    """

    def apply(self, state: GameSession, action: Action) -> ActionResult:
        """
        Apply an action to the session.

        Returns an accepted ActionResult with the new session, or an
        ignored one carrying the unchanged session.
        """
        rejection = self._validate_action(state, action)
        if rejection:
            log.debug("Ignored %s: %s", action.action_type.value, rejection)
            return ActionResult.ignored(state, rejection)

        handler = self._get_handler(action.action_type)
        return handler(state, action)

    def _validate_action(self, state: GameSession, action: Action) -> str | None:
        """
        Check that an action is allowed in the current state.

        Returns the reason it is not, None if it is.
        """
        action_type = action.action_type

        if action_type == ActionType.RESET:
            return None

        if action_type == ActionType.START_NEW_GAME:
            if state.pending:
                return "An oracle call is already in progress"
            if state.phase not in NEW_GAME_PHASES:
                return f"Cannot start a new game while {state.phase.value}"
            return None

        if action_type in {ActionType.SECRET_ITEM_SELECTED, ActionType.SECRET_ITEM_FAILED}:
            if state.phase != GamePhase.AWAITING_ITEM or not state.pending:
                return "No secret item request is outstanding"
            if action.payload.game_id != state.game_id:
                return "Secret item belongs to another game"
            if action_type == ActionType.SECRET_ITEM_SELECTED and not action.payload.secret_item:
                return "Secret item is empty"
            return None

        if action_type == ActionType.SUBMIT:
            if state.phase != GamePhase.PLAYING:
                return f"Cannot submit while {state.phase.value}"
            if state.pending:
                return "An oracle call is already in progress"
            if state.questions_used >= state.max_questions:
                return "No questions remaining"
            if not (action.payload.user_text or "").strip():
                return "Input is blank"
            return None

        if action_type in {ActionType.RECORD_VERDICT, ActionType.SUBMIT_FAILED}:
            if state.phase != GamePhase.PLAYING or not state.pending:
                return "No evaluation is outstanding"
            if action.payload.game_id != state.game_id:
                return "Verdict belongs to another game"
            if action_type == ActionType.RECORD_VERDICT and action.payload.verdict is None:
                return "Verdict is missing"
            return None

        if action_type == ActionType.GIVE_UP:
            if state.phase != GamePhase.PLAYING:
                return f"Cannot give up while {state.phase.value}"
            return None

        return f"Unknown action type: {action_type}"

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.START_NEW_GAME: self._handle_start_new_game,
            ActionType.SECRET_ITEM_SELECTED: self._handle_secret_item_selected,
            ActionType.SECRET_ITEM_FAILED: self._handle_secret_item_failed,
            ActionType.SUBMIT: self._handle_submit,
            ActionType.RECORD_VERDICT: self._handle_record_verdict,
            ActionType.SUBMIT_FAILED: self._handle_submit_failed,
            ActionType.GIVE_UP: self._handle_give_up,
            ActionType.RESET: self._handle_reset,
        }
        return handlers[action_type]

    def _handle_start_new_game(self, state: GameSession, action: Action) -> ActionResult:
        """Enter awaiting-item. Data from a previous game is discarded here."""
        new_state = GameSession(
            phase=GamePhase.AWAITING_ITEM,
            max_questions=state.max_questions,
            pending=True,
            game_id=action.payload.game_id,
        )
        return ActionResult.success_with_state(
            new_state,
            changes=["Waiting for the oracle to choose an item"],
        )

    def _handle_secret_item_selected(self, state: GameSession, action: Action) -> ActionResult:
        new_state = state._copy_with(
            phase=GamePhase.PLAYING,
            secret_item=action.payload.secret_item,
            questions_used=0,
            transcript=(),
            pending=False,
        )
        return ActionResult.success_with_state(
            new_state,
            effects=[Effect.CONTINUE],
            changes=["Secret item chosen"],
        )

    def _handle_secret_item_failed(self, state: GameSession, action: Action) -> ActionResult:
        new_state = GameSession(max_questions=state.max_questions)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Could not start a game: {action.payload.reason}"],
        )

    def _handle_submit(self, state: GameSession, action: Action) -> ActionResult:
        new_state = state._copy_with(pending=True)
        return ActionResult.success_with_state(
            new_state,
            changes=["Waiting for the oracle"],
        )

    def _handle_record_verdict(self, state: GameSession, action: Action) -> ActionResult:
        """
        Apply a verdict to the session.

        Clarifications cost nothing. Every other verdict consumes one
        question; running out of questions without a win loses.
        """
        verdict: Verdict = action.payload.verdict
        user_text = action.payload.user_text or ""

        if isinstance(verdict, NeedsClarification):
            entry = Entry(
                entry_id=state.next_entry_id(),
                kind=EntryKind.QUESTION,
                user_text=user_text,
                response_text=verdict.content,
            )
            new_state = state.with_entry(entry)._copy_with(pending=False)
            return ActionResult.success_with_state(
                new_state,
                effects=[Effect.CLARIFICATION, Effect.CONTINUE],
                changes=["Clarification requested, no question used"],
            )

        new_count = state.questions_used + 1

        if isinstance(verdict, Win):
            entry = Entry(
                entry_id=state.next_entry_id(),
                kind=EntryKind.GUESS,
                user_text=user_text,
                response_text=verdict.content,
                question_number=new_count,
                is_correct=True,
            )
            new_state = state.with_entry(entry)._copy_with(
                questions_used=new_count,
                phase=GamePhase.WON,
                pending=False,
            )
            return ActionResult.success_with_state(
                new_state,
                effects=[Effect.WIN],
                changes=[f"Guessed correctly with question {new_count}"],
            )

        if isinstance(verdict, PlainAnswer):
            entry = Entry(
                entry_id=state.next_entry_id(),
                kind=EntryKind.QUESTION,
                user_text=user_text,
                response_text=verdict.content,
                question_number=new_count,
            )
            effect = Effect.YES if verdict.value == Answer.YES else Effect.NO
        elif isinstance(verdict, WrongGuess):
            entry = Entry(
                entry_id=state.next_entry_id(),
                kind=EntryKind.GUESS,
                user_text=user_text,
                response_text=verdict.content,
                question_number=new_count,
                is_correct=False,
            )
            effect = Effect.WRONG_GUESS
        else:
            # Treated like a failed evaluation: nothing consumed, pending cleared
            log.warning("Discarding unsupported verdict %r", verdict)
            return ActionResult(
                accepted=True,
                new_state=state._copy_with(pending=False),
                error=f"Unsupported verdict: {verdict!r}",
                error_code=UNSUPPORTED_VERDICT,
                changes=["Unsupported verdict discarded, no question used"],
            )

        exhausted = new_count >= state.max_questions
        new_state = state.with_entry(entry)._copy_with(
            questions_used=new_count,
            phase=GamePhase.LOST if exhausted else GamePhase.PLAYING,
            pending=False,
        )
        changes = [f"Question {new_count} of {state.max_questions} used"]
        if exhausted:
            changes.append("Out of questions")
        return ActionResult.success_with_state(
            new_state,
            effects=[effect, Effect.LOSE if exhausted else Effect.CONTINUE],
            changes=changes,
        )

    def _handle_submit_failed(self, state: GameSession, action: Action) -> ActionResult:
        """Roll back a failed evaluation. The question is not consumed."""
        new_state = state._copy_with(pending=False)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"Evaluation failed: {action.payload.reason}"],
        )

    def _handle_give_up(self, state: GameSession, action: Action) -> ActionResult:
        new_count = state.questions_used + 1
        entry = Entry(
            entry_id=state.next_entry_id(),
            kind=EntryKind.QUESTION,
            user_text=GIVE_UP_TEXT,
            response_text=f'The answer was "{state.secret_item}". Better luck next time!',
            question_number=new_count,
        )
        new_state = state.with_entry(entry)._copy_with(
            questions_used=new_count,
            phase=GamePhase.LOST,
            pending=False,
        )
        return ActionResult.success_with_state(
            new_state,
            effects=[Effect.LOSE],
            changes=["Player gave up"],
        )

    def _handle_reset(self, state: GameSession, action: Action) -> ActionResult:
        return ActionResult.success_with_state(
            GameSession(max_questions=state.max_questions),
            changes=["Session reset"],
        )


def apply_action(state: GameSession, action: Action) -> ActionResult:
    """Convenience function to apply an action with a fresh Reducer."""
    return Reducer().apply(state, action)
