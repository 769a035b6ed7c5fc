"""
Tests for the reducer (state transitions).

Tests:
- Phase validation (ignored actions)
- Verdict classification into entries, counters and effects
- Give up and reset
- Stale resolutions from another game
"""

import pytest

from ..engine_core.state import GameSession, GamePhase, EntryKind, GIVE_UP_TEXT
from ..engine_core.action import Action, ActionType, Effect, INVALID_TRANSITION, UNSUPPORTED_VERDICT
from ..engine_core.reducer import Reducer, apply_action
from ..oracle.verdict import Win, PlainAnswer, WrongGuess, NeedsClarification, Answer


def _submit_and_record(reducer, state, text, verdict):
    """Run one submit + record_verdict pair and return the second result."""
    begun = reducer.apply(state, Action.submit(text))
    assert begun.accepted
    assert begun.new_state.pending
    return reducer.apply(
        begun.new_state,
        Action.record_verdict(state.game_id, text, verdict),
    )


class TestStartNewGame:
    """Tests for entering awaiting-item and playing."""

    def test_start_from_intro(self, reducer):
        """Starting sets pending and waits for the item."""
        result = reducer.apply(GameSession(), Action.start_new_game("g1"))

        assert result.accepted
        assert result.new_state.phase == GamePhase.AWAITING_ITEM
        assert result.new_state.pending
        assert result.new_state.game_id == "g1"

    def test_item_selected_enters_playing(self, reducer):
        state = reducer.apply(GameSession(), Action.start_new_game("g1")).new_state
        result = reducer.apply(state, Action.secret_item_selected("g1", "apple"))

        assert result.accepted
        new_state = result.new_state
        assert new_state.phase == GamePhase.PLAYING
        assert new_state.secret_item == "apple"
        assert new_state.questions_used == 0
        assert new_state.transcript == ()
        assert not new_state.pending

    def test_item_failure_returns_to_intro(self, reducer):
        state = reducer.apply(GameSession(), Action.start_new_game("g1")).new_state
        result = reducer.apply(state, Action.secret_item_failed("g1", "timeout"))

        assert result.accepted
        assert result.new_state.phase == GamePhase.INTRO
        assert not result.new_state.pending
        assert result.new_state.secret_item is None

    def test_start_from_terminal_discards_previous_game(self, reducer):
        """A new game after a loss starts from a clean slate."""
        lost = reducer.apply(
            GameSession(phase=GamePhase.PLAYING, secret_item="apple", game_id="g1"),
            Action.give_up(),
        ).new_state
        assert lost.phase == GamePhase.LOST

        result = reducer.apply(lost, Action.start_new_game("g2"))

        assert result.accepted
        assert result.new_state.transcript == ()
        assert result.new_state.questions_used == 0
        assert result.new_state.secret_item is None

    def test_start_while_playing_is_ignored(self, reducer, playing_session):
        result = reducer.apply(playing_session, Action.start_new_game("g2"))

        assert not result.accepted
        assert result.error_code == INVALID_TRANSITION
        assert result.new_state is playing_session

    def test_start_while_awaiting_item_is_ignored(self, reducer):
        state = reducer.apply(GameSession(), Action.start_new_game("g1")).new_state
        result = reducer.apply(state, Action.start_new_game("g2"))

        assert not result.accepted
        assert result.new_state.game_id == "g1"

    def test_item_for_another_game_is_ignored(self, reducer):
        state = reducer.apply(GameSession(), Action.start_new_game("g2")).new_state
        result = reducer.apply(state, Action.secret_item_selected("g1", "apple"))

        assert not result.accepted
        assert result.new_state.phase == GamePhase.AWAITING_ITEM

    def test_empty_item_is_ignored(self, reducer):
        state = reducer.apply(GameSession(), Action.start_new_game("g1")).new_state
        result = reducer.apply(state, Action.secret_item_selected("g1", ""))

        assert not result.accepted


class TestSubmit:
    """Tests for the submit / record_verdict pair."""

    def test_plain_answer_consumes_question(self, reducer, playing_session):
        result = _submit_and_record(
            reducer, playing_session, "Is it a fruit?", PlainAnswer(Answer.YES, "Yes")
        )

        assert result.accepted
        state = result.new_state
        assert state.questions_used == 1
        assert state.phase == GamePhase.PLAYING
        assert not state.pending

        entry = state.transcript[-1]
        assert entry.kind == EntryKind.QUESTION
        assert entry.question_number == 1
        assert entry.is_correct is None
        assert entry.response_text == "Yes"
        assert result.effects == [Effect.YES, Effect.CONTINUE]

    def test_clarification_is_free(self, reducer, playing_session):
        result = _submit_and_record(
            reducer, playing_session, "Is it nice?", NeedsClarification("Could you be more specific?")
        )

        state = result.new_state
        assert state.questions_used == 0
        assert state.phase == GamePhase.PLAYING
        assert len(state.transcript) == 1
        assert state.transcript[0].question_number is None
        assert state.transcript[0].kind == EntryKind.QUESTION
        assert Effect.CLARIFICATION in result.effects

    def test_win(self, reducer, playing_session):
        result = _submit_and_record(reducer, playing_session, "apple", Win("Correct!"))

        state = result.new_state
        assert state.phase == GamePhase.WON
        assert state.questions_used == 1
        entry = state.transcript[-1]
        assert entry.kind == EntryKind.GUESS
        assert entry.is_correct is True
        assert entry.question_number == 1
        assert result.effects == [Effect.WIN]

    def test_wrong_guess_keeps_playing(self, reducer, playing_session):
        result = _submit_and_record(
            reducer, playing_session, "Is it a chair?", WrongGuess("No, that's not correct.")
        )

        state = result.new_state
        assert state.phase == GamePhase.PLAYING
        assert state.questions_used == 1
        entry = state.transcript[-1]
        assert entry.kind == EntryKind.GUESS
        assert entry.is_correct is False
        assert result.effects == [Effect.WRONG_GUESS, Effect.CONTINUE]

    def test_last_answer_loses(self, reducer):
        state = GameSession(
            phase=GamePhase.PLAYING, secret_item="apple", game_id="g1", max_questions=1
        )
        result = _submit_and_record(reducer, state, "Is it red?", PlainAnswer(Answer.NO, "No"))

        assert result.new_state.phase == GamePhase.LOST
        assert result.new_state.questions_used == 1
        assert result.effects == [Effect.NO, Effect.LOSE]

    def test_last_wrong_guess_loses(self, reducer):
        state = GameSession(
            phase=GamePhase.PLAYING, secret_item="apple", game_id="g1", max_questions=1
        )
        result = _submit_and_record(reducer, state, "pear", WrongGuess("No."))

        assert result.new_state.phase == GamePhase.LOST
        assert Effect.LOSE in result.effects

    def test_submit_while_pending_is_ignored(self, reducer, playing_session):
        pending = reducer.apply(playing_session, Action.submit("Is it red?")).new_state
        result = reducer.apply(pending, Action.submit("Is it round?"))

        assert not result.accepted
        assert result.error_code == INVALID_TRANSITION
        assert result.new_state is pending

    @pytest.mark.parametrize("phase", [GamePhase.INTRO, GamePhase.AWAITING_ITEM, GamePhase.WON, GamePhase.LOST])
    def test_submit_outside_playing_is_ignored(self, reducer, phase):
        state = GameSession(phase=phase, secret_item="apple")
        result = reducer.apply(state, Action.submit("Is it red?"))

        assert not result.accepted
        assert result.new_state is state

    def test_blank_submit_is_ignored(self, reducer, playing_session):
        result = reducer.apply(playing_session, Action.submit("   "))

        assert not result.accepted
        assert not result.new_state.pending

    def test_submit_failed_rolls_back(self, reducer, playing_session):
        pending = reducer.apply(playing_session, Action.submit("Is it red?")).new_state
        result = reducer.apply(pending, Action.submit_failed("game-1", "timeout"))

        assert result.accepted
        assert not result.new_state.pending
        assert result.new_state.questions_used == 0
        assert result.new_state.transcript == ()

    def test_verdict_for_another_game_is_ignored(self, reducer, playing_session):
        pending = reducer.apply(playing_session, Action.submit("Is it red?")).new_state
        result = reducer.apply(
            pending,
            Action.record_verdict("old-game", "Is it red?", PlainAnswer(Answer.YES, "Yes")),
        )

        assert not result.accepted
        assert result.new_state.transcript == ()

    def test_unsupported_verdict_clears_pending(self, reducer, playing_session):
        pending = reducer.apply(playing_session, Action.submit("Is it red?")).new_state
        result = reducer.apply(pending, Action.record_verdict("game-1", "Is it red?", "Yes"))

        assert result.error_code == UNSUPPORTED_VERDICT
        assert not result.new_state.pending
        assert result.new_state.questions_used == 0
        assert result.new_state.transcript == ()
        assert result.effects == []

    def test_verdict_without_pending_submit_is_ignored(self, reducer, playing_session):
        result = reducer.apply(
            playing_session,
            Action.record_verdict("game-1", "Is it red?", PlainAnswer(Answer.YES, "Yes")),
        )

        assert not result.accepted


class TestGiveUp:
    """Tests for give up."""

    def test_give_up_reveals_item(self, reducer, playing_session):
        result = reducer.apply(playing_session, Action.give_up())

        assert result.accepted
        state = result.new_state
        assert state.phase == GamePhase.LOST
        assert state.questions_used == 1
        assert len(state.transcript) == 1

        entry = state.transcript[0]
        assert entry.user_text == GIVE_UP_TEXT
        assert "apple" in entry.response_text
        assert entry.question_number == 1
        assert result.effects == [Effect.LOSE]

    def test_give_up_clears_pending(self, reducer, playing_session):
        pending = reducer.apply(playing_session, Action.submit("Is it red?")).new_state
        state = reducer.apply(pending, Action.give_up()).new_state

        assert state.phase == GamePhase.LOST
        assert not state.pending

        # The answer to the abandoned question arrives too late
        late = reducer.apply(
            state, Action.record_verdict("game-1", "Is it red?", PlainAnswer(Answer.YES, "Yes"))
        )
        assert not late.accepted
        assert late.new_state.questions_used == 1

    def test_give_up_outside_playing_is_ignored(self, reducer):
        result = reducer.apply(GameSession(), Action.give_up())

        assert not result.accepted
        assert result.new_state.transcript == ()


class TestReset:
    """Tests for reset."""

    @pytest.mark.parametrize("phase", list(GamePhase))
    def test_reset_from_any_phase(self, reducer, phase):
        state = GameSession(phase=phase, secret_item="apple", questions_used=3, pending=True, max_questions=12)
        result = reducer.apply(state, Action.reset())

        assert result.accepted
        new_state = result.new_state
        assert new_state.phase == GamePhase.INTRO
        assert new_state.secret_item is None
        assert new_state.questions_used == 0
        assert new_state.transcript == ()
        assert not new_state.pending
        assert new_state.max_questions == 12


class TestApplyAction:
    """Tests for the convenience function."""

    def test_apply_action_matches_reducer(self, playing_session):
        result = apply_action(playing_session, Action.give_up())
        assert result.new_state == Reducer().apply(playing_session, Action.give_up()).new_state

    def test_action_factories(self):
        assert Action.submit("x").action_type == ActionType.SUBMIT
        assert Action.give_up().action_type == ActionType.GIVE_UP
        assert Action.reset().action_type == ActionType.RESET
