"""
Tests for the session value.
"""

import dataclasses

import pytest

from ..engine_core.state import GameSession, GamePhase, Entry, EntryKind, BudgetPressure


class TestGameSession:

    def test_defaults(self):
        state = GameSession()

        assert state.phase == GamePhase.INTRO
        assert state.max_questions == 20
        assert state.questions_used == 0
        assert state.transcript == ()
        assert not state.pending
        assert state.secret_item is None

    def test_immutable(self):
        state = GameSession()
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.phase = GamePhase.PLAYING

    def test_invalid_budget(self):
        with pytest.raises(ValueError):
            GameSession(max_questions=0)

    def test_can_submit(self):
        assert GameSession(phase=GamePhase.PLAYING).can_submit
        assert not GameSession(phase=GamePhase.PLAYING, pending=True).can_submit
        assert not GameSession(phase=GamePhase.PLAYING, questions_used=20).can_submit
        assert not GameSession(phase=GamePhase.WON).can_submit

    def test_terminal_phases(self):
        assert GameSession(phase=GamePhase.WON).is_terminal
        assert GameSession(phase=GamePhase.LOST).is_terminal
        assert not GameSession(phase=GamePhase.PLAYING).is_terminal

    @pytest.mark.parametrize("used,expected", [
        (0, BudgetPressure.NORMAL),
        (9, BudgetPressure.NORMAL),
        (10, BudgetPressure.WARNING),
        (14, BudgetPressure.WARNING),
        (15, BudgetPressure.CRITICAL),
        (20, BudgetPressure.CRITICAL),
    ])
    def test_budget_pressure(self, used, expected):
        assert GameSession(questions_used=used).budget_pressure == expected

    def test_with_entry_appends(self):
        entry = Entry(entry_id=1, kind=EntryKind.QUESTION, user_text="Is it red?", response_text="Yes", question_number=1)
        state = GameSession().with_entry(entry)

        assert state.transcript == (entry,)
        assert state.last_entry is entry
        assert state.next_entry_id() == 2

    def test_to_dict_hides_secret_until_terminal(self):
        playing = GameSession(phase=GamePhase.PLAYING, secret_item="apple")
        won = GameSession(phase=GamePhase.WON, secret_item="apple")

        assert playing.to_dict(reveal_secret=False)["secret_item"] is None
        assert playing.to_dict()["secret_item"] == "apple"
        assert won.to_dict(reveal_secret=False)["secret_item"] == "apple"

    def test_to_dict_shape(self):
        data = GameSession(phase=GamePhase.AWAITING_ITEM, pending=True).to_dict()

        assert data["phase"] == "awaiting-item"
        assert data["pending"] is True
        assert data["questions_remaining"] == 20
        assert data["transcript"] == []
