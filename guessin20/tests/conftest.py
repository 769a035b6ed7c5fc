"""
Pytest fixtures for GuessIn20 tests.
"""

import pytest

from ..engine_core.state import GameSession, GamePhase
from ..engine_core.reducer import Reducer
from ..oracle.client import OracleClient, OracleTransport
from ..oracle.errors import OracleUnavailable
from ..session import SessionManager, GameLoop


class ScriptedTransport(OracleTransport):
    """
    Transport that replays canned responses in order.

    A response that is an exception instance is raised instead of returned.
    Every request payload is recorded in `calls`.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def call(self, payload):
        self.calls.append(payload)
        if not self.responses:
            raise OracleUnavailable("No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def answer(value: str) -> dict:
    return {"type": "answer", "content": value}


def clarification(text: str = "Could you be more specific?") -> dict:
    return {"type": "clarification", "content": text}


def guess(correct: bool) -> dict:
    content = "Correct! You got it!" if correct else "No, that's not correct."
    return {"type": "guess_evaluation", "content": content, "isCorrect": correct}


def item(name: str) -> dict:
    return {"content": name}


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def oracle(transport) -> OracleClient:
    return OracleClient(transport)


@pytest.fixture
def reducer() -> Reducer:
    return Reducer()


@pytest.fixture
def manager() -> SessionManager:
    return SessionManager()


@pytest.fixture
def loop(manager, oracle) -> GameLoop:
    """Game loop on a fresh session at intro."""
    return GameLoop(manager.create_session(), oracle)


@pytest.fixture
def playing_loop(loop, transport) -> GameLoop:
    """Game loop already playing with secret item 'apple'."""
    transport.queue(item("apple"))
    result = loop.start_new_game()
    assert result.accepted
    assert loop.state.phase == GamePhase.PLAYING
    return loop


@pytest.fixture
def playing_session() -> GameSession:
    """Session value in playing with secret item 'apple', nothing pending."""
    return GameSession(
        phase=GamePhase.PLAYING,
        secret_item="apple",
        game_id="game-1",
    )
