"""
Session Module - Manages ephemeral game sessions.

A session is one player's seat at the game:
- Created at phase intro
- Holds the current GameSession value
- Runs any number of games (start_new_game after won/lost)
- Dropped when ended or stale

Sessions are EPHEMERAL: nothing is persisted.
"""

from .manager import SessionManager, Session
from .game_loop import GameLoop, TurnResult, ORACLE_UNAVAILABLE

__all__ = [
    "SessionManager",
    "Session",
    "GameLoop",
    "TurnResult",
    "ORACLE_UNAVAILABLE",
]
