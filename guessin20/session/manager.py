"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Client creates a session -> in-memory holder at phase intro
2. Client starts games, submits inputs, gives up or resets through a GameLoop
3. Client ends the session (or it goes stale) -> holder dropped, ALL state deleted

PERSISTENCE RULES:
- No database, no files
- Each session is independent; nothing is shared between them
- A session lives only as long as the process
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import threading
import time
import uuid

from ..engine_core.state import GameSession, DEFAULT_MAX_QUESTIONS

log = logging.getLogger("guessin20.session")


@dataclass
class Session:
    """
    Holder for one player's GameSession.

    The GameSession itself is immutable; the holder swaps in each new value.
    The lock only guards that swap (check-and-set of the pending flag),
    never an oracle call.
    """
    session_id: str
    created_at: float
    game: GameSession = field(default_factory=GameSession)
    last_active_at: float = 0.0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def touch(self):
        self.last_active_at = time.time()

    def idle_seconds(self, now: float | None = None) -> float:
        now = time.time() if now is None else now
        return now - (self.last_active_at or self.created_at)


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions
    - Track live sessions
    - Drop ended and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, default_max_questions: int = DEFAULT_MAX_QUESTIONS):
        self.default_max_questions = default_max_questions
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(self, max_questions: int | None = None) -> Session:
        """
        Create a new session at phase intro.

        Args:
            max_questions: Question budget for every game in this session
                (the manager default when None)

        Returns:
            New Session ready for start_new_game

        Raises:
            ValueError: if the budget is less than 1
        """
        budget = self.default_max_questions if max_questions is None else max_questions
        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            created_at=now,
            game=GameSession(max_questions=budget),
            last_active_at=now,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        log.info("Created session %s (budget %d)", session.session_id, budget)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        with self._lock:
            return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and drop its state.

        Returns True if the session existed.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if not session:
            return False
        log.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of live sessions."""
        with self._lock:
            return list(self._sessions.keys())

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Drop sessions idle for longer than max_age_seconds.

        Sessions with an oracle call in flight are kept.
        """
        now = time.time()
        with self._lock:
            to_remove = [
                session_id
                for session_id, session in self._sessions.items()
                if session.idle_seconds(now) > max_age_seconds and not session.game.pending
            ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
