"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to game loop calls
2. Manages sessions
3. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    CreateSessionRequest,
    SubmitRequest,
    SessionResponse,
    TurnResponse,
    ErrorResponse,
    ErrorCode,
    GameStateInfo,
    EffectType,
)
from ..session import SessionManager, Session, GameLoop, TurnResult
from ..oracle.client import OracleClient


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService(oracle=OracleClient(transport))

        session = service.create_session(CreateSessionRequest())
        turn = service.start_new_game(session.session_id)
        turn = service.submit(session.session_id, SubmitRequest(text="Is it a fruit?"))
    """
    oracle: OracleClient
    session_manager: SessionManager = field(default_factory=SessionManager)
    session_max_age_s: int = 3600

    def create_session(self, request: CreateSessionRequest) -> SessionResponse:
        """Create a new session at phase intro."""
        self.session_manager.cleanup_stale_sessions(self.session_max_age_s)
        session = self.session_manager.create_session(max_questions=request.max_questions)
        return self._session_to_response(session)

    def get_session(self, session_id: str) -> SessionResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._session_to_response(session)

    def end_session(self, session_id: str, reason: str = "user_ended") -> bool:
        return self.session_manager.end_session(session_id, reason)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    def close(self):
        """Close the oracle connection."""
        self.oracle.close()

    def start_new_game(self, session_id: str) -> TurnResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._turn_to_response(session, self._loop(session).start_new_game())

    def submit(self, session_id: str, request: SubmitRequest) -> TurnResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._turn_to_response(session, self._loop(session).submit(request.text))

    def give_up(self, session_id: str) -> TurnResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._turn_to_response(session, self._loop(session).give_up())

    def reset(self, session_id: str) -> TurnResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return self._not_found(session_id)
        return self._turn_to_response(session, self._loop(session).reset())

    # =========================================================================
    # Helpers
    # =========================================================================

    def _loop(self, session: Session) -> GameLoop:
        return GameLoop(session, self.oracle)

    def _not_found(self, session_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Session {session_id} not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        )

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_id=session.session_id,
            created_at=session.created_at,
            state=GameStateInfo.from_session(session.game),
        )

    def _turn_to_response(self, session: Session, result: TurnResult) -> TurnResponse:
        return TurnResponse(
            session_id=session.session_id,
            accepted=result.accepted,
            effects=[EffectType(e.value) for e in result.effects],
            changes=result.changes,
            error=result.error,
            error_code=result.error_code,
            state=GameStateInfo.from_session(result.state),
        )
