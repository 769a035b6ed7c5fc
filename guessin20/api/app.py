"""
FastAPI Application - REST API for a game client.

Endpoints:
    GET    /api/v1/health                    Liveness and session count
    POST   /api/v1/sessions                  Create session
    GET    /api/v1/sessions                  List sessions
    GET    /api/v1/sessions/{id}             Get session state
    DELETE /api/v1/sessions/{id}             End session
    POST   /api/v1/sessions/{id}/start       Start a new game
    POST   /api/v1/sessions/{id}/submit      Ask a question or make a guess
    POST   /api/v1/sessions/{id}/give-up     Reveal the item and lose
    POST   /api/v1/sessions/{id}/reset       Back to intro

Operations that are not allowed in the current phase (for example a
submit while another one is pending) return 200 with accepted=false.
Oracle failures return 502 with the rolled-back state in details.

Handlers are plain functions so FastAPI runs them in its thread pool;
a slow oracle call does not block other sessions.
"""

from contextlib import asynccontextmanager
from typing import Annotated, Optional, Union
import logging

from fastapi import FastAPI, Body, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, load_settings
from ..oracle.client import OracleClient, HttpOracleTransport
from ..session import SessionManager, ORACLE_UNAVAILABLE
from .service import APIService
from .schemas import (
    CreateSessionRequest,
    SubmitRequest,
    SessionResponse,
    TurnResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    ErrorCode,
)

log = logging.getLogger("guessin20.api")


def build_service(settings: Settings) -> APIService:
    """Wire an APIService to the configured oracle endpoint."""
    transport = HttpOracleTransport(
        settings.oracle_url,
        api_key=settings.oracle_api_key or None,
        timeout=settings.oracle_timeout_s,
    )
    return APIService(
        oracle=OracleClient(transport),
        session_manager=SessionManager(default_max_questions=settings.max_questions),
        session_max_age_s=settings.session_max_age_s,
    )


def create_app(service: Optional[APIService] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (built from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or load_settings()
    owns_service = service is None
    api_service = service or build_service(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # A service passed in by the caller is closed by the caller
        if owns_service:
            log.info("Closing oracle connection")
            api_service.close()

    app = FastAPI(
        lifespan=lifespan,
        title="GuessIn20 API",
        description="""
20 Questions against a remote oracle.

## Game Flow

1. `POST /sessions` creates a session at phase `intro`
2. `POST /sessions/{id}/start` asks the oracle for a secret item
3. `POST /sessions/{id}/submit` with `{"text": "..."}` for each question or guess
4. The game ends at `won` or `lost`; `start` again or `reset`

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `ORACLE_UNAVAILABLE` | Oracle failed; nothing was consumed |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.service = api_service

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def respond(result: Union[SessionResponse, TurnResponse, ErrorResponse]):
        if isinstance(result, ErrorResponse):
            status_code = 404 if result.error_code == ErrorCode.SESSION_NOT_FOUND else 400
            return make_error_response(result.error_code, result.error, status_code=status_code)
        if isinstance(result, TurnResponse) and result.error_code == ORACLE_UNAVAILABLE:
            return make_error_response(
                ErrorCode.ORACLE_UNAVAILABLE,
                result.error or "Oracle unavailable",
                status_code=502,
                details={"state": result.state.model_dump(mode="json")},
            )
        return result

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["Health"])
    def health() -> HealthResponse:
        return HealthResponse(
            version=__version__,
            active_sessions=len(api_service.list_sessions()),
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        tags=["Sessions"],
        summary="Create a new session",
    )
    def create_session(
        body: Annotated[Optional[CreateSessionRequest], Body()] = None,
    ) -> SessionResponse:
        """Create a new session at phase `intro`."""
        return api_service.create_session(body or CreateSessionRequest())

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session state",
    )
    def get_session(session_id: str):
        return respond(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    turn_responses = {
        404: {"model": ErrorResponse, "description": "Session not found"},
        502: {"model": ErrorResponse, "description": "Oracle unavailable"},
    }

    @app.post(
        "/api/v1/sessions/{session_id}/start",
        response_model=TurnResponse,
        responses=turn_responses,
        tags=["Game"],
        summary="Start a new game",
    )
    def start_new_game(session_id: str):
        """Ask the oracle for a secret item. Allowed from intro, won and lost."""
        return respond(api_service.start_new_game(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/submit",
        response_model=TurnResponse,
        responses=turn_responses,
        tags=["Game"],
        summary="Ask a question or make a guess",
    )
    def submit(session_id: str, body: SubmitRequest):
        """
        Submit one input to the oracle.

        Clarifications cost no question. A failed oracle call costs nothing.
        """
        return respond(api_service.submit(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/give-up",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Give up and reveal the item",
    )
    def give_up(session_id: str):
        return respond(api_service.give_up(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=TurnResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Reset the session to intro",
    )
    def reset(session_id: str):
        return respond(api_service.reset(session_id))

    return app


# For running directly: uvicorn guessin20.api.app:app
app = create_app()
