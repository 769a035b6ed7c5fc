"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates a session
2. Starts a game (the oracle picks the item)
3. Submits questions and guesses
4. Gives up, resets or starts again

All state is session-scoped. No user accounts, no persistence.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    SubmitRequest,
    # Responses
    SessionResponse,
    TurnResponse,
    ErrorResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    # Shared
    GameStateInfo,
    EntryInfo,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "SubmitRequest",
    # Responses
    "SessionResponse",
    "TurnResponse",
    "ErrorResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    # Shared
    "GameStateInfo",
    "EntryInfo",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
