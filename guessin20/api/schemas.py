"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client UI and the engine.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- ORACLE_UNAVAILABLE: The oracle failed; the operation was rolled back
- VALIDATION_ERROR: Request body is invalid
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..engine_core.state import GameSession


# =============================================================================
# Enums
# =============================================================================

class GamePhase(str, Enum):
    """Game phase values."""
    INTRO = "intro"
    AWAITING_ITEM = "awaiting-item"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class EntryKind(str, Enum):
    QUESTION = "question"
    GUESS = "guess"


class BudgetPressure(str, Enum):
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class EffectType(str, Enum):
    """Feedback cues for the client (sounds, banners)."""
    CLARIFICATION = "clarification"
    YES = "yes"
    NO = "no"
    WRONG_GUESS = "wrong_guess"
    WIN = "win"
    LOSE = "lose"
    CONTINUE = "continue"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ORACLE_UNAVAILABLE = "ORACLE_UNAVAILABLE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class EntryInfo(BaseModel):
    """One transcript entry."""
    entry_id: int
    kind: EntryKind
    user_text: str
    response_text: str
    question_number: Optional[int] = Field(None, description="Absent for clarifications")
    is_correct: Optional[bool] = Field(None, description="Only set on guesses")


class GameStateInfo(BaseModel):
    """Read state of a session."""
    phase: GamePhase
    questions_used: int
    max_questions: int
    questions_remaining: int
    budget_pressure: BudgetPressure
    pending: bool
    secret_item: Optional[str] = Field(None, description="Only revealed once the game is over")
    transcript: list[EntryInfo] = Field(default_factory=list)

    @classmethod
    def from_session(cls, game: GameSession) -> "GameStateInfo":
        return cls.model_validate(game.to_dict(reveal_secret=False))


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a session."""
    max_questions: Optional[int] = Field(
        None, ge=1, le=100, description="Question budget (server default if omitted)"
    )


class SubmitRequest(BaseModel):
    """A question or a guess."""
    text: str = Field(..., min_length=1, max_length=500)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    created_at: float = 0.0
    state: GameStateInfo
    api_version: str = "v1"


class TurnResponse(BaseModel):
    """Result of start / submit / give-up / reset."""
    session_id: str
    accepted: bool = Field(..., description="False when the operation was ignored")
    effects: list[EffectType] = Field(default_factory=list)
    changes: list[str] = Field(default_factory=list)
    error: Optional[str] = None
    error_code: Optional[str] = None
    state: GameStateInfo
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    sessions: list[str] = Field(default_factory=list)
    count: int = 0


class EndSessionResponse(BaseModel):
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    active_sessions: int = 0
