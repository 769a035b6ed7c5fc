"""
Configuration and environment loading for GuessIn20.

- Loads a local .env if present, then reads environment variables.
- Exposes load_settings() for the API, the CLI and the oracle transport.
"""
from dataclasses import dataclass
import os
from typing import Any, Callable

from dotenv import load_dotenv

from .engine_core.state import DEFAULT_MAX_QUESTIONS
from .oracle.client import DEFAULT_TIMEOUT_S


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    env = os.environ.get(name)
    if env is None or env == "":
        return default
    return cast(env) if cast else env


def positive_int(value: Any) -> int:
    """Parse a budget-like value; raises ValueError unless it is >= 1."""
    n = int(value)
    if n < 1:
        raise ValueError(f"must be a positive integer, got {value!r}")
    return n


def _get_positive_int(name: str, default: int) -> int:
    try:
        return _get(name, default, cast=positive_int)
    except ValueError as e:
        raise ValueError(f"{name} {e}") from e


@dataclass(frozen=True)
class Settings:
    # Oracle endpoint
    oracle_url: str
    oracle_api_key: str
    oracle_timeout_s: float

    # Game
    max_questions: int

    # Server
    session_max_age_s: int
    allowed_origins: tuple[str, ...]
    log_level: str


def load_settings() -> Settings:
    """Read settings from the environment (and .env)."""
    load_dotenv()
    return Settings(
        oracle_url=_get("GUESSIN20_ORACLE_URL", ""),
        oracle_api_key=_get("GUESSIN20_ORACLE_API_KEY", ""),
        oracle_timeout_s=float(_get("GUESSIN20_ORACLE_TIMEOUT_S", DEFAULT_TIMEOUT_S, cast=float)),
        max_questions=_get_positive_int("GUESSIN20_MAX_QUESTIONS", DEFAULT_MAX_QUESTIONS),
        session_max_age_s=_get_positive_int("GUESSIN20_SESSION_MAX_AGE_S", 3600),
        allowed_origins=tuple(
            o.strip() for o in _get("ALLOWED_ORIGINS", "*").split(",") if o.strip()
        ),
        log_level=str(_get("GUESSIN20_LOG_LEVEL", "INFO")).upper(),
    )
