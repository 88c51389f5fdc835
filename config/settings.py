from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from assistant.errors import ConfigurationError


load_dotenv()


API_KEY_ENV = "GEMINI_API_KEY"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MEMORY_SIZE = 10
# A system role plus the pending question must both fit.
MIN_MEMORY_SIZE = 2
DEFAULT_MAX_SESSIONS = 1000
DEFAULT_SESSION_IDLE_TIMEOUT = 1800.0


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def _positive_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")
    return value


class Settings:
    """Application settings loaded from environment variables.

    Values are read when the object is created, so a new conversation
    session always sees the current process environment.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.gemini_api_key: Optional[str] = os.getenv(API_KEY_ENV)
        self.gemini_model: str = os.getenv("GEMINI_MODEL") or DEFAULT_MODEL
        self.temperature: Optional[float] = _optional_float("MODEL_TEMPERATURE")
        self.request_timeout: Optional[float] = _optional_float("REQUEST_TIMEOUT")
        self.memory_size: int = _positive_int(
            "CHAT_MEMORY_SIZE", DEFAULT_MEMORY_SIZE, minimum=MIN_MEMORY_SIZE
        )
        self.max_sessions: int = _positive_int("MAX_SESSIONS", DEFAULT_MAX_SESSIONS)
        idle = _optional_float("SESSION_IDLE_TIMEOUT")
        self.session_idle_timeout: float = DEFAULT_SESSION_IDLE_TIMEOUT if idle is None else idle
        if self.session_idle_timeout <= 0:
            raise ConfigurationError(
                f"SESSION_IDLE_TIMEOUT must be positive, got {self.session_idle_timeout}"
            )

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key and self.gemini_api_key.strip())

    def require_api_key(self) -> str:
        if not self.has_api_key:
            raise ConfigurationError(
                f"{API_KEY_ENV} is not set. Define it as an environment variable or in .env"
            )
        return self.gemini_api_key.strip()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
