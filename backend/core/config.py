"""core/config.py — Application configuration via Pydantic BaseSettings.

Loads environment variables from .env (and the OS environment).
Import `settings` from this module wherever configuration is needed.

Usage:
    from core.config import settings

    client = GoRestClient.from_settings(settings)
    logger.info("upstream", extra={"base_url": settings.gorest_base_url})
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "1.0.0"

# .env lives in the project root (one level above backend/)
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Upstream GoRest API. The default base URL is the public demo instance
    # and is only meant for local development.
    gorest_base_url: str = "https://gorest.co.in/"
    gorest_token: str = ""
    gorest_timeout_seconds: float = 30.0

    # Retry policy for upstream calls
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_operations: list[str] = ["get_user", "delete_user"]

    # Application
    environment: str = "development"
    log_level: str = "DEBUG"

    # CORS: list of allowed origins for the browser front end
    allowed_origins: list[str] = [
        "http://localhost:5173",   # Vite dev server
        "http://localhost:3000",   # CRA fallback
    ]

    @field_validator("log_level", mode="before")
    @classmethod
    def _uppercase_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("retry_max_attempts")
    @classmethod
    def _at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retry_max_attempts must be >= 1")
        return v


# Singleton, import this everywhere
settings = Settings()
