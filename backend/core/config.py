"""
Centralised settings using `pydantic-settings`.

All env-vars are loaded once at import time.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class _Settings(BaseSettings):
    # environment
    ENV: str = "development"  # development | staging | production

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # HTTP server
    PORT: int = 5000
    MAX_BODY_BYTES: int = 2 * 1024 * 1024  # 2 MB of JSON

    # Document store
    DATABASE_URL: str = "sqlite+aiosqlite:///./meetings.db"

    # Gemini
    GEMINI_API_KEY: str | None = None          # set this in .env / secrets manager
    GEMINI_MODEL: str = "gemini-1.5-pro-latest"
    LLM_MAX_TOKENS: int = 800
    LLM_TEMPERATURE: float = 0.8   # more variety
    LLM_TOP_P: float = 1.0

    # SMTP relay
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASS: str | None = None
    FROM_EMAIL: str | None = None
    DEFAULT_EMAIL_SUBJECT: str = "Shared summary"

    # Log level (DEBUG/INFO/WARNING/ERROR)
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_FILE_LEVEL: str = "DEBUG"  # file sink keeps everything by default
    LOG_RETENTION_DAYS: int = 7

    # Client side
    API_BASE_URL: str = "http://localhost:5000"  # no trailing slash
    STATUS_MESSAGE_SECONDS: float = 5.0

    # --- internal ---
    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def sender_address(self) -> str | None:
        return self.FROM_EMAIL or self.SMTP_USER


settings = _Settings()  # Singleton
