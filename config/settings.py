"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interview.db")
    APP_CONFIG_PATH: str = Field(default="app_config.json")
    PREFERENCES_PATH: str = Field(default="data/preferences.json")

    MAX_QUESTIONS: int = Field(default=5, ge=1)
    DEFAULT_PEER_AVERAGE: int = Field(default=60, ge=0, le=100)
    FALLBACK_SCORE: int = Field(default=50, ge=0, le=100)
    FALLBACK_CONFIDENCE: int = Field(default=50, ge=0, le=100)
    REDIRECT_DELAY_SECONDS: int = 3
    SESSION_TIMEOUT_MINUTES: int = Field(default=60, ge=1)

    BADGE_QUICK_THINKER_CONFIDENCE: int = 75
    BADGE_COMMUNICATOR_SCORE: int = 75
    BADGE_DETAIL_WORDS: int = 40

    DASHBOARD_LIMIT: int = 100
    SPEECH_SAMPLE_RATE: int = 24000

    LOG_LEVEL: str = "INFO"
    ENABLE_FILE_LOGS: bool = True
    LOG_FILE: str = "logs/interview.log"
    LOG_MAX_BYTES: int = 5 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    JWT_SECRET: str | None = None  # Required at startup, at least 32 bytes
    JWT_TTL_MINUTES: int = 60 * 24
    RESET_TOKEN_TTL_MINUTES: int = 30
    RESET_REDIRECT_URL: str = "http://localhost:5173/#/reset-password"

    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_NAME: str = "FairHire AI"

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
