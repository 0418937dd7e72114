from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Redis (admission counters)
    REDIS_URL: str = "redis://localhost:6379/0"
    ADMISSION_KEY_PREFIX: str = "flowform:admission"

    # Analytics
    TIMELINE_DAYS: int = 30
    SCORE_BUCKET_COUNT: int = 5
    COMPLETION_TIME_FLOOR_SECONDS: float = 5.0

    # HTTP
    CORS_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])

    # Respondent runtime
    ALLOW_BACK_NAVIGATION: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()
