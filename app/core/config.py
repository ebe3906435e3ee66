# app/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "StandupBot"
    APP_ENV: str = Field("local", description="Environment name: local/test/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./standupbot.db",
        description="SQLAlchemy-compatible async database URL",
    )

    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level for the service (DEBUG, INFO, WARNING, ...).",
    )

    SEED_SAMPLE_DATA: bool = Field(
        True,
        description=(
            "Insert the sample team and its five members on startup "
            "when they are missing."
        ),
    )

    # --- Standup history ---
    HISTORY_DEFAULT_COUNT: int = Field(
        10,
        description="Number of standups returned by the history endpoint when `count` is omitted.",
    )
    HISTORY_MAX_COUNT: int = Field(
        100,
        description="Upper bound accepted for the history `count` parameter.",
    )

    # --- Blockers ---
    BLOCKER_ALLOW_REOPEN: bool = Field(
        True,
        description=(
            "Whether a Resolved blocker may be moved back to New or Critical. "
            "When false, such transitions are rejected as validation errors."
        ),
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
