"""Configuration settings for the lawyer verification service."""
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # 1. Storage
    STORAGE_BACKEND: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Registry/request store backend: sqlite or memory"
    )
    DATABASE_PATH: str = Field(
        default="lawyers.db",
        description="Path to the SQLite database file (':memory:' allowed)"
    )
    SEED_DEMO_DATA: bool = Field(
        default=True,
        description="Seed demo lawyers into an empty registry on startup"
    )

    # 2. Review workflow
    REVIEWER_NAME: str = Field(
        default="admin",
        description="Reviewer identity recorded on approve/reject"
    )
    DEDUPLICATE_PENDING_REQUESTS: bool = Field(
        default=False,
        description="Reuse an existing pending request for the same pair instead of queueing a new one"
    )

    # 3. Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Minimum level for the stderr sink"
    )
    LOG_FILE: str = Field(
        default="lawverify.log",
        description="Log file path (empty string disables the file sink)"
    )
    LOG_ROTATION: str = Field(
        default="10 MB",
        description="Rotation policy for the log file"
    )

    @field_validator("REVIEWER_NAME", "LOG_LEVEL", mode="before")
    def strip_value(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value

    @field_validator("LOG_LEVEL")
    def upper_level(cls, value):
        return value.upper()

    @property
    def uses_memory_storage(self) -> bool:
        """True when the stores live in process memory only."""
        return self.STORAGE_BACKEND == "memory"

