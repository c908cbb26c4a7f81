"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "reminders.db"
    snapshot_key: str = "fintracker::reminders::v1"

    # Reader connections next to the single writer
    reader_connections: int = Field(default=2, ge=1)
    busy_timeout: int = 30000

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ReminderSettings(BaseSettings):
    """Reminder lifecycle configuration."""

    model_config = SettingsConfigDict(env_prefix="REMINDER_")

    sweep_interval_seconds: float = Field(default=60.0, gt=0)
    default_snooze_minutes: int = Field(default=15, ge=1)
    upcoming_window_days: int = Field(default=7, ge=0)

    # Fallback interval for CUSTOM reminders without their own interval
    custom_interval_unit: Literal["days", "weeks"] = "days"
    custom_interval_count: int = Field(default=30, ge=1)

    request_permission_on_schedule: bool = True


class NotificationSettings(BaseSettings):
    """Local notification configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    permission_granted: bool = True
    deliver_overdue_notices: bool = True


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "FinTracker Reminders"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    reminders: ReminderSettings = Field(default_factory=ReminderSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def coerce_storage(cls, v: object) -> StorageSettings:
        if isinstance(v, dict):
            return StorageSettings(**v)
        return v or StorageSettings()  # type: ignore[return-value]


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
