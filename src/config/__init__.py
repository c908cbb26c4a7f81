"""Configuration module."""

from src.config.logging import configure_logging, get_logger
from src.config.settings import (
    NotificationSettings,
    ReminderSettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "StorageSettings",
    "ReminderSettings",
    "NotificationSettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
