"""Local notification, permission and transaction collaborators."""

from src.infrastructure.notifications.local_scheduler import (
    InProcessNotificationScheduler,
    log_delivery,
)
from src.infrastructure.notifications.permissions import StaticNotificationPermissions
from src.infrastructure.notifications.transactions import LoggingTransactionCreator

__all__ = [
    "InProcessNotificationScheduler",
    "log_delivery",
    "StaticNotificationPermissions",
    "LoggingTransactionCreator",
]
