"""Core interfaces (abstract base classes)."""

from src.core.interfaces.notifications import (
    INotificationPermissions,
    INotificationScheduler,
)
from src.core.interfaces.storage import IKeyValueStore, IReminderStore
from src.core.interfaces.transactions import ITransactionCreator

__all__ = [
    # Storage
    "IKeyValueStore",
    "IReminderStore",
    # Notifications
    "INotificationScheduler",
    "INotificationPermissions",
    # Transactions
    "ITransactionCreator",
]
