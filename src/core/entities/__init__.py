"""Core domain entities."""

from src.core.entities.notification import (
    REMINDER_ID_KEY,
    NoticeLevel,
    NotificationPriority,
    ReminderNotice,
    ScheduledNotification,
    ScheduleOutcome,
    ScheduleStatus,
    TransactionRequest,
)
from src.core.entities.reminder import (
    CustomInterval,
    IntervalUnit,
    Reminder,
    ReminderDraft,
    ReminderFrequency,
    ReminderStatus,
    ReminderUpdate,
    ReminderView,
    TransactionType,
    to_wall_clock,
)

__all__ = [
    # Reminder entities
    "Reminder",
    "ReminderDraft",
    "ReminderUpdate",
    "ReminderView",
    "ReminderFrequency",
    "ReminderStatus",
    "TransactionType",
    "CustomInterval",
    "IntervalUnit",
    "to_wall_clock",
    # Notification entities
    "REMINDER_ID_KEY",
    "NotificationPriority",
    "ScheduledNotification",
    "ScheduleOutcome",
    "ScheduleStatus",
    "NoticeLevel",
    "ReminderNotice",
    "TransactionRequest",
]
