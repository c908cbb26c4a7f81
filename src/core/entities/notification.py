"""Notification and transaction value objects exchanged with collaborators."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.core.entities.reminder import TransactionType

REMINDER_ID_KEY = "reminderId"


class NotificationPriority(str, Enum):
    """Urgency hint attached to a scheduled reminder notification."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ScheduledNotification(BaseModel):
    """A notification currently held by the external scheduler."""

    id: str
    title: str = ""
    body: str = ""
    fire_at: datetime | None = None
    payload: dict[str, Any] = Field(default_factory=dict)

    @property
    def reminder_id(self) -> str | None:
        value = self.payload.get(REMINDER_ID_KEY)
        return value if isinstance(value, str) and value else None


class ScheduleStatus(str, Enum):
    """Outcome of one attempt to schedule a reminder notification."""

    SCHEDULED = "scheduled"
    NOT_ELIGIBLE = "not_eligible"
    PERMISSION_DENIED = "permission_denied"
    SCHEDULER_ERROR = "scheduler_error"


class ScheduleOutcome(BaseModel):
    """Result of NotificationReconciler.schedule_for."""

    reminder_id: str
    status: ScheduleStatus
    notification_id: str | None = None
    fire_at: datetime | None = None
    reason: str | None = None

    @property
    def scheduled(self) -> bool:
        return self.status == ScheduleStatus.SCHEDULED

    @property
    def is_warning(self) -> bool:
        return self.status in (
            ScheduleStatus.PERMISSION_DENIED,
            ScheduleStatus.SCHEDULER_ERROR,
        )


class NoticeLevel(str, Enum):
    """Severity of a user-visible notice."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class ReminderNotice(BaseModel):
    """Transient user-visible message produced by the lifecycle service."""

    title: str
    message: str
    level: NoticeLevel = NoticeLevel.INFO
    reminder_id: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class TransactionRequest(BaseModel):
    """Transaction the wallet service should record for a completed reminder."""

    reminder_id: str
    amount: float
    transaction_type: TransactionType
    wallet_id: str
    category_id: str | None = None
    description: str
    date: datetime
