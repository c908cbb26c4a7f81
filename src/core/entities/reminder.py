"""Reminder entity for recurring bills, income and other money obligations."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


def to_wall_clock(value: datetime) -> datetime:
    """Convert an aware datetime to naive local wall-clock time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class ReminderFrequency(str, Enum):
    """How often a recurring reminder repeats."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"
    CUSTOM = "CUSTOM"


class ReminderStatus(str, Enum):
    """Lifecycle state of a reminder."""

    PENDING = "PENDING"
    OVERDUE = "OVERDUE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class TransactionType(str, Enum):
    """Direction of the transaction a reminder may create on completion."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class IntervalUnit(str, Enum):
    """Unit for custom recurrence intervals."""

    DAYS = "days"
    WEEKS = "weeks"


class CustomInterval(BaseModel):
    """Explicit step for CUSTOM frequency reminders."""

    unit: IntervalUnit = IntervalUnit.DAYS
    count: int = Field(default=1, ge=1)

    def as_timedelta(self) -> timedelta:
        if self.unit == IntervalUnit.WEEKS:
            return timedelta(weeks=self.count)
        return timedelta(days=self.count)


class Reminder(BaseModel):
    """
    Reminder entity tracked by the lifecycle service.

    Category and wallet references belong to external services and are
    carried as opaque values. All timestamps are local wall-clock times.
    """

    id: str
    title: str
    description: str | None = None
    amount: float | None = None
    transaction_type: TransactionType | None = None
    category_id: str | None = None
    category: dict[str, Any] | None = None
    wallet_id: str | None = None
    wallet: dict[str, Any] | None = None

    due_date: datetime
    frequency: ReminderFrequency = ReminderFrequency.MONTHLY
    custom_interval: CustomInterval | None = None
    is_recurring: bool = False
    is_active: bool = True
    status: ReminderStatus = ReminderStatus.PENDING

    auto_create_transaction: bool = False
    notify_before: int = Field(default=0, ge=0)
    enable_push_notification: bool = True
    enable_email_notification: bool = False

    completed_count: int = Field(default=0, ge=0)
    last_completed: datetime | None = None
    next_due: datetime | None = None
    snooze_until: datetime | None = None

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator(
        "due_date",
        "last_completed",
        "next_due",
        "snooze_until",
        "created_at",
        "updated_at",
    )
    @classmethod
    def normalize_timestamps(cls, v: datetime | None) -> datetime | None:
        return to_wall_clock(v) if v is not None else None

    @property
    def fire_at(self) -> datetime:
        """When the push notification for the current occurrence should fire."""
        return self.due_date - timedelta(minutes=self.notify_before)

    @property
    def has_transaction_details(self) -> bool:
        """Check if completion can create a transaction."""
        return (
            self.auto_create_transaction
            and self.amount is not None
            and self.transaction_type is not None
            and bool(self.wallet_id)
        )

    @property
    def category_label(self) -> str | None:
        if self.category and self.category.get("name"):
            return str(self.category["name"])
        return self.category_id


class ReminderDraft(BaseModel):
    """Validated input for creating a reminder."""

    title: str = Field(min_length=1)
    description: str | None = None
    amount: float | None = None
    transaction_type: TransactionType | None = None
    category_id: str | None = None
    category: dict[str, Any] | None = None
    wallet_id: str | None = None
    wallet: dict[str, Any] | None = None

    due_date: datetime
    frequency: ReminderFrequency = ReminderFrequency.MONTHLY
    custom_interval: CustomInterval | None = None
    is_recurring: bool = False
    is_active: bool = True

    auto_create_transaction: bool = False
    notify_before: int = Field(default=0, ge=0)
    enable_push_notification: bool = True
    enable_email_notification: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be blank")
        return v

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime) -> datetime:
        return to_wall_clock(v)


class ReminderUpdate(BaseModel):
    """
    Partial update for an existing reminder.

    Only fields explicitly set are applied, so an explicit None clears an
    optional field.
    """

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    amount: float | None = None
    transaction_type: TransactionType | None = None
    category_id: str | None = None
    category: dict[str, Any] | None = None
    wallet_id: str | None = None
    wallet: dict[str, Any] | None = None

    due_date: datetime | None = None
    frequency: ReminderFrequency | None = None
    custom_interval: CustomInterval | None = None
    is_recurring: bool | None = None
    is_active: bool | None = None
    status: ReminderStatus | None = None

    auto_create_transaction: bool | None = None
    notify_before: int | None = Field(default=None, ge=0)
    enable_push_notification: bool | None = None
    enable_email_notification: bool | None = None
    snooze_until: datetime | None = None

    @field_validator("due_date", "snooze_until")
    @classmethod
    def normalize_timestamps(cls, v: datetime | None) -> datetime | None:
        return to_wall_clock(v) if v is not None else None

    def changes(self) -> dict[str, Any]:
        """Return the explicitly set fields, dropping nulls for required ones."""
        data = self.model_dump(exclude_unset=True)
        for required in (
            "title",
            "due_date",
            "frequency",
            "is_recurring",
            "is_active",
            "status",
            "auto_create_transaction",
            "notify_before",
            "enable_push_notification",
            "enable_email_notification",
        ):
            if required in data and data[required] is None:
                del data[required]
        return data


class ReminderView(str, Enum):
    """Named filters over the collection."""

    ALL = "all"
    ACTIVE = "active"
    OVERDUE = "overdue"
    COMPLETED = "completed"

    def matches(self, reminder: Reminder) -> bool:
        if self == ReminderView.ACTIVE:
            return reminder.is_active and reminder.status == ReminderStatus.PENDING
        if self == ReminderView.OVERDUE:
            return reminder.status == ReminderStatus.OVERDUE
        if self == ReminderView.COMPLETED:
            return reminder.status == ReminderStatus.COMPLETED
        return True
