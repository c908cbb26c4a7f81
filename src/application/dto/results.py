"""Structured results returned by the reminder lifecycle service.

Operations never raise to the caller for storage, scheduler or
collaborator failures; they report them here instead.
"""

from dataclasses import dataclass, field
from typing import Any

from src.core.entities.reminder import Reminder


@dataclass
class OperationResult:
    """Outcome of one lifecycle operation."""

    success: bool
    message: str | None = None
    reminder: Reminder | None = None
    reminders: list[Reminder] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: dict[str, Any] | None = None
    notification_id: str | None = None
    transaction_id: str | None = None

    @classmethod
    def ok(
        cls,
        message: str | None = None,
        reminder: Reminder | None = None,
        **kwargs: Any,
    ) -> "OperationResult":
        return cls(success=True, message=message, reminder=reminder, **kwargs)

    @classmethod
    def failed(
        cls,
        message: str,
        error: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> "OperationResult":
        return cls(success=False, message=message, error=error, **kwargs)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


@dataclass
class SweepReport:
    """Outcome of one overdue sweep."""

    success: bool
    newly_overdue: list[Reminder] = field(default_factory=list)
    message: str | None = None
    error: dict[str, Any] | None = None

    @property
    def transitioned(self) -> int:
        return len(self.newly_overdue)
