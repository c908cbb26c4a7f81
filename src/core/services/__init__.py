"""Core domain services."""

from src.core.services.notification_reconciler import (
    NotificationReconciler,
    build_payload,
    should_schedule,
)
from src.core.services.overdue_sweeper import (
    OverdueSweeper,
    SweepResult,
    is_newly_overdue,
)
from src.core.services.recurrence import (
    RecurrenceEngine,
    add_months,
    advance,
    next_due_date,
)

__all__ = [
    "RecurrenceEngine",
    "next_due_date",
    "advance",
    "add_months",
    "NotificationReconciler",
    "should_schedule",
    "build_payload",
    "OverdueSweeper",
    "SweepResult",
    "is_newly_overdue",
]
