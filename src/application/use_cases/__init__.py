"""Application use cases."""

from src.application.use_cases.reminder_lifecycle import (
    ReminderLifecycleService,
    log_notice,
)
from src.application.use_cases.sweep_overdue import (
    OverdueSweepRunner,
    SweepRunnerStatus,
)

__all__ = [
    "ReminderLifecycleService",
    "log_notice",
    "OverdueSweepRunner",
    "SweepRunnerStatus",
]
