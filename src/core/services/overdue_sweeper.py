"""
Overdue sweeper.

Pure PENDING -> OVERDUE transition over a reminder snapshot. Persisting the
result and notifying the user is the caller's job.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from src.config import get_logger
from src.core.entities.reminder import Reminder, ReminderStatus

logger = get_logger(__name__)


def is_newly_overdue(reminder: Reminder, now: datetime) -> bool:
    """Check if a pending reminder has passed its due date and any snooze."""
    if reminder.status != ReminderStatus.PENDING or not reminder.is_active:
        return False
    if now <= reminder.due_date:
        return False
    return reminder.snooze_until is None or now > reminder.snooze_until


@dataclass
class SweepResult:
    """Result of one sweep over the collection."""

    reminders: list[Reminder] = field(default_factory=list)
    newly_overdue: list[Reminder] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.newly_overdue)


class OverdueSweeper:
    """Evaluates the overdue predicate over a snapshot."""

    def sweep(self, reminders: Sequence[Reminder], now: datetime) -> SweepResult:
        """
        Transition every eligible reminder to OVERDUE.

        The input is not mutated. Reminders already OVERDUE are left alone,
        so sweeping the result again reports nothing new.
        """
        result = SweepResult()

        for reminder in reminders:
            if is_newly_overdue(reminder, now):
                updated = reminder.model_copy(
                    update={"status": ReminderStatus.OVERDUE, "updated_at": now}
                )
                result.reminders.append(updated)
                result.newly_overdue.append(updated)
            else:
                result.reminders.append(reminder)

        if result.newly_overdue:
            logger.info(
                "overdue_sweep_transitioned",
                count=len(result.newly_overdue),
                reminder_ids=[r.id for r in result.newly_overdue],
            )
        return result
