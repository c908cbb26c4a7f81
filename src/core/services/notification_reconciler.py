"""
Notification Reconciler.

Keeps exactly one scheduled push notification per reminder that is
pending, active and push-enabled. The reminder -> notification mapping is
derived state: it is rebuilt from the scheduler's pending set (each payload
embeds the reminder id) instead of being persisted separately.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from src.config import get_logger
from src.core.entities.notification import (
    REMINDER_ID_KEY,
    NotificationPriority,
    ScheduleOutcome,
    ScheduleStatus,
)
from src.core.entities.reminder import Reminder, ReminderStatus
from src.core.exceptions import NotificationCancelError, NotificationSchedulingError
from src.core.interfaces.notifications import (
    INotificationPermissions,
    INotificationScheduler,
)

logger = get_logger(__name__)

# Category keywords -> screen that handles the reminder when tapped
_TARGET_SCREENS: list[tuple[tuple[str, ...], str]] = [
    (("bill", "utility"), "BillsReminder"),
    (("budget",), "BudgetPlanner"),
    (("goal",), "SavingsGoals"),
]
_DEFAULT_SCREEN = "Reminders"


def should_schedule(reminder: Reminder) -> bool:
    """The reconciliation predicate: pending, active and push-enabled."""
    return (
        reminder.status == ReminderStatus.PENDING
        and reminder.is_active
        and reminder.enable_push_notification
    )


def target_screen_for(reminder: Reminder) -> str:
    """Pick the screen a tapped notification should open."""
    label = (
        reminder.category_label
        or (reminder.transaction_type.value if reminder.transaction_type else "")
    ).lower()
    for keywords, screen in _TARGET_SCREENS:
        if any(k in label for k in keywords):
            return screen
    return _DEFAULT_SCREEN


def priority_for(reminder: Reminder, now: datetime) -> NotificationPriority:
    """Overdue or due today is high, due tomorrow medium, later low."""
    days_until = math.floor((reminder.due_date - now).total_seconds() / 86400)
    if days_until <= 0:
        return NotificationPriority.HIGH
    if days_until <= 1:
        return NotificationPriority.MEDIUM
    return NotificationPriority.LOW


def build_payload(reminder: Reminder, now: datetime) -> dict[str, Any]:
    """Build the notification payload; reminderId is what rebuild() matches on."""
    reminder_type = reminder.category_label
    return {
        REMINDER_ID_KEY: reminder.id,
        "type": "reminder",
        "amount": reminder.amount,
        "transactionType": (
            reminder.transaction_type.value if reminder.transaction_type else None
        ),
        "categoryId": reminder.category_id,
        "categoryName": (reminder.category or {}).get("name"),
        "reminderType": reminder_type,
        "targetScreen": target_screen_for(reminder),
        "navigationParams": {
            REMINDER_ID_KEY: reminder.id,
            "reminderType": (reminder.category or {}).get("name"),
        },
        "priority": priority_for(reminder, now).value,
        "dueDate": reminder.due_date.isoformat(),
    }


def notification_body(reminder: Reminder) -> str:
    return reminder.description or f"Reminder: {reminder.title}"


class NotificationReconciler:
    """
    Schedules and cancels reminder notifications.

    Calling schedule_for for a reminder that already has a notification
    cancels the stale one first, so a reminder never holds two.
    """

    def __init__(
        self,
        scheduler: INotificationScheduler,
        permissions: INotificationPermissions,
        request_permission: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._scheduler = scheduler
        self._permissions = permissions
        self._request_permission = request_permission
        self._clock = clock
        self._mapping: dict[str, str] = {}

    @property
    def mapping(self) -> dict[str, str]:
        """Copy of the reminder id -> notification id mapping."""
        return dict(self._mapping)

    def notification_id_for(self, reminder_id: str) -> str | None:
        return self._mapping.get(reminder_id)

    def has_notification(self, reminder_id: str) -> bool:
        return reminder_id in self._mapping

    async def ensure_permission(self) -> bool:
        """Check permission, asking once if it has not been granted."""
        try:
            if await self._permissions.has_permission():
                return True
            if not self._request_permission:
                return False
            granted = await self._permissions.request_permission()
        except Exception:
            logger.warning("notification_permission_check_failed", exc_info=True)
            return False

        if not granted:
            logger.info("notification_permission_denied")
        return granted

    async def schedule_for(self, reminder: Reminder) -> ScheduleOutcome:
        """
        Schedule the notification for a reminder's current occurrence.

        Fire time is due_date minus notify_before minutes. A fire time in
        the past is passed to the scheduler unchanged.
        """
        if self.has_notification(reminder.id):
            await self.cancel_for(reminder.id)

        if not should_schedule(reminder):
            return ScheduleOutcome(
                reminder_id=reminder.id,
                status=ScheduleStatus.NOT_ELIGIBLE,
                reason="reminder is not pending, active and push-enabled",
            )

        if not await self.ensure_permission():
            return ScheduleOutcome(
                reminder_id=reminder.id,
                status=ScheduleStatus.PERMISSION_DENIED,
                reason="notification permission denied",
            )

        fire_at = reminder.fire_at
        try:
            notification_id = await self._scheduler.schedule(
                reminder.title,
                notification_body(reminder),
                fire_at,
                build_payload(reminder, self._clock()),
            )
        except Exception as e:
            error = NotificationSchedulingError(reminder.id, str(e))
            logger.warning(
                "notification_schedule_failed",
                reminder_id=reminder.id,
                error=error.message,
            )
            return ScheduleOutcome(
                reminder_id=reminder.id,
                status=ScheduleStatus.SCHEDULER_ERROR,
                reason=error.message,
            )

        self._mapping[reminder.id] = notification_id
        logger.info(
            "notification_scheduled",
            reminder_id=reminder.id,
            notification_id=notification_id,
            fire_at=fire_at.isoformat(),
        )
        return ScheduleOutcome(
            reminder_id=reminder.id,
            status=ScheduleStatus.SCHEDULED,
            notification_id=notification_id,
            fire_at=fire_at,
        )

    async def cancel_for(self, reminder_id: str) -> bool:
        """
        Cancel a reminder's notification and drop the mapping entry.

        The entry is dropped even when the scheduler fails to cancel.

        Returns:
            True if the reminder had a mapping entry
        """
        notification_id = self._mapping.pop(reminder_id, None)
        if notification_id is None:
            return False

        try:
            await self._scheduler.cancel(notification_id)
        except Exception as e:
            error = NotificationCancelError(notification_id, str(e))
            logger.warning(
                "notification_cancel_failed",
                reminder_id=reminder_id,
                error=error.message,
            )
        else:
            logger.info(
                "notification_cancelled",
                reminder_id=reminder_id,
                notification_id=notification_id,
            )
        return True

    async def rebuild(self) -> dict[str, str]:
        """
        Rebuild the mapping from the scheduler's pending notifications.

        Extra notifications found for one reminder are cancelled so at most
        one survives.
        """
        try:
            scheduled = await self._scheduler.list_scheduled()
        except Exception:
            logger.warning("notification_rebuild_failed", exc_info=True)
            self._mapping = {}
            return {}

        mapping: dict[str, str] = {}
        duplicates: list[str] = []
        for notification in scheduled:
            reminder_id = notification.reminder_id
            if reminder_id is None:
                continue
            if reminder_id in mapping:
                duplicates.append(notification.id)
                continue
            mapping[reminder_id] = notification.id

        for notification_id in duplicates:
            try:
                await self._scheduler.cancel(notification_id)
            except Exception:
                logger.warning(
                    "notification_duplicate_cancel_failed",
                    notification_id=notification_id,
                    exc_info=True,
                )

        self._mapping = mapping
        logger.info(
            "notification_mapping_rebuilt",
            entries=len(mapping),
            duplicates_cancelled=len(duplicates),
        )
        return dict(mapping)

    async def reconcile(self, reminders: Iterable[Reminder]) -> list[ScheduleOutcome]:
        """
        Bring the mapping in line with a collection.

        Entries for unknown or ineligible reminders are cancelled. Eligible
        reminders without an entry are scheduled when their fire time is
        still ahead; a past fire time means the notification was already
        delivered before the mapping was rebuilt.
        """
        by_id = {r.id: r for r in reminders}
        now = self._clock()

        for reminder_id in list(self._mapping):
            reminder = by_id.get(reminder_id)
            if reminder is None or not should_schedule(reminder):
                await self.cancel_for(reminder_id)

        outcomes: list[ScheduleOutcome] = []
        for reminder in by_id.values():
            if not should_schedule(reminder) or self.has_notification(reminder.id):
                continue
            # Already fired before the mapping was rebuilt; an eligible reminder
            # may lack an entry here and is not re-announced
            if reminder.fire_at <= now:
                continue
            outcomes.append(await self.schedule_for(reminder))
        return outcomes
