"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to the reminder core.
The CLI and tests should build services from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from src.application.use_cases.reminder_lifecycle import (
    NoticeSink,
    ReminderLifecycleService,
    log_notice,
)
from src.application.use_cases.sweep_overdue import OverdueSweepRunner
from src.config import get_settings
from src.core.entities.notification import ReminderNotice
from src.core.entities.reminder import CustomInterval, IntervalUnit
from src.core.services import NotificationReconciler, RecurrenceEngine

if TYPE_CHECKING:
    from src.core.interfaces import (
        IKeyValueStore,
        INotificationPermissions,
        INotificationScheduler,
        IReminderStore,
        ITransactionCreator,
    )


OVERDUE_NOTICE_TITLE = "Reminder Overdue"

# Singleton service instances
_reminder_store: "IReminderStore | None" = None
_notification_reconciler: NotificationReconciler | None = None
_lifecycle_service: ReminderLifecycleService | None = None


async def get_reminder_store(
    kv_store: "IKeyValueStore | None" = None,
) -> "IReminderStore":
    """
    Get or create the snapshot reminder store.

    Args:
        kv_store: Optional key-value store override. Defaults to SQLite.

    Returns:
        Reminder store persisting under the configured snapshot key
    """
    global _reminder_store

    if _reminder_store is not None and kv_store is None:
        return _reminder_store

    # Lazy import infrastructure to avoid circular imports
    from src.infrastructure.storage import SnapshotReminderStore, get_kv_store

    settings = get_settings()
    store = SnapshotReminderStore(
        kv_store or await get_kv_store(),
        key=settings.storage.snapshot_key,
    )

    if kv_store is None:
        _reminder_store = store

    return store


def get_notification_reconciler(
    scheduler: "INotificationScheduler | None" = None,
    permissions: "INotificationPermissions | None" = None,
) -> NotificationReconciler:
    """
    Get or create the notification reconciler.

    Args:
        scheduler: Optional scheduler override. Defaults to in-process timers.
        permissions: Optional permission provider override

    Returns:
        Configured NotificationReconciler
    """
    global _notification_reconciler

    overridden = scheduler is not None or permissions is not None
    if _notification_reconciler is not None and not overridden:
        return _notification_reconciler

    from src.infrastructure.notifications import (
        InProcessNotificationScheduler,
        StaticNotificationPermissions,
    )

    settings = get_settings()
    reconciler = NotificationReconciler(
        scheduler=scheduler or InProcessNotificationScheduler(),
        permissions=permissions
        or StaticNotificationPermissions(granted=settings.notifications.permission_granted),
        request_permission=settings.reminders.request_permission_on_schedule,
    )

    if not overridden:
        _notification_reconciler = reconciler

    return reconciler


def _without_overdue_notices(sink: NoticeSink) -> NoticeSink:
    def _sink(notice: ReminderNotice) -> None:
        if notice.title != OVERDUE_NOTICE_TITLE:
            sink(notice)

    return _sink


async def get_lifecycle_service(
    store: "IReminderStore | None" = None,
    reconciler: NotificationReconciler | None = None,
    transaction_creator: "ITransactionCreator | None" = None,
    notice_sink: NoticeSink | None = None,
) -> ReminderLifecycleService:
    """
    Get or create the ReminderLifecycleService.

    Creates infrastructure dependencies if not provided. Only the fully
    default instance is cached.

    Args:
        store: Optional reminder store override
        reconciler: Optional notification reconciler override
        transaction_creator: Optional transaction service override
        notice_sink: Optional receiver for user-visible notices

    Returns:
        Configured ReminderLifecycleService
    """
    global _lifecycle_service

    overridden = any(
        dep is not None for dep in (store, reconciler, transaction_creator, notice_sink)
    )
    if _lifecycle_service is not None and not overridden:
        return _lifecycle_service

    from src.infrastructure.notifications import LoggingTransactionCreator

    settings = get_settings().reminders
    sink = notice_sink or log_notice
    if not get_settings().notifications.deliver_overdue_notices:
        sink = _without_overdue_notices(sink)

    service = ReminderLifecycleService(
        store=store or await get_reminder_store(),
        reconciler=reconciler or get_notification_reconciler(),
        transaction_creator=transaction_creator or LoggingTransactionCreator(),
        recurrence=RecurrenceEngine(
            CustomInterval(
                unit=IntervalUnit(settings.custom_interval_unit),
                count=settings.custom_interval_count,
            )
        ),
        notice_sink=sink,
        default_snooze_minutes=settings.default_snooze_minutes,
        upcoming_window_days=settings.upcoming_window_days,
    )

    if not overridden:
        _lifecycle_service = service

    return service


def get_sweep_runner(
    service: ReminderLifecycleService,
    interval_seconds: float | None = None,
) -> OverdueSweepRunner:
    """Create a sweep runner, defaulting to the configured interval."""
    if interval_seconds is None:
        interval_seconds = get_settings().reminders.sweep_interval_seconds
    return OverdueSweepRunner(service, interval_seconds=interval_seconds)


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _reminder_store
    global _notification_reconciler
    global _lifecycle_service

    _reminder_store = None
    _notification_reconciler = None
    _lifecycle_service = None


__all__ = [
    # Factory functions
    "get_reminder_store",
    "get_notification_reconciler",
    "get_lifecycle_service",
    "get_sweep_runner",
    # Reset
    "reset_services",
]
