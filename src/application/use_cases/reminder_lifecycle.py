"""
Reminder Lifecycle Use Case.

Create, edit, complete, snooze and delete reminders, keeping the persisted
snapshot and the scheduled notifications in step. Every operation, sweeps
included, runs under one asyncio.Lock and reads the store's current
collection after acquiring it, so an edit can never interleave with a
periodic sweep that is suspended on I/O.
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.application.dto.results import OperationResult, SweepReport
from src.config import get_logger
from src.core.entities.notification import (
    NoticeLevel,
    ReminderNotice,
    ScheduleOutcome,
    ScheduleStatus,
    TransactionRequest,
)
from src.core.entities.reminder import (
    Reminder,
    ReminderDraft,
    ReminderStatus,
    ReminderUpdate,
    ReminderView,
)
from src.core.exceptions import (
    ReminderCoreError,
    ReminderNotFoundError,
    StorageError,
    TransactionCreationError,
    ValidationError,
)
from src.core.interfaces.storage import IReminderStore
from src.core.interfaces.transactions import ITransactionCreator
from src.core.services.notification_reconciler import (
    NotificationReconciler,
    should_schedule,
)
from src.core.services.overdue_sweeper import OverdueSweeper
from src.core.services.recurrence import RecurrenceEngine

logger = get_logger(__name__)

NoticeSink = Callable[[ReminderNotice], None]

_SCHEDULE_WARNINGS: dict[ScheduleStatus, str] = {
    ScheduleStatus.PERMISSION_DENIED: (
        "Notification permission denied; reminder saved without a notification"
    ),
    ScheduleStatus.SCHEDULER_ERROR: (
        "Reminder saved but its notification could not be scheduled"
    ),
}


def log_notice(notice: ReminderNotice) -> None:
    """Default notice sink: write notices to the log."""
    log = logger.warning if notice.level in (NoticeLevel.WARNING, NoticeLevel.ERROR) else logger.info
    log("reminder_notice", title=notice.title, message=notice.message, reminder_id=notice.reminder_id)


def _validation_failure(e: PydanticValidationError) -> OperationResult:
    first = e.errors()[0] if e.errors() else {}
    field_name = ".".join(str(p) for p in first.get("loc", ())) or "input"
    error = ValidationError(field_name, first.get("msg", str(e)), first.get("input"))
    return OperationResult.failed(error.message, error=error.to_dict())


class ReminderLifecycleService:
    """Public reminder operations over store, reconciler and recurrence engine."""

    def __init__(
        self,
        store: IReminderStore,
        reconciler: NotificationReconciler,
        transaction_creator: ITransactionCreator | None = None,
        recurrence: RecurrenceEngine | None = None,
        sweeper: OverdueSweeper | None = None,
        notice_sink: NoticeSink | None = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
        default_snooze_minutes: int = 15,
        upcoming_window_days: int = 7,
    ) -> None:
        self._store = store
        self._reconciler = reconciler
        self._transactions = transaction_creator
        self._recurrence = recurrence or RecurrenceEngine()
        self._sweeper = sweeper or OverdueSweeper()
        self._notice_sink = notice_sink or log_notice
        self._clock = clock
        self._id_factory = id_factory
        self._default_snooze_minutes = default_snooze_minutes
        self._upcoming_window_days = upcoming_window_days
        self._lock = asyncio.Lock()

    @property
    def store(self) -> IReminderStore:
        return self._store

    @property
    def reconciler(self) -> NotificationReconciler:
        return self._reconciler

    # Queries

    def list_reminders(self, view: ReminderView | str = ReminderView.ALL) -> list[Reminder]:
        """Current collection filtered by a named view, sorted by due date."""
        return self._store.filter_by(view)

    def status_counts(self) -> dict[str, int]:
        return self._store.status_counts()

    def upcoming(self, within_days: int | None = None) -> list[Reminder]:
        """Active reminders due between now and the upcoming window."""
        days = self._upcoming_window_days if within_days is None else within_days
        return self._store.upcoming(days, self._clock())

    # Loading

    async def load(self) -> OperationResult:
        """
        Load the collection and bring notifications in line with it.

        Rebuilds the notification mapping from the scheduler, sweeps for
        overdue reminders, then reconciles the rest.
        """
        async with self._lock:
            return await self._load_unlocked()

    async def _load_unlocked(self) -> OperationResult:
        try:
            reminders = await self._store.load()
        except StorageError as e:
            logger.error("reminders_load_failed", error=e.message)
            self._notify("Error", "Failed to load reminders", NoticeLevel.ERROR)
            return OperationResult.failed("Failed to load reminders", error=e.to_dict())

        await self._reconciler.rebuild()
        report = await self._sweep_unlocked(self._clock())
        outcomes = await self._reconciler.reconcile(self._store.reminders)

        warnings = [self._schedule_warning(o) for o in outcomes if o.is_warning]
        if not report.success and report.message:
            warnings.append(report.message)

        logger.info(
            "reminders_refreshed",
            count=len(reminders),
            overdue=report.transitioned,
            scheduled=sum(1 for o in outcomes if o.scheduled),
        )
        return OperationResult.ok(
            "Reminders loaded",
            reminders=self._store.reminders,
            warnings=warnings,
        )

    async def refresh(self) -> OperationResult:
        return await self.load()

    # Lifecycle operations

    async def create(self, data: ReminderDraft | dict[str, Any]) -> OperationResult:
        """
        Create a reminder and schedule its notification.

        A scheduling problem does not undo the creation; it is reported as
        a warning.
        """
        try:
            draft = data if isinstance(data, ReminderDraft) else ReminderDraft.model_validate(data)
        except PydanticValidationError as e:
            return _validation_failure(e)

        async with self._lock:
            failed = await self._ensure_loaded()
            if failed is not None:
                return failed
            now = self._clock()
            existing = self._store.reminders
            taken = {r.id for r in existing}
            reminder_id = self._id_factory()
            while reminder_id in taken:
                reminder_id = self._id_factory()

            reminder = Reminder(
                id=reminder_id,
                **draft.model_dump(),
                status=ReminderStatus.PENDING,
                completed_count=0,
                created_at=now,
                updated_at=now,
            )

            warnings: list[str] = []
            outcome = await self._schedule(reminder, warnings)

            result = await self._commit(
                [*existing, reminder], reminder, previous=None, action="create", warnings=warnings
            )
            if result.success:
                result.notification_id = outcome.notification_id if outcome else None
                logger.info("reminder_created", reminder_id=reminder.id, title=reminder.title)
            return result

    async def edit(
        self, reminder_id: str, data: ReminderUpdate | dict[str, Any]
    ) -> OperationResult:
        """
        Apply a partial update.

        The current notification is cancelled first and a new one is
        scheduled only if the updated reminder is pending, active and
        push-enabled.

        Status cannot be set to COMPLETED here, since completion also moves
        the counters and the recurrence. A recurring reminder that ends up
        COMPLETED anyway is rolled forward to its next occurrence.
        """
        try:
            update = data if isinstance(data, ReminderUpdate) else ReminderUpdate.model_validate(data)
        except PydanticValidationError as e:
            return _validation_failure(e)

        if update.status == ReminderStatus.COMPLETED:
            error = ValidationError(
                "status", "reminders are completed through complete()", update.status.value
            )
            return OperationResult.failed(error.message, error=error.to_dict())

        async with self._lock:
            failed = await self._ensure_loaded()
            if failed is not None:
                return failed
            current = self._store.get(reminder_id)
            if current is None:
                return self._not_found(reminder_id)

            try:
                updated = Reminder.model_validate(
                    {
                        **current.model_dump(),
                        **update.changes(),
                        "id": current.id,
                        "completed_count": current.completed_count,
                        "updated_at": self._clock(),
                    }
                )
            except PydanticValidationError as e:
                return _validation_failure(e)
            updated = self._roll_forward_if_completed(updated)

            await self._reconciler.cancel_for(reminder_id)

            warnings: list[str] = []
            outcome = await self._schedule(updated, warnings)

            result = await self._commit(
                self._replace(updated), updated, previous=current, action="edit", warnings=warnings
            )
            if result.success:
                result.notification_id = outcome.notification_id if outcome else None
                logger.info("reminder_updated", reminder_id=reminder_id)
            return result

    async def complete(self, reminder_id: str) -> OperationResult:
        """
        Mark the current occurrence done.

        Recurring reminders roll forward to their next due date and stay
        PENDING; one-off reminders become COMPLETED. When the reminder
        carries transaction details, the transaction service is called
        after the completion has been persisted.
        """
        async with self._lock:
            failed = await self._ensure_loaded()
            if failed is not None:
                return failed
            current = self._store.get(reminder_id)
            if current is None:
                return self._not_found(reminder_id)
            if current.status == ReminderStatus.COMPLETED:
                return OperationResult.failed(
                    "Reminder is already completed", reminder=current
                )

            now = self._clock()
            await self._reconciler.cancel_for(reminder_id)

            changes: dict[str, Any] = {
                "completed_count": current.completed_count + 1,
                "last_completed": now,
                "updated_at": now,
            }
            if current.is_recurring:
                new_due = self._recurrence.next_due_date(
                    current.due_date, current.frequency, current.custom_interval
                )
                changes.update(
                    due_date=new_due,
                    next_due=self._recurrence.next_due_date(
                        new_due, current.frequency, current.custom_interval
                    ),
                    status=ReminderStatus.PENDING,
                    snooze_until=None,
                )
            else:
                changes.update(status=ReminderStatus.COMPLETED, next_due=None)

            completed = current.model_copy(update=changes)

            warnings: list[str] = []
            outcome = await self._schedule(completed, warnings) if completed.is_recurring else None

            result = await self._commit(
                self._replace(completed), completed, previous=current, action="complete", warnings=warnings
            )
            if not result.success:
                return result

            result.notification_id = outcome.notification_id if outcome else None
            logger.info(
                "reminder_completed",
                reminder_id=reminder_id,
                completed_count=completed.completed_count,
                next_due=completed.due_date.isoformat() if completed.is_recurring else None,
            )

            if current.has_transaction_details:
                result.transaction_id = await self._create_transaction(current, now, result.warnings)
            return result

    async def snooze(self, reminder_id: str, minutes: int | None = None) -> OperationResult:
        """
        Hold off overdue detection for the given number of minutes.

        Status, due date and the scheduled notification are left untouched.
        """
        minutes = self._default_snooze_minutes if minutes is None else minutes
        if minutes < 1:
            error = ValidationError("minutes", "must be at least 1", minutes)
            return OperationResult.failed(error.message, error=error.to_dict())

        async with self._lock:
            failed = await self._ensure_loaded()
            if failed is not None:
                return failed
            current = self._store.get(reminder_id)
            if current is None:
                return self._not_found(reminder_id)

            now = self._clock()
            snoozed = current.model_copy(
                update={"snooze_until": now + timedelta(minutes=minutes), "updated_at": now}
            )

            result = await self._commit(
                self._replace(snoozed), snoozed, previous=current, action="snooze",
                warnings=[], restore=False,
            )
            if result.success:
                logger.info(
                    "reminder_snoozed",
                    reminder_id=reminder_id,
                    snooze_until=snoozed.snooze_until.isoformat(),
                )
            return result

    async def delete(self, reminder_id: str) -> OperationResult:
        """Cancel the reminder's notification and remove it from the collection."""
        async with self._lock:
            failed = await self._ensure_loaded()
            if failed is not None:
                return failed
            current = self._store.get(reminder_id)
            if current is None:
                return self._not_found(reminder_id)

            await self._reconciler.cancel_for(reminder_id)
            remaining = [r for r in self._store.reminders if r.id != reminder_id]

            result = await self._commit(
                remaining, current, previous=current, action="delete", warnings=[]
            )
            if result.success:
                logger.info("reminder_deleted", reminder_id=reminder_id)
            return result

    async def sweep(self, now: datetime | None = None) -> SweepReport:
        """Mark overdue reminders, persist, and notify once per transition."""
        async with self._lock:
            failed = await self._ensure_loaded()
            if failed is not None:
                return SweepReport(success=False, message=failed.message, error=failed.error)
            return await self._sweep_unlocked(now or self._clock())

    # Internals

    async def _ensure_loaded(self) -> OperationResult | None:
        """
        Read the snapshot before the first mutation of a fresh store.

        Mutations persist the whole collection, so writing from an unloaded
        store would replace the snapshot with only the new state.
        """
        if self._store.is_loaded:
            return None
        result = await self._load_unlocked()
        return None if result.success else result

    async def _sweep_unlocked(self, now: datetime) -> SweepReport:
        result = self._sweeper.sweep(self._store.reminders, now)
        if not result.changed:
            return SweepReport(success=True)

        try:
            await self._store.persist(result.reminders)
        except StorageError as e:
            # Nothing is announced; the next sweep sees the same transitions
            logger.error("overdue_sweep_persist_failed", error=e.message)
            return SweepReport(
                success=False,
                message="Failed to save overdue reminders",
                error=e.to_dict(),
            )

        for reminder in result.newly_overdue:
            await self._reconciler.cancel_for(reminder.id)
            self._notify(
                "Reminder Overdue",
                f'"{reminder.title}" is now overdue',
                NoticeLevel.WARNING,
                reminder_id=reminder.id,
            )
        return SweepReport(success=True, newly_overdue=result.newly_overdue)

    async def _schedule(self, reminder: Reminder, warnings: list[str]) -> ScheduleOutcome | None:
        if not should_schedule(reminder):
            return None
        outcome = await self._reconciler.schedule_for(reminder)
        if outcome.is_warning:
            message = self._schedule_warning(outcome)
            warnings.append(message)
            self._notify(
                "Notification Scheduling Failed",
                message,
                NoticeLevel.WARNING,
                reminder_id=reminder.id,
            )
        return outcome

    def _roll_forward_if_completed(self, reminder: Reminder) -> Reminder:
        if not (reminder.is_recurring and reminder.status == ReminderStatus.COMPLETED):
            return reminder
        new_due = self._recurrence.next_due_date(
            reminder.due_date, reminder.frequency, reminder.custom_interval
        )
        return reminder.model_copy(
            update={
                "status": ReminderStatus.PENDING,
                "due_date": new_due,
                "next_due": self._recurrence.next_due_date(
                    new_due, reminder.frequency, reminder.custom_interval
                ),
                "snooze_until": None,
            }
        )

    @staticmethod
    def _schedule_warning(outcome: ScheduleOutcome) -> str:
        return _SCHEDULE_WARNINGS.get(outcome.status, outcome.reason or outcome.status.value)

    async def _commit(
        self,
        collection: list[Reminder],
        reminder: Reminder,
        previous: Reminder | None,
        action: str,
        warnings: list[str],
        restore: bool = True,
    ) -> OperationResult:
        """Persist the collection, restoring notification state on failure."""
        try:
            await self._store.persist(collection)
        except StorageError as e:
            logger.error(f"reminder_{action}_failed", reminder_id=reminder.id, error=e.message)
            if restore:
                await self._restore_notification(reminder.id, previous)
            self._notify("Error", f"Failed to {action} reminder", NoticeLevel.ERROR, reminder_id=reminder.id)
            return OperationResult.failed(
                f"Failed to {action} reminder",
                error=e.to_dict(),
                reminder=previous,
                warnings=warnings,
            )
        return OperationResult.ok(reminder=reminder, warnings=warnings)

    async def _restore_notification(self, reminder_id: str, previous: Reminder | None) -> None:
        # The store kept the previous collection, so match notifications to it
        if previous is not None and should_schedule(previous):
            await self._reconciler.schedule_for(previous)
        else:
            await self._reconciler.cancel_for(reminder_id)

    async def _create_transaction(
        self, reminder: Reminder, now: datetime, warnings: list[str]
    ) -> str | None:
        if self._transactions is None:
            warnings.append("No transaction service configured; transaction not created")
            return None

        request = TransactionRequest(
            reminder_id=reminder.id,
            amount=reminder.amount,  # type: ignore[arg-type]
            transaction_type=reminder.transaction_type,  # type: ignore[arg-type]
            wallet_id=reminder.wallet_id,  # type: ignore[arg-type]
            category_id=reminder.category_id,
            description=f"Auto: {reminder.title}",
            date=now,
        )
        try:
            transaction_id = await self._transactions.create_transaction(request)
        except Exception as e:
            error = TransactionCreationError(reminder.id, str(e))
            logger.warning("auto_transaction_failed", reminder_id=reminder.id, error=str(e))
            warnings.append(error.message)
            self._notify("Error", "Failed to create transaction", NoticeLevel.ERROR, reminder_id=reminder.id)
            return None

        self._notify(
            "Transaction Created",
            f"{request.transaction_type.value.lower()} of {request.amount} "
            f'created for "{reminder.title}"',
            NoticeLevel.SUCCESS,
            reminder_id=reminder.id,
        )
        return transaction_id

    def _replace(self, updated: Reminder) -> list[Reminder]:
        return [updated if r.id == updated.id else r for r in self._store.reminders]

    def _not_found(self, reminder_id: str) -> OperationResult:
        error: ReminderCoreError = ReminderNotFoundError(reminder_id)
        return OperationResult.failed(error.message, error=error.to_dict())

    def _notify(
        self,
        title: str,
        message: str,
        level: NoticeLevel,
        reminder_id: str | None = None,
    ) -> None:
        notice = ReminderNotice(
            title=title,
            message=message,
            level=level,
            reminder_id=reminder_id,
            created_at=self._clock(),
        )
        try:
            self._notice_sink(notice)
        except Exception:
            logger.warning("reminder_notice_sink_failed", exc_info=True)
