"""Pytest configuration and fixtures."""

import uuid
from collections.abc import Generator
from datetime import datetime, timedelta
from typing import Any

import pytest

from src.application.services import reset_services
from src.config import reset_settings
from src.core.entities import Reminder, ReminderNotice, ScheduledNotification
from src.core.interfaces import INotificationScheduler
from src.core.services import NotificationReconciler
from src.infrastructure.notifications import (
    LoggingTransactionCreator,
    StaticNotificationPermissions,
)
from src.infrastructure.storage import InMemoryKeyValueStore, SnapshotReminderStore

NOW = datetime(2025, 1, 15, 9, 0, 0)


class FakeScheduler(INotificationScheduler):
    """Scheduler double that records every call."""

    def __init__(self) -> None:
        self.pending: dict[str, ScheduledNotification] = {}
        self.scheduled_calls: list[ScheduledNotification] = []
        self.cancel_calls: list[str] = []
        self.fail_schedule = False
        self.fail_cancel = False
        self.fail_list = False

    async def schedule(
        self,
        title: str,
        body: str,
        fire_at: datetime | None,
        payload: dict[str, Any],
    ) -> str:
        if self.fail_schedule:
            raise RuntimeError("scheduler unavailable")
        notification = ScheduledNotification(
            id=f"n-{uuid.uuid4().hex[:8]}",
            title=title,
            body=body,
            fire_at=fire_at,
            payload=payload,
        )
        self.pending[notification.id] = notification
        self.scheduled_calls.append(notification)
        return notification.id

    async def cancel(self, notification_id: str) -> None:
        self.cancel_calls.append(notification_id)
        if self.fail_cancel:
            raise RuntimeError("cancel failed")
        self.pending.pop(notification_id, None)

    async def list_scheduled(self) -> list[ScheduledNotification]:
        if self.fail_list:
            raise RuntimeError("list failed")
        return list(self.pending.values())

    def for_reminder(self, reminder_id: str) -> list[ScheduledNotification]:
        return [n for n in self.pending.values() if n.reminder_id == reminder_id]


class Clock:
    """Settable clock for deterministic time."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(autouse=True)
def _reset_singletons() -> Generator[None, None, None]:
    """Isolate global settings and service singletons between tests."""
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def permissions() -> StaticNotificationPermissions:
    return StaticNotificationPermissions(granted=True)


@pytest.fixture
def reconciler(
    scheduler: FakeScheduler,
    permissions: StaticNotificationPermissions,
    clock: Clock,
) -> NotificationReconciler:
    return NotificationReconciler(scheduler, permissions, clock=clock)


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv_store: InMemoryKeyValueStore) -> SnapshotReminderStore:
    return SnapshotReminderStore(kv_store)


@pytest.fixture
def transactions() -> LoggingTransactionCreator:
    return LoggingTransactionCreator()


@pytest.fixture
def notices() -> list[ReminderNotice]:
    return []


@pytest.fixture
def make_reminder():
    """Factory for reminders with sensible defaults."""

    def _make(**overrides: Any) -> Reminder:
        data: dict[str, Any] = {
            "id": uuid.uuid4().hex,
            "title": "Electricity bill",
            "due_date": NOW + timedelta(days=3),
            "created_at": NOW,
            "updated_at": NOW,
        }
        data.update(overrides)
        return Reminder(**data)

    return _make
