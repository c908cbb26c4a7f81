"""
In-process notification scheduler.

Holds pending notifications in memory and fires them with asyncio timers.
Delivery goes to a callback; a notification whose fire time has already
passed is delivered on the next loop iteration.
"""

import asyncio
import inspect
import uuid
from collections import deque
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from src.config import get_logger
from src.core.entities.notification import ScheduledNotification
from src.core.interfaces.notifications import INotificationScheduler

logger = get_logger(__name__)

# Delivered notifications kept for inspection; older ones are dropped
DELIVERY_HISTORY_SIZE = 100

DeliveryCallback = Callable[[ScheduledNotification], Awaitable[None] | None]


def log_delivery(notification: ScheduledNotification) -> None:
    """Default delivery: write the notification to the log."""
    logger.info(
        "notification_delivered",
        notification_id=notification.id,
        title=notification.title,
        body=notification.body,
        reminder_id=notification.reminder_id,
    )


class InProcessNotificationScheduler(INotificationScheduler):
    """Scheduler backed by the running event loop."""

    def __init__(
        self,
        deliver: DeliveryCallback | None = None,
        clock: Callable[[], datetime] = datetime.now,
        history_size: int = DELIVERY_HISTORY_SIZE,
    ) -> None:
        self._deliver = deliver or log_delivery
        self._clock = clock
        self._pending: dict[str, ScheduledNotification] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._delivery_tasks: set[asyncio.Task] = set()
        self._delivered: deque[ScheduledNotification] = deque(maxlen=history_size)

    @property
    def delivered(self) -> list[ScheduledNotification]:
        """Most recent deliveries, oldest first."""
        return list(self._delivered)

    async def schedule(
        self,
        title: str,
        body: str,
        fire_at: datetime | None,
        payload: dict[str, Any],
    ) -> str:
        notification = ScheduledNotification(
            id=uuid.uuid4().hex,
            title=title,
            body=body,
            fire_at=fire_at,
            payload=dict(payload),
        )
        delay = 0.0
        if fire_at is not None:
            delay = max(0.0, (fire_at - self._clock()).total_seconds())

        loop = asyncio.get_running_loop()
        self._pending[notification.id] = notification
        self._timers[notification.id] = loop.call_later(delay, self._fire, notification.id)
        logger.debug("local_notification_scheduled", notification_id=notification.id, delay=delay)
        return notification.id

    async def cancel(self, notification_id: str) -> None:
        handle = self._timers.pop(notification_id, None)
        if handle is not None:
            handle.cancel()
        if self._pending.pop(notification_id, None) is None:
            # Already delivered or never scheduled
            logger.debug("local_notification_cancel_noop", notification_id=notification_id)

    async def list_scheduled(self) -> list[ScheduledNotification]:
        return list(self._pending.values())

    def _fire(self, notification_id: str) -> None:
        self._timers.pop(notification_id, None)
        notification = self._pending.pop(notification_id, None)
        if notification is None:
            return

        self._delivered.append(notification)
        try:
            result = self._deliver(notification)
        except Exception:
            logger.error("notification_delivery_failed", notification_id=notification_id, exc_info=True)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._delivery_tasks.add(task)
            task.add_done_callback(self._delivery_tasks.discard)

    async def close(self) -> None:
        """Cancel every pending timer."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._pending.clear()
        for task in list(self._delivery_tasks):
            task.cancel()
        self._delivery_tasks.clear()
