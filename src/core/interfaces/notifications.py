"""
Abstract interfaces for notification collaborators.

The scheduler owns delivery; the reminder core only asks it to schedule,
cancel and enumerate pending notifications.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from src.core.entities.notification import ScheduledNotification


class INotificationScheduler(ABC):
    """Abstract interface for the local notification scheduler."""

    @abstractmethod
    async def schedule(
        self,
        title: str,
        body: str,
        fire_at: datetime | None,
        payload: dict[str, Any],
    ) -> str:
        """
        Schedule a notification.

        Args:
            title: Notification title
            body: Notification body text
            fire_at: When to fire; None or a past time fires immediately
            payload: Data attached to the notification

        Returns:
            Scheduler-assigned notification ID
        """
        pass

    @abstractmethod
    async def cancel(self, notification_id: str) -> None:
        """Cancel a scheduled notification."""
        pass

    @abstractmethod
    async def list_scheduled(self) -> list[ScheduledNotification]:
        """List notifications that have not fired yet."""
        pass


class INotificationPermissions(ABC):
    """Abstract interface for the notification permission prompt."""

    @abstractmethod
    async def has_permission(self) -> bool:
        """Check whether notifications are currently allowed."""
        pass

    @abstractmethod
    async def request_permission(self) -> bool:
        """Ask for permission. Returns True if granted."""
        pass
