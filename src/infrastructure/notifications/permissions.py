"""Notification permission provider driven by configuration."""

from src.config import get_logger
from src.core.interfaces.notifications import INotificationPermissions

logger = get_logger(__name__)


class StaticNotificationPermissions(INotificationPermissions):
    """
    Permission provider with a fixed answer.

    A request flips the state to grant_on_request, mirroring a user who
    answers the system prompt the same way every time.
    """

    def __init__(self, granted: bool = True, grant_on_request: bool | None = None) -> None:
        self._granted = granted
        self._grant_on_request = granted if grant_on_request is None else grant_on_request
        self.request_count = 0

    async def has_permission(self) -> bool:
        return self._granted

    async def request_permission(self) -> bool:
        self.request_count += 1
        self._granted = self._grant_on_request
        logger.info("notification_permission_requested", granted=self._granted)
        return self._granted
