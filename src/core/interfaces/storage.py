"""
Abstract interfaces for storage providers.

Defines contracts for the key-value store and the reminder snapshot store.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from src.core.entities.reminder import Reminder, ReminderView


class IKeyValueStore(ABC):
    """
    Abstract interface for a persistent string key-value store.

    Only the read/write contract is used by the reminder core.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get the value stored under key, or None if missing."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under key."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key. Returns True if it existed."""
        pass


class IReminderStore(ABC):
    """
    Abstract interface for the reminder collection.

    The collection is persisted as one snapshot; callers always pass
    the complete desired collection to persist().
    """

    @property
    @abstractmethod
    def reminders(self) -> list[Reminder]:
        """Current in-memory collection, sorted by due date."""
        pass

    @property
    @abstractmethod
    def is_loaded(self) -> bool:
        """Whether the in-memory collection mirrors the persisted snapshot."""
        pass

    @abstractmethod
    def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID from the in-memory collection."""
        pass

    @abstractmethod
    async def load(self) -> list[Reminder]:
        """Read the persisted snapshot, replacing the in-memory collection."""
        pass

    @abstractmethod
    async def persist(self, reminders: Sequence[Reminder]) -> list[Reminder]:
        """Overwrite the persisted snapshot with the full collection."""
        pass

    @abstractmethod
    def filter_by(self, view: ReminderView | str = ReminderView.ALL) -> list[Reminder]:
        """Reminders matching a named view."""
        pass

    @abstractmethod
    def status_counts(self) -> dict[str, int]:
        """Number of reminders per named view."""
        pass

    @abstractmethod
    def upcoming(self, within_days: int, now: datetime) -> list[Reminder]:
        """Active pending reminders due within the window."""
        pass
