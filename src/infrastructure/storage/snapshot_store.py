"""
Snapshot-backed reminder store.

Owns the in-memory reminder collection and persists it as one JSON value
in the key-value store. Every write replaces the whole snapshot.
"""

from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timedelta

from src.config import get_logger
from src.core.entities.reminder import Reminder, ReminderStatus, ReminderView
from src.core.exceptions import (
    DuplicateReminderError,
    SnapshotReadError,
    SnapshotWriteError,
)
from src.core.interfaces.storage import IKeyValueStore, IReminderStore
from src.infrastructure.storage.reminder_codec import (
    deserialize_snapshot,
    serialize_snapshot,
)

logger = get_logger(__name__)

DEFAULT_SNAPSHOT_KEY = "fintracker::reminders::v1"


def _sorted_by_due(reminders: Sequence[Reminder]) -> list[Reminder]:
    return sorted(reminders, key=lambda r: r.due_date)


class SnapshotReminderStore(IReminderStore):
    """Reminder store persisting the collection under a single key."""

    def __init__(self, kv_store: IKeyValueStore, key: str = DEFAULT_SNAPSHOT_KEY) -> None:
        self._kv = kv_store
        self._key = key
        self._reminders: list[Reminder] = []
        self._loaded = False

    @property
    def key(self) -> str:
        return self._key

    @property
    def reminders(self) -> list[Reminder]:
        return list(self._reminders)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self, reminder_id: str) -> Reminder | None:
        for reminder in self._reminders:
            if reminder.id == reminder_id:
                return reminder
        return None

    async def load(self) -> list[Reminder]:
        """
        Read and parse the snapshot, sorted ascending by due date.

        Raises:
            SnapshotReadError: If the key-value store cannot be read
        """
        try:
            text = await self._kv.get(self._key)
        except Exception as e:
            logger.error("reminder_snapshot_read_failed", key=self._key, error=str(e))
            raise SnapshotReadError(self._key, str(e)) from e

        self._reminders = _sorted_by_due(deserialize_snapshot(text))
        self._loaded = True
        logger.info("reminders_loaded", count=len(self._reminders))
        return self.reminders

    async def persist(self, reminders: Sequence[Reminder]) -> list[Reminder]:
        """
        Overwrite the snapshot with the full collection.

        The in-memory collection is replaced only after the write succeeds.

        Raises:
            DuplicateReminderError: If two reminders share an id
            SnapshotWriteError: If the key-value store rejects the write
        """
        duplicates = [rid for rid, n in Counter(r.id for r in reminders).items() if n > 1]
        if duplicates:
            raise DuplicateReminderError(duplicates[0])

        ordered = _sorted_by_due(reminders)
        payload = serialize_snapshot(ordered)
        try:
            await self._kv.set(self._key, payload)
        except Exception as e:
            logger.error(
                "reminder_snapshot_write_failed",
                key=self._key,
                count=len(ordered),
                error=str(e),
            )
            raise SnapshotWriteError(self._key, str(e), count=len(ordered)) from e

        self._reminders = ordered
        self._loaded = True
        logger.debug("reminders_persisted", count=len(ordered))
        return self.reminders

    def filter_by(self, view: ReminderView | str = ReminderView.ALL) -> list[Reminder]:
        """Filter the collection by a named view."""
        view = ReminderView(view)
        return [r for r in self._reminders if view.matches(r)]

    def status_counts(self) -> dict[str, int]:
        """Count reminders per view."""
        return {view.value: len(self.filter_by(view)) for view in ReminderView}

    def upcoming(self, within_days: int, now: datetime) -> list[Reminder]:
        """Active pending reminders due between now and now + within_days."""
        horizon = now + timedelta(days=within_days)
        return [
            r
            for r in self._reminders
            if r.is_active
            and r.status == ReminderStatus.PENDING
            and now <= r.due_date <= horizon
        ]
