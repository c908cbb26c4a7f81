"""Storage infrastructure implementations."""

from src.infrastructure.storage.memory_store import InMemoryKeyValueStore
from src.infrastructure.storage.snapshot_store import (
    DEFAULT_SNAPSHOT_KEY,
    SnapshotReminderStore,
)
from src.infrastructure.storage.sqlite import (
    SQLiteKeyValueStore,
    close_pool,
    get_kv_store,
    get_pool,
)

__all__ = [
    # Reminder store
    "SnapshotReminderStore",
    "DEFAULT_SNAPSHOT_KEY",
    # Key-value stores
    "SQLiteKeyValueStore",
    "InMemoryKeyValueStore",
    "get_kv_store",
    # Connection pool
    "get_pool",
    "close_pool",
]
