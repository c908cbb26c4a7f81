"""
SQLite implementation of the key-value store.

Values are opaque strings; the reminder snapshot is stored as JSON text.
"""

from datetime import UTC, datetime

import aiosqlite

from src.config import get_logger
from src.core.exceptions import DatabaseError
from src.core.interfaces.storage import IKeyValueStore
from src.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool

logger = get_logger(__name__)


class SQLiteKeyValueStore(IKeyValueStore):
    """SQLite implementation of key-value storage."""

    def __init__(self, pool: ConnectionPool | None = None) -> None:
        # Without an explicit pool the global one is used
        self._pool = pool

    async def _resolve_pool(self) -> ConnectionPool:
        return self._pool if self._pool is not None else await get_pool()

    async def get(self, key: str) -> str | None:
        """Get value by key."""
        try:
            pool = await self._resolve_pool()
            async with pool.read() as conn:
                cursor = await conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("kv_get", str(e)) from e
        if row is None:
            return None
        return row["value"]

    async def set(self, key: str, value: str) -> None:
        """Insert or overwrite a value."""
        try:
            pool = await self._resolve_pool()
            async with pool.write() as conn:
                await conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, datetime.now(UTC).isoformat()),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("kv_set", str(e)) from e
        logger.debug("kv_set", key=key, size=len(value))

    async def delete(self, key: str) -> bool:
        """Delete a key."""
        try:
            pool = await self._resolve_pool()
            async with pool.write() as conn:
                cursor = await conn.execute(
                    "DELETE FROM kv_store WHERE key = ?", (key,)
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise DatabaseError("kv_delete", str(e)) from e
        if deleted:
            logger.info("kv_deleted", key=key)
        return deleted
