"""Tests for SQLiteKeyValueStore."""

from pathlib import Path
from unittest.mock import patch

import pytest

import src.infrastructure.storage.sqlite.connection as conn_module
from src.core.exceptions import DatabaseError
from src.infrastructure.storage import SnapshotReminderStore
from src.infrastructure.storage.sqlite import SQLiteKeyValueStore, close_pool
from src.infrastructure.storage.sqlite.connection import ConnectionPool


class TestSQLiteKeyValueStore:
    """Tests for SQLiteKeyValueStore with an explicit pool."""

    @pytest.fixture(autouse=True)
    def _setup(self, pool: ConnectionPool):
        self.store = SQLiteKeyValueStore(pool)

    async def test_get_missing(self):
        assert await self.store.get("missing") is None

    async def test_set_and_get(self):
        await self.store.set("k", "value")
        assert await self.store.get("k") == "value"

    async def test_set_overwrites(self):
        await self.store.set("k", "first")
        await self.store.set("k", "second")
        assert await self.store.get("k") == "second"

    async def test_delete(self):
        await self.store.set("k", "value")
        assert await self.store.delete("k") is True
        assert await self.store.delete("k") is False
        assert await self.store.get("k") is None

    async def test_snapshot_survives_new_store(self, pool: ConnectionPool, make_reminder):
        reminder = make_reminder(id="r1")
        await SnapshotReminderStore(self.store).persist([reminder])

        reloaded = await SnapshotReminderStore(SQLiteKeyValueStore(pool)).load()

        assert reloaded == [reminder]

    async def test_sqlite_errors_wrapped(self, pool: ConnectionPool):
        async with pool.write() as conn:
            await conn.execute("DROP TABLE kv_store")

        with pytest.raises(DatabaseError) as exc_info:
            await self.store.get("k")
        assert exc_info.value.details["operation"] == "kv_get"


class TestSQLiteKeyValueStoreGlobalPool:
    """Without an explicit pool the global one is used."""

    async def test_uses_global_pool(self, mock_settings, temp_db_path: Path):
        conn_module._pool = None

        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            store = SQLiteKeyValueStore()
            await store.set("k", "v")
            assert await store.get("k") == "v"
            await close_pool()

        assert temp_db_path.exists()
