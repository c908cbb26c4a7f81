"""
SQLite connections for the reminder database.

The reminder collection is rewritten as one snapshot, so writes never need
to run side by side: a single writer connection takes them one at a time
inside an IMMEDIATE transaction. Reads come from a few reader connections,
which WAL lets run while a write is in flight.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.infrastructure.storage.sqlite.schema import ensure_schema

logger = get_logger(__name__)


class ConnectionPool:
    """One serialized writer plus a queue of reader connections."""

    def __init__(
        self,
        db_path: Path,
        readers: int = 2,
        busy_timeout: int = 30000,
    ):
        if readers < 1:
            raise ValueError("readers must be at least 1")
        self.db_path = db_path
        self.readers = readers
        self.busy_timeout = busy_timeout

        self._writer: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()
        self._readers: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._reader_connections: list[aiosqlite.Connection] = []
        self._init_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._writer is not None

    async def initialize(self) -> None:
        """Open the writer, bootstrap the schema, then open the readers."""
        async with self._init_lock:
            if self._writer is not None:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            # Schema first, so readers never see a database without kv_store
            writer = await self._open()
            await ensure_schema(writer)
            self._writer = writer

            for _ in range(self.readers):
                conn = await self._open()
                self._reader_connections.append(conn)
                self._readers.put_nowait(conn)

            logger.info(
                "sqlite_opened",
                db_path=str(self.db_path),
                readers=self.readers,
            )

    async def _open(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def read(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a reader connection.

        Usage:
            async with pool.read() as conn:
                cursor = await conn.execute(...)
        """
        if not self.is_open:
            await self.initialize()

        conn = await self._readers.get()
        try:
            yield conn
        finally:
            self._readers.put_nowait(conn)

    @asynccontextmanager
    async def write(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Run statements on the writer inside one IMMEDIATE transaction.

        Commits on success and rolls back on any exception. Writers queue
        on a lock, so one snapshot write finishes before the next starts.
        """
        if not self.is_open:
            await self.initialize()

        async with self._write_lock:
            writer = self._writer
            if writer is None:
                raise aiosqlite.ProgrammingError("connection pool is closed")
            await writer.execute("BEGIN IMMEDIATE")
            try:
                yield writer
            except BaseException:
                await writer.rollback()
                raise
            await writer.commit()

    async def close(self) -> None:
        """Close every connection; the pool can be reopened afterwards."""
        async with self._init_lock:
            async with self._write_lock:
                if self._writer is not None:
                    await self._writer.close()
                    self._writer = None
            for conn in self._reader_connections:
                await conn.close()
            self._reader_connections.clear()
            self._readers = asyncio.Queue()
            logger.info("sqlite_closed", db_path=str(self.db_path))


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global pool for the configured database."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            readers=settings.storage.reader_connections,
            busy_timeout=settings.storage.busy_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
