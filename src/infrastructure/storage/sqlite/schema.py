"""
Schema bootstrap for the reminder database.

The reminder core only needs a key-value table; the whole reminder
collection lives under a single key.
"""

import aiosqlite

from src.config import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = "001"

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        applied_at TEXT DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
)


async def ensure_schema(conn: aiosqlite.Connection) -> None:
    """Create tables if missing and record the schema version."""
    for statement in SCHEMA_STATEMENTS:
        await conn.execute(statement)
    await conn.execute(
        "INSERT OR IGNORE INTO schema_migrations (version, name) VALUES (?, ?)",
        (SCHEMA_VERSION, "kv_store"),
    )
    await conn.commit()
    logger.debug("schema_ready", version=SCHEMA_VERSION)
