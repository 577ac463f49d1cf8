"""Database connection management."""

import logging
from pathlib import Path

import aiosqlite

from fact_history.config import get_db_path
from fact_history.db.backend import Database
from fact_history.db.sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)


async def create_connection(db_path: Path | str | None = None) -> Database:
    """Create and initialize a database connection.

    For in-memory databases (used by tests), pass ":memory:".
    """
    db_path = str(db_path or get_db_path())

    if db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row

    # WAL keeps history reads from blocking on a concurrent write
    if db_path != ":memory:":
        await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA foreign_keys=ON")

    db = SQLiteBackend(conn)
    await db.apply_schema()
    logger.debug("Opened database at %s", db_path)
    return db
