"""Database connection and schema management."""

from fact_history.db.backend import Cursor, Database, Row
from fact_history.db.sqlite_backend import SQLiteBackend

__all__ = ["Cursor", "Database", "Row", "SQLiteBackend"]
