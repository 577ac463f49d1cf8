"""DDL and migrations for the fact history database."""

from fact_history.db.backend import Database

SCHEMA_VERSION = 1

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS facts (
    record_id TEXT PRIMARY KEY,
    fields TEXT NOT NULL DEFAULT '{}',
    version INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS fact_snapshots (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    record_id TEXT NOT NULL REFERENCES facts(record_id),
    version_number INTEGER NOT NULL,
    snapshot TEXT NOT NULL,
    changes TEXT NOT NULL DEFAULT '{}',
    changed_by TEXT NOT NULL,
    change_reason TEXT,
    action TEXT NOT NULL DEFAULT 'update',
    reverted_from INTEGER,
    created_at TEXT NOT NULL,
    UNIQUE(record_id, version_number)
);

CREATE INDEX IF NOT EXISTS idx_snapshots_record ON fact_snapshots(record_id);

-- History is append-only
CREATE TRIGGER IF NOT EXISTS fact_snapshots_no_update BEFORE UPDATE ON fact_snapshots
BEGIN
    SELECT RAISE(ABORT, 'fact_snapshots is append-only');
END;

CREATE TRIGGER IF NOT EXISTS fact_snapshots_no_delete BEFORE DELETE ON fact_snapshots
BEGIN
    SELECT RAISE(ABORT, 'fact_snapshots is append-only');
END;

CREATE TABLE IF NOT EXISTS fact_id_seq (
    next_id INTEGER NOT NULL DEFAULT 1
);
"""

INIT_SEQ_SQL = """
INSERT INTO fact_id_seq (next_id)
SELECT 1 WHERE NOT EXISTS (SELECT 1 FROM fact_id_seq);
"""


async def apply_schema(db: Database) -> None:
    """Apply the database schema."""
    await db.executescript(SCHEMA_SQL)
    await db.execute(INIT_SEQ_SQL)

    cursor = await db.execute("SELECT version FROM schema_version")
    row = await cursor.fetchone()
    if row is None:
        await db.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))

    await db.commit()
