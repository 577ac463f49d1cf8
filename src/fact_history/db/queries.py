"""Query helpers for facts and their snapshots.

Helpers never commit; the calling store owns the transaction so a fact
update and its snapshot land together or not at all.
"""

import json
from datetime import UTC, datetime

from fact_history.db.backend import Database, Row
from fact_history.models.fact import StrategicFact
from fact_history.models.snapshot import Snapshot, SnapshotAction, SnapshotDiff

_SNAPSHOT_COLUMNS = """record_id, version_number, snapshot, changes, changed_by,
    change_reason, action, reverted_from, created_at"""


async def next_record_id(db: Database) -> str:
    """Get and increment the next fact ID."""
    cursor = await db.execute("SELECT next_id FROM fact_id_seq")
    row = await cursor.fetchone()
    if row is None:
        raise RuntimeError("fact_id_seq table is empty")
    next_id = row[0]
    await db.execute("UPDATE fact_id_seq SET next_id = ?", (next_id + 1,))
    return f"sf-{next_id:05d}"


def row_to_fact(row: Row) -> StrategicFact:
    """Convert a database row to a StrategicFact."""
    return StrategicFact(
        record_id=row["record_id"],
        fields=json.loads(row["fields"]),
        version=row["version"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


def row_to_snapshot(row: Row) -> Snapshot:
    """Convert a database row to a Snapshot."""
    return Snapshot(
        record_id=row["record_id"],
        version_number=row["version_number"],
        snapshot=json.loads(row["snapshot"]),
        changes=SnapshotDiff.model_validate(json.loads(row["changes"])),
        changed_by=row["changed_by"],
        change_reason=row["change_reason"],
        action=SnapshotAction(row["action"]),
        reverted_from=row["reverted_from"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


async def get_fact(db: Database, record_id: str) -> StrategicFact | None:
    """Get a single fact by ID."""
    cursor = await db.execute("SELECT * FROM facts WHERE record_id = ?", (record_id,))
    row = await cursor.fetchone()
    return row_to_fact(row) if row else None


async def insert_fact(db: Database, fact: StrategicFact) -> None:
    """Insert a new fact row."""
    await db.execute(
        """INSERT INTO facts (record_id, fields, version, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?)""",
        (
            fact.record_id,
            json.dumps(fact.fields),
            fact.version,
            fact.created_at.isoformat() if fact.created_at else _now_iso(),
            fact.updated_at.isoformat() if fact.updated_at else _now_iso(),
        ),
    )


async def update_fact_if_version(db: Database, fact: StrategicFact, expected_version: int) -> bool:
    """Update a fact only if it is still at ``expected_version``.

    Returns False when another writer got there first.
    """
    cursor = await db.execute(
        """UPDATE facts SET fields = ?, version = ?, updated_at = ?
        WHERE record_id = ? AND version = ?""",
        (
            json.dumps(fact.fields),
            fact.version,
            fact.updated_at.isoformat() if fact.updated_at else _now_iso(),
            fact.record_id,
            expected_version,
        ),
    )
    return cursor.rowcount == 1


async def insert_snapshot(db: Database, snapshot: Snapshot) -> None:
    """Append a snapshot row."""
    await db.execute(
        f"INSERT INTO fact_snapshots ({_SNAPSHOT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        (
            snapshot.record_id,
            snapshot.version_number,
            json.dumps(snapshot.snapshot),
            json.dumps(snapshot.changes.model_dump(mode="json")),
            snapshot.changed_by,
            snapshot.change_reason,
            snapshot.action.value,
            snapshot.reverted_from,
            snapshot.created_at.isoformat() if snapshot.created_at else _now_iso(),
        ),
    )


async def get_snapshots(db: Database, record_id: str) -> list[Snapshot]:
    """All snapshots of a fact, oldest first."""
    cursor = await db.execute(
        f"SELECT {_SNAPSHOT_COLUMNS} FROM fact_snapshots"
        " WHERE record_id = ? ORDER BY version_number, id",
        (record_id,),
    )
    rows = await cursor.fetchall()
    return [row_to_snapshot(row) for row in rows]


async def get_latest_snapshot(db: Database, record_id: str) -> Snapshot | None:
    """The highest-numbered snapshot of a fact."""
    cursor = await db.execute(
        f"SELECT {_SNAPSHOT_COLUMNS} FROM fact_snapshots"
        " WHERE record_id = ? ORDER BY version_number DESC, id DESC LIMIT 1",
        (record_id,),
    )
    row = await cursor.fetchone()
    return row_to_snapshot(row) if row else None


async def count_snapshots(db: Database, record_id: str | None = None) -> int:
    """Number of snapshots, for one fact or overall."""
    if record_id is None:
        cursor = await db.execute("SELECT COUNT(*) FROM fact_snapshots")
    else:
        cursor = await db.execute(
            "SELECT COUNT(*) FROM fact_snapshots WHERE record_id = ?", (record_id,)
        )
    row = await cursor.fetchone()
    return int(row[0]) if row else 0


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()
