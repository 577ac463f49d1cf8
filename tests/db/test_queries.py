"""Tests for fact and snapshot query helpers."""

from datetime import UTC, datetime

import pytest

from fact_history.db.queries import (
    count_snapshots,
    get_fact,
    get_latest_snapshot,
    get_snapshots,
    insert_fact,
    insert_snapshot,
    next_record_id,
    update_fact_if_version,
)
from fact_history.diff.engine import compute_diff
from fact_history.models.fact import StrategicFact
from fact_history.models.snapshot import Snapshot, SnapshotAction


def _fact(record_id: str = "sf-00001", **fields) -> StrategicFact:
    now = datetime(2026, 2, 1, tzinfo=UTC)
    return StrategicFact(record_id=record_id, fields=fields, created_at=now, updated_at=now)


@pytest.mark.asyncio
async def test_next_record_id_increments(db):
    assert await next_record_id(db) == "sf-00001"
    assert await next_record_id(db) == "sf-00002"


@pytest.mark.asyncio
async def test_insert_and_get_fact(db):
    await insert_fact(db, _fact(title="A", tags=["x"]))
    await db.commit()

    fact = await get_fact(db, "sf-00001")
    assert fact is not None
    assert fact.fields == {"title": "A", "tags": ["x"]}
    assert fact.version == 1
    assert fact.created_at == datetime(2026, 2, 1, tzinfo=UTC)


@pytest.mark.asyncio
async def test_get_missing_fact(db):
    assert await get_fact(db, "sf-99999") is None


@pytest.mark.asyncio
async def test_update_fact_if_version(db):
    fact = _fact(title="A")
    await insert_fact(db, fact)

    updated = fact.model_copy(update={"fields": {"title": "B"}, "version": 2})
    assert await update_fact_if_version(db, updated, expected_version=1)
    # Already at v2, so a second guarded write on v1 matches nothing
    assert not await update_fact_if_version(db, updated, expected_version=1)
    await db.commit()

    stored = await get_fact(db, "sf-00001")
    assert stored.version == 2
    assert stored.fields == {"title": "B"}


@pytest.mark.asyncio
async def test_snapshot_round_trip(db):
    await insert_fact(db, _fact(title="A"))
    snapshot = Snapshot(
        record_id="sf-00001",
        version_number=1,
        snapshot={"title": "A", "tags": ["x"]},
        changes=compute_diff({"title": "Z"}, {"title": "A", "tags": ["x"]}),
        changed_by="ana",
        change_reason="why",
        action=SnapshotAction.REVERT,
        reverted_from=7,
        created_at=datetime(2026, 2, 1, 12, 30, tzinfo=UTC),
    )
    await insert_snapshot(db, snapshot)
    await db.commit()

    [loaded] = await get_snapshots(db, "sf-00001")
    assert loaded == snapshot


@pytest.mark.asyncio
async def test_snapshots_ordered_and_counted(db):
    await insert_fact(db, _fact(title="A"))
    for n in (2, 1, 3):
        await insert_snapshot(
            db,
            Snapshot(record_id="sf-00001", version_number=n, snapshot={"n": n}, changed_by="a"),
        )
    await db.commit()

    snapshots = await get_snapshots(db, "sf-00001")
    assert [s.version_number for s in snapshots] == [1, 2, 3]
    latest = await get_latest_snapshot(db, "sf-00001")
    assert latest.version_number == 3
    assert await count_snapshots(db, "sf-00001") == 3
    assert await count_snapshots(db) == 3


@pytest.mark.asyncio
async def test_duplicate_version_number_rejected(db):
    await insert_fact(db, _fact(title="A"))
    snap = Snapshot(record_id="sf-00001", version_number=1, changed_by="a")
    await insert_snapshot(db, snap)
    with pytest.raises(Exception, match="UNIQUE"):
        await insert_snapshot(db, snap)
    await db.rollback()
