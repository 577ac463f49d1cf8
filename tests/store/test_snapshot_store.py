"""Tests for snapshot store."""

import pytest


@pytest.mark.asyncio
async def test_fetch_snapshots(fact_store, snapshot_store):
    fact = await fact_store.create_fact({"title": "V1"}, changed_by="ana")
    await fact_store.write_record_state(
        fact.record_id, {"title": "V2"}, changed_by="bo", change_reason="Updated content"
    )

    snapshots = await snapshot_store.fetch_snapshots(fact.record_id)
    assert len(snapshots) == 2
    assert snapshots[0].version_number == 1
    assert snapshots[0].snapshot == {"title": "V1"}
    assert snapshots[1].version_number == 2
    assert snapshots[1].snapshot == {"title": "V2"}
    assert snapshots[1].change_reason == "Updated content"
    assert snapshots[1].changes.modified["title"].old_value == "V1"
    assert snapshots[1].created_at is not None


@pytest.mark.asyncio
async def test_fetch_snapshots_nonexistent(snapshot_store):
    assert await snapshot_store.fetch_snapshots("sf-99999") == []


@pytest.mark.asyncio
async def test_fetch_snapshots_only_returns_own_record(fact_store, snapshot_store):
    first = await fact_store.create_fact({"title": "A"}, changed_by="ana")
    second = await fact_store.create_fact({"title": "B"}, changed_by="ana")
    await fact_store.write_record_state(first.record_id, {"title": "A2"}, changed_by="ana")

    snapshots = await snapshot_store.fetch_snapshots(second.record_id)
    assert [s.record_id for s in snapshots] == [second.record_id]


@pytest.mark.asyncio
async def test_nested_values_round_trip(fact_store, snapshot_store):
    fields = {"meta": {"owners": ["ana", "bo"], "score": 0.5}, "flag": True, "note": None}
    fact = await fact_store.create_fact(fields, changed_by="ana")
    [snapshot] = await snapshot_store.fetch_snapshots(fact.record_id)
    assert snapshot.snapshot == fields
    assert snapshot.changes.added == fields
