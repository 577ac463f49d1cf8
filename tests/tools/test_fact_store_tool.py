"""Tests for the fact_store and fact_get MCP tools."""

import pytest

from fact_history.tools.fact_get import _get_fact
from fact_history.tools.fact_store import _store_fact


@pytest.mark.asyncio
async def test_store_creates_fact(fact_store):
    result = await _store_fact(fact_store, {"title": "A"}, actor="agent")
    assert result == "Created sf-00001 (v1.0)"


@pytest.mark.asyncio
async def test_store_updates_fact(fact_store, snapshot_store):
    await _store_fact(fact_store, {"title": "A"}, actor="agent")
    result = await _store_fact(
        fact_store,
        {"title": "B", "status": "draft"},
        actor="agent",
        record_id="sf-00001",
        change_reason="Refined",
    )
    assert result.startswith("Updated sf-00001 (v2.0)")
    assert '+ status: "draft"' in result

    latest = (await snapshot_store.fetch_snapshots("sf-00001"))[-1]
    assert latest.changed_by == "agent"
    assert latest.change_reason == "Refined"


@pytest.mark.asyncio
async def test_store_update_missing_fact(fact_store):
    result = await _store_fact(fact_store, {"title": "B"}, actor="agent", record_id="sf-00042")
    assert result == "Error: Fact sf-00042 not found"


@pytest.mark.asyncio
async def test_store_update_conflict(fact_store):
    await _store_fact(fact_store, {"title": "A"}, actor="agent")
    await _store_fact(fact_store, {"title": "B"}, actor="agent", record_id="sf-00001")

    result = await _store_fact(
        fact_store, {"title": "C"}, actor="agent", record_id="sf-00001", expected_version=1
    )
    assert result.startswith("Error: Fact sf-00001 changed concurrently")
    assert "retry" in result


@pytest.mark.asyncio
async def test_get_fact(fact_store):
    await _store_fact(fact_store, {"title": "A"}, actor="agent")
    assert await _get_fact(fact_store, "sf-00001") == '[sf-00001] v1.0\n  title: "A"'
    assert await _get_fact(fact_store, "sf-00009") == "[sf-00009] not found"
