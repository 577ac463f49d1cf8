"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta
from typing import Any

import pytest_asyncio

from fact_history.db.connection import create_connection
from fact_history.diff.engine import compute_diff, deep_copy_payload
from fact_history.errors import RecordNotFound, VersionConflict
from fact_history.history.manager import VersionHistoryManager
from fact_history.models.snapshot import Snapshot, SnapshotAction
from fact_history.store.fact_store import FactStore
from fact_history.store.snapshot_store import SnapshotStore


@pytest_asyncio.fixture
async def db():
    """In-memory database with full schema."""
    conn = await create_connection(":memory:")
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def fact_store(db):
    """Fact store backed by in-memory DB."""
    return FactStore(db)


@pytest_asyncio.fixture
async def snapshot_store(db):
    """Snapshot store backed by in-memory DB."""
    return SnapshotStore(db)


@pytest_asyncio.fixture
async def history(snapshot_store, fact_store):
    """History manager wired to the SQLite stores."""
    return VersionHistoryManager(snapshot_store, fact_store)


class InMemoryHistory:
    """In-memory snapshot source and record writer.

    Behaves like the SQLite stores, with switches to inject failures.
    """

    def __init__(self):
        self.snapshots: list[Snapshot] = []
        self.fetch_error: Exception | None = None
        self.write_error: Exception | None = None
        self.fetch_count = 0
        self.write_count = 0
        self._clock = datetime(2026, 1, 1, tzinfo=UTC)

    def add(
        self,
        record_id: str,
        payload: dict[str, Any],
        *,
        version_number: int | None = None,
        changed_by: str = "tester",
        created_at: datetime | None = None,
    ) -> Snapshot:
        """Append a snapshot directly, bypassing the writer."""
        existing = [s for s in self.snapshots if s.record_id == record_id]
        previous = max(existing, key=lambda s: s.version_number) if existing else None
        if version_number is None:
            version_number = previous.version_number + 1 if previous else 1
        if created_at is None:
            self._clock += timedelta(minutes=1)
            created_at = self._clock
        snapshot = Snapshot(
            record_id=record_id,
            version_number=version_number,
            snapshot=deep_copy_payload(payload),
            changes=compute_diff(previous.snapshot if previous else {}, payload),
            changed_by=changed_by,
            action=SnapshotAction.CREATE if previous is None else SnapshotAction.UPDATE,
            created_at=created_at,
        )
        self.snapshots.append(snapshot)
        return snapshot

    async def fetch_snapshots(self, record_id: str) -> list[Snapshot]:
        self.fetch_count += 1
        if self.fetch_error is not None:
            raise self.fetch_error
        return [s for s in self.snapshots if s.record_id == record_id]

    async def write_record_state(
        self,
        record_id: str,
        payload: dict[str, Any],
        *,
        changed_by: str,
        change_reason: str | None = None,
        expected_version: int | None = None,
        action: SnapshotAction = SnapshotAction.UPDATE,
        reverted_from: int | None = None,
    ) -> Snapshot:
        self.write_count += 1
        if self.write_error is not None:
            raise self.write_error
        existing = [s for s in self.snapshots if s.record_id == record_id]
        if not existing:
            raise RecordNotFound(record_id)
        latest = max(existing, key=lambda s: s.version_number)
        if expected_version is not None and latest.version_number != expected_version:
            raise VersionConflict(record_id, expected_version, latest.version_number)
        self._clock += timedelta(minutes=1)
        snapshot = Snapshot(
            record_id=record_id,
            version_number=latest.version_number + 1,
            snapshot=deep_copy_payload(payload),
            changes=compute_diff(latest.snapshot, payload),
            changed_by=changed_by,
            change_reason=change_reason,
            action=action,
            reverted_from=reverted_from,
            created_at=self._clock,
        )
        self.snapshots.append(snapshot)
        return snapshot


@pytest_asyncio.fixture
async def memory_history():
    """In-memory collaborator pair."""
    return InMemoryHistory()


@pytest_asyncio.fixture
async def memory_manager(memory_history):
    """History manager over in-memory collaborators."""
    return VersionHistoryManager(memory_history, memory_history)
