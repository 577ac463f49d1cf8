"""Collaborator protocols consumed by the version history manager.

The manager programs against these two narrow interfaces. The SQLite stores
implement them; tests substitute in-memory fakes.
"""

from typing import Any, Protocol, runtime_checkable

from fact_history.models.snapshot import Snapshot, SnapshotAction


@runtime_checkable
class SnapshotSource(Protocol):
    """Append-only snapshot store, read side."""

    async def fetch_snapshots(self, record_id: str) -> list[Snapshot]:
        """Return every snapshot recorded for a record, in any order."""
        ...


@runtime_checkable
class RecordWriter(Protocol):
    """Writer that applies a payload as a record's current state.

    Each successful call appends exactly one new snapshot. A write whose
    ``expected_version`` no longer matches must raise ``VersionConflict``
    and leave the record untouched.
    """

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
        """Apply the payload and return the snapshot it produced."""
        ...
