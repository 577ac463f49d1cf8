"""Version history orchestration: listing, comparison, and revert."""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from fact_history.diff.engine import compute_diff, deep_copy_payload, values_equal
from fact_history.errors import (
    FetchFailure,
    IncompleteSelection,
    RevertConflict,
    RevertFailure,
    RevertUnverified,
    VersionConflict,
    VersionNotFound,
)
from fact_history.history.collaborators import RecordWriter, SnapshotSource
from fact_history.history.selector import ComparisonSelector
from fact_history.models.comparison import VersionComparison
from fact_history.models.snapshot import Snapshot, SnapshotAction

logger = logging.getLogger(__name__)


class HistoryState(StrEnum):
    """Load state of one record's history."""

    IDLE = "idle"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class HistoryView:
    """What a caller can display for one record's history."""

    record_id: str
    state: HistoryState = HistoryState.IDLE
    versions: list[Snapshot] = field(default_factory=list)
    error: str | None = None


def _created_sort_key(snapshot: Snapshot) -> float:
    if snapshot.created_at is None:
        return float("-inf")
    return snapshot.created_at.timestamp()


def order_newest_first(snapshots: list[Snapshot]) -> list[Snapshot]:
    """Sort by version_number descending.

    Ties (which correct writers never produce) fall back to created_at
    descending, then to the later-fetched snapshot first.
    """
    indexed = list(enumerate(snapshots))
    indexed.sort(
        key=lambda pair: (pair[1].version_number, _created_sort_key(pair[1]), pair[0]),
        reverse=True,
    )
    return [snapshot for _, snapshot in indexed]


class VersionHistoryManager:
    """Reads a record's version sequence, compares versions, and reverts."""

    def __init__(self, source: SnapshotSource, writer: RecordWriter):
        """Initialize with the snapshot source and record writer collaborators."""
        self.source = source
        self.writer = writer
        self._views: dict[str, HistoryView] = {}

    # -- Reads --

    async def list_versions(self, record_id: str) -> list[Snapshot]:
        """Fetch all versions of a record, newest first."""
        try:
            snapshots = list(await self.source.fetch_snapshots(record_id))
        except FetchFailure:
            raise
        except Exception as e:
            logger.warning("Fetching history for %s failed: %s", record_id, e)
            raise FetchFailure(record_id, str(e)) from e

        for snapshot in snapshots:
            if not isinstance(snapshot, Snapshot) or snapshot.record_id != record_id:
                raise FetchFailure(record_id, "store returned malformed or foreign snapshots")
        return order_newest_first(snapshots)

    async def get_version(self, record_id: str, version_number: int) -> Snapshot:
        """Get one version of a record. Raises VersionNotFound."""
        versions = await self.list_versions(record_id)
        return _find_version(record_id, versions, version_number)

    async def load(self, record_id: str) -> HistoryView:
        """Load (or reload) a record's history into its view.

        A failed load moves the view to the error state but keeps any
        versions from the last successful load.
        """
        previous = self._views.get(record_id) or HistoryView(record_id=record_id)
        try:
            versions = await self.list_versions(record_id)
        except FetchFailure as e:
            view = HistoryView(
                record_id=record_id,
                state=HistoryState.ERROR,
                versions=previous.versions,
                error=str(e),
            )
        else:
            view = HistoryView(record_id=record_id, state=HistoryState.LOADED, versions=versions)
        self._views[record_id] = view
        return view

    def view(self, record_id: str) -> HistoryView:
        """Current view of a record's history (idle if never loaded)."""
        return self._views.get(record_id) or HistoryView(record_id=record_id)

    # -- Comparison --

    async def compare(
        self, record_id: str, version_a: int, version_b: int
    ) -> VersionComparison:
        """Diff two versions. Argument order does not matter.

        The lower version_number is always treated as the old side.
        """
        versions = await self.list_versions(record_id)
        snap_a = _find_version(record_id, versions, version_a)
        snap_b = _find_version(record_id, versions, version_b)
        old, new = sorted((snap_a, snap_b), key=lambda s: s.version_number)
        return VersionComparison(
            record_id=record_id,
            old_version=old.version_number,
            new_version=new.version_number,
            old_label=old.label,
            new_label=new.label,
            diff=compute_diff(old.snapshot, new.snapshot),
        )

    async def compare_selection(
        self, record_id: str, selector: ComparisonSelector
    ) -> VersionComparison:
        """Compare the two versions held by a selector."""
        if not selector.is_complete():
            raise IncompleteSelection("Select 2 versions to compare")
        first, second = selector.current()
        return await self.compare(record_id, first, second)

    # -- Revert --

    async def revert(
        self,
        record_id: str,
        target_version: int,
        *,
        changed_by: str,
        change_reason: str | None = None,
    ) -> Snapshot:
        """Reinstate an older version's content as a new, latest version.

        History is never rewritten: reverting to v3 when the latest is v7
        produces v8. The writer is called at most once, guarded by the
        latest version number so a concurrent write surfaces as
        RevertConflict instead of being overwritten. A committed version that
        fails verification raises RevertUnverified carrying that version.
        """
        versions = await self.list_versions(record_id)
        target = _find_version(record_id, versions, target_version)
        latest = versions[0].version_number
        payload = deep_copy_payload(target.snapshot)

        try:
            created = await self.writer.write_record_state(
                record_id,
                payload,
                changed_by=changed_by,
                change_reason=change_reason or f"Reverted to version {target_version}",
                expected_version=latest,
                action=SnapshotAction.REVERT,
                reverted_from=target_version,
            )
        except VersionConflict as e:
            logger.warning("Revert of %s to v%d conflicted: %s", record_id, target_version, e)
            raise RevertConflict(str(e)) from e
        except Exception as e:
            logger.error("Revert of %s to v%d failed: %s", record_id, target_version, e)
            raise RevertFailure(f"Revert of {record_id} to v{target_version} failed: {e}") from e

        # The write is committed past this point; mismatches are reported, not undone
        problem = None
        if created.version_number <= latest:
            problem = f"the writer returned no version after v{latest}"
        elif not values_equal(created.snapshot, target.snapshot):
            problem = f"its content differs from v{target_version}"
        if problem is not None:
            error = RevertUnverified(created, problem)
            logger.error("%s", error)
            raise error

        logger.info(
            "Reverted %s to v%d as v%d", record_id, target_version, created.version_number
        )
        return created


def _find_version(record_id: str, versions: list[Snapshot], version_number: int) -> Snapshot:
    for snapshot in versions:
        if snapshot.version_number == version_number:
            return snapshot
    raise VersionNotFound(record_id, version_number)
