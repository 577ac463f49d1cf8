"""Version comparison result."""

from pydantic import BaseModel

from fact_history.models.snapshot import SnapshotDiff


class VersionComparison(BaseModel):
    """Diff between two versions, always oriented older to newer."""

    record_id: str
    old_version: int
    new_version: int
    old_label: str
    new_label: str
    diff: SnapshotDiff
