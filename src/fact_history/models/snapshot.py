"""Snapshot and diff models."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SnapshotAction(StrEnum):
    """What produced a snapshot."""

    CREATE = "create"
    UPDATE = "update"
    REVERT = "revert"


class FieldChange(BaseModel):
    """Old and new value of a field present in both snapshots."""

    model_config = ConfigDict(frozen=True)

    old_value: Any = None
    new_value: Any = None


class SnapshotDiff(BaseModel):
    """Structural delta between two snapshots, split into disjoint buckets."""

    model_config = ConfigDict(frozen=True)

    added: dict[str, Any] = Field(default_factory=dict)
    modified: dict[str, FieldChange] = Field(default_factory=dict)
    removed: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True when no field was added, modified, or removed."""
        return not (self.added or self.modified or self.removed)

    @property
    def total_changes(self) -> int:
        """Number of changed keys across all buckets."""
        return len(self.added) + len(self.modified) + len(self.removed)


class Snapshot(BaseModel):
    """An immutable captured state of a fact at one version."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    version_number: int = Field(ge=1)
    snapshot: dict[str, Any] = Field(default_factory=dict)
    changed_by: str
    change_reason: str | None = None
    created_at: datetime | None = None
    changes: SnapshotDiff = Field(default_factory=SnapshotDiff)
    action: SnapshotAction = SnapshotAction.UPDATE
    reverted_from: int | None = None

    @property
    def label(self) -> str:
        """Display label, e.g. ``3.0``."""
        return f"{self.version_number}.0"
