"""Version history: ordering, comparison, selection, and revert."""

from fact_history.history.collaborators import RecordWriter, SnapshotSource
from fact_history.history.manager import HistoryState, HistoryView, VersionHistoryManager
from fact_history.history.selector import ComparisonSelector

__all__ = [
    "ComparisonSelector",
    "HistoryState",
    "HistoryView",
    "RecordWriter",
    "SnapshotSource",
    "VersionHistoryManager",
]
