"""Error taxonomy for version history operations."""

from fact_history.models.snapshot import Snapshot


class FactHistoryError(Exception):
    """Base class for all fact history errors."""

    retryable = False


class FetchFailure(FactHistoryError):
    """The snapshot store was unreachable or returned malformed data."""

    retryable = True

    def __init__(self, record_id: str, reason: str):
        """Initialize with the record whose history could not be fetched."""
        super().__init__(f"History unavailable for {record_id}: {reason}")
        self.record_id = record_id
        self.reason = reason


class VersionNotFound(FactHistoryError, ValueError):
    """A requested version does not exist in the fetched history."""

    def __init__(self, record_id: str, version_number: int):
        """Initialize with the missing (record, version) pair."""
        super().__init__(f"Version {version_number} of {record_id} not found")
        self.record_id = record_id
        self.version_number = version_number


class DiffInputInvalid(FactHistoryError):
    """A diff input was not a mapping. Handled inside the diff engine."""


class RecordNotFound(FactHistoryError, ValueError):
    """The record being written does not exist."""

    def __init__(self, record_id: str):
        """Initialize with the missing record id."""
        super().__init__(f"Fact {record_id} not found")
        self.record_id = record_id


class VersionConflict(FactHistoryError):
    """A write was rejected because the record moved past the expected version."""

    retryable = True

    def __init__(self, record_id: str, expected_version: int, actual_version: int | None):
        """Initialize with the expected and observed current versions."""
        actual = "unknown" if actual_version is None else str(actual_version)
        super().__init__(
            f"Fact {record_id} changed concurrently "
            f"(expected v{expected_version}, found v{actual})"
        )
        self.record_id = record_id
        self.expected_version = expected_version
        self.actual_version = actual_version


class RevertConflict(FactHistoryError):
    """A revert lost a race with another writer. Safe to retry."""

    retryable = True


class RevertFailure(FactHistoryError):
    """A revert failed for a reason other than a concurrent write."""


class IncompleteSelection(FactHistoryError, ValueError):
    """A comparison was requested without exactly two selected versions."""


class RevertUnverified(FactHistoryError):
    """A revert was committed, but the stored version failed verification.

    The new version exists in the history. Retrying would append another.
    """

    def __init__(self, snapshot: Snapshot, problem: str):
        """Initialize with the committed snapshot and what did not match."""
        super().__init__(
            f"Revert of {snapshot.record_id} was committed as v{snapshot.version_number} "
            f"but {problem}"
        )
        self.snapshot = snapshot
        self.problem = problem
