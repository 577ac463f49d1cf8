"""Read access to fact snapshot history."""

from fact_history.db.backend import Database
from fact_history.db.queries import get_snapshots
from fact_history.models.snapshot import Snapshot


class SnapshotStore:
    """Append-only snapshot history, read side."""

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db

    async def fetch_snapshots(self, record_id: str) -> list[Snapshot]:
        """Get all snapshots of a fact, ordered by version number."""
        return await get_snapshots(self.db, record_id)
