"""Create and update strategic facts, appending a snapshot per change."""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from fact_history.db.backend import Database
from fact_history.db.queries import (
    get_fact,
    get_latest_snapshot,
    insert_fact,
    insert_snapshot,
    next_record_id,
    update_fact_if_version,
)
from fact_history.diff.engine import compute_diff, deep_copy_payload
from fact_history.errors import RecordNotFound, VersionConflict
from fact_history.models.fact import StrategicFact
from fact_history.models.snapshot import Snapshot, SnapshotAction

logger = logging.getLogger(__name__)


class FactStore:
    """Writes facts with optimistic concurrency and append-only history.

    Every write updates the fact row and appends exactly one snapshot in a
    single transaction. Writes through one store are serialized because
    they share one connection, and so one transaction.
    """

    def __init__(self, db: Database):
        """Initialize with a database connection."""
        self.db = db
        self._write_lock = asyncio.Lock()

    async def create_fact(
        self,
        fields: dict[str, Any],
        *,
        changed_by: str,
        change_reason: str | None = None,
    ) -> StrategicFact:
        """Create a new fact with its initial snapshot."""
        payload = deep_copy_payload(fields)
        async with self._write_lock:
            now = datetime.now(UTC)
            try:
                record_id = await next_record_id(self.db)
                fact = StrategicFact(
                    record_id=record_id,
                    fields=payload,
                    version=1,
                    created_at=now,
                    updated_at=now,
                )
                await insert_fact(self.db, fact)
                await insert_snapshot(
                    self.db,
                    Snapshot(
                        record_id=record_id,
                        version_number=1,
                        snapshot=deep_copy_payload(payload),
                        changes=compute_diff({}, payload),
                        changed_by=changed_by,
                        change_reason=change_reason or "Initial creation",
                        action=SnapshotAction.CREATE,
                        created_at=now,
                    ),
                )
                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

        logger.info("Created fact %s", record_id)
        return fact

    async def get_fact(self, record_id: str) -> StrategicFact | None:
        """Get a single fact by ID."""
        return await get_fact(self.db, record_id)

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
        """Replace a fact's fields with ``payload`` and record the new version.

        Raises RecordNotFound for unknown facts and VersionConflict when the
        fact is no longer at ``expected_version``. Nothing is written on error.
        """
        new_fields = deep_copy_payload(payload)
        async with self._write_lock:
            fact = await get_fact(self.db, record_id)
            if fact is None:
                raise RecordNotFound(record_id)
            if expected_version is not None and fact.version != expected_version:
                raise VersionConflict(record_id, expected_version, fact.version)

            now = datetime.now(UTC)
            previous = await get_latest_snapshot(self.db, record_id)
            old_fields = previous.snapshot if previous is not None else fact.fields

            updated = fact.model_copy(
                update={"fields": new_fields, "version": fact.version + 1, "updated_at": now}
            )
            snapshot = Snapshot(
                record_id=record_id,
                version_number=updated.version,
                snapshot=deep_copy_payload(new_fields),
                changes=compute_diff(old_fields, new_fields),
                changed_by=changed_by,
                change_reason=change_reason or "Updated",
                action=action,
                reverted_from=reverted_from,
                created_at=now,
            )

            try:
                # Guarded on the version just read, in case another connection wrote since
                if not await update_fact_if_version(self.db, updated, fact.version):
                    raise VersionConflict(record_id, fact.version, None)
                await insert_snapshot(self.db, snapshot)
                await self.db.commit()
            except Exception:
                await self.db.rollback()
                raise

        logger.info("Updated fact %s to v%d (%s)", record_id, snapshot.version_number, action)
        return snapshot
