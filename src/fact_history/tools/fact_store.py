"""fact_store MCP tool — create and update strategic facts."""

import logging
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from fact_history.config import get_actor
from fact_history.errors import VersionConflict
from fact_history.models.snapshot import Snapshot
from fact_history.store.fact_store import FactStore
from fact_history.tools.formatters import format_diff

logger = logging.getLogger(__name__)


def format_write_result(snapshot: Snapshot) -> str:
    """Format the result of a write for the MCP response."""
    action = "Created" if snapshot.version_number == 1 else "Updated"
    return f"{action} {snapshot.record_id} (v{snapshot.label})\n{format_diff(snapshot.changes)}"


async def _store_fact(
    store: FactStore,
    fields: dict[str, Any],
    *,
    actor: str,
    record_id: str | None = None,
    change_reason: str | None = None,
    expected_version: int | None = None,
) -> str:
    """Create a fact, or replace an existing fact's fields."""
    if record_id is None:
        fact = await store.create_fact(fields, changed_by=actor, change_reason=change_reason)
        return f"Created {fact.record_id} (v{fact.version}.0)"

    try:
        snapshot = await store.write_record_state(
            record_id,
            fields,
            changed_by=actor,
            change_reason=change_reason,
            expected_version=expected_version,
        )
    except VersionConflict as e:
        return f"Error: {e}. Reload the fact and retry."
    except ValueError as e:
        return f"Error: {e}"
    return format_write_result(snapshot)


def register_fact_store(mcp: FastMCP) -> None:
    """Register the fact_store tool with the MCP server."""

    @mcp.tool()
    async def fact_store(
        fields: Annotated[
            dict[str, Any],
            Field(description="Complete field set of the fact (replaces current fields)"),
        ],
        record_id: Annotated[
            str | None,
            Field(description="ID of the fact to update (e.g. sf-00003); omit to create"),
        ] = None,
        change_reason: Annotated[
            str | None, Field(description="Why the fact changed")
        ] = None,
        expected_version: Annotated[
            int | None,
            Field(description="Reject the update if the fact is no longer at this version"),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Create a strategic fact or record a new version of an existing one.

        Every write appends an immutable snapshot to the fact's history along
        with the diff against the previous version. Pass expected_version to
        guard against overwriting a concurrent edit.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        store: FactStore = ctx.lifespan_context["fact_store"]
        return await _store_fact(
            store,
            fields,
            actor=get_actor(),
            record_id=record_id,
            change_reason=change_reason,
            expected_version=expected_version,
        )
