"""fact_history MCP tool — version listing and per-version changes."""

from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from fact_history.config import get_history_limit
from fact_history.errors import FetchFailure
from fact_history.history.manager import HistoryState, VersionHistoryManager
from fact_history.tools.formatters import (
    format_diff,
    format_result_list,
    format_snapshot_compact,
    format_snapshot_header,
)


async def _list_history(manager: VersionHistoryManager, record_id: str, limit: int) -> str:
    """Reload the history and render it, newest first."""
    view = await manager.load(record_id)

    note = None
    if view.state == HistoryState.ERROR:
        if not view.versions:
            return f"Error: {view.error}. Retry in a moment."
        note = f"{view.error}. Showing last loaded history; retry to refresh."

    shown = view.versions[:limit]
    if len(view.versions) > limit:
        extra = f"{len(view.versions) - limit} older version(s) not shown"
        note = f"{note}; {extra}" if note else extra

    if not shown:
        return f"No versions recorded for {record_id}."
    return format_result_list(
        [format_snapshot_compact(s) for s in shown],
        header=f"History of {record_id}",
        note=note,
    )


async def _version_changes(
    manager: VersionHistoryManager, record_id: str, version_number: int
) -> str:
    """Render the stored diff of one version against its predecessor."""
    try:
        snapshot = await manager.get_version(record_id, version_number)
    except FetchFailure as e:
        return f"Error: {e}. Retry in a moment."
    except ValueError as e:
        return f"Error: {e}"
    return f"{format_snapshot_header(snapshot)}\n{format_diff(snapshot.changes)}"


def register_fact_history(mcp: FastMCP) -> None:
    """Register the fact_history tool with the MCP server."""

    @mcp.tool()
    async def fact_history(
        record_id: Annotated[str, Field(description="Fact ID, e.g. sf-00003")],
        version: Annotated[
            int | None,
            Field(description="Show what changed in this version instead of the listing"),
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """List a fact's versions (newest first) or show one version's changes.

        Each version records who changed the fact, why, and a diff against the
        previous version.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        manager: VersionHistoryManager = ctx.lifespan_context["history"]
        if version is not None:
            return await _version_changes(manager, record_id, version)
        return await _list_history(manager, record_id, get_history_limit())
