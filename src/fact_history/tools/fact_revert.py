"""fact_revert MCP tool — reinstate an earlier version as the latest."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from fact_history.config import get_actor
from fact_history.errors import (
    FetchFailure,
    RevertConflict,
    RevertFailure,
    RevertUnverified,
    VersionNotFound,
)
from fact_history.history.manager import VersionHistoryManager
from fact_history.tools.formatters import format_diff

logger = logging.getLogger(__name__)


async def _revert_fact(
    manager: VersionHistoryManager,
    record_id: str,
    version: int,
    *,
    actor: str,
    change_reason: str | None = None,
) -> str:
    """Revert and describe the new version, or the failure."""
    try:
        created = await manager.revert(
            record_id, version, changed_by=actor, change_reason=change_reason
        )
    except VersionNotFound as e:
        return f"Error: {e}"
    except FetchFailure as e:
        return f"Error: {e}. Nothing was reverted; retry in a moment."
    except RevertConflict as e:
        return f"Error: revert conflicted with another change ({e}). Nothing was reverted; retry."
    except RevertFailure as e:
        logger.error("Revert failed: %s", e)
        return f"Error: {e}"
    except RevertUnverified as e:
        return (
            f"Warning: {e}. v{e.snapshot.label} is in the history; "
            "check it with fact_history before reverting again."
        )

    return (
        f"Reverted {record_id} to v{version}.0 as new version v{created.label}\n"
        f"{format_diff(created.changes)}"
    )


def register_fact_revert(mcp: FastMCP) -> None:
    """Register the fact_revert tool with the MCP server."""

    @mcp.tool()
    async def fact_revert(
        record_id: Annotated[str, Field(description="Fact ID, e.g. sf-00003")],
        version: Annotated[int, Field(description="Version whose content to restore", ge=1)],
        change_reason: Annotated[
            str | None, Field(description="Why the fact is being reverted")
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Restore a fact's content from an earlier version.

        History is never rewritten: the restored content becomes a new, latest
        version and every intervening version stays in the history. Fails
        without changing anything if the fact was edited concurrently.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await _revert_fact(
            ctx.lifespan_context["history"],
            record_id,
            version,
            actor=get_actor(),
            change_reason=change_reason,
        )
