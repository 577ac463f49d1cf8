"""fact_get MCP tool — current state of a fact."""

from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from fact_history.store.fact_store import FactStore
from fact_history.tools.formatters import format_fact


async def _get_fact(store: FactStore, record_id: str) -> str:
    fact = await store.get_fact(record_id)
    if fact is None:
        return f"[{record_id}] not found"
    return format_fact(fact)


def register_fact_get(mcp: FastMCP) -> None:
    """Register the fact_get tool with the MCP server."""

    @mcp.tool()
    async def fact_get(
        record_id: Annotated[str, Field(description="Fact ID, e.g. sf-00003")],
        ctx: Context | None = None,
    ) -> str:
        """Show the current fields and version of a strategic fact."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        return await _get_fact(ctx.lifespan_context["fact_store"], record_id)
