"""fact_select and fact_compare MCP tools — pick two versions and diff them."""

from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from fact_history.errors import FetchFailure
from fact_history.history.manager import VersionHistoryManager
from fact_history.history.selector import ComparisonSelector
from fact_history.tools.formatters import format_comparison


def _describe_selection(record_id: str, selector: ComparisonSelector) -> str:
    labels = ", ".join(f"v{v}.0" for v in selector.current()) or "none"
    status = "ready to compare" if selector.is_complete() else "select 2 versions to compare"
    return f"Selected for {record_id}: {labels} ({status})"


async def _select_version(
    manager: VersionHistoryManager,
    selectors: dict[str, ComparisonSelector],
    record_id: str,
    version: int | None,
    clear: bool = False,
) -> str:
    """Toggle a version in the record's selection and describe the result.

    A selection is only created for a version that exists, and an emptied
    selection is dropped.
    """
    if clear:
        selectors.pop(record_id, None)
        return f"Selection for {record_id} cleared."
    if version is None:
        return _describe_selection(record_id, selectors.get(record_id, ComparisonSelector()))

    try:
        await manager.get_version(record_id, version)
    except FetchFailure as e:
        return f"Error: {e}. Retry in a moment."
    except ValueError as e:
        return f"Error: {e}"

    selector = selectors.setdefault(record_id, ComparisonSelector())
    selector.toggle(version)
    if not selector.current():
        del selectors[record_id]
    return _describe_selection(record_id, selector)


async def _compare_versions(
    manager: VersionHistoryManager,
    selectors: dict[str, ComparisonSelector],
    record_id: str,
    version_a: int | None = None,
    version_b: int | None = None,
) -> str:
    """Diff two explicit versions, or the record's current selection."""
    try:
        if version_a is not None and version_b is not None:
            comparison = await manager.compare(record_id, version_a, version_b)
        elif version_a is None and version_b is None:
            comparison = await manager.compare_selection(
                record_id, selectors.get(record_id, ComparisonSelector())
            )
        else:
            return "Error: pass both version_a and version_b, or neither to use the selection."
    except FetchFailure as e:
        return f"Error: {e}. Retry in a moment."
    except ValueError as e:
        return f"Error: {e}"
    return format_comparison(comparison)


def register_fact_compare(mcp: FastMCP) -> None:
    """Register the fact_select and fact_compare tools with the MCP server."""

    @mcp.tool()
    async def fact_select(
        record_id: Annotated[str, Field(description="Fact ID, e.g. sf-00003")],
        version: Annotated[
            int | None,
            Field(description="Version to toggle in the comparison selection"),
        ] = None,
        clear: Annotated[bool, Field(description="Clear the selection")] = False,
        ctx: Context | None = None,
    ) -> str:
        """Toggle a version in the two-slot comparison selection for a fact.

        Selecting a selected version deselects it. With two versions already
        selected, a new pick replaces the second one. Only existing versions
        can be selected.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        lifespan = ctx.lifespan_context
        return await _select_version(
            lifespan["history"], lifespan["selectors"], record_id, version, clear
        )

    @mcp.tool()
    async def fact_compare(
        record_id: Annotated[str, Field(description="Fact ID, e.g. sf-00003")],
        version_a: Annotated[int | None, Field(description="One version to compare")] = None,
        version_b: Annotated[
            int | None, Field(description="The other version to compare")
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Show what changed between two versions of a fact.

        The older version is always the baseline, whatever order the versions
        are given in. Without versions, compares the fact_select selection.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        lifespan = ctx.lifespan_context
        return await _compare_versions(
            lifespan["history"], lifespan["selectors"], record_id, version_a, version_b
        )
