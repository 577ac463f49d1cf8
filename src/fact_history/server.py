"""FastMCP server with lifespan management and tool registration."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP

from fact_history.config import get_db_path, get_log_level
from fact_history.db.connection import create_connection
from fact_history.history.manager import VersionHistoryManager
from fact_history.history.selector import ComparisonSelector
from fact_history.store.fact_store import FactStore
from fact_history.store.snapshot_store import SnapshotStore
from fact_history.tools.fact_compare import register_fact_compare
from fact_history.tools.fact_get import register_fact_get
from fact_history.tools.fact_history import register_fact_history
from fact_history.tools.fact_revert import register_fact_revert
from fact_history.tools.fact_store import register_fact_store


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Manage the database connection and history collaborators."""
    # Configure logging to stderr (stdout is MCP stdio transport)
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    logger = logging.getLogger(__name__)

    db_path = get_db_path()
    logger.info("Opening database at %s", db_path)
    db = await create_connection(db_path)

    fact_store = FactStore(db)
    history = VersionHistoryManager(SnapshotStore(db), fact_store)
    selectors: dict[str, ComparisonSelector] = {}

    try:
        yield {
            "db": db,
            "fact_store": fact_store,
            "history": history,
            "selectors": selectors,
        }
    finally:
        await db.close()
        logger.info("Database connection closed")


_INSTRUCTIONS = """\
This server keeps the full version history of strategic facts. Every change \
to a fact is captured as an immutable snapshot with a diff against the \
previous version; nothing in the history is ever edited or deleted.

- fact_store: Create a fact, or write a new version (pass record_id). Pass \
expected_version to avoid overwriting a concurrent edit.
- fact_get: Current fields of a fact.
- fact_history: Versions newest first, or one version's changes.
- fact_select / fact_compare: Diff any two versions. The older version is \
always the baseline.
- fact_revert: Restore an earlier version's content as a new latest version.
"""


def create_server() -> FastMCP:
    """Create and configure the MCP server with all tools."""
    mcp = FastMCP(
        "fact-history",
        instructions=_INSTRUCTIONS,
        lifespan=lifespan,
    )

    register_fact_store(mcp)
    register_fact_get(mcp)
    register_fact_history(mcp)
    register_fact_compare(mcp)
    register_fact_revert(mcp)

    return mcp
