"""Environment-variable-based configuration."""

import os
from pathlib import Path


def get_db_path() -> Path:
    """Return the database file path from FH_DB_PATH."""
    raw = os.environ.get("FH_DB_PATH", "~/.local/share/fact_history/facts.db")
    return Path(raw).expanduser()


def get_log_level() -> str:
    """Return the logging level from FH_LOG_LEVEL."""
    return os.environ.get("FH_LOG_LEVEL", "WARNING").upper()


def get_actor() -> str:
    """Return the identity recorded as changed_by for tool writes, from FH_ACTOR."""
    return os.environ.get("FH_ACTOR", "mcp-agent")


def get_history_limit() -> int:
    """Return the max versions rendered per history listing from FH_HISTORY_LIMIT."""
    return int(os.environ.get("FH_HISTORY_LIMIT", "50"))
