"""Tests for server-level functions and configuration."""

from unittest.mock import patch

import pytest
from fastmcp import FastMCP

from fact_history.config import get_actor, get_db_path, get_history_limit, get_log_level
from fact_history.history.manager import VersionHistoryManager
from fact_history.server import create_server, lifespan
from fact_history.store.fact_store import FactStore


def test_create_server():
    server = create_server()
    assert isinstance(server, FastMCP)
    assert server.name == "fact-history"


def test_config_defaults():
    with patch.dict("os.environ", {}, clear=True):
        assert get_db_path().name == "facts.db"
        assert get_log_level() == "WARNING"
        assert get_actor() == "mcp-agent"
        assert get_history_limit() == 50


def test_config_from_env():
    with patch.dict(
        "os.environ",
        {
            "FH_DB_PATH": "/tmp/fh/test.db",
            "FH_LOG_LEVEL": "debug",
            "FH_ACTOR": "ana@example.com",
            "FH_HISTORY_LIMIT": "5",
        },
    ):
        assert str(get_db_path()) == "/tmp/fh/test.db"
        assert get_log_level() == "DEBUG"
        assert get_actor() == "ana@example.com"
        assert get_history_limit() == 5


@pytest.mark.asyncio
async def test_lifespan_wires_collaborators(tmp_path, monkeypatch):
    monkeypatch.setenv("FH_DB_PATH", str(tmp_path / "facts.db"))
    async with lifespan(create_server()) as context:
        assert isinstance(context["fact_store"], FactStore)
        assert isinstance(context["history"], VersionHistoryManager)
        assert context["history"].writer is context["fact_store"]
        assert context["selectors"] == {}

        fact = await context["fact_store"].create_fact({"title": "A"}, changed_by="ana")
        versions = await context["history"].list_versions(fact.record_id)
        assert [v.version_number for v in versions] == [1]
