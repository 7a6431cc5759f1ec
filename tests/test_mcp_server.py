"""
Tests for MCP Server initialization and lifecycle.
"""

from __future__ import annotations

import logging

import pytest
from dependency_injector import providers

from tgpp_guidance.container import ApplicationContainer
from tgpp_guidance.core.exceptions import KnowledgeLoadError
from tgpp_guidance.presentation.mcp_server import server as server_module
from tgpp_guidance.presentation.mcp_server.server import (
    DEFAULT_NAME,
    _make_lifespan,
    configure_logging,
    create_server,
    get_container,
)

EXPECTED_TOOLS = {
    "analyze_query",
    "guide_specification_search",
    "search_specifications",
    "get_specification_details",
    "compare_specifications",
    "find_implementation_requirements",
    "explain_3gpp_structure",
}


@pytest.fixture(autouse=True)
def _isolate_container(monkeypatch):
    """Each test starts without a module-level container."""
    monkeypatch.setattr(server_module, "_container", None)
    monkeypatch.delenv("TGPP_PROFILING", raising=False)


@pytest.fixture
def container(knowledge_base) -> ApplicationContainer:
    container = ApplicationContainer()
    container.config.from_dict({"data_dir": None})
    container.knowledge_base.override(providers.Object(knowledge_base))
    return container


class TestServerImports:
    def test_package_exports(self):
        from tgpp_guidance.presentation.mcp_server import create_server, main, register_all_tools

        assert callable(create_server)
        assert callable(main)
        assert callable(register_all_tools)


class TestCreateServer:
    def test_registers_all_tools(self, container):
        mcp = create_server(container=container)
        assert mcp.name == DEFAULT_NAME
        assert {t.name for t in mcp._tool_manager.list_tools()} == EXPECTED_TOOLS

    def test_instructions(self, container):
        mcp = create_server(container=container)
        assert "guide_specification_search" in mcp.instructions

    def test_settings(self, container):
        mcp = create_server(host="0.0.0.0", port=9000, container=container, stateless_http=True)
        assert mcp.settings.host == "0.0.0.0"
        assert mcp.settings.port == 9000
        assert mcp.settings.stateless_http is True

    def test_container_available_after_create(self, container):
        create_server(container=container)
        assert get_container() is container

    def test_builds_own_container(self):
        create_server()
        assert get_container().knowledge_base().stats()["specifications"] == 18

    def test_bad_data_dir_fails_fast(self, tmp_path):
        with pytest.raises(KnowledgeLoadError):
            create_server(data_dir=str(tmp_path / "missing"))

    def test_profiling_from_env(self, container, monkeypatch):
        monkeypatch.setenv("TGPP_PROFILING", "1")
        mcp = create_server(container=container)
        assert "get_performance_metrics" in {t.name for t in mcp._tool_manager.list_tools()}

    def test_tool_round_trip(self, container):
        mcp = create_server(container=container)
        fn = mcp._tool_manager._tools["analyze_query"].fn
        assert '"intent": "learning"' in fn("explain how NAS protocol works")


class TestGetContainer:
    def test_before_create_server(self):
        with pytest.raises(RuntimeError, match="create_server"):
            get_container()


class TestLifespan:
    async def test_yields_container_and_resets(self):
        container = ApplicationContainer()
        container.config.from_dict({"data_dir": None})
        kb = container.knowledge_base()

        lifespan = _make_lifespan(container)
        async with lifespan(None) as ctx:
            assert ctx is container
            assert container.knowledge_base() is kb

        assert container.knowledge_base() is not kb


class TestConfigureLogging:
    def test_level_from_env(self, monkeypatch):
        calls = {}
        monkeypatch.setenv("TGPP_LOG_LEVEL", "debug")
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging()
        assert calls["level"] == logging.DEBUG

    def test_explicit_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging("warning")
        assert calls["level"] == logging.WARNING
        assert "%(levelname)s" in calls["format"]
