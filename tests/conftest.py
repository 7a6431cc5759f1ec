"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from mcp.server.fastmcp import FastMCP

from tgpp_guidance.application.guidance.engine import GuidanceEngine
from tgpp_guidance.application.guidance.generator import GuidanceGenerator
from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase
from tgpp_guidance.application.search.query_analyzer import QueryAnalyzer
from tgpp_guidance.application.search.relevance_ranker import RelevanceRanker
from tgpp_guidance.infrastructure.knowledge.loader import DEFAULT_DATA_DIR

# ============================================================
# Knowledge Fixtures
# ============================================================


@pytest.fixture(scope="session")
def knowledge_base() -> KnowledgeBase:
    """The bundled catalogue, loaded once per test session."""
    return KnowledgeBase.load()


@pytest.fixture(scope="session")
def analyzer(knowledge_base) -> QueryAnalyzer:
    return QueryAnalyzer(knowledge_base)


@pytest.fixture(scope="session")
def generator(knowledge_base) -> GuidanceGenerator:
    return GuidanceGenerator(knowledge_base, RelevanceRanker())


@pytest.fixture(scope="session")
def engine(analyzer, generator) -> GuidanceEngine:
    return GuidanceEngine(analyzer, generator)


@pytest.fixture
def data_dir_copy(tmp_path) -> Path:
    """A writable copy of the bundled data directory."""
    target = tmp_path / "data"
    shutil.copytree(DEFAULT_DATA_DIR, target)
    return target


# ============================================================
# MCP Fixtures
# ============================================================


@pytest.fixture
def mcp(engine, knowledge_base) -> FastMCP:
    """A FastMCP server with every guidance tool, resource and prompt registered."""
    from tgpp_guidance.presentation.mcp_server.tool_registry import register_all_mcp_tools

    server = FastMCP(name="test")
    register_all_mcp_tools(server, engine, knowledge_base)
    return server


@pytest.fixture
def tool(mcp):
    """Look up a registered tool function by name."""

    def _get(name: str):
        return mcp._tool_manager._tools[name].fn

    return _get
