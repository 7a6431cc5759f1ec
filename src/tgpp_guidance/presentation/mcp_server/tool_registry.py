"""
Tool Registry - Central registration of MCP tools, resources and prompts.

Usage:
    from .tool_registry import register_all_mcp_tools, list_registered_tools

    # Register everything
    register_all_mcp_tools(mcp, engine, knowledge_base)

    # Look up registered tools
    tools = list_registered_tools()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from tgpp_guidance.application.guidance.engine import GuidanceEngine
    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)


# ============================================================================
# Tool Categories
# ============================================================================

TOOL_CATEGORIES: dict[str, dict[str, str | list[str]]] = {
    "guidance": {
        "name": "Guidance",
        "description": "Question analysis and leveled research guidance",
        "tools": ["analyze_query", "guide_specification_search"],
    },
    "specifications": {
        "name": "Specification catalogue",
        "description": "Search, inspect and compare catalogued specifications",
        "tools": [
            "search_specifications",
            "get_specification_details",
            "compare_specifications",
            "find_implementation_requirements",
        ],
    },
    "structure": {
        "name": "3GPP structure",
        "description": "Series, working groups and releases",
        "tools": ["explain_3gpp_structure"],
    },
}


def register_all_mcp_tools(
    mcp: FastMCP,
    engine: GuidanceEngine,
    knowledge_base: KnowledgeBase,
) -> dict[str, int]:
    """
    Register all MCP tools, resources and prompts.

    Returns:
        Dict with category names and registration counts
    """
    from .prompts import register_prompts
    from .resources import register_resources
    from .tools import register_all_tools

    logger.info("Registering tools...")
    stats = register_all_tools(mcp, engine, knowledge_base)

    logger.info("Registering resources...")
    stats["resources"] = register_resources(mcp, knowledge_base)

    logger.info("Registering prompts...")
    stats["prompts"] = register_prompts(mcp, knowledge_base)

    logger.info("Total registered: %d tools/resources/prompts", sum(stats.values()))
    return stats


def list_registered_tools() -> dict[str, list[str]]:
    """All defined tools grouped by category."""
    return {cat_id: list(cat_info["tools"]) for cat_id, cat_info in TOOL_CATEGORIES.items()}


def get_tool_info(tool_name: str) -> dict[str, str] | None:
    """
    Category information for one tool.

    Returns:
        Dict with name, category, category_id and description, or None
    """
    for cat_id, cat_info in TOOL_CATEGORIES.items():
        if tool_name in cat_info["tools"]:
            return {
                "name": tool_name,
                "category": str(cat_info["name"]),
                "category_id": cat_id,
                "category_description": str(cat_info["description"]),
            }
    return None
