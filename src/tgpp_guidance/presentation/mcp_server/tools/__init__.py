"""
3GPP Guidance MCP Tools

Guidance (2):
- analyze_query, guide_specification_search

Specification catalogue (4):
- search_specifications, get_specification_details
- compare_specifications, find_implementation_requirements

3GPP structure (1):
- explain_3gpp_structure

Usage:
    from .tools import register_all_tools
    register_all_tools(mcp, engine, knowledge_base)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .guidance import register_guidance_tools
from .specifications import register_specification_tools
from .structure import register_structure_tools

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from tgpp_guidance.application.guidance.engine import GuidanceEngine
    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase


def register_all_tools(mcp: FastMCP, engine: GuidanceEngine, knowledge_base: KnowledgeBase) -> dict[str, int]:
    """Register every tool category. Returns tool counts per category."""
    # 1. Guidance entry points (2 tools)
    register_guidance_tools(mcp, engine)

    # 2. Catalogue search and inspection (4 tools)
    register_specification_tools(mcp, knowledge_base, engine)

    # 3. Organization reference (1 tool)
    register_structure_tools(mcp, knowledge_base)

    return {"guidance": 2, "specifications": 4, "structure": 1}


__all__ = [
    "register_all_tools",
    "register_guidance_tools",
    "register_specification_tools",
    "register_structure_tools",
]
