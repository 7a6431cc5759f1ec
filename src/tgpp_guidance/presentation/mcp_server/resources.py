"""
MCP Resources - Catalogue reference documents for agents.

Resources:
- tgpp://knowledge/series             Specification series guide (Markdown)
- tgpp://knowledge/protocols          Protocol relationship mapping (Markdown)
- tgpp://knowledge/research-patterns  Research methodology patterns (Markdown)
- tgpp://tools/reference              Tool categories (JSON)
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from .tool_registry import TOOL_CATEGORIES
from .tools.structure import render_series

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)


def render_protocols(knowledge_base: KnowledgeBase) -> str:
    lines = [
        "# 3GPP Protocol Relationship Mapping\n",
        "NAS runs between the UE and the core network; RRC controls the radio",
        "connection underneath it. Charging and policy functions sit beside",
        "the core network and talk Diameter (4G) or service-based HTTP/2 (5G).\n",
    ]
    for protocol in sorted(knowledge_base.protocols(), key=lambda p: p.name):
        lines.append(f"## {protocol.full_name} ({protocol.name})\n")
        lines.append(f"- **Layer**: {protocol.layer}")
        lines.append(f"- **Purpose**: {protocol.purpose}")
        if protocol.defining_specs:
            lines.append(f"- **Defining specs**: {', '.join(protocol.defining_specs)}")
        if protocol.related_protocols:
            lines.append(f"- **Related protocols**: {', '.join(protocol.related_protocols)}")
        if protocol.procedures:
            lines.append(f"- **Procedures**: {', '.join(protocol.procedure_names)}")
        if protocol.common_use_cases:
            lines.append(f"- **Common use cases**: {', '.join(protocol.common_use_cases)}")
        lines.append("")
    return "\n".join(lines)


def render_research_patterns(knowledge_base: KnowledgeBase) -> str:
    lines = ["# 3GPP Research Methodology Patterns\n"]
    for pattern in knowledge_base.patterns():
        lines.append(f"## {pattern.name}\n")
        lines.append(f"{pattern.description}\n")
        lines.append(f"**Time estimate**: {pattern.time_estimate}")
        if pattern.applicable_for:
            lines.append(f"**Applicable for**: {', '.join(pattern.applicable_for)}\n")
        for i, step in enumerate(pattern.steps, 1):
            lines.append(f"### Phase {i}: {step.phase}")
            lines.extend(f"- {task}" for task in step.tasks)
            lines.append("")
        if pattern.common_pitfalls:
            lines.append("**Common pitfalls**:")
            lines.extend(f"- {p}" for p in pattern.common_pitfalls)
        lines.append("")
    return "\n".join(lines)


def register_resources(mcp: FastMCP, knowledge_base: KnowledgeBase) -> int:
    """Register knowledge resources. Returns the number registered."""

    @mcp.resource("tgpp://knowledge/series", mime_type="text/markdown")
    def get_series_guide() -> str:
        """Guide to 3GPP specification series (21-38) and their focus areas."""
        return render_series(knowledge_base)

    @mcp.resource("tgpp://knowledge/protocols", mime_type="text/markdown")
    def get_protocol_mapping() -> str:
        """Protocol relationship mapping for NAS, RRC, Diameter and charging functions."""
        return render_protocols(knowledge_base)

    @mcp.resource("tgpp://knowledge/research-patterns", mime_type="text/markdown")
    def get_research_patterns() -> str:
        """Phased research methodologies for studying 3GPP specifications."""
        return render_research_patterns(knowledge_base)

    @mcp.resource("tgpp://tools/reference", mime_type="application/json")
    def get_tools_reference() -> str:
        """Reference of all available MCP tools by category."""
        return json.dumps(TOOL_CATEGORIES, indent=2, ensure_ascii=False)

    logger.info("Registered 4 knowledge resources")
    return 4
