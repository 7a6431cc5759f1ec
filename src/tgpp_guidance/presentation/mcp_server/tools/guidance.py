"""
Guidance Tools - Analyze questions and produce leveled research guidance.

Tools:
- analyze_query: Classify a question (intent, domain, concepts, complexity)
- guide_specification_search: Full guidance document for a question
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tgpp_guidance.core.exceptions import GuidanceError

from .formatting import InputNormalizer, ResponseFormatter

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from tgpp_guidance.application.guidance.engine import GuidanceEngine

logger = logging.getLogger(__name__)


def register_guidance_tools(mcp: FastMCP, engine: GuidanceEngine) -> None:
    """Register guidance tools (2 tools)."""

    @mcp.tool()
    def analyze_query(query: str, user_level: str | None = None) -> str:
        """
        Classify a question about 3GPP standards without generating guidance.

        Returns the detected intent (discovery, learning, implementation,
        comparison), the technical domain, recognised concepts such as NAS,
        SUCI or TS 33.501, a complexity estimate in (0, 1] and the user level.

        Args:
            query: The question (e.g., "compare 5G-AKA vs EPS-AKA authentication")
            user_level: beginner, intermediate (default) or expert
        """
        logger.info("Analyzing query: %r (level=%s)", query, user_level)
        try:
            analysis = engine.analyze_query(query, user_level)
        except GuidanceError as e:
            return ResponseFormatter.error(e)
        return ResponseFormatter.to_json({"query": query, "analysis": analysis.to_dict()})

    @mcp.tool()
    def guide_specification_search(
        query: str,
        user_level: str | None = None,
        output_format: str = "json",
    ) -> str:
        """
        Get structured, level-appropriate guidance for researching 3GPP specifications.

        The guidance names which specifications to read, in what order,
        which concepts matter, and what to watch out for. Content depends on
        the question's intent:

        - discovery: overview, specification list, related topics
        - learning: overview, concept explanation, learning path
        - implementation: overview, requirements, steps, pitfalls
        - comparison: overview, comparison table, differences

        Every referenced specification comes from the local catalogue.

        Args:
            query: The question (e.g., "explain how NAS protocol works")
            user_level: beginner, intermediate (default) or expert
            output_format: "json" (default) or "markdown"
        """
        logger.info("Generating guidance: %r (level=%s)", query, user_level)
        try:
            fmt = InputNormalizer.output_format(output_format)
            analysis = engine.analyze_query(query, user_level)
            guidance = engine.generate_guidance(query, analysis, user_level)
        except GuidanceError as e:
            return ResponseFormatter.error(e)

        if fmt == "markdown":
            return ResponseFormatter.guidance_markdown(guidance, analysis)
        return ResponseFormatter.to_json(
            {
                "query": query,
                "analysis": analysis.to_dict(),
                "guidance": guidance.to_dict(),
            }
        )
