"""
3GPP Guidance - Research guidance over a curated 3GPP specification catalogue.

Classifies natural-language questions about 3GPP standards and answers
them with leveled, structured guidance: which specifications to read, in
what order, which concepts matter and what to watch out for.

Usage:
    from tgpp_guidance import ApplicationContainer

    container = ApplicationContainer()
    engine = container.guidance_engine()
    guidance = engine.generate_guidance("explain how NAS protocol works")
    print(guidance.summary)

Or run the MCP server:
    python -m tgpp_guidance.presentation.mcp_server
"""

from __future__ import annotations

from .container import ApplicationContainer
from .core.exceptions import EmptyQueryError, GuidanceError
from .domain.entities.guidance import Guidance, Query, QueryAnalysis, QueryIntent, UserLevel

__version__ = "0.3.0"

__all__ = [
    "ApplicationContainer",
    "GuidanceError",
    "EmptyQueryError",
    "Query",
    "QueryAnalysis",
    "QueryIntent",
    "UserLevel",
    "Guidance",
    "__version__",
]
