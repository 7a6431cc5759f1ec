"""
Domain Layer - Core Business Objects

Contains:
- entities: Catalogue entities (Specification, Protocol, Concept, ...)
  and guidance entities (Query, QueryAnalysis, Guidance)
"""

from .entities import (
    Concept,
    Guidance,
    GuidanceSection,
    Protocol,
    Query,
    QueryAnalysis,
    QueryIntent,
    ResearchPattern,
    SearchPattern,
    SectionType,
    Specification,
    UserLevel,
)

__all__ = [
    "Specification",
    "Protocol",
    "Concept",
    "ResearchPattern",
    "SearchPattern",
    "Query",
    "QueryAnalysis",
    "QueryIntent",
    "UserLevel",
    "SectionType",
    "GuidanceSection",
    "Guidance",
]
