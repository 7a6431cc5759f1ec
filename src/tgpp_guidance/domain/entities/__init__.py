"""
Domain Entities

Core business objects for 3GPP specification guidance.
"""

from __future__ import annotations

from .guidance import (
    Guidance,
    GuidanceSection,
    Query,
    QueryAnalysis,
    QueryIntent,
    SectionType,
    UserLevel,
)
from .knowledge import (
    Concept,
    KnowledgeSnapshot,
    PatternStep,
    Procedure,
    Protocol,
    Relationship,
    RelationshipKind,
    ResearchPattern,
    SearchPattern,
    Specification,
)

__all__ = [
    # Catalogue entities
    "Specification",
    "Protocol",
    "Procedure",
    "Concept",
    "ResearchPattern",
    "PatternStep",
    "SearchPattern",
    "Relationship",
    "RelationshipKind",
    "KnowledgeSnapshot",
    # Guidance entities
    "Query",
    "QueryAnalysis",
    "QueryIntent",
    "UserLevel",
    "SectionType",
    "GuidanceSection",
    "Guidance",
]
