"""
Guidance Entities - Query, analysis and guidance document model.

Key Entities:
    - Query: Caller-supplied question plus optional experience level
    - QueryAnalysis: Typed intent/domain/concept classification of a Query
    - GuidanceSection: One titled block of a guidance document
    - Guidance: Complete leveled guidance document

All entities are immutable and produced fresh per request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from tgpp_guidance.core.exceptions import InvalidParameterError


class UserLevel(Enum):
    """Experience level of the person asking."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: UserLevel | str | None) -> UserLevel | None:
        """Accept an enum member, its value (any case) or None."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidParameterError(
                "user_level",
                value,
                "one of: " + ", ".join(level.value for level in cls),
            ) from None


class QueryIntent(Enum):
    """What the asker wants to do with the answer."""

    DISCOVERY = "discovery"
    LEARNING = "learning"
    IMPLEMENTATION = "implementation"
    COMPARISON = "comparison"


class SectionType(Enum):
    """Section kinds a guidance document can contain."""

    OVERVIEW = "overview"
    SPECIFICATION_LIST = "specification_list"
    RELATED_TOPICS = "related_topics"
    CONCEPT_EXPLANATION = "concept_explanation"
    LEARNING_PATH = "learning_path"
    REQUIREMENTS = "requirements"
    IMPLEMENTATION_STEPS = "implementation_steps"
    PITFALLS = "pitfalls"
    COMPARISON_TABLE = "comparison_table"
    DIFFERENCES = "differences"
    SEARCH_STRATEGY = "search_strategy"
    GLOSSARY = "glossary"
    TECHNICAL_DETAIL = "technical_detail"


@dataclass(frozen=True)
class Query:
    """
    A question about 3GPP standards.

    ``user_level`` may be given as a :class:`UserLevel` or its string value.
    Empty text is accepted here and rejected by the analyzer, which owns the
    EmptyQueryError contract.
    """

    text: str
    user_level: UserLevel | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_level", UserLevel.parse(self.user_level))


@dataclass(frozen=True)
class QueryAnalysis:
    """Deterministic classification of one Query."""

    intent: QueryIntent
    domain: str
    concepts: tuple[str, ...]
    complexity: float
    user_level: UserLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent": self.intent.value,
            "domain": self.domain,
            "concepts": list(self.concepts),
            "complexity": self.complexity,
            "user_level": self.user_level.value,
        }


@dataclass(frozen=True)
class GuidanceSection:
    type: SectionType
    title: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "title": self.title, "content": self.content}


@dataclass(frozen=True)
class Guidance:
    """
    Leveled guidance document.

    Attributes:
        summary: Level-specific one-paragraph answer framing
        sections: Ordered sections; intent-required ones come first
        confidence: How well the catalogue covered the question (0-1)
        next_steps: Suggested follow-up actions, never empty
        related_topics: Adjacent topics worth reading, never empty
    """

    summary: str
    sections: tuple[GuidanceSection, ...]
    confidence: float
    next_steps: tuple[str, ...]
    related_topics: tuple[str, ...]

    type: str = "guidance"

    @property
    def section_types(self) -> tuple[SectionType, ...]:
        return tuple(s.type for s in self.sections)

    def section(self, section_type: SectionType) -> GuidanceSection | None:
        """Return the first section of the given type, if present."""
        for s in self.sections:
            if s.type is section_type:
                return s
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "summary": self.summary,
            "sections": [s.to_dict() for s in self.sections],
            "confidence": self.confidence,
            "next_steps": list(self.next_steps),
            "related_topics": list(self.related_topics),
        }
