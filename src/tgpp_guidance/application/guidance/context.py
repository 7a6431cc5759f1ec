"""
Per-request state shared by the guidance section builders.

A GuidanceContext is assembled once per ``generate`` call from the query,
its analysis and knowledge-base lookups. Builders only read it. Every record
it holds was obtained from the knowledge base, so anything a builder renders
from it is a real catalogue entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tgpp_guidance.application.search.query_analyzer import GENERAL_DOMAIN
from tgpp_guidance.domain.entities.guidance import Query, QueryAnalysis, UserLevel

if TYPE_CHECKING:
    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase
    from tgpp_guidance.domain.entities.knowledge import (
        Concept,
        Protocol,
        ResearchPattern,
        SearchPattern,
        Specification,
    )


@dataclass(frozen=True)
class LevelProfile:
    """How much of each kind of content a user level gets."""

    level: UserLevel
    max_specs: int
    max_notes: int | None  # None = all
    glossary_terms: int
    technical_notes: int | None  # None = all, 0 = no technical_detail section
    show_intro: bool
    show_details: bool


LEVEL_PROFILES: dict[UserLevel, LevelProfile] = {
    UserLevel.BEGINNER: LevelProfile(
        level=UserLevel.BEGINNER,
        max_specs=3,
        max_notes=2,
        glossary_terms=5,
        technical_notes=0,
        show_intro=True,
        show_details=False,
    ),
    UserLevel.INTERMEDIATE: LevelProfile(
        level=UserLevel.INTERMEDIATE,
        max_specs=5,
        max_notes=3,
        glossary_terms=3,
        technical_notes=2,
        show_intro=False,
        show_details=True,
    ),
    UserLevel.EXPERT: LevelProfile(
        level=UserLevel.EXPERT,
        max_specs=8,
        max_notes=None,
        glossary_terms=0,
        technical_notes=None,
        show_intro=False,
        show_details=True,
    ),
}


def domain_label(domain: str) -> str:
    """Human-readable domain name ("session_management" -> "session management")."""
    return domain.replace("_", " ")


@dataclass(frozen=True)
class GuidanceContext:
    query: Query
    analysis: QueryAnalysis
    knowledge_base: KnowledgeBase
    profile: LevelProfile
    ranked_specs: tuple[Specification, ...]
    implementation_specs: tuple[Specification, ...]
    concepts: tuple[Concept, ...]
    protocols: tuple[Protocol, ...]
    mentioned_specs: tuple[Specification, ...]
    search_pattern: SearchPattern | None
    research_pattern: ResearchPattern | None

    @property
    def level(self) -> UserLevel:
        return self.profile.level

    @property
    def label(self) -> str:
        return domain_label(self.analysis.domain)

    @property
    def specs(self) -> tuple[Specification, ...]:
        """Ranked specifications trimmed to the level's budget."""
        return self.ranked_specs[: self.profile.max_specs]

    @property
    def has_domain(self) -> bool:
        return self.analysis.domain != GENERAL_DOMAIN

    def notes(self, items: tuple[str, ...]) -> tuple[str, ...]:
        if self.profile.max_notes is None:
            return items
        return items[: self.profile.max_notes]
