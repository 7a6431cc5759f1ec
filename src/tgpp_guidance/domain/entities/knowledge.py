"""
Knowledge Entities - 3GPP Reference Catalogue Domain Model

Key Entities:
    - Specification: One 3GPP Technical Specification (e.g. TS 33.501)
    - Protocol: A signalling protocol or charging/policy function
    - Concept: A glossary entry (SUCI, 5G-AKA, CDR, ...)
    - ResearchPattern: A phased study methodology
    - SearchPattern: A per-domain reading template
    - Relationship: A typed, weighted edge between two specifications

All entities are frozen. Collection fields are tuples so that a loaded
catalogue can be shared between concurrent requests without copying.

Example:
    >>> spec = Specification(
    ...     id="TS 33.501",
    ...     series="33",
    ...     title="Security architecture and procedures for 5G System",
    ...     working_group="SA3",
    ...     purpose="Defines 5G security",
    ... )
    >>> spec.number
    '501'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RelationshipKind(Enum):
    """How one specification relates to another."""

    DEFINES = "defines"
    USES = "uses"
    EXTENDS = "extends"
    REPLACES = "replaces"
    REFERENCES = "references"
    IMPLEMENTS = "implements"
    DEPENDS_ON = "depends_on"


@dataclass(frozen=True)
class Specification:
    """
    Metadata for a single Technical Specification.

    Attributes:
        id: Unique identifier in "TS <series>.<number>" form
        series: Two-digit series ("24", "33", ...)
        title: Official title
        working_group: Owning working group (SA3, CT1, RAN2, ...)
        purpose: One-sentence description of what the spec covers
        key_topics: Headline topics, matched exactly by the ranker
        search_keywords: Looser keywords, matched by substring
        dependencies: Spec ids this spec builds on
        implementation_notes: Ordered practical notes for implementers
        release: Release the metadata describes (e.g. "Rel-16")
        related_specs: Spec ids mentioned alongside this one
        common_questions: Typical questions the spec answers
        evolution_notes: How the spec evolved from its predecessor
    """

    id: str
    series: str
    title: str
    working_group: str
    purpose: str
    key_topics: tuple[str, ...] = ()
    search_keywords: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    implementation_notes: tuple[str, ...] = ()
    release: str | None = None
    related_specs: tuple[str, ...] = ()
    common_questions: tuple[str, ...] = ()
    evolution_notes: str | None = None

    @property
    def number(self) -> str:
        """Document number after the series dot ("501" for TS 33.501)."""
        return self.id.rpartition(".")[2]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "series": self.series,
            "title": self.title,
            "working_group": self.working_group,
            "release": self.release,
            "purpose": self.purpose,
            "key_topics": list(self.key_topics),
            "search_keywords": list(self.search_keywords),
            "dependencies": list(self.dependencies),
            "related_specs": list(self.related_specs),
            "implementation_notes": list(self.implementation_notes),
            "common_questions": list(self.common_questions),
            "evolution_notes": self.evolution_notes,
        }


@dataclass(frozen=True)
class Procedure:
    """A named procedure of a protocol (Registration, Credit Control, ...)."""

    name: str
    description: str
    trigger_conditions: tuple[str, ...] = ()
    key_steps: tuple[str, ...] = ()
    related_procedures: tuple[str, ...] = ()
    common_issues: tuple[str, ...] = ()
    debugging_tips: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "trigger_conditions": list(self.trigger_conditions),
            "key_steps": list(self.key_steps),
            "related_procedures": list(self.related_procedures),
            "common_issues": list(self.common_issues),
            "debugging_tips": list(self.debugging_tips),
        }


@dataclass(frozen=True)
class Protocol:
    """A protocol or protocol-bearing network function."""

    name: str
    full_name: str
    layer: str
    purpose: str
    defining_specs: tuple[str, ...] = ()
    related_protocols: tuple[str, ...] = ()
    procedures: tuple[Procedure, ...] = ()
    common_use_cases: tuple[str, ...] = ()
    troubleshooting_areas: tuple[str, ...] = ()

    @property
    def procedure_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.procedures)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "layer": self.layer,
            "purpose": self.purpose,
            "defining_specs": list(self.defining_specs),
            "related_protocols": list(self.related_protocols),
            "procedures": [p.to_dict() for p in self.procedures],
            "common_use_cases": list(self.common_use_cases),
            "troubleshooting_areas": list(self.troubleshooting_areas),
        }


@dataclass(frozen=True)
class Concept:
    """A glossary concept."""

    name: str
    full_name: str
    category: str
    description: str = ""
    purpose: str = ""
    related_concepts: tuple[str, ...] = ()
    specifications: tuple[str, ...] = ()
    evolution_from: str | None = None
    usage_context: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "category": self.category,
            "description": self.description,
            "purpose": self.purpose,
            "related_concepts": list(self.related_concepts),
            "specifications": list(self.specifications),
            "evolution_from": self.evolution_from,
            "usage_context": list(self.usage_context),
        }


@dataclass(frozen=True)
class PatternStep:
    """One phase of a research pattern."""

    phase: str
    tasks: tuple[str, ...] = ()
    deliverables: tuple[str, ...] = ()
    tips: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "tasks": list(self.tasks),
            "deliverables": list(self.deliverables),
            "tips": list(self.tips),
        }


@dataclass(frozen=True)
class ResearchPattern:
    """A phased methodology for studying a family of specifications."""

    name: str
    description: str
    time_estimate: str
    applicable_for: tuple[str, ...] = ()
    steps: tuple[PatternStep, ...] = ()
    expected_outputs: tuple[str, ...] = ()
    common_pitfalls: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "applicable_for": list(self.applicable_for),
            "time_estimate": self.time_estimate,
            "steps": [s.to_dict() for s in self.steps],
            "expected_outputs": list(self.expected_outputs),
            "common_pitfalls": list(self.common_pitfalls),
        }


@dataclass(frozen=True)
class SearchPattern:
    """Reading template for one technical domain."""

    domain: str
    keywords: tuple[str, ...] = ()
    series: tuple[str, ...] = ()
    starting_specs: tuple[str, ...] = ()
    reading_order: tuple[str, ...] = ()
    common_mistakes: tuple[str, ...] = ()
    tips: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain,
            "keywords": list(self.keywords),
            "series": list(self.series),
            "starting_specs": list(self.starting_specs),
            "reading_order": list(self.reading_order),
            "common_mistakes": list(self.common_mistakes),
            "tips": list(self.tips),
        }


@dataclass(frozen=True)
class Relationship:
    """Directed, weighted edge between two specifications."""

    source: str
    target: str
    kind: RelationshipKind
    strength: float
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "kind": self.kind.value,
            "strength": round(self.strength, 3),
            "description": self.description,
        }


@dataclass(frozen=True)
class KnowledgeSnapshot:
    """Raw catalogue contents as produced by the loader."""

    specifications: tuple[Specification, ...] = ()
    protocols: tuple[Protocol, ...] = ()
    concepts: tuple[Concept, ...] = ()
    patterns: tuple[ResearchPattern, ...] = ()
    search_patterns: tuple[SearchPattern, ...] = ()
    relationships: tuple[Relationship, ...] = field(default_factory=tuple)
