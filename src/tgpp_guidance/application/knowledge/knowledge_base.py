"""
KnowledgeBase - Immutable, indexed view over a loaded catalogue snapshot.

The knowledge base is built once (normally by the DI container at start-up)
and then only read. Every index is a ``MappingProxyType`` over a private
dict, and every record is a frozen dataclass, so concurrent requests can
share one instance without locking.

Lookup misses return ``None`` or an empty list, never an exception.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from types import MappingProxyType

from tgpp_guidance.application.search.relevance_ranker import RankedSpecification, RelevanceRanker
from tgpp_guidance.domain.entities.knowledge import (
    Concept,
    KnowledgeSnapshot,
    Procedure,
    Protocol,
    Relationship,
    RelationshipKind,
    ResearchPattern,
    SearchPattern,
    Specification,
)
from tgpp_guidance.infrastructure.knowledge.loader import load_knowledge

logger = logging.getLogger(__name__)

# Reverse edges added for bidirectional relationship kinds
_REVERSE_KINDS: dict[RelationshipKind, RelationshipKind] = {
    RelationshipKind.USES: RelationshipKind.DEFINES,
    RelationshipKind.REFERENCES: RelationshipKind.REFERENCES,
}
_REVERSE_STRENGTH_FACTOR = 0.8


def _build_relationships(
    relationships: Iterable[Relationship],
) -> dict[str, tuple[Relationship, ...]]:
    graph: dict[str, list[Relationship]] = {}
    for rel in relationships:
        graph.setdefault(rel.source, []).append(rel)
        reverse_kind = _REVERSE_KINDS.get(rel.kind)
        if reverse_kind is not None:
            graph.setdefault(rel.target, []).append(
                Relationship(
                    source=rel.target,
                    target=rel.source,
                    kind=reverse_kind,
                    strength=rel.strength * _REVERSE_STRENGTH_FACTOR,
                    description=f"Reverse: {rel.description}" if rel.description else None,
                )
            )
    return {source: tuple(edges) for source, edges in graph.items()}


class KnowledgeBase:
    """
    Read-only catalogue of specifications, protocols, concepts and patterns.

    Usage:
        kb = KnowledgeBase.load()
        kb.get_specification("TS 33.501")
        kb.suggest_specifications_for_topic("authentication")
    """

    def __init__(
        self,
        snapshot: KnowledgeSnapshot,
        ranker: RelevanceRanker | None = None,
    ) -> None:
        self._ranker = ranker or RelevanceRanker()
        self._specifications = MappingProxyType({s.id: s for s in snapshot.specifications})
        self._protocols = MappingProxyType({p.name.upper(): p for p in snapshot.protocols})
        self._concepts = MappingProxyType({c.name.casefold(): c for c in snapshot.concepts})
        self._patterns = MappingProxyType({p.name: p for p in snapshot.patterns})
        self._search_patterns = tuple(snapshot.search_patterns)
        self._relationships = MappingProxyType(_build_relationships(snapshot.relationships))

    @classmethod
    def load(
        cls,
        data_dir: str | Path | None = None,
        ranker: RelevanceRanker | None = None,
    ) -> KnowledgeBase:
        """Load YAML data from ``data_dir`` (bundled data when None)."""
        return cls(load_knowledge(data_dir), ranker=ranker)

    # =========================================================================
    # Exact lookups
    # =========================================================================

    def get_specification(self, spec_id: str) -> Specification | None:
        spec = self._specifications.get(spec_id)
        if spec is None:
            logger.debug("Specification not in catalogue: %s", spec_id)
        return spec

    def get_protocol(self, name: str) -> Protocol | None:
        return self._protocols.get(name.upper())

    def get_concept(self, name: str) -> Concept | None:
        return self._concepts.get(name.casefold())

    def get_pattern(self, name: str) -> ResearchPattern | None:
        return self._patterns.get(name)

    def get_procedure(self, protocol_name: str, procedure_name: str) -> Procedure | None:
        protocol = self.get_protocol(protocol_name)
        if protocol is None:
            return None
        wanted = procedure_name.casefold()
        for procedure in protocol.procedures:
            if procedure.name.casefold() == wanted:
                return procedure
        return None

    def get_relationships(self, spec_id: str) -> tuple[Relationship, ...]:
        return self._relationships.get(spec_id, ())

    def existing_specifications(self, spec_ids: Iterable[str]) -> list[Specification]:
        """Resolve ids in order, silently dropping unknown and repeated ones."""
        resolved: dict[str, Specification] = {}
        for spec_id in spec_ids:
            spec = self._specifications.get(spec_id)
            if spec is not None:
                resolved.setdefault(spec.id, spec)
        return list(resolved.values())

    # =========================================================================
    # Collections
    # =========================================================================

    def specifications(self) -> tuple[Specification, ...]:
        return tuple(self._specifications.values())

    def protocols(self) -> tuple[Protocol, ...]:
        return tuple(self._protocols.values())

    def concepts(self) -> tuple[Concept, ...]:
        return tuple(self._concepts.values())

    def patterns(self) -> tuple[ResearchPattern, ...]:
        return tuple(self._patterns.values())

    def search_patterns(self) -> tuple[SearchPattern, ...]:
        return self._search_patterns

    def stats(self) -> dict[str, int]:
        return {
            "specifications": len(self._specifications),
            "protocols": len(self._protocols),
            "concepts": len(self._concepts),
            "research_patterns": len(self._patterns),
            "search_patterns": len(self._search_patterns),
            "relationships": sum(len(edges) for edges in self._relationships.values()),
        }

    # =========================================================================
    # Topic lookups
    # =========================================================================

    def suggest_specifications_for_topic(self, topic: str) -> list[Specification]:
        """All specifications matching ``topic``, most relevant first."""
        if not topic or not topic.strip():
            return []
        return self._ranker.rank(topic, self._specifications.values())

    def rank_specifications(self, topics: Iterable[str]) -> list[RankedSpecification]:
        """Scored matches for several topics at once (scores summed per spec)."""
        return self._ranker.rank_many(topics, self._specifications.values())

    def get_related_specifications(self, spec_id: str) -> list[Specification]:
        """
        Specifications sharing a dependency or a search keyword with ``spec_id``.

        Ordered by number of shared items plus the strength of any direct
        relationship between the two, then by id. The target is excluded.
        """
        target = self._specifications.get(spec_id)
        if target is None:
            return []

        deps = set(target.dependencies)
        keywords = {k.casefold() for k in target.search_keywords}
        edge_strength: dict[str, float] = {}
        for rel in self.get_relationships(spec_id):
            edge_strength[rel.target] = max(edge_strength.get(rel.target, 0.0), rel.strength)

        scored: list[tuple[float, str, Specification]] = []
        for other in self._specifications.values():
            if other.id == target.id:
                continue
            shared = len(deps & set(other.dependencies))
            shared += len(keywords & {k.casefold() for k in other.search_keywords})
            if shared == 0:
                continue
            scored.append((shared + edge_strength.get(other.id, 0.0), other.id, other))

        scored.sort(key=lambda item: (-item[0], item[1]))
        return [spec for _, _, spec in scored]

    def get_search_pattern_for_domain(self, domain: str) -> SearchPattern | None:
        """Exact (case-insensitive) domain match, else first keyword containing it."""
        wanted = domain.strip().casefold()
        if not wanted:
            return None
        for pattern in self._search_patterns:
            if pattern.domain.casefold() == wanted:
                return pattern
        for pattern in self._search_patterns:
            if any(wanted in keyword.casefold() for keyword in pattern.keywords):
                return pattern
        return None

    def get_implementation_guidance_for_topic(self, topic: str) -> list[Specification]:
        return [
            spec for spec in self.suggest_specifications_for_topic(topic)
            if spec.implementation_notes
        ]
