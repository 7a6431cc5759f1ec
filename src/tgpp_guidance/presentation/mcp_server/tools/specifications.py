"""
Specification Tools - Search and inspect the local 3GPP catalogue.

Tools:
- search_specifications: Ranked catalogue search with series/release filters
- get_specification_details: Full record plus dependencies and relationships
- compare_specifications: Side-by-side comparison of two or more specs
- find_implementation_requirements: Implementation notes, prerequisites, phases

All results come from the curated knowledge base; nothing is fetched
remotely. Catalogue misses are reported to the agent as NotFound messages.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tgpp_guidance.application.guidance.generator import (
    DEFAULT_RESEARCH_PATTERN,
    DOMAIN_RESEARCH_PATTERNS,
)
from tgpp_guidance.application.search.query_analyzer import GENERAL_DOMAIN
from tgpp_guidance.core.exceptions import (
    EmptyQueryError,
    ErrorContext,
    GuidanceError,
    InvalidParameterError,
    NotFoundError,
)

from .formatting import InputNormalizer, ResponseFormatter

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from tgpp_guidance.application.guidance.engine import GuidanceEngine
    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase
    from tgpp_guidance.domain.entities.knowledge import Specification

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 20
RELATED_LIMIT = 5

COMPARISON_CRITERIA = (
    "title",
    "working_group",
    "release",
    "purpose",
    "key_topics",
    "dependencies",
    "evolution",
)

# complexity_level -> (primary specs, notes per spec)
COMPLEXITY_LIMITS: dict[str, tuple[int, int | None]] = {
    "basic": (2, 2),
    "intermediate": (3, 4),
    "advanced": (5, None),
}


def _brief(spec: Specification) -> dict[str, Any]:
    return {
        "id": spec.id,
        "title": spec.title,
        "series": spec.series,
        "working_group": spec.working_group,
        "release": spec.release,
    }


def _resolve_spec(knowledge_base: KnowledgeBase, raw_id: str) -> Specification:
    spec_id = InputNormalizer.normalize_spec_id(raw_id)
    spec = knowledge_base.get_specification(spec_id)
    if spec is None:
        series = InputNormalizer.normalize_series(spec_id)
        same_series = [s.id for s in knowledge_base.specifications() if s.series == series]
        hint = f"Catalogued specs in series {series}: {', '.join(same_series)}" if same_series else None
        raise NotFoundError(
            "Specification",
            spec_id,
            context=ErrorContext(
                suggestion=hint or "Use search_specifications to find catalogued specifications",
                example='search_specifications(query="5G authentication")',
            ),
        )
    return spec


def register_specification_tools(
    mcp: FastMCP,
    knowledge_base: KnowledgeBase,
    engine: GuidanceEngine,
) -> None:
    """Register specification catalogue tools (4 tools)."""

    @mcp.tool()
    def search_specifications(
        query: str,
        max_results: int = 5,
        series_filter: list[str] | str | None = None,
        release_filter: list[str] | str | None = None,
    ) -> str:
        """
        Search the 3GPP specification catalogue.

        Matches the query (and the domain and concepts detected in it)
        against each specification's key topics, search keywords and title.
        Specifications named explicitly (e.g., "TS 33.501") are listed first.

        Args:
            query: Search text (e.g., "5G charging CHF", "handover procedures")
            max_results: Maximum results to return (1-20, default 5)
            series_filter: Only these series (e.g., ["32", "33"] or "32,33")
            release_filter: Only these releases (e.g., ["Rel-16", "Rel-17"])
        """
        logger.info("Searching specifications: %r (max=%s)", query, max_results)
        try:
            if not query or not query.strip():
                raise EmptyQueryError(query)
            if not 1 <= max_results <= MAX_SEARCH_RESULTS:
                raise InvalidParameterError("max_results", max_results, f"an integer between 1 and {MAX_SEARCH_RESULTS}")
            analysis = engine.analyze_query(query)
        except GuidanceError as e:
            return ResponseFormatter.error(e)

        series = {InputNormalizer.normalize_series(s) for s in InputNormalizer.normalize_list(series_filter)}
        releases = {InputNormalizer.normalize_release(r) for r in InputNormalizer.normalize_list(release_filter)}

        topics = [query]
        if analysis.domain != GENERAL_DOMAIN:
            topics.append(analysis.domain)
        topics.extend(c for c in analysis.concepts if not c.startswith("TS "))

        mentioned = knowledge_base.existing_specifications(c for c in analysis.concepts if c.startswith("TS "))
        scored: list[tuple[Specification, int | None]] = [(s, None) for s in mentioned]
        seen = {s.id for s in mentioned}
        scored += [(r.specification, r.score) for r in knowledge_base.rank_specifications(topics) if r.id not in seen]

        results = [
            {**_brief(spec), "purpose": spec.purpose, "key_topics": list(spec.key_topics), "score": score}
            for spec, score in scored
            if (not series or spec.series in series) and (not releases or spec.release in releases)
        ]

        response: dict[str, Any] = {
            "query": query,
            "analysis": {
                "intent": analysis.intent.value,
                "domain": analysis.domain,
                "concepts": list(analysis.concepts),
            },
            "filters": {"series": sorted(series), "releases": sorted(releases)},
            "total_found": len(results),
            "results": results[:max_results],
        }
        if not results:
            response["suggestions"] = [
                "Use protocol or feature names (NAS, RRC, SUCI, CHF, PCF)",
                "Remove series or release filters",
                "Call explain_3gpp_structure(focus='series') to pick a series",
            ]
        return ResponseFormatter.to_json(response)

    @mcp.tool()
    def get_specification_details(spec_id: str, include_dependencies: bool = True) -> str:
        """
        Get the full catalogue record of one specification.

        Includes purpose, key topics, implementation notes, common questions
        and evolution notes. With include_dependencies, also resolves the
        specifications it builds on, related specifications and typed
        relationships (uses, extends, replaces, ...).

        Args:
            spec_id: Specification id (e.g., "TS 33.501" or "33.501")
            include_dependencies: Include dependency and relationship analysis
        """
        logger.info("Getting specification details: %s", spec_id)
        try:
            spec = _resolve_spec(knowledge_base, spec_id)
        except GuidanceError as e:
            return ResponseFormatter.error(e)

        result: dict[str, Any] = {"specification": spec.to_dict()}
        if include_dependencies:
            resolved = knowledge_base.existing_specifications(spec.dependencies)
            resolved_ids = {s.id for s in resolved}
            result["dependencies"] = {
                "resolved": [_brief(s) for s in resolved],
                "not_catalogued": [d for d in spec.dependencies if d not in resolved_ids],
            }
            result["related_specifications"] = [
                _brief(s) for s in knowledge_base.get_related_specifications(spec.id)[:RELATED_LIMIT]
            ]
            result["relationships"] = [r.to_dict() for r in knowledge_base.get_relationships(spec.id)]
        return ResponseFormatter.to_json(result)

    @mcp.tool()
    def compare_specifications(
        spec_ids: list[str] | str,
        criteria: list[str] | str | None = None,
    ) -> str:
        """
        Compare two or more specifications side by side.

        Args:
            spec_ids: Specification ids (e.g., ["TS 24.501", "TS 24.301"] or "24.501, 24.301")
            criteria: Subset of: title, working_group, release, purpose,
                      key_topics, dependencies, evolution (default: all)
        """
        ids = [InputNormalizer.normalize_spec_id(s) for s in InputNormalizer.normalize_list(spec_ids)]
        ids = list(dict.fromkeys(ids))
        wanted = [c.lower() for c in InputNormalizer.normalize_list(criteria)] or list(COMPARISON_CRITERIA)
        logger.info("Comparing specifications: %s on %s", ids, wanted)
        try:
            if len(ids) < 2:
                raise InvalidParameterError("spec_ids", spec_ids, "at least two distinct specification ids")
            unknown = [c for c in wanted if c not in COMPARISON_CRITERIA]
            if unknown:
                raise InvalidParameterError("criteria", unknown, "any of: " + ", ".join(COMPARISON_CRITERIA))
            specs = [_resolve_spec(knowledge_base, s) for s in ids]
        except GuidanceError as e:
            return ResponseFormatter.error(e)

        def value(spec: Specification, criterion: str) -> Any:
            if criterion == "evolution":
                return spec.evolution_notes
            field_value = getattr(spec, criterion)
            return list(field_value) if isinstance(field_value, tuple) else field_value

        comparison = {c: {s.id: value(s, c) for s in specs} for c in wanted}

        shared_topics = set.intersection(*({t.lower() for t in s.key_topics} for s in specs))
        shared_deps = set.intersection(*(set(s.dependencies) for s in specs))
        compared = {s.id for s in specs}
        direct = [
            r.to_dict()
            for s in specs
            for r in knowledge_base.get_relationships(s.id)
            if r.target in compared
        ]

        return ResponseFormatter.to_json(
            {
                "specifications": [_brief(s) for s in specs],
                "criteria": wanted,
                "comparison": comparison,
                "shared": {
                    "key_topics": sorted(shared_topics),
                    "dependencies": sorted(shared_deps),
                    "same_working_group": len({s.working_group for s in specs}) == 1,
                    "same_series": len({s.series for s in specs}) == 1,
                },
                "direct_relationships": direct,
            }
        )

    @mcp.tool()
    def find_implementation_requirements(
        feature: str,
        domain: str | None = None,
        complexity_level: str = "intermediate",
    ) -> str:
        """
        Collect implementation requirements for a 3GPP feature.

        Returns the specifications carrying implementation notes for the
        feature, the prerequisite specifications they depend on, a phased
        research plan and common pitfalls.

        Args:
            feature: Feature to implement (e.g., "SUCI privacy protection", "CHF converged charging")
            domain: Optional domain override (e.g., "charging", "security", "mobility")
            complexity_level: basic, intermediate (default) or advanced
        """
        logger.info("Finding implementation requirements: %r (domain=%s)", feature, domain)
        try:
            level = (complexity_level or "intermediate").strip().lower()
            if level not in COMPLEXITY_LIMITS:
                raise InvalidParameterError("complexity_level", complexity_level, "one of: " + ", ".join(COMPLEXITY_LIMITS))
            analysis = engine.analyze_query(feature)
        except GuidanceError as e:
            return ResponseFormatter.error(e)

        effective_domain = (domain or analysis.domain).strip().lower().replace(" ", "_")
        topics = [feature, effective_domain] if effective_domain != GENERAL_DOMAIN else [feature]
        topics.extend(c for c in analysis.concepts if not c.startswith("TS "))

        candidates = knowledge_base.existing_specifications(c for c in analysis.concepts if c.startswith("TS "))
        candidates += [r.specification for r in knowledge_base.rank_specifications(topics)]
        specs = [s for s in dict.fromkeys(candidates) if s.implementation_notes]

        max_specs, max_notes = COMPLEXITY_LIMITS[level]
        primary, supporting = specs[:max_specs], specs[max_specs:]

        in_plan = {s.id for s in specs}
        prerequisites = knowledge_base.existing_specifications(
            dep for s in primary for dep in s.dependencies if dep not in in_plan
        )

        pattern = knowledge_base.get_pattern(DOMAIN_RESEARCH_PATTERNS.get(effective_domain, DEFAULT_RESEARCH_PATTERN))
        search_pattern = (
            knowledge_base.get_search_pattern_for_domain(effective_domain)
            if effective_domain != GENERAL_DOMAIN
            else None
        )
        pitfalls = list(search_pattern.common_mistakes) if search_pattern else []
        if pattern is not None:
            pitfalls += [p for p in pattern.common_pitfalls if p not in pitfalls]

        result: dict[str, Any] = {
            "feature_analysis": {
                "feature": feature,
                "domain": effective_domain,
                "complexity_level": level,
                "concepts": list(analysis.concepts),
                "total_specifications": len(specs),
            },
            "primary_specifications": [
                {
                    **_brief(s),
                    "implementation_notes": list(s.implementation_notes[:max_notes] if max_notes else s.implementation_notes),
                }
                for s in primary
            ],
            "supporting_specifications": [_brief(s) for s in supporting],
            "prerequisites": [_brief(s) for s in prerequisites],
            "implementation_phases": [step.to_dict() for step in pattern.steps] if pattern else [],
            "common_pitfalls": pitfalls,
        }
        if not specs:
            result["message"] = (
                "No catalogued specification carries implementation notes for this feature. "
                "Try naming the protocol or network function (e.g., NAS, SUCI, CHF)."
            )
        return ResponseFormatter.to_json(result)
