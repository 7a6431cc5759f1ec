"""
GuidanceGenerator - Assemble leveled guidance from a QueryAnalysis.

Pipeline:
    1. Resolve recognised terms to catalogue records (concepts, protocols,
       mentioned specification ids). Unknown terms are dropped.
    2. Rank specifications against the domain and the recognised terms.
    3. Pick the domain's SearchPattern and ResearchPattern.
    4. Run the intent's section builders, then the optional ones.
    5. Compute summary, confidence, next steps and related topics.

``generate`` never raises for a valid QueryAnalysis. Lookup misses degrade
to generic content and lower confidence.

Confidence:
    +0.10  the query mapped to a technical domain
    +0.20  the domain has a SearchPattern
    +0.30  at least one term was recognised
    +0.25  at least one specification ranked
    +0.05  per further ranked specification (up to three)
"""

from __future__ import annotations

import logging

from tgpp_guidance.application.guidance.context import (
    LEVEL_PROFILES,
    GuidanceContext,
)
from tgpp_guidance.application.guidance.sections import (
    SECTION_BUILDERS,
    optional_builders,
)
from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase
from tgpp_guidance.application.search.query_analyzer import GENERAL_DOMAIN
from tgpp_guidance.application.search.relevance_ranker import RelevanceRanker
from tgpp_guidance.domain.entities.guidance import (
    Guidance,
    Query,
    QueryAnalysis,
    QueryIntent,
    UserLevel,
)
from tgpp_guidance.domain.entities.knowledge import Specification

logger = logging.getLogger(__name__)

# Domain -> ResearchPattern name
DOMAIN_RESEARCH_PATTERNS: dict[str, str] = {
    "authentication": "Security Analysis",
    "security": "Security Analysis",
    "protocol": "Protocol Analysis",
    "mobility": "Protocol Analysis",
    "session_management": "Protocol Analysis",
    "radio": "Protocol Analysis",
    "architecture": "Protocol Analysis",
    "charging": "Charging Architecture Analysis",
    "policy_charging": "Policy Control Integration",
}
DEFAULT_RESEARCH_PATTERN = "Protocol Analysis"

DOMAIN_TOPICS: dict[str, tuple[str, ...]] = {
    "authentication": ("5G security architecture", "Key hierarchy and derivation", "Subscriber identity privacy"),
    "security": ("Authentication procedures", "Key hierarchy and derivation", "Security algorithm negotiation"),
    "mobility": ("Registration procedures", "Handover preparation and execution", "Tracking area management"),
    "session_management": ("QoS flows", "PDU session establishment", "User plane selection"),
    "charging": ("Online and offline charging", "Converged charging", "CDR processing"),
    "policy_charging": ("Policy and charging control", "QoS control", "Charging rules"),
    "architecture": ("Service based architecture", "Network slicing", "Network function discovery"),
    "radio": ("RRC state machine", "Beam management", "Measurement reporting"),
    "protocol": ("Protocol stack layering", "Message encoding", "Procedure state machines"),
}
GENERIC_TOPICS = (
    "3GPP specification series",
    "3GPP working groups",
    "3GPP release evolution",
)

INTENT_SUMMARY: dict[QueryIntent, str] = {
    QueryIntent.DISCOVERY: "locating the specifications",
    QueryIntent.LEARNING: "learning the concepts",
    QueryIntent.IMPLEMENTATION: "implementing the requirements",
    QueryIntent.COMPARISON: "comparing the alternatives",
}

_MAX_RELATED_TOPICS = 6


class GuidanceGenerator:
    """
    Turn a QueryAnalysis into a Guidance document.

    Usage:
        generator = GuidanceGenerator(knowledge_base, RelevanceRanker())
        guidance = generator.generate(query, analysis)
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase,
        ranker: RelevanceRanker | None = None,
    ) -> None:
        self._kb = knowledge_base
        self._ranker = ranker or RelevanceRanker()

    def generate(self, query: Query, analysis: QueryAnalysis) -> Guidance:
        ctx = self._build_context(query, analysis)

        builders = list(SECTION_BUILDERS[analysis.intent]) + optional_builders(ctx)
        sections = tuple(build(ctx) for build in builders)

        guidance = Guidance(
            summary=self._summary(ctx),
            sections=sections,
            confidence=self._confidence(ctx),
            next_steps=self._next_steps(ctx),
            related_topics=self._related_topics(ctx),
        )
        logger.debug(
            "Generated %s guidance for domain=%s level=%s (%d sections, confidence=%.2f)",
            analysis.intent.value,
            analysis.domain,
            analysis.user_level.value,
            len(sections),
            guidance.confidence,
        )
        return guidance

    # =========================================================================
    # Context
    # =========================================================================

    def _build_context(self, query: Query, analysis: QueryAnalysis) -> GuidanceContext:
        kb = self._kb
        concepts = tuple(c for c in (kb.get_concept(t) for t in analysis.concepts) if c is not None)
        protocols = tuple(p for p in (kb.get_protocol(t) for t in analysis.concepts) if p is not None)
        mentioned = tuple(kb.existing_specifications(t for t in analysis.concepts if t.startswith("TS ")))

        topics = self._topics(analysis)
        ranked = self._rank(topics, mentioned)
        implementation_ids = {
            spec.id
            for topic in topics
            for spec in kb.get_implementation_guidance_for_topic(topic)
        }
        implementation_specs = tuple(
            s for s in ranked if s.id in implementation_ids or (s in mentioned and s.implementation_notes)
        )

        has_domain = analysis.domain != GENERAL_DOMAIN
        search_pattern = kb.get_search_pattern_for_domain(analysis.domain) if has_domain else None
        research_pattern = kb.get_pattern(
            DOMAIN_RESEARCH_PATTERNS.get(analysis.domain, DEFAULT_RESEARCH_PATTERN)
        )

        return GuidanceContext(
            query=query,
            analysis=analysis,
            knowledge_base=kb,
            profile=LEVEL_PROFILES[analysis.user_level],
            ranked_specs=ranked,
            implementation_specs=implementation_specs,
            concepts=concepts,
            protocols=protocols,
            mentioned_specs=mentioned,
            search_pattern=search_pattern,
            research_pattern=research_pattern,
        )

    @staticmethod
    def _topics(analysis: QueryAnalysis) -> list[str]:
        topics: list[str] = []
        if analysis.domain != GENERAL_DOMAIN:
            topics.append(analysis.domain)
        topics.extend(t for t in analysis.concepts if not t.startswith("TS "))
        return topics

    def _rank(
        self,
        topics: list[str],
        mentioned: tuple[Specification, ...],
    ) -> tuple[Specification, ...]:
        """Explicitly mentioned specifications first, then ranked matches."""
        ranked = [r.specification for r in self._ranker.rank_many(topics, self._kb.specifications())]
        first = {s.id for s in mentioned}
        return tuple(mentioned) + tuple(s for s in ranked if s.id not in first)

    # =========================================================================
    # Scores and text
    # =========================================================================

    @staticmethod
    def _confidence(ctx: GuidanceContext) -> float:
        confidence = 0.0
        if ctx.has_domain:
            confidence += 0.1
        if ctx.search_pattern is not None:
            confidence += 0.2
        if ctx.analysis.concepts:
            confidence += 0.3
        count = len(ctx.ranked_specs)
        if count:
            confidence += 0.25 + 0.05 * min(count - 1, 3)
        return round(max(0.0, min(confidence, 1.0)), 2)

    @staticmethod
    def _summary(ctx: GuidanceContext) -> str:
        label = ctx.label
        focus = INTENT_SUMMARY[ctx.analysis.intent]
        specs = ctx.specs

        if ctx.level is UserLevel.BEGINNER:
            summary = (
                f"A beginner-friendly introduction to {label} 3GPP standards, "
                f"focused on {focus}. It explains the basic terms first"
            )
            if specs:
                summary += f" and points you to {len(specs)} specification(s) to start with, beginning with {specs[0].id}."
            else:
                summary += " and shows how the specification series are organised."
            return summary

        if ctx.level is UserLevel.EXPERT:
            refs = ", ".join(s.id for s in specs[:3]) if specs else "no catalogued specification"
            return f"Expert brief on {label} ({focus}): primary references {refs}."

        summary = f"Guidance on {label} in 3GPP, focused on {focus}"
        if specs:
            summary += f", covering {len(specs)} relevant specification(s) led by {specs[0].id}"
        if ctx.search_pattern is not None:
            summary += " with a suggested reading strategy"
        return summary + "."

    @staticmethod
    def _next_steps(ctx: GuidanceContext) -> tuple[str, ...]:
        top = ctx.specs[0].id if ctx.specs else None
        steps: list[str] = []
        intent = ctx.analysis.intent

        if intent is QueryIntent.DISCOVERY:
            if top:
                steps.append(f"Open {top} and read its scope and overview clauses")
            steps.append("Narrow the search with search_specifications and a series filter")
        elif intent is QueryIntent.LEARNING:
            steps.append("Work through the learning path phases in order")
            if top:
                steps.append(f"Use get_specification_details on {top} to see its dependencies")
        elif intent is QueryIntent.IMPLEMENTATION:
            steps.append("Turn each implementation note into a testable requirement")
            steps.append("Use find_implementation_requirements for a phased checklist")
        else:
            steps.append("Use compare_specifications for a side-by-side view of the documents")
            steps.append("Check which release introduced each compared feature")

        if ctx.level is UserLevel.BEGINNER:
            steps.append("Review the glossary before opening the specifications")
        elif ctx.level is UserLevel.EXPERT:
            steps.append("Check the latest release for change requests affecting these procedures")

        if not ctx.specs:
            steps.append("Rephrase the question with protocol or feature names (for example NAS, SUCI, CHF)")
        return tuple(steps)

    def _related_topics(self, ctx: GuidanceContext) -> tuple[str, ...]:
        topics: list[str] = list(DOMAIN_TOPICS.get(ctx.analysis.domain, ()))
        for concept in ctx.concepts:
            for name in concept.related_concepts:
                related = self._kb.get_concept(name)
                if related is not None:
                    topics.append(related.name)
        for protocol in ctx.protocols:
            topics.extend(p.name for p in (self._kb.get_protocol(n) for n in protocol.related_protocols) if p)
        topics = [t for t in dict.fromkeys(topics) if t not in ctx.analysis.concepts]
        if not topics:
            topics = list(GENERIC_TOPICS)
        return tuple(topics[:_MAX_RELATED_TOPICS])
