"""
Guidance section builders.

Each builder is a pure function ``GuidanceContext -> GuidanceSection``.
``SECTION_BUILDERS`` maps every intent to the ordered builders of its
required sections; ``optional_builders`` adds the search strategy and the
level-specific glossary / technical detail sections after them.

Builders never raise on missing data: when the catalogue has nothing to
say they fall back to generic, reference-free text.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from tgpp_guidance.application.guidance.context import GuidanceContext
from tgpp_guidance.domain.entities.guidance import (
    GuidanceSection,
    QueryIntent,
    SectionType,
    UserLevel,
)
from tgpp_guidance.domain.entities.knowledge import Concept, Protocol, Specification

SectionBuilder = Callable[[GuidanceContext], GuidanceSection]

GENERIC_READING_ORDER = (
    "Architecture specifications (23 series) for the system view",
    "Protocol specifications (24, 36 and 38 series) for procedures and messages",
    "Security specifications (33 series) for protection mechanisms",
    "Conformance specifications (34 series) to validate an implementation",
)

GENERIC_PITFALLS = (
    "Reading a protocol specification without its architecture context",
    "Mixing requirements from different releases",
    "Ignoring error and failure cases in procedures",
)

INTENT_PHRASES: dict[QueryIntent, str] = {
    QueryIntent.DISCOVERY: "finding the right specifications",
    QueryIntent.LEARNING: "understanding how it works",
    QueryIntent.IMPLEMENTATION: "implementing it",
    QueryIntent.COMPARISON: "comparing the options",
}


def _bullets(lines: Iterable[str]) -> str:
    return "\n".join(f"- {line}" for line in lines)


def _numbered(lines: Iterable[str]) -> str:
    return "\n".join(f"{i}. {line}" for i, line in enumerate(lines, 1))


def _known_ids(ctx: GuidanceContext, spec_ids: Iterable[str]) -> list[str]:
    return [s.id for s in ctx.knowledge_base.existing_specifications(spec_ids)]


def _spec_line(ctx: GuidanceContext, spec: Specification) -> str:
    if ctx.level is UserLevel.BEGINNER:
        return f"**{spec.id}**: {spec.title}. {spec.purpose}."
    line = f"**{spec.id}** ({spec.working_group}"
    line += f", {spec.release})" if spec.release else ")"
    line += f": {spec.title}"
    if ctx.level is UserLevel.EXPERT:
        deps = _known_ids(ctx, spec.dependencies)
        if deps:
            line += f"; builds on {', '.join(deps)}"
    return line


def _concept_line(ctx: GuidanceContext, concept: Concept) -> str:
    line = f"**{concept.name}** ({concept.full_name}): {concept.description}"
    if ctx.level is UserLevel.BEGINNER:
        if concept.purpose:
            line += f". Why it exists: {concept.purpose}"
        return line
    specs = _known_ids(ctx, concept.specifications)
    if specs:
        line += f". Defined in {', '.join(specs)}"
    predecessor = _predecessor(ctx, concept)
    if ctx.level is UserLevel.EXPERT and predecessor is not None:
        line += f". Evolved from {predecessor.name}"
    return line


def _predecessor(ctx: GuidanceContext, concept: Concept) -> Concept | None:
    """The catalogued concept this one evolved from, if any."""
    if not concept.evolution_from:
        return None
    return ctx.knowledge_base.get_concept(concept.evolution_from)


def catalogued_terms(ctx: GuidanceContext) -> list[str]:
    """Recognised query terms that name a catalogue record."""
    kb = ctx.knowledge_base
    return [
        t for t in ctx.analysis.concepts
        if kb.get_specification(t) or kb.get_concept(t) or kb.get_protocol(t)
    ]


def _protocol_line(ctx: GuidanceContext, protocol: Protocol) -> str:
    line = f"**{protocol.name}** ({protocol.full_name}, {protocol.layer}): {protocol.purpose}"
    if ctx.level is UserLevel.BEGINNER:
        if protocol.common_use_cases:
            line += f". Typical uses: {', '.join(protocol.common_use_cases[:3])}"
        return line
    specs = _known_ids(ctx, protocol.defining_specs)
    if specs:
        line += f". Defined in {', '.join(specs)}"
    if ctx.level is UserLevel.EXPERT and protocol.procedures:
        line += f". Procedures: {', '.join(protocol.procedure_names)}"
    return line


def compared_items(ctx: GuidanceContext) -> list[Concept | Protocol | Specification]:
    """
    Catalogue records named in the query, in mention order.

    When fewer than two are recognised, the best-ranked specifications fill
    the gap so that a comparison has something to compare.
    """
    items: list[Concept | Protocol | Specification] = []
    seen: set[str] = set()
    by_name = {c.name: c for c in ctx.concepts} | {p.name: p for p in ctx.protocols}
    by_name |= {s.id: s for s in ctx.mentioned_specs}
    for term in ctx.analysis.concepts:
        record = by_name.get(term) or by_name.get(term.upper())
        key = getattr(record, "id", None) or getattr(record, "name", None)
        if record is not None and key not in seen:
            seen.add(key)
            items.append(record)
    for spec in ctx.specs:
        if len(items) >= 2:
            break
        if spec.id not in seen:
            seen.add(spec.id)
            items.append(spec)
    return items


def _item_name(item: Concept | Protocol | Specification) -> str:
    return item.id if isinstance(item, Specification) else item.name


# =============================================================================
# Shared opening section
# =============================================================================


def build_overview(ctx: GuidanceContext) -> GuidanceSection:
    parts: list[str] = []
    if ctx.profile.show_intro:
        parts.append(
            "3GPP publishes mobile network standards as numbered Technical "
            "Specifications (TS). The first two digits are the series, which "
            "tells you the subject area (for example 23 = architecture, "
            "33 = security)."
        )
    focus = INTENT_PHRASES[ctx.analysis.intent]
    if ctx.has_domain:
        parts.append(f"Your question is about **{ctx.label}**, with a focus on {focus}.")
    else:
        parts.append(f"Your question does not map to one technical domain; this guide focuses on {focus}.")

    terms = catalogued_terms(ctx)
    if terms:
        parts.append(f"Recognised terms: {', '.join(terms)}.")

    if ctx.level is UserLevel.EXPERT:
        if ctx.specs:
            parts.append(f"Primary references: {', '.join(s.id for s in ctx.specs[:3])}.")
    elif ctx.search_pattern is not None and ctx.search_pattern.tips:
        parts.append(f"Tip: {ctx.search_pattern.tips[0]}.")

    return GuidanceSection(SectionType.OVERVIEW, "Overview", "\n\n".join(parts))


# =============================================================================
# Discovery
# =============================================================================


def build_specification_list(ctx: GuidanceContext) -> GuidanceSection:
    if ctx.specs:
        content = _bullets(_spec_line(ctx, spec) for spec in ctx.specs)
        hidden = len(ctx.ranked_specs) - len(ctx.specs)
        if hidden > 0 and ctx.level is not UserLevel.BEGINNER:
            content += f"\n\n{hidden} further matching specification(s) omitted."
    else:
        content = (
            "No catalogued specification matched this question directly. "
            "Use the series structure to narrow the search:\n"
            + _bullets(GENERIC_READING_ORDER)
        )
    return GuidanceSection(SectionType.SPECIFICATION_LIST, "Relevant Specifications", content)


def build_related_topics_section(ctx: GuidanceContext) -> GuidanceSection:
    lines: list[str] = []
    if ctx.specs:
        related = ctx.knowledge_base.get_related_specifications(ctx.specs[0].id)
        shown = {s.id for s in ctx.specs}
        extra = [s for s in related if s.id not in shown][:3]
        if extra:
            lines.append(
                f"Specifications related to {ctx.specs[0].id}: "
                + ", ".join(f"{s.id} ({s.title})" for s in extra)
            )
    for concept in ctx.concepts:
        related_names = [
            c.name for c in (ctx.knowledge_base.get_concept(n) for n in concept.related_concepts)
            if c is not None
        ]
        if related_names:
            lines.append(f"Concepts linked to {concept.name}: {', '.join(related_names)}")
    if ctx.search_pattern is not None and ctx.search_pattern.series:
        lines.append(f"Series to browse: {', '.join(ctx.search_pattern.series)}")
    if not lines:
        lines.append("3GPP series structure, working groups and release evolution")
    return GuidanceSection(SectionType.RELATED_TOPICS, "Related Topics", _bullets(lines))


# =============================================================================
# Learning
# =============================================================================


def build_concept_explanation(ctx: GuidanceContext) -> GuidanceSection:
    lines = [_concept_line(ctx, c) for c in ctx.concepts]
    lines += [_protocol_line(ctx, p) for p in ctx.protocols]
    if lines:
        content = _bullets(lines)
    elif ctx.specs:
        top = ctx.specs[0]
        content = f"The central document for {ctx.label} is {top.id}. {top.purpose}."
        if ctx.level is not UserLevel.BEGINNER and top.key_topics:
            content += f"\n\nKey topics: {', '.join(top.key_topics)}."
    else:
        content = (
            "No catalogued concept matched this question. Start from the "
            "architecture series (23) and follow references into protocol series."
        )
    return GuidanceSection(SectionType.CONCEPT_EXPLANATION, "Key Concepts", content)


def build_learning_path(ctx: GuidanceContext) -> GuidanceSection:
    steps: list[str] = []
    if ctx.search_pattern is not None:
        for spec in ctx.knowledge_base.existing_specifications(ctx.search_pattern.starting_specs):
            steps.append(f"Read {spec.id} ({spec.title})")
    elif ctx.specs:
        steps.append(f"Read {ctx.specs[0].id} ({ctx.specs[0].title})")

    pattern = ctx.research_pattern
    if pattern is not None:
        for step in pattern.steps:
            if ctx.level is UserLevel.EXPERT:
                steps.append(f"{step.phase}: {', '.join(step.tasks)}")
            else:
                tip = f" (tip: {step.tips[0]})" if step.tips and ctx.profile.show_intro else ""
                steps.append(f"{step.phase}: {'; '.join(step.tasks)}{tip}")
    if not steps:
        steps.extend(GENERIC_READING_ORDER)

    content = _numbered(steps)
    if pattern is not None and ctx.level is not UserLevel.EXPERT:
        content += f"\n\nExpected effort ({pattern.name}): {pattern.time_estimate}."
    return GuidanceSection(SectionType.LEARNING_PATH, "Learning Path", content)


# =============================================================================
# Implementation
# =============================================================================


def build_requirements(ctx: GuidanceContext) -> GuidanceSection:
    specs = ctx.implementation_specs[: ctx.profile.max_specs]
    if not specs:
        content = (
            "No catalogued implementation notes matched this question. "
            "Identify the stage 2 (architecture) and stage 3 (protocol) "
            "specifications for the feature before writing code."
        )
        return GuidanceSection(SectionType.REQUIREMENTS, "Implementation Requirements", content)

    blocks: list[str] = []
    for spec in specs:
        block = f"**{spec.id}** {spec.title}\n" + _bullets(ctx.notes(spec.implementation_notes))
        if ctx.profile.show_details:
            deps = _known_ids(ctx, spec.dependencies)
            if deps:
                block += f"\n- Prerequisite reading: {', '.join(deps)}"
        blocks.append(block)
    return GuidanceSection(SectionType.REQUIREMENTS, "Implementation Requirements", "\n\n".join(blocks))


def build_implementation_steps(ctx: GuidanceContext) -> GuidanceSection:
    pattern = ctx.research_pattern
    steps: list[str] = []
    if pattern is not None:
        for step in pattern.steps:
            line = f"**{step.phase}**: {', '.join(step.tasks)}"
            if ctx.level is UserLevel.BEGINNER and step.tips:
                line += f". Tip: {step.tips[0]}"
            elif ctx.profile.show_details and step.deliverables:
                line += f". Deliverables: {', '.join(step.deliverables)}"
            steps.append(line)
    for protocol in ctx.protocols:
        if ctx.level is UserLevel.BEGINNER:
            break
        for procedure in protocol.procedures[:2]:
            steps.append(f"Implement {protocol.name} {procedure.name}: {' -> '.join(procedure.key_steps)}")
    if not steps:
        steps = [
            "Collect the normative requirements (shall statements) for the feature",
            "Model the state machines and message flows",
            "Implement the happy path, then every failure cause",
            "Validate against the conformance test specifications",
        ]
    return GuidanceSection(SectionType.IMPLEMENTATION_STEPS, "Implementation Steps", _numbered(steps))


def build_pitfalls(ctx: GuidanceContext) -> GuidanceSection:
    items: list[str] = []
    if ctx.research_pattern is not None:
        items.extend(ctx.research_pattern.common_pitfalls)
    if ctx.search_pattern is not None:
        items.extend(ctx.search_pattern.common_mistakes)
    if ctx.level is UserLevel.EXPERT:
        for protocol in ctx.protocols:
            for procedure in protocol.procedures:
                items.extend(f"{procedure.name}: {issue}" for issue in procedure.common_issues)
    if not items:
        items.extend(GENERIC_PITFALLS)
    unique = list(dict.fromkeys(items))
    if ctx.level is UserLevel.BEGINNER:
        unique = unique[:4]
    return GuidanceSection(SectionType.PITFALLS, "Common Pitfalls", _bullets(unique))


# =============================================================================
# Comparison
# =============================================================================


def _row(ctx: GuidanceContext, item: Concept | Protocol | Specification) -> list[str]:
    if isinstance(item, Specification):
        row = [item.id, item.title, item.working_group, item.release or "-"]
        evolution = item.evolution_notes or "-"
    elif isinstance(item, Protocol):
        row = [item.name, item.full_name, item.layer, ", ".join(_known_ids(ctx, item.defining_specs)) or "-"]
        evolution = "-"
    else:
        row = [item.name, item.full_name, item.category, ", ".join(_known_ids(ctx, item.specifications)) or "-"]
        predecessor = _predecessor(ctx, item)
        evolution = f"from {predecessor.name}" if predecessor is not None else "-"
    if ctx.level is UserLevel.EXPERT:
        row.append(evolution)
    return row


def build_comparison_table(ctx: GuidanceContext) -> GuidanceSection:
    items = compared_items(ctx)
    if not items:
        content = (
            "None of the compared items is in the catalogue. Compare them by "
            "series, owning working group and release."
        )
        return GuidanceSection(SectionType.COMPARISON_TABLE, "Comparison", content)

    header = ["Item", "Name", "Category / Group", "Specifications / Release"]
    if ctx.level is UserLevel.EXPERT:
        header.append("Evolution")
    lines = [
        "| " + " | ".join(header) + " |",
        "|" + "---|" * len(header),
    ]
    lines += ["| " + " | ".join(_row(ctx, item)) + " |" for item in items]
    content = "\n".join(lines)
    if len(items) < 2:
        content += "\n\nOnly one catalogued item was recognised; name a second one to compare."
    return GuidanceSection(SectionType.COMPARISON_TABLE, "Comparison", content)


def _pair_differences(
    ctx: GuidanceContext,
    a: Concept | Protocol | Specification,
    b: Concept | Protocol | Specification,
) -> list[str]:
    name_a, name_b = _item_name(a), _item_name(b)
    lines: list[str] = []
    if isinstance(a, Concept) and isinstance(b, Concept):
        if a.evolution_from == b.name:
            lines.append(f"{name_a} evolved from {name_b}")
        elif b.evolution_from == a.name:
            lines.append(f"{name_b} evolved from {name_a}")
        if a.category != b.category:
            lines.append(f"{name_a} is a {a.category.lower()} concept; {name_b} is {b.category.lower()}")
    if isinstance(a, Specification) and isinstance(b, Specification):
        for rel in ctx.knowledge_base.get_relationships(a.id):
            if rel.target == b.id:
                lines.append(f"{a.id} {rel.kind.value.replace('_', ' ')} {b.id}")
        if a.working_group != b.working_group:
            lines.append(f"Owned by different working groups: {a.working_group} vs {b.working_group}")
        if ctx.profile.show_details:
            only_a = [t for t in a.key_topics if t not in b.key_topics]
            if only_a:
                lines.append(f"Covered only by {a.id}: {', '.join(only_a)}")
    if not lines:
        lines.append(f"{name_a} and {name_b} address different parts of the system; read both scopes")
    return lines


def build_differences(ctx: GuidanceContext) -> GuidanceSection:
    items = compared_items(ctx)
    lines: list[str] = []
    for i, a in enumerate(items):
        for b in items[i + 1:]:
            lines.extend(_pair_differences(ctx, a, b))
    if not lines:
        lines.append(
            "Compare scope clauses first, then procedures, then the release each "
            "feature was introduced in"
        )
    if ctx.profile.show_intro:
        lines.insert(0, "Look at what problem each item solves before comparing details")
    return GuidanceSection(SectionType.DIFFERENCES, "Key Differences", _bullets(lines))


# =============================================================================
# Optional sections
# =============================================================================


def build_search_strategy(ctx: GuidanceContext) -> GuidanceSection:
    pattern = ctx.search_pattern
    if pattern is None:
        return GuidanceSection(
            SectionType.SEARCH_STRATEGY,
            "Search Strategy",
            _bullets(GENERIC_READING_ORDER),
        )
    lines = [f"Series: {', '.join(pattern.series)}"]
    starting = _known_ids(ctx, pattern.starting_specs)
    if starting:
        lines.append(f"Start with: {', '.join(starting)}")
    if pattern.reading_order:
        lines.append(f"Reading order: {' -> '.join(o.replace('_', ' ') for o in pattern.reading_order)}")
    if ctx.level is UserLevel.EXPERT:
        lines.append(f"Search keywords: {', '.join(pattern.keywords)}")
    else:
        lines.extend(f"Tip: {tip}" for tip in pattern.tips[: 3 if ctx.profile.show_intro else 2])
    return GuidanceSection(SectionType.SEARCH_STRATEGY, "Search Strategy", _bullets(lines))


def build_glossary(ctx: GuidanceContext) -> GuidanceSection:
    entries: dict[str, str] = {}
    for concept in ctx.concepts:
        entries.setdefault(concept.name, concept.full_name)
    for protocol in ctx.protocols:
        entries.setdefault(protocol.name, protocol.full_name)
    spec_ids = {s.id for s in ctx.specs}
    for concept in ctx.knowledge_base.concepts():
        if len(entries) >= ctx.profile.glossary_terms:
            break
        if spec_ids.intersection(concept.specifications):
            entries.setdefault(concept.name, concept.full_name)
    basics = {
        "TS": "Technical Specification, the 3GPP document type",
        "Working Group": "The 3GPP sub-committee that owns a specification",
        "Release": "A frozen, versioned set of 3GPP features",
    }
    for term, meaning in basics.items():
        if len(entries) >= ctx.profile.glossary_terms:
            break
        entries.setdefault(term, meaning)
    shown = list(entries.items())[: ctx.profile.glossary_terms]
    return GuidanceSection(
        SectionType.GLOSSARY,
        "Glossary",
        _bullets(f"**{term}**: {meaning}" for term, meaning in shown),
    )


def build_technical_detail(ctx: GuidanceContext) -> GuidanceSection:
    limit = ctx.profile.technical_notes
    lines: list[str] = []
    for spec in ctx.specs:
        if spec.evolution_notes:
            lines.append(f"{spec.id}: {spec.evolution_notes}")
        for rel in ctx.knowledge_base.get_relationships(spec.id):
            if ctx.knowledge_base.get_specification(rel.target) is not None:
                lines.append(f"{spec.id} {rel.kind.value.replace('_', ' ')} {rel.target} (strength {rel.strength:.2f})")
    for protocol in ctx.protocols:
        for procedure in protocol.procedures:
            if procedure.debugging_tips:
                lines.append(f"{protocol.name} {procedure.name} debugging: {', '.join(procedure.debugging_tips)}")
    lines = list(dict.fromkeys(lines))
    if limit is not None:
        lines = lines[:limit]
    if not lines:
        lines.append("No further technical detail is catalogued for this question")
    return GuidanceSection(SectionType.TECHNICAL_DETAIL, "Technical Detail", _bullets(lines))


# Intent -> required sections, in order
SECTION_BUILDERS: dict[QueryIntent, tuple[SectionBuilder, ...]] = {
    QueryIntent.DISCOVERY: (build_overview, build_specification_list, build_related_topics_section),
    QueryIntent.LEARNING: (build_overview, build_concept_explanation, build_learning_path),
    QueryIntent.IMPLEMENTATION: (build_overview, build_requirements, build_implementation_steps, build_pitfalls),
    QueryIntent.COMPARISON: (build_overview, build_comparison_table, build_differences),
}


def optional_builders(ctx: GuidanceContext) -> list[SectionBuilder]:
    """Sections appended after the required ones, by match and user level."""
    builders: list[SectionBuilder] = []
    if ctx.search_pattern is not None:
        builders.append(build_search_strategy)
    if ctx.profile.glossary_terms:
        builders.append(build_glossary)
    if ctx.profile.technical_notes != 0:
        builders.append(build_technical_detail)
    return builders
