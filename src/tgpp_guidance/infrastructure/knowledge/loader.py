"""
KnowledgeLoader - Read the 3GPP catalogue from YAML files.

Storage model (one file per record kind, each a YAML dict with one list):
- specifications.yaml   -> {"specifications": [...]}
- protocols.yaml        -> {"protocols": [...]}
- concepts.yaml         -> {"concepts": [...]}
- research_patterns.yaml -> {"patterns": [...]}
- search_patterns.yaml  -> {"search_patterns": [...]}
- relationships.yaml    -> {"relationships": [...]}

The bundled data directory is used unless a different one is configured
(``TGPP_DATA_DIR`` / ``data_dir`` in the container config). Any missing file,
malformed YAML, missing required field, malformed specification id or
duplicate name raises KnowledgeLoadError so that a broken catalogue fails at
start-up instead of at request time.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

from tgpp_guidance.core.exceptions import KnowledgeLoadError
from tgpp_guidance.domain.entities.knowledge import (
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

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent / "data"

T = TypeVar("T")

SPEC_ID_PATTERN = re.compile(r"^TS \d{2}\.\d{3}$")


def _strings(value: Any) -> tuple[str, ...]:
    """Normalize a YAML list (or None) into a de-duplicated tuple of strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    seen: dict[str, None] = {}
    for item in value:
        seen.setdefault(str(item), None)
    return tuple(seen)


def _require(raw: dict[str, Any], key: str, kind: str) -> str:
    value = raw.get(key)
    if value is None or str(value).strip() == "":
        msg = f"{kind} entry is missing required field '{key}': {raw!r}"
        raise KnowledgeLoadError(msg)
    return str(value)


def _mappings(value: Any, kind: str) -> list[dict[str, Any]]:
    """Nested record list; every item must be a YAML mapping."""
    items = value or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        msg = f"{kind} entries must be a list of mappings: {value!r}"
        raise KnowledgeLoadError(msg)
    return items


# =============================================================================
# Record parsers
# =============================================================================


def parse_specification(raw: dict[str, Any]) -> Specification:
    spec_id = _require(raw, "id", "Specification")
    if not SPEC_ID_PATTERN.match(spec_id):
        msg = f"Specification id must look like 'TS 33.501': {spec_id!r}"
        raise KnowledgeLoadError(msg)
    return Specification(
        id=spec_id,
        series=str(raw.get("series") or spec_id.split()[-1].split(".")[0]),
        title=_require(raw, "title", "Specification"),
        working_group=_require(raw, "working_group", "Specification"),
        purpose=_require(raw, "purpose", "Specification"),
        key_topics=_strings(raw.get("key_topics")),
        search_keywords=_strings(raw.get("search_keywords")),
        dependencies=_strings(raw.get("dependencies")),
        implementation_notes=_strings(raw.get("implementation_notes")),
        release=raw.get("release"),
        related_specs=_strings(raw.get("related_specs")),
        common_questions=_strings(raw.get("common_questions")),
        evolution_notes=raw.get("evolution_notes"),
    )


def parse_procedure(raw: dict[str, Any]) -> Procedure:
    return Procedure(
        name=_require(raw, "name", "Procedure"),
        description=str(raw.get("description", "")),
        trigger_conditions=_strings(raw.get("trigger_conditions")),
        key_steps=_strings(raw.get("key_steps")),
        related_procedures=_strings(raw.get("related_procedures")),
        common_issues=_strings(raw.get("common_issues")),
        debugging_tips=_strings(raw.get("debugging_tips")),
    )


def parse_protocol(raw: dict[str, Any]) -> Protocol:
    return Protocol(
        name=_require(raw, "name", "Protocol").upper(),
        full_name=_require(raw, "full_name", "Protocol"),
        layer=_require(raw, "layer", "Protocol"),
        purpose=_require(raw, "purpose", "Protocol"),
        defining_specs=_strings(raw.get("defining_specs")),
        related_protocols=_strings(raw.get("related_protocols")),
        procedures=tuple(parse_procedure(p) for p in _mappings(raw.get("procedures"), "Procedure")),
        common_use_cases=_strings(raw.get("common_use_cases")),
        troubleshooting_areas=_strings(raw.get("troubleshooting_areas")),
    )


def parse_concept(raw: dict[str, Any]) -> Concept:
    return Concept(
        name=_require(raw, "name", "Concept"),
        full_name=_require(raw, "full_name", "Concept"),
        category=_require(raw, "category", "Concept"),
        description=str(raw.get("description", "")),
        purpose=str(raw.get("purpose", "")),
        related_concepts=_strings(raw.get("related_concepts")),
        specifications=_strings(raw.get("specifications")),
        evolution_from=raw.get("evolution_from"),
        usage_context=_strings(raw.get("usage_context")),
    )


def parse_research_pattern(raw: dict[str, Any]) -> ResearchPattern:
    steps = tuple(
        PatternStep(
            phase=_require(step, "phase", "Research pattern step"),
            tasks=_strings(step.get("tasks")),
            deliverables=_strings(step.get("deliverables")),
            tips=_strings(step.get("tips")),
        )
        for step in _mappings(raw.get("steps"), "Research pattern step")
    )
    return ResearchPattern(
        name=_require(raw, "name", "Research pattern"),
        description=_require(raw, "description", "Research pattern"),
        time_estimate=str(raw.get("time_estimate", "")),
        applicable_for=_strings(raw.get("applicable_for")),
        steps=steps,
        expected_outputs=_strings(raw.get("expected_outputs")),
        common_pitfalls=_strings(raw.get("common_pitfalls")),
    )


def parse_search_pattern(raw: dict[str, Any]) -> SearchPattern:
    return SearchPattern(
        domain=_require(raw, "domain", "Search pattern"),
        keywords=_strings(raw.get("keywords")),
        series=_strings(raw.get("series")),
        starting_specs=_strings(raw.get("starting_specs")),
        reading_order=_strings(raw.get("reading_order")),
        common_mistakes=_strings(raw.get("common_mistakes")),
        tips=_strings(raw.get("tips")),
    )


def parse_relationship(raw: dict[str, Any]) -> Relationship:
    kind_value = _require(raw, "kind", "Relationship")
    try:
        kind = RelationshipKind(kind_value)
    except ValueError:
        msg = f"Unknown relationship kind '{kind_value}'"
        raise KnowledgeLoadError(msg) from None
    try:
        strength = float(raw.get("strength", 0.5))
    except (TypeError, ValueError):
        msg = f"Relationship strength must be a number: {raw!r}"
        raise KnowledgeLoadError(msg) from None
    if not 0.0 <= strength <= 1.0:
        msg = f"Relationship strength must be within [0, 1]: {strength}"
        raise KnowledgeLoadError(msg)
    return Relationship(
        source=_require(raw, "source", "Relationship"),
        target=_require(raw, "target", "Relationship"),
        kind=kind,
        strength=strength,
        description=raw.get("description"),
    )


# =============================================================================
# Loader
# =============================================================================


class KnowledgeLoader:
    """Load every catalogue file from one directory into a KnowledgeSnapshot."""

    FILES: dict[str, tuple[str, str]] = {
        # attribute: (file name, top-level key)
        "specifications": ("specifications.yaml", "specifications"),
        "protocols": ("protocols.yaml", "protocols"),
        "concepts": ("concepts.yaml", "concepts"),
        "patterns": ("research_patterns.yaml", "patterns"),
        "search_patterns": ("search_patterns.yaml", "search_patterns"),
        "relationships": ("relationships.yaml", "relationships"),
    }

    PARSERS: dict[str, Callable[[dict[str, Any]], Any]] = {
        "specifications": parse_specification,
        "protocols": parse_protocol,
        "concepts": parse_concept,
        "patterns": parse_research_pattern,
        "search_patterns": parse_search_pattern,
        "relationships": parse_relationship,
    }

    # Lookup key per record kind, matching how KnowledgeBase indexes them
    KEYS: dict[str, Callable[[Any], str]] = {
        "specifications": lambda s: s.id,
        "protocols": lambda p: p.name.upper(),
        "concepts": lambda c: c.name.casefold(),
        "patterns": lambda p: p.name,
        "search_patterns": lambda p: p.domain,
    }

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self._data_dir = Path(data_dir) if data_dir else DEFAULT_DATA_DIR

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _read_entries(self, file_name: str, key: str) -> list[dict[str, Any]]:
        path = self._data_dir / file_name
        if not path.is_file():
            msg = f"Knowledge file not found: {path}"
            raise KnowledgeLoadError(msg, source=file_name)

        try:
            raw_data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise KnowledgeLoadError(str(e), source=file_name) from e

        if not isinstance(raw_data, dict):
            msg = f"'{path}' is not a valid YAML dict"
            raise KnowledgeLoadError(msg, source=file_name)

        entries = raw_data.get(key) or []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            msg = f"'{key}' must be a list of mappings"
            raise KnowledgeLoadError(msg, source=file_name)
        return entries

    def _load_kind(self, attr: str, parser: Callable[[dict[str, Any]], T]) -> tuple[T, ...]:
        file_name, key = self.FILES[attr]
        entries = self._read_entries(file_name, key)
        try:
            records = tuple(parser(entry) for entry in entries)
        except KnowledgeLoadError as e:
            if e.source:
                raise
            raise KnowledgeLoadError(str(e).removeprefix("Knowledge load error: "), source=file_name) from e

        key_of = self.KEYS.get(attr)
        if key_of is not None:
            seen: set[str] = set()
            for record in records:
                record_key = key_of(record)
                if record_key in seen:
                    msg = f"Duplicate {attr} entry: {record_key!r}"
                    raise KnowledgeLoadError(msg, source=file_name)
                seen.add(record_key)
        return records

    def load(self) -> KnowledgeSnapshot:
        """Parse all files. Raises KnowledgeLoadError on the first problem."""
        parts = {attr: self._load_kind(attr, parser) for attr, parser in self.PARSERS.items()}
        snapshot = KnowledgeSnapshot(**parts)
        logger.info(
            "Loaded knowledge from %s: %d specifications, %d protocols, %d concepts, %d patterns",
            self._data_dir,
            len(snapshot.specifications),
            len(snapshot.protocols),
            len(snapshot.concepts),
            len(snapshot.patterns),
        )
        return snapshot


def load_knowledge(data_dir: str | Path | None = None) -> KnowledgeSnapshot:
    """Convenience function: load a snapshot from ``data_dir`` (or bundled data)."""
    return KnowledgeLoader(data_dir).load()
