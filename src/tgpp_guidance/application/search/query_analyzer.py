"""
QueryAnalyzer - Heuristic Classification of 3GPP Questions

This module analyzes a free-text question to determine:
1. Intent (discovery, learning, implementation, comparison)
2. Technical domain (authentication, mobility, charging, ...)
3. Recognised concepts (NAS, SUCI, 5G-AKA, TS 33.501, ...)
4. A complexity estimate
5. The resolved user level

Architecture Decision:
    Intent and domain are decided by ordered, data-driven rule tables rather
    than nested conditionals. Each rule can be tested on its own and new
    rules are added by editing a table.

    QueryAnalyzer is stateless and purely local. When a KnowledgeBase is
    supplied, acronym-style concept and protocol names from the catalogue
    extend the built-in term dictionary.

Example:
    >>> analyzer = QueryAnalyzer()
    >>> result = analyzer.analyze(Query("compare 5G-AKA vs EPS-AKA authentication procedures"))
    >>> result.intent, result.domain, result.concepts
    (<QueryIntent.COMPARISON: 'comparison'>, 'authentication', ('5G-AKA', 'EPS-AKA'))
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from tgpp_guidance.core.exceptions import EmptyQueryError
from tgpp_guidance.domain.entities.guidance import (
    Query,
    QueryAnalysis,
    QueryIntent,
    UserLevel,
)

if TYPE_CHECKING:
    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase


GENERAL_DOMAIN = "general"
DEFAULT_USER_LEVEL = UserLevel.INTERMEDIATE


@lru_cache(maxsize=None)
def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    """Whole-word / whole-phrase matcher; hyphens and punctuation are boundaries."""
    return re.compile(r"(?<![a-z0-9])" + re.escape(phrase) + r"(?![a-z0-9])")


@dataclass(frozen=True)
class IntentRule:
    """Maps trigger phrases to an intent. Rules are evaluated in table order."""

    intent: QueryIntent
    triggers: tuple[str, ...]

    def matches(self, text: str) -> bool:
        return any(_phrase_pattern(t).search(text) for t in self.triggers)


@dataclass(frozen=True)
class DomainRule:
    """
    Maps keywords to a domain.

    ``fallback`` rules are only considered when no specific rule matched,
    so "NAS authentication" resolves to authentication, not protocol.
    """

    domain: str
    keywords: tuple[str, ...]
    fallback: bool = False

    def longest_match(self, text: str) -> int:
        """Length of the longest keyword found in ``text`` (0 if none)."""
        return max(
            (len(kw) for kw in self.keywords if _phrase_pattern(kw).search(text)),
            default=0,
        )


# Comparison is checked first: comparison questions often also say
# "explain" or "understand".
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(QueryIntent.COMPARISON, (
        "compare", "comparing", "comparison", "vs", "versus",
        "difference between", "differences between", "contrast", "choose between",
    )),
    IntentRule(QueryIntent.IMPLEMENTATION, (
        "implement", "implementing", "implementation", "build", "building",
        "develop", "developing", "code", "coding", "deploy", "deploying",
        "how to build",
    )),
    IntentRule(QueryIntent.LEARNING, (
        "explain", "how does", "how do", "understand", "learn about", "learn",
        "what is", "what are", "tutorial", "guide me",
    )),
    IntentRule(QueryIntent.DISCOVERY, (
        "find", "search", "specifications for", "what specs", "which spec",
        "which specs", "locate", "identify", "list",
    )),
)

DOMAIN_RULES: tuple[DomainRule, ...] = (
    DomainRule("authentication", (
        "authentication", "authenticate", "auth", "aka", "5g-aka", "eps-aka",
        "identity", "supi", "ausf", "privacy",
    )),
    DomainRule("security", (
        "security", "encryption", "cipher", "ciphering", "integrity", "suci",
        "key derivation", "crypto",
    )),
    DomainRule("mobility", (
        "handover", "mobility", "tracking area", "roaming", "cell reselection",
    )),
    DomainRule("session_management", (
        "session management", "pdu session", "bearer", "qos flow", "qos",
    )),
    DomainRule("charging", (
        "charging", "billing", "chf", "cdr", "rating", "quota", "ocs",
    )),
    DomainRule("policy_charging", (
        "policy control", "pcf", "pcrf",
    )),
    DomainRule("architecture", (
        "architecture", "network function", "service based", "sba",
        "network slicing",
    )),
    DomainRule("radio", (
        "radio", "beam", "mimo", "physical layer",
    )),
    DomainRule("protocol", (
        "protocol", "nas", "rrc", "pdcp", "signaling", "signalling", "message",
    ), fallback=True),
)

# Case-sensitive term dictionary. Hyphenated entries are compounds and win
# over their parts.
KNOWN_TERMS: frozenset[str] = frozenset({
    # Protocols
    "NAS", "RRC", "PDCP", "RLC",
    # Security and identity
    "AKA", "5G-AKA", "EPS-AKA", "SUCI", "SUPI", "IMSI", "GUTI",
    # Network functions
    "AMF", "SMF", "UPF", "AUSF", "UDM", "SEAF", "CHF", "PCF", "PCRF",
    "OCS", "OFCS", "CDR",
    # Generations and systems
    "5G", "4G", "3G", "LTE", "NR", "EPS", "5GS", "5GC", "EPC",
    # Session
    "QoS", "PDU",
})

_CONCEPT_TOKEN_PATTERN = re.compile(
    r"(?P<spec>\b[Tt][Ss]\s*(?P<series>\d{2})\.(?P<number>\d{3})\b)"
    r"|(?P<token>[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*)"
)

# Complexity weights
_COMPLEXITY_BASE = 0.1
_COMPLEXITY_PER_CONCEPT = 0.1
_COMPLEXITY_LENGTH_CAP = 0.3
_COMPLEXITY_WORDS_PER_UNIT = 50
INTENT_COMPLEXITY: dict[QueryIntent, float] = {
    QueryIntent.COMPARISON: 0.3,
    QueryIntent.IMPLEMENTATION: 0.25,
    QueryIntent.LEARNING: 0.1,
    QueryIntent.DISCOVERY: 0.05,
}


def score_complexity(word_count: int, concept_count: int, intent: QueryIntent) -> float:
    """
    Complexity in (0, 1].

    Non-decreasing in concept count for a fixed intent and length;
    comparison and implementation outweigh learning and discovery.
    """
    length_term = min(word_count / _COMPLEXITY_WORDS_PER_UNIT, _COMPLEXITY_LENGTH_CAP)
    raw = (
        _COMPLEXITY_BASE
        + INTENT_COMPLEXITY[intent]
        + _COMPLEXITY_PER_CONCEPT * concept_count
        + length_term
    )
    return round(min(raw, 1.0), 3)


def normalize_text(text: str) -> str:
    return " ".join(text.replace("_", " ").lower().split())


class QueryAnalyzer:
    """
    Classify a Query into a QueryAnalysis.

    Usage:
        analyzer = QueryAnalyzer(knowledge_base)
        analysis = analyzer.analyze(Query("explain how NAS protocol works"))

        analysis.intent   # QueryIntent.LEARNING
        analysis.domain   # "protocol"
        analysis.concepts # ("NAS",)
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBase | None = None,
        intent_rules: tuple[IntentRule, ...] = INTENT_RULES,
        domain_rules: tuple[DomainRule, ...] = DOMAIN_RULES,
    ) -> None:
        self._intent_rules = intent_rules
        self._domain_rules = domain_rules
        self._terms = KNOWN_TERMS | self._catalogue_terms(knowledge_base)

    @staticmethod
    def _catalogue_terms(knowledge_base: KnowledgeBase | None) -> frozenset[str]:
        """Acronym-style single-token names from the catalogue (SUCI, DIAMETER, ...)."""
        if knowledge_base is None:
            return frozenset()
        names = [c.name for c in knowledge_base.concepts()]
        names += [p.name for p in knowledge_base.protocols()]
        return frozenset(
            name for name in names
            if " " not in name and name.upper() == name
        )

    def analyze(self, query: Query | str) -> QueryAnalysis:
        """
        Analyze a query.

        Raises:
            EmptyQueryError: query text is empty or whitespace only
        """
        if isinstance(query, str):
            query = Query(query)
        text = query.text
        if not text or not text.strip():
            raise EmptyQueryError(text)

        normalized = normalize_text(text)
        intent = self._detect_intent(normalized)
        domain = self._detect_domain(normalized)
        concepts = self._extract_concepts(text)
        complexity = score_complexity(len(normalized.split()), len(concepts), intent)

        return QueryAnalysis(
            intent=intent,
            domain=domain,
            concepts=concepts,
            complexity=complexity,
            user_level=query.user_level or DEFAULT_USER_LEVEL,
        )

    def _detect_intent(self, text: str) -> QueryIntent:
        for rule in self._intent_rules:
            if rule.matches(text):
                return rule.intent
        return QueryIntent.DISCOVERY

    def _detect_domain(self, text: str) -> str:
        best_domain = GENERAL_DOMAIN
        best_length = 0
        for rule in self._domain_rules:
            if rule.fallback:
                continue
            length = rule.longest_match(text)
            if length > best_length:
                best_domain, best_length = rule.domain, length
        if best_length:
            return best_domain

        for rule in self._domain_rules:
            if rule.fallback and rule.longest_match(text):
                return rule.domain
        return GENERAL_DOMAIN

    def _extract_concepts(self, text: str) -> tuple[str, ...]:
        found: dict[str, None] = {}
        for match in _CONCEPT_TOKEN_PATTERN.finditer(text):
            if match.group("spec"):
                found.setdefault(f"TS {match.group('series')}.{match.group('number')}", None)
                continue
            token = match.group("token")
            if token in self._terms:
                found.setdefault(token, None)
            elif "-" in token:
                for part in token.split("-"):
                    if part in self._terms:
                        found.setdefault(part, None)
        return tuple(found)


# Convenience function
def analyze_query(query: Query | str) -> QueryAnalysis:
    """
    Analyze a query without a knowledge base (convenience function).

    Args:
        query: Query or raw question text

    Returns:
        QueryAnalysis with analysis results
    """
    analyzer = QueryAnalyzer()
    return analyzer.analyze(query)
