"""
Relevance Ranking for 3GPP Specifications.

Scoring (per candidate specification, against one topic string):

    score = 3 × |key topics equal to a topic token|
          + 2 × |search keywords containing a topic token|
          + 1 × [title contains the topic]

Topic tokens are the lower-cased words of the topic (underscores read as
spaces, stop words dropped) plus the whole normalized topic phrase, so that
"session_management" matches the key topic "Session Management" exactly.

Results are ordered by descending score, ties by ascending specification id.
Candidates scoring 0 are never returned.

Architecture:
    RelevanceRanker is stateless. One instance is shared by the knowledge
    base and the guidance generator.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from tgpp_guidance.domain.entities.knowledge import Specification

# Match weights
KEY_TOPIC_WEIGHT = 3
SEARCH_KEYWORD_WEIGHT = 2
TITLE_WEIGHT = 1

_MIN_TOKEN_LENGTH = 2
_TOKEN_PATTERN = re.compile(r"[a-z0-9]+(?:[-/][a-z0-9]+)*")

STOP_WORDS = frozenset({
    "a", "an", "the", "of", "for", "and", "or", "in", "on", "to", "is",
    "are", "how", "what", "which", "does", "do", "with", "about", "vs",
    "spec", "specs", "specification", "specifications",
})


def normalize_topic(topic: str) -> str:
    """Lower-case, read underscores as spaces, collapse whitespace."""
    return " ".join(topic.replace("_", " ").lower().split())


def topic_tokens(topic: str) -> tuple[str, ...]:
    """
    Split a topic into match tokens.

    >>> topic_tokens("5G authentication")
    ('5g', 'authentication', '5g authentication')
    """
    normalized = normalize_topic(topic)
    tokens: dict[str, None] = {}
    for word in _TOKEN_PATTERN.findall(normalized):
        if len(word) >= _MIN_TOKEN_LENGTH and word not in STOP_WORDS:
            tokens.setdefault(word, None)
    if tokens and normalized not in STOP_WORDS:
        tokens.setdefault(normalized, None)
    return tuple(tokens)


@dataclass(frozen=True)
class RankedSpecification:
    """A specification with its relevance score."""

    specification: Specification
    score: int

    @property
    def id(self) -> str:
        return self.specification.id


class RelevanceRanker:
    """Score and order specifications against a free-text topic."""

    def score(self, topic: str, spec: Specification) -> int:
        tokens = topic_tokens(topic)
        if not tokens:
            return 0
        token_set = set(tokens)

        key_topic_hits = sum(1 for t in spec.key_topics if t.lower() in token_set)
        keyword_hits = sum(
            1 for kw in spec.search_keywords
            if any(token in kw.lower() for token in tokens)
        )
        normalized = normalize_topic(topic)
        title_hit = 1 if normalized and normalized in spec.title.lower() else 0

        return (
            KEY_TOPIC_WEIGHT * key_topic_hits
            + SEARCH_KEYWORD_WEIGHT * keyword_hits
            + TITLE_WEIGHT * title_hit
        )

    def rank_scored(
        self,
        topic: str,
        candidates: Iterable[Specification],
    ) -> list[RankedSpecification]:
        """Score candidates, drop zeros, order by (-score, id)."""
        scored = [RankedSpecification(spec, self.score(topic, spec)) for spec in candidates]
        return _ordered(scored)

    def rank(self, topic: str, candidates: Iterable[Specification]) -> list[Specification]:
        return [r.specification for r in self.rank_scored(topic, candidates)]

    def rank_many(
        self,
        topics: Iterable[str],
        candidates: Iterable[Specification],
    ) -> list[RankedSpecification]:
        """
        Rank against several topics at once.

        A candidate's score is the sum of its per-topic scores. Duplicate
        candidates (same id) are scored once.
        """
        topic_list = [t for t in dict.fromkeys(topics) if t and t.strip()]
        unique = {spec.id: spec for spec in candidates}
        scored = [
            RankedSpecification(spec, sum(self.score(t, spec) for t in topic_list))
            for spec in unique.values()
        ]
        return _ordered(scored)


def _ordered(scored: list[RankedSpecification]) -> list[RankedSpecification]:
    return sorted(
        (r for r in scored if r.score > 0),
        key=lambda r: (-r.score, r.id),
    )
