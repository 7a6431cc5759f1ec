"""
GuidanceEngine - The two public operations of the guidance core.

    analyze_query(query)                  -> QueryAnalysis
    generate_guidance(query, analysis?)   -> Guidance

Both operations are synchronous and read only the injected, immutable
knowledge base, so one engine serves any number of concurrent requests.
"""

from __future__ import annotations

import logging

from tgpp_guidance.application.guidance.generator import GuidanceGenerator
from tgpp_guidance.application.search.query_analyzer import QueryAnalyzer
from tgpp_guidance.domain.entities.guidance import (
    Guidance,
    Query,
    QueryAnalysis,
    UserLevel,
)

logger = logging.getLogger(__name__)


class GuidanceEngine:
    """Facade over QueryAnalyzer and GuidanceGenerator."""

    def __init__(self, analyzer: QueryAnalyzer, generator: GuidanceGenerator) -> None:
        self._analyzer = analyzer
        self._generator = generator

    def analyze_query(self, query: Query | str, user_level: UserLevel | str | None = None) -> QueryAnalysis:
        """
        Classify a query.

        Raises:
            EmptyQueryError: query text is empty or whitespace only
            InvalidParameterError: unknown user level
        """
        return self._analyzer.analyze(_as_query(query, user_level))

    def generate_guidance(
        self,
        query: Query | str,
        analysis: QueryAnalysis | None = None,
        user_level: UserLevel | str | None = None,
    ) -> Guidance:
        """
        Produce guidance for ``query``.

        When ``analysis`` is omitted the query is analyzed first, so the
        same errors as ``analyze_query`` apply.
        """
        query = _as_query(query, user_level)
        if analysis is None:
            analysis = self._analyzer.analyze(query)
        logger.info(
            "Guidance request: intent=%s domain=%s level=%s",
            analysis.intent.value,
            analysis.domain,
            analysis.user_level.value,
        )
        return self._generator.generate(query, analysis)


def _as_query(query: Query | str, user_level: UserLevel | str | None) -> Query:
    if isinstance(query, Query):
        if user_level is None:
            return query
        return Query(query.text, user_level)
    return Query(query, user_level)
