"""
Search - Query analysis and specification ranking.
"""

from .query_analyzer import (
    DOMAIN_RULES,
    GENERAL_DOMAIN,
    INTENT_RULES,
    DomainRule,
    IntentRule,
    QueryAnalyzer,
    analyze_query,
    score_complexity,
)
from .relevance_ranker import RankedSpecification, RelevanceRanker, topic_tokens

__all__ = [
    "QueryAnalyzer",
    "analyze_query",
    "score_complexity",
    "IntentRule",
    "DomainRule",
    "INTENT_RULES",
    "DOMAIN_RULES",
    "GENERAL_DOMAIN",
    "RelevanceRanker",
    "RankedSpecification",
    "topic_tokens",
]
