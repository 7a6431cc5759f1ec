"""Tests for application/search/query_analyzer.py."""

from __future__ import annotations

import pytest

from tgpp_guidance.application.search.query_analyzer import (
    GENERAL_DOMAIN,
    INTENT_RULES,
    DomainRule,
    IntentRule,
    QueryAnalyzer,
    analyze_query,
    normalize_text,
    score_complexity,
)
from tgpp_guidance.core.exceptions import EmptyQueryError, InvalidParameterError
from tgpp_guidance.domain.entities.guidance import Query, QueryIntent, UserLevel


class TestReferenceQueries:
    """The four reference questions and their expected classification."""

    def test_discovery(self, analyzer):
        result = analyzer.analyze(Query("find specifications for 5G authentication"))
        assert result.intent is QueryIntent.DISCOVERY
        assert result.domain == "authentication"
        assert "5G" in result.concepts

    def test_learning(self, analyzer):
        result = analyzer.analyze(Query("explain how NAS protocol works"))
        assert result.intent is QueryIntent.LEARNING
        assert result.domain == "protocol"
        assert "NAS" in result.concepts

    def test_implementation(self, analyzer):
        result = analyzer.analyze(Query("implement SUCI encryption for identity protection"))
        assert result.intent is QueryIntent.IMPLEMENTATION
        assert result.domain in {"security", "authentication"}
        assert "SUCI" in result.concepts

    def test_comparison(self, analyzer):
        result = analyzer.analyze(Query("compare 5G-AKA vs EPS-AKA authentication procedures"))
        assert result.intent is QueryIntent.COMPARISON
        assert result.domain == "authentication"
        assert len(result.concepts) > 1
        assert result.concepts[:2] == ("5G-AKA", "EPS-AKA")


class TestIntent:
    @pytest.mark.parametrize(
        ("text", "intent"),
        [
            ("what is the difference between NAS and RRC", QueryIntent.COMPARISON),
            ("help me understand 4G versus 5G security", QueryIntent.COMPARISON),
            ("how to build a CHF", QueryIntent.IMPLEMENTATION),
            ("what is SUCI", QueryIntent.LEARNING),
            ("which specs cover handover", QueryIntent.DISCOVERY),
            ("NAS timers", QueryIntent.DISCOVERY),
        ],
    )
    def test_rules(self, analyzer, text, intent):
        assert analyzer.analyze(text).intent is intent

    def test_comparison_checked_first(self):
        assert INTENT_RULES[0].intent is QueryIntent.COMPARISON

    def test_whole_word_triggers(self, analyzer):
        # "code" inside "codec" does not count as implementation
        assert analyzer.analyze("list codec specifications").intent is QueryIntent.DISCOVERY

    def test_custom_rule_table(self):
        rules = (IntentRule(QueryIntent.LEARNING, ("tell me",)),)
        analyzer = QueryAnalyzer(intent_rules=rules)
        assert analyzer.analyze("tell me about NAS").intent is QueryIntent.LEARNING
        assert analyzer.analyze("compare NAS and RRC").intent is QueryIntent.DISCOVERY


class TestDomain:
    @pytest.mark.parametrize(
        ("text", "domain"),
        [
            ("handover between cells", "mobility"),
            ("5G charging with CHF", "charging"),
            ("PDU session establishment", "session_management"),
            ("PCF policy control rules", "policy_charging"),
            ("network slicing architecture", "architecture"),
            ("beam management in NR", "radio"),
            ("RRC message flow", "protocol"),
        ],
    )
    def test_keywords(self, analyzer, text, domain):
        assert analyzer.analyze(text).domain == domain

    def test_specific_domain_beats_protocol_fallback(self, analyzer):
        assert analyzer.analyze("NAS authentication procedure").domain == "authentication"

    def test_longest_keyword_wins(self, analyzer):
        # "encryption" (security) is longer than "identity" (authentication)
        assert analyzer.analyze("identity encryption").domain == "security"

    def test_tie_broken_by_table_order(self):
        rules = (DomainRule("first", ("abc",)), DomainRule("second", ("xyz",)))
        analyzer = QueryAnalyzer(domain_rules=rules)
        assert analyzer.analyze("xyz and abc").domain == "first"

    def test_general_when_nothing_matches(self, analyzer):
        assert analyzer.analyze("hello there").domain == GENERAL_DOMAIN

    def test_auth_is_not_matched_inside_author(self, analyzer):
        assert analyzer.analyze("who is the author").domain == GENERAL_DOMAIN


class TestConcepts:
    def test_first_occurrence_order_without_duplicates(self, analyzer):
        result = analyzer.analyze("SUCI and NAS and SUCI again")
        assert result.concepts == ("SUCI", "NAS")

    def test_compound_wins_over_parts(self, analyzer):
        concepts = analyzer.analyze("how does 5G-AKA work").concepts
        assert concepts == ("5G-AKA",)

    def test_unknown_compound_decomposes(self, analyzer):
        concepts = analyzer.analyze("NAS-RRC interaction").concepts
        assert concepts == ("NAS", "RRC")

    def test_case_sensitive(self, analyzer):
        assert analyzer.analyze("nas rrc").concepts == ()

    def test_spec_ids_normalized(self, analyzer):
        concepts = analyzer.analyze("read ts33.501 and TS 24.501").concepts
        assert concepts == ("TS 33.501", "TS 24.501")

    def test_catalogue_terms_extend_dictionary(self, analyzer):
        assert "DIAMETER" in analyzer.analyze("DIAMETER credit control").concepts
        assert "DIAMETER" not in QueryAnalyzer().analyze("DIAMETER credit control").concepts


class TestComplexity:
    def test_positive_for_any_query(self, analyzer):
        for text in ["a", "NAS", "hello there", "compare 5G-AKA vs EPS-AKA"]:
            assert analyzer.analyze(text).complexity > 0

    def test_bounded(self, analyzer):
        long_query = "compare " + " ".join(["NAS RRC SUCI SUPI AMF SMF UPF"] * 20)
        assert analyzer.analyze(long_query).complexity <= 1.0

    @pytest.mark.parametrize("intent", list(QueryIntent))
    def test_non_decreasing_in_concepts(self, intent):
        scores = [score_complexity(12, n, intent) for n in range(12)]
        assert scores == sorted(scores)

    def test_intent_ordering(self):
        args = (10, 2)
        assert score_complexity(*args, QueryIntent.COMPARISON) > score_complexity(*args, QueryIntent.LEARNING)
        assert score_complexity(*args, QueryIntent.IMPLEMENTATION) > score_complexity(*args, QueryIntent.DISCOVERY)


class TestUserLevelAndErrors:
    def test_default_level(self, analyzer):
        assert analyzer.analyze("what is NAS").user_level is UserLevel.INTERMEDIATE

    def test_supplied_level(self, analyzer):
        assert analyzer.analyze(Query("what is NAS", UserLevel.EXPERT)).user_level is UserLevel.EXPERT

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_query(self, analyzer, text):
        with pytest.raises(EmptyQueryError):
            analyzer.analyze(Query(text))

    def test_invalid_level(self):
        with pytest.raises(InvalidParameterError):
            Query("what is NAS", "guru")


class TestDeterminism:
    def test_same_query_same_analysis(self, analyzer):
        query = Query("compare 5G-AKA vs EPS-AKA authentication procedures", "beginner")
        assert analyzer.analyze(query) == analyzer.analyze(query)

    def test_convenience_function(self):
        result = analyze_query("explain how NAS protocol works")
        assert result.intent is QueryIntent.LEARNING

    def test_normalize_text(self):
        assert normalize_text("  PDU_Session   SETUP ") == "pdu session setup"
