"""Tests for application/guidance/engine.py."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from tgpp_guidance.core.exceptions import EmptyQueryError, InvalidParameterError
from tgpp_guidance.domain.entities.guidance import Query, QueryIntent, UserLevel


class TestAnalyzeQuery:
    def test_accepts_text(self, engine):
        assert engine.analyze_query("explain how NAS protocol works").intent is QueryIntent.LEARNING

    def test_accepts_query(self, engine):
        analysis = engine.analyze_query(Query("explain how NAS protocol works", "beginner"))
        assert analysis.user_level is UserLevel.BEGINNER

    def test_level_argument_overrides_query_level(self, engine):
        analysis = engine.analyze_query(Query("what is SUCI", "beginner"), "expert")
        assert analysis.user_level is UserLevel.EXPERT

    def test_empty_query_propagates(self, engine):
        with pytest.raises(EmptyQueryError):
            engine.analyze_query("  ")

    def test_invalid_level(self, engine):
        with pytest.raises(InvalidParameterError):
            engine.analyze_query("what is SUCI", "guru")


class TestGenerateGuidance:
    def test_analyzes_when_no_analysis_given(self, engine):
        guidance = engine.generate_guidance("find specifications for 5G authentication")
        assert guidance.type == "guidance"
        assert guidance.confidence > 0.5

    def test_uses_supplied_analysis(self, engine):
        analysis = engine.analyze_query("compare 5G-AKA vs EPS-AKA authentication procedures")
        with_analysis = engine.generate_guidance("compare 5G-AKA vs EPS-AKA authentication procedures", analysis)
        without = engine.generate_guidance("compare 5G-AKA vs EPS-AKA authentication procedures")
        assert with_analysis == without

    def test_level_changes_output(self, engine):
        beginner = engine.generate_guidance("explain how NAS protocol works", user_level="beginner")
        expert = engine.generate_guidance("explain how NAS protocol works", user_level="expert")
        assert beginner.summary != expert.summary

    def test_empty_query_propagates(self, engine):
        with pytest.raises(EmptyQueryError):
            engine.generate_guidance("")

    def test_logs_request(self, engine, caplog):
        with caplog.at_level("INFO", logger="tgpp_guidance.application.guidance.engine"):
            engine.generate_guidance("explain how NAS protocol works")
        assert "intent=learning" in caplog.text


class TestConcurrency:
    def test_parallel_requests_match_sequential(self, engine):
        queries = [
            "find specifications for 5G authentication",
            "explain how NAS protocol works",
            "implement SUCI encryption for identity protection",
            "compare 5G-AKA vs EPS-AKA authentication procedures",
        ] * 4
        expected = [engine.generate_guidance(q) for q in queries]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(engine.generate_guidance, queries))
        assert results == expected
