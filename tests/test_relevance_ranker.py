"""Tests for application/search/relevance_ranker.py."""

from __future__ import annotations

import random

import pytest

from tgpp_guidance.application.search.relevance_ranker import (
    RelevanceRanker,
    normalize_topic,
    topic_tokens,
)
from tgpp_guidance.domain.entities.knowledge import Specification


def make_spec(spec_id: str, title: str = "Untitled", key_topics=(), keywords=()) -> Specification:
    return Specification(
        id=spec_id,
        series=spec_id.split()[1].split(".")[0],
        title=title,
        working_group="CT1",
        purpose="test",
        key_topics=tuple(key_topics),
        search_keywords=tuple(keywords),
    )


@pytest.fixture
def candidates() -> list[Specification]:
    return [
        make_spec("TS 99.002", keywords=["inter-RAT handover"]),
        make_spec("TS 99.001", title="Mobility handover", key_topics=["Handover"], keywords=["handover procedure", "HO"]),
        make_spec("TS 99.003", title="Charging", key_topics=["CDR"]),
        make_spec("TS 99.000", keywords=["Handover"]),
    ]


class TestTopicTokens:
    def test_words_and_phrase(self):
        assert topic_tokens("5G authentication") == ("5g", "authentication", "5g authentication")

    def test_single_word_not_duplicated(self):
        assert topic_tokens("Authentication") == ("authentication",)

    def test_underscores_read_as_spaces(self):
        assert "session management" in topic_tokens("session_management")

    def test_stop_words_dropped(self):
        assert topic_tokens("the specs for NAS") == ("nas", "the specs for nas")

    def test_only_stop_words(self):
        assert topic_tokens("the of") == ()

    def test_normalize_topic(self):
        assert normalize_topic("  PDU_Session  Setup ") == "pdu session setup"


class TestScore:
    def test_weights(self, candidates):
        ranker = RelevanceRanker()
        by_id = {s.id: s for s in candidates}
        # key topic 3 + one keyword 2 + title 1
        assert ranker.score("handover", by_id["TS 99.001"]) == 6
        assert ranker.score("handover", by_id["TS 99.002"]) == 2
        assert ranker.score("handover", by_id["TS 99.003"]) == 0

    def test_key_topic_requires_exact_match(self):
        spec = make_spec("TS 99.010", key_topics=["Session Management"])
        ranker = RelevanceRanker()
        assert ranker.score("session", spec) == 0
        assert ranker.score("session_management", spec) == 3

    def test_empty_topic_scores_zero(self, candidates):
        assert RelevanceRanker().score("", candidates[0]) == 0


class TestRank:
    def test_order_and_tie_break(self, candidates):
        ranked = RelevanceRanker().rank("handover", candidates)
        assert [s.id for s in ranked] == ["TS 99.001", "TS 99.000", "TS 99.002"]

    def test_zero_scores_excluded(self, candidates):
        ranked = RelevanceRanker().rank("handover", candidates)
        assert "TS 99.003" not in {s.id for s in ranked}

    def test_no_match(self, candidates):
        assert RelevanceRanker().rank("astrology", candidates) == []

    def test_deterministic_regardless_of_input_order(self, candidates):
        ranker = RelevanceRanker()
        expected = ranker.rank("handover", candidates)
        shuffled = list(candidates)
        for seed in range(5):
            random.Random(seed).shuffle(shuffled)
            assert ranker.rank("handover", shuffled) == expected

    def test_rank_scored(self, candidates):
        scored = RelevanceRanker().rank_scored("handover", candidates)
        assert [(r.id, r.score) for r in scored] == [("TS 99.001", 6), ("TS 99.000", 2), ("TS 99.002", 2)]


class TestRankMany:
    def test_scores_are_summed(self, candidates):
        ranked = RelevanceRanker().rank_many(["handover", "CDR"], candidates)
        scores = {r.id: r.score for r in ranked}
        assert scores["TS 99.001"] == 6
        assert scores["TS 99.003"] == 3

    def test_duplicate_candidates_scored_once(self, candidates):
        ranked = RelevanceRanker().rank_many(["handover"], candidates + candidates)
        assert len(ranked) == 3

    def test_blank_and_repeated_topics_ignored(self, candidates):
        ranker = RelevanceRanker()
        once = ranker.rank_many(["handover"], candidates)
        assert ranker.rank_many(["handover", "handover", "", "  "], candidates) == once

    def test_no_topics(self, candidates):
        assert RelevanceRanker().rank_many([], candidates) == []
