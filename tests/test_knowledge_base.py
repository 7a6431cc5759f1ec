"""Tests for application/knowledge/knowledge_base.py."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from tgpp_guidance.domain.entities.knowledge import (
    KnowledgeSnapshot,
    Relationship,
    RelationshipKind,
    Specification,
)
from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase


class TestLookups:
    def test_get_specification(self, knowledge_base):
        spec = knowledge_base.get_specification("TS 33.501")
        assert spec is not None
        assert spec.working_group == "SA3"

    def test_get_specification_miss(self, knowledge_base):
        assert knowledge_base.get_specification("TS 99.999") is None

    def test_get_protocol_case_insensitive(self, knowledge_base):
        assert knowledge_base.get_protocol("nas").name == "NAS"
        assert knowledge_base.get_protocol("Diameter").name == "DIAMETER"
        assert knowledge_base.get_protocol("SIP") is None

    def test_get_concept_case_insensitive(self, knowledge_base):
        assert knowledge_base.get_concept("suci").name == "SUCI"
        assert knowledge_base.get_concept("5g-aka").name == "5G-AKA"
        assert knowledge_base.get_concept("GUTI") is None

    def test_get_pattern(self, knowledge_base):
        pattern = knowledge_base.get_pattern("Security Analysis")
        assert pattern is not None
        assert pattern.steps
        assert knowledge_base.get_pattern("Astrology") is None

    def test_get_procedure(self, knowledge_base):
        assert knowledge_base.get_procedure("NAS", "registration").name == "Registration"
        assert knowledge_base.get_procedure("NAS", "Teleportation") is None
        assert knowledge_base.get_procedure("SIP", "Registration") is None

    def test_existing_specifications_drops_unknown_and_duplicates(self, knowledge_base):
        specs = knowledge_base.existing_specifications(
            ["TS 99.999", "TS 33.501", "TS 33.501", "TS 24.501"]
        )
        assert [s.id for s in specs] == ["TS 33.501", "TS 24.501"]

    def test_stats(self, knowledge_base):
        stats = knowledge_base.stats()
        assert stats["specifications"] == 18
        assert stats["research_patterns"] == 7
        assert stats["relationships"] > 0


class TestRelationships:
    def test_forward_edge(self, knowledge_base):
        edges = knowledge_base.get_relationships("TS 24.501")
        assert any(r.target == "TS 33.501" and r.kind is RelationshipKind.USES for r in edges)

    def test_reverse_edge_for_uses(self, knowledge_base):
        edges = knowledge_base.get_relationships("TS 33.501")
        reverse = [r for r in edges if r.target == "TS 24.501"]
        assert len(reverse) == 1
        assert reverse[0].kind is RelationshipKind.DEFINES
        assert reverse[0].strength == pytest.approx(0.9 * 0.8)

    def test_no_reverse_edge_for_extends(self, knowledge_base):
        edges = knowledge_base.get_relationships("TS 24.301")
        assert not any(r.target == "TS 24.501" for r in edges)

    def test_unknown_spec_has_no_edges(self, knowledge_base):
        assert knowledge_base.get_relationships("TS 99.999") == ()


class TestTopicLookups:
    def test_suggest_blank_topic(self, knowledge_base):
        assert knowledge_base.suggest_specifications_for_topic("") == []
        assert knowledge_base.suggest_specifications_for_topic("   ") == []

    def test_suggest_no_match(self, knowledge_base):
        assert knowledge_base.suggest_specifications_for_topic("zzzz qqqq") == []

    def test_suggest_authentication(self, knowledge_base):
        ids = [s.id for s in knowledge_base.suggest_specifications_for_topic("authentication")]
        assert "TS 33.501" in ids
        assert "TS 24.501" in ids

    def test_suggest_is_deterministic(self, knowledge_base):
        first = knowledge_base.suggest_specifications_for_topic("5G charging")
        second = knowledge_base.suggest_specifications_for_topic("5G charging")
        assert first == second

    def test_rank_specifications_scores_descend(self, knowledge_base):
        ranked = knowledge_base.rank_specifications(["charging", "CHF"])
        assert ranked
        scores = [r.score for r in ranked]
        assert scores == sorted(scores, reverse=True)
        assert all(r.score > 0 for r in ranked)

    def test_related_specifications(self, knowledge_base):
        ids = [s.id for s in knowledge_base.get_related_specifications("TS 24.501")]
        assert "TS 33.501" in ids
        assert "TS 24.501" not in ids

    def test_related_specifications_unknown(self, knowledge_base):
        assert knowledge_base.get_related_specifications("TS 99.999") == []

    def test_implementation_guidance_has_notes(self, knowledge_base):
        specs = knowledge_base.get_implementation_guidance_for_topic("authentication")
        assert specs
        assert all(s.implementation_notes for s in specs)


class TestSearchPatterns:
    def test_exact_domain(self, knowledge_base):
        assert knowledge_base.get_search_pattern_for_domain("authentication").domain == "authentication"

    def test_case_insensitive(self, knowledge_base):
        assert knowledge_base.get_search_pattern_for_domain("Charging").domain == "charging"

    def test_keyword_fallback(self, knowledge_base):
        assert knowledge_base.get_search_pattern_for_domain("handover").domain == "mobility"

    def test_miss(self, knowledge_base):
        assert knowledge_base.get_search_pattern_for_domain("astrology") is None
        assert knowledge_base.get_search_pattern_for_domain("") is None


class TestSnapshotConstruction:
    def test_from_snapshot(self):
        spec = Specification(
            id="TS 24.501",
            series="24",
            title="5G NAS",
            working_group="CT1",
            purpose="NAS",
            key_topics=("Registration",),
        )
        kb = KnowledgeBase(
            KnowledgeSnapshot(
                specifications=(spec,),
                relationships=(Relationship("TS 24.501", "TS 33.501", RelationshipKind.REFERENCES, 0.5),),
            )
        )
        assert kb.get_specification("TS 24.501") is spec
        assert kb.suggest_specifications_for_topic("registration") == [spec]
        assert kb.get_relationships("TS 33.501")[0].kind is RelationshipKind.REFERENCES

    def test_collections_are_tuples(self, knowledge_base):
        assert isinstance(knowledge_base.specifications(), tuple)
        assert isinstance(knowledge_base.concepts(), tuple)


class TestConcurrentReads:
    def test_parallel_reads_match_sequential(self, knowledge_base):
        topics = ["authentication", "charging", "handover", "NAS", "policy control", "RRC"] * 5
        expected = [knowledge_base.suggest_specifications_for_topic(t) for t in topics]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(knowledge_base.suggest_specifications_for_topic, topics))
        assert results == expected
