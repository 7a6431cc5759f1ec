"""
Tests for MCP Tools - guidance, specification catalogue and 3GPP structure.
"""

from __future__ import annotations

import json

# ============================================================
# Guidance tools
# ============================================================


class TestAnalyzeQueryTool:
    def test_returns_analysis(self, tool):
        result = json.loads(tool("analyze_query")("explain how NAS protocol works"))
        assert result["query"] == "explain how NAS protocol works"
        assert result["analysis"]["intent"] == "learning"
        assert result["analysis"]["domain"] == "protocol"
        assert "NAS" in result["analysis"]["concepts"]
        assert result["analysis"]["user_level"] == "intermediate"

    def test_user_level(self, tool):
        result = json.loads(tool("analyze_query")("what is SUCI", user_level="expert"))
        assert result["analysis"]["user_level"] == "expert"

    def test_empty_query(self, tool):
        result = tool("analyze_query")("   ")
        assert "Query text cannot be empty" in result
        assert "Suggestion" in result

    def test_invalid_level(self, tool):
        assert "user_level" in tool("analyze_query")("what is SUCI", user_level="guru")


class TestGuideSpecificationSearchTool:
    def test_json_output(self, tool):
        result = json.loads(tool("guide_specification_search")("find specifications for 5G authentication"))
        assert result["analysis"]["intent"] == "discovery"
        guidance = result["guidance"]
        assert guidance["type"] == "guidance"
        assert [s["type"] for s in guidance["sections"]][:3] == [
            "overview",
            "specification_list",
            "related_topics",
        ]
        assert guidance["confidence"] > 0.5
        assert guidance["next_steps"]
        assert guidance["related_topics"]

    def test_markdown_output(self, tool):
        result = tool("guide_specification_search")(
            "explain how NAS protocol works", user_level="beginner", output_format="markdown"
        )
        assert result.startswith("# 3GPP Guidance")
        assert "## Learning Path" in result
        assert "## Glossary" in result
        assert "## Next Steps" in result
        assert "Confidence:" in result

    def test_levels_differ(self, tool):
        guide = tool("guide_specification_search")
        beginner = json.loads(guide("explain how NAS protocol works", user_level="beginner"))
        expert = json.loads(guide("explain how NAS protocol works", user_level="expert"))
        assert beginner["guidance"]["summary"] != expert["guidance"]["summary"]

    def test_invalid_output_format(self, tool):
        result = tool("guide_specification_search")("explain NAS", output_format="xml")
        assert "output_format" in result

    def test_empty_query(self, tool):
        assert "Query text cannot be empty" in tool("guide_specification_search")("")


# ============================================================
# Specification tools
# ============================================================


class TestSearchSpecificationsTool:
    def test_ranked_results(self, tool):
        result = json.loads(tool("search_specifications")("5G charging CHF"))
        assert result["analysis"]["domain"] == "charging"
        assert result["results"]
        scores = [r["score"] for r in result["results"]]
        assert scores == sorted(scores, reverse=True)
        assert result["total_found"] >= len(result["results"])

    def test_mentioned_spec_first(self, tool):
        result = json.loads(tool("search_specifications")("TS 33.501 privacy"))
        first = result["results"][0]
        assert first["id"] == "TS 33.501"
        assert first["score"] is None

    def test_max_results(self, tool):
        result = json.loads(tool("search_specifications")("charging", max_results=2))
        assert len(result["results"]) <= 2

    def test_max_results_out_of_range(self, tool):
        assert "max_results" in tool("search_specifications")("charging", max_results=0)
        assert "max_results" in tool("search_specifications")("charging", max_results=21)

    def test_series_filter(self, tool):
        result = json.loads(tool("search_specifications")("authentication", series_filter="33"))
        assert result["results"]
        assert {r["series"] for r in result["results"]} == {"33"}
        assert result["filters"]["series"] == ["33"]

    def test_release_filter(self, tool):
        result = json.loads(tool("search_specifications")("5G", max_results=20, release_filter=["16"]))
        assert result["results"]
        assert {r["release"] for r in result["results"]} == {"Rel-16"}

    def test_no_match_has_suggestions(self, tool):
        result = json.loads(tool("search_specifications")("zzzz qqqq"))
        assert result["total_found"] == 0
        assert result["results"] == []
        assert result["suggestions"]

    def test_empty_query(self, tool):
        assert "Query text cannot be empty" in tool("search_specifications")(" ")


class TestGetSpecificationDetailsTool:
    def test_details(self, tool):
        result = json.loads(tool("get_specification_details")("33.501"))
        assert result["specification"]["id"] == "TS 33.501"
        assert {d["id"] for d in result["dependencies"]["resolved"]} == {"TS 23.501", "TS 24.501"}
        assert result["dependencies"]["not_catalogued"] == []
        assert result["relationships"]
        assert all(r["id"] != "TS 33.501" for r in result["related_specifications"])

    def test_uncatalogued_dependencies(self, tool):
        result = json.loads(tool("get_specification_details")("TS 38.331"))
        assert result["dependencies"]["resolved"] == []
        assert result["dependencies"]["not_catalogued"] == ["TS 38.300", "TS 38.321"]

    def test_without_dependencies(self, tool):
        result = json.loads(tool("get_specification_details")("TS 24.501", include_dependencies=False))
        assert set(result) == {"specification"}

    def test_not_found_suggests_same_series(self, tool):
        result = tool("get_specification_details")("TS 33.999")
        assert "Specification not found: TS 33.999" in result
        assert "TS 33.401" in result

    def test_technical_report_is_not_the_specification(self, tool):
        result = tool("get_specification_details")("TR 33.501")
        assert "Specification not found: TR 33.501" in result

    def test_not_found_unknown_series(self, tool):
        result = tool("get_specification_details")("TS 99.999")
        assert "not found" in result
        assert "search_specifications" in result


class TestCompareSpecificationsTool:
    def test_compare(self, tool):
        result = json.loads(tool("compare_specifications")(["TS 24.501", "TS 24.301"]))
        assert [s["id"] for s in result["specifications"]] == ["TS 24.501", "TS 24.301"]
        assert result["comparison"]["release"] == {"TS 24.501": "Rel-16", "TS 24.301": "Rel-15"}
        assert result["shared"]["same_working_group"] is True
        assert result["shared"]["same_series"] is True
        assert "authentication" in result["shared"]["key_topics"]
        assert any(
            r["source"] == "TS 24.501" and r["target"] == "TS 24.301" and r["kind"] == "extends"
            for r in result["direct_relationships"]
        )

    def test_string_ids(self, tool):
        result = json.loads(tool("compare_specifications")("24.501, 33.501"))
        assert [s["id"] for s in result["specifications"]] == ["TS 24.501", "TS 33.501"]
        assert result["shared"]["same_series"] is False

    def test_criteria_subset(self, tool):
        result = json.loads(tool("compare_specifications")("24.501, 24.301", criteria="release"))
        assert list(result["comparison"]) == ["release"]

    def test_unknown_criterion(self, tool):
        assert "criteria" in tool("compare_specifications")("24.501, 24.301", criteria="release,colour")

    def test_needs_two_distinct(self, tool):
        assert "spec_ids" in tool("compare_specifications")("TS 24.501")
        assert "spec_ids" in tool("compare_specifications")("TS 24.501, 24.501")

    def test_unknown_spec(self, tool):
        assert "not found" in tool("compare_specifications")("TS 24.501, TS 24.999")


class TestFindImplementationRequirementsTool:
    def test_requirements(self, tool):
        result = json.loads(tool("find_implementation_requirements")("SUCI privacy protection"))
        assert result["feature_analysis"]["domain"] == "authentication"
        assert "SUCI" in result["feature_analysis"]["concepts"]
        assert result["primary_specifications"]
        assert all(s["implementation_notes"] for s in result["primary_specifications"])
        assert result["implementation_phases"]
        assert "Ignoring privacy requirements" in result["common_pitfalls"]

    def test_basic_limits(self, tool):
        result = json.loads(tool("find_implementation_requirements")("SUCI privacy protection", complexity_level="basic"))
        assert len(result["primary_specifications"]) <= 2
        assert all(len(s["implementation_notes"]) <= 2 for s in result["primary_specifications"])

    def test_domain_override(self, tool):
        result = json.loads(tool("find_implementation_requirements")("CDR collection", domain="charging"))
        assert result["feature_analysis"]["domain"] == "charging"
        assert result["implementation_phases"]

    def test_invalid_complexity(self, tool):
        assert "complexity_level" in tool("find_implementation_requirements")("SUCI", complexity_level="expert")

    def test_nothing_found(self, tool):
        result = json.loads(tool("find_implementation_requirements")("zzzz qqqq"))
        assert result["primary_specifications"] == []
        assert "message" in result

    def test_empty_feature(self, tool):
        assert "Query text cannot be empty" in tool("find_implementation_requirements")("")


# ============================================================
# Structure tool
# ============================================================


class TestExplainStructureTool:
    def test_overview_default(self, tool):
        assert tool("explain_3gpp_structure")().startswith("# 3GPP Organization Overview")

    def test_series(self, tool):
        result = tool("explain_3gpp_structure")("series")
        assert "**33.xxx**" in result
        assert "TS 33.501" in result

    def test_working_groups(self, tool):
        result = tool("explain_3gpp_structure")("working groups")
        assert "**SA3**" in result
        assert "owns" in result

    def test_releases(self, tool):
        result = tool("explain_3gpp_structure")("Releases")
        assert "| Rel-15 | 2018 |" in result

    def test_invalid_focus(self, tool):
        assert "focus" in tool("explain_3gpp_structure")("budget")
