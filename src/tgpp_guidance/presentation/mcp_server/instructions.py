"""
MCP Server Instructions - Usage guide for AI Agents.

Kept apart from server.py so it can be maintained and read on its own.
"""

from __future__ import annotations

SERVER_INSTRUCTIONS = """
3GPP Guidance MCP Server - research assistant for 3GPP specifications

Answers questions about 3GPP standards with structured guidance: which
specifications to read, in what order, which concepts matter and what to
watch out for. All specification references come from a curated local
catalogue. Nothing is fetched from the network.

═══════════════════════════════════════════════════════════════════════════════
Choosing a tool
═══════════════════════════════════════════════════════════════════════════════

## 1. Open question about a 3GPP topic (start here)
Trigger: "how does ... work", "which specs cover ...", "how do I implement ...",
         "compare ... vs ..."
```
guide_specification_search(query="explain how NAS protocol works", user_level="beginner")
```
user_level: beginner | intermediate (default) | expert
output_format: json (default) | markdown

## 2. Quick catalogue lookup
```
search_specifications(query="5G charging CHF", series_filter=["32"], max_results=5)
get_specification_details(spec_id="TS 33.501")
```

## 3. Two specifications side by side
```
compare_specifications(spec_ids=["TS 24.501", "TS 24.301"])
```

## 4. Implementation planning
```
find_implementation_requirements(feature="SUCI privacy protection", complexity_level="advanced")
```

## 5. Orientation in 3GPP itself
```
explain_3gpp_structure(focus="series")   # overview | series | working_groups | releases
```

═══════════════════════════════════════════════════════════════════════════════
Notes
═══════════════════════════════════════════════════════════════════════════════

- analyze_query shows how a question was classified (intent, domain, concepts)
  without generating guidance. Use it to rephrase unclear questions.
- Guidance confidence reflects catalogue coverage. Low confidence means the
  question named nothing the catalogue knows; ask for protocol or function names.
- Resources: tgpp://knowledge/series, tgpp://knowledge/protocols,
  tgpp://knowledge/research-patterns
"""
