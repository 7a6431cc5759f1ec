"""
Shared input normalization and response formatting for MCP tools.

- InputNormalizer: tolerate the loose argument shapes agents send
  ("TS 33.501, TS 24.501" vs ["TS 33.501", "TS 24.501"], "33.501" vs "TS 33.501")
- ResponseFormatter: JSON / Markdown rendering and agent-facing errors
"""

from __future__ import annotations

import json
import re
from typing import Any

from tgpp_guidance.core.exceptions import GuidanceError, InvalidParameterError
from tgpp_guidance.domain.entities.guidance import Guidance, QueryAnalysis

OUTPUT_FORMATS = ("json", "markdown")

_SPEC_ID_PATTERN = re.compile(r"^(?:TS)?\s*(\d{2})\.(\d{3})$", re.IGNORECASE)


class InputNormalizer:
    """Normalize tool arguments before they reach the core."""

    @staticmethod
    def normalize_list(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
        """Accept a list or a comma/semicolon separated string. Blanks are dropped."""
        if value is None:
            return []
        if isinstance(value, str):
            items = re.split(r"[,;]", value)
        else:
            items = [str(v) for v in value]
        return [item.strip() for item in items if item and item.strip()]

    @staticmethod
    def normalize_spec_id(value: str) -> str:
        """'33.501', 'ts33.501' and 'TS 33.501' all become 'TS 33.501'. TR ids keep their prefix."""
        text = " ".join(value.split())
        match = _SPEC_ID_PATTERN.match(text)
        if match:
            return f"TS {match.group(1)}.{match.group(2)}"
        return text

    @staticmethod
    def normalize_series(value: str) -> str:
        """'33', '33.xxx' and 'TS 33' all become '33'."""
        match = re.search(r"\d{2}", value)
        return match.group(0) if match else value.strip()

    @staticmethod
    def normalize_release(value: str) -> str:
        """'16', 'rel16', 'Release 16' and 'Rel-16' all become 'Rel-16'."""
        match = re.search(r"\d+", value)
        return f"Rel-{match.group(0)}" if match else value.strip()

    @staticmethod
    def output_format(value: str | None) -> str:
        fmt = (value or "json").strip().lower()
        if fmt not in OUTPUT_FORMATS:
            raise InvalidParameterError("output_format", value, "one of: " + ", ".join(OUTPUT_FORMATS))
        return fmt


class ResponseFormatter:
    """Render tool results as text for the agent."""

    @staticmethod
    def to_json(data: Any) -> str:
        return json.dumps(data, indent=2, ensure_ascii=False)

    @staticmethod
    def error(exc: GuidanceError) -> str:
        return exc.to_agent_message()

    @staticmethod
    def guidance_markdown(guidance: Guidance, analysis: QueryAnalysis | None = None) -> str:
        lines = [f"# 3GPP Guidance\n\n{guidance.summary}\n"]
        if analysis is not None:
            concepts = ", ".join(analysis.concepts) or "none recognised"
            lines.append(
                f"*Intent: {analysis.intent.value} | Domain: {analysis.domain} | "
                f"Level: {analysis.user_level.value} | Concepts: {concepts}*\n"
            )
        for section in guidance.sections:
            lines.append(f"## {section.title}\n\n{section.content}\n")
        lines.append("## Next Steps\n")
        lines.extend(f"{i}. {step}" for i, step in enumerate(guidance.next_steps, 1))
        lines.append("\n## Related Topics\n")
        lines.extend(f"- {topic}" for topic in guidance.related_topics)
        lines.append(f"\n---\nConfidence: {guidance.confidence:.0%}")
        return "\n".join(lines)
