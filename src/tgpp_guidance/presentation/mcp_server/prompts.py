"""
MCP Prompts - Explanation templates for AI Agents

Prompts are NOT executed - they return a template the Agent follows.
When the named procedure or specifications are in the catalogue, the
template is seeded with what the catalogue knows about them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .tools.formatting import InputNormalizer

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase
    from tgpp_guidance.domain.entities.knowledge import Procedure

DETAIL_LEVELS = ("overview", "detailed", "implementation")


def _find_procedure(knowledge_base: KnowledgeBase, name: str) -> tuple[str, Procedure] | None:
    for protocol in knowledge_base.protocols():
        procedure = knowledge_base.get_procedure(protocol.name, name)
        if procedure is not None:
            return protocol.name, procedure
    return None


def register_prompts(mcp: FastMCP, knowledge_base: KnowledgeBase) -> int:
    """Register explanation prompts. Returns the number registered."""

    @mcp.prompt()
    def explain_3gpp_procedure(
        procedure_name: str,
        specification: str | None = None,
        detail_level: str = "detailed",
    ) -> str:
        """
        Template for explaining a 3GPP procedure with context and examples.

        Use when: User asks "how does <procedure> work", "walk me through <procedure>"
        """
        level = detail_level if detail_level in DETAIL_LEVELS else "detailed"
        spec_label = InputNormalizer.normalize_spec_id(specification) if specification else "the relevant specification"

        known = ""
        found = _find_procedure(knowledge_base, procedure_name)
        if found is not None:
            protocol_name, procedure = found
            known = f"\n## Catalogue notes ({protocol_name})\n{procedure.description}\n"
            if procedure.key_steps:
                known += "\nKey steps:\n" + "\n".join(f"- {s}" for s in procedure.key_steps) + "\n"
            if procedure.common_issues:
                known += "\nCommon issues:\n" + "\n".join(f"- {s}" for s in procedure.common_issues) + "\n"

        implementation = ""
        if level == "implementation":
            implementation = """
### Implementation Considerations
- Mandatory versus optional behaviour
- Timers, retries and error causes
- Common interoperability problems
- How to test and validate the procedure
"""

        return f"""You are explaining the {procedure_name} procedure from 3GPP {spec_label}.
{known}
Structure your explanation as follows:

## {procedure_name} Procedure Overview

### Purpose and Context
- Why the procedure exists
- When it is triggered
- Which network entities take part

### High-Level Flow
- Step-by-step message sequence
- Key decision points
- Error conditions and their handling
{implementation}
### References and Related Procedures
- Cite the clauses of {spec_label} you rely on
- Connect to related procedures
- Suggest further reading

Only cite specifications you are sure exist. Detail level: {level}.
"""

    @mcp.prompt()
    def compare_specifications_prompt(spec_ids: str, focus: str | None = None) -> str:
        """
        Template for a structured comparison of specifications.

        Use when: User asks "what changed between <spec A> and <spec B>"
        """
        ids = [InputNormalizer.normalize_spec_id(s) for s in InputNormalizer.normalize_list(spec_ids)]
        specs = knowledge_base.existing_specifications(ids)
        aspects = focus or "purpose, architecture, procedures, security, evolution"

        catalogue = ""
        if specs:
            catalogue = "\n## Catalogue summary\n" + "\n".join(
                f"- **{s.id}** ({s.release or 'release n/a'}, {s.working_group}): {s.title}. {s.purpose}"
                for s in specs
            ) + "\n"

        return f"""Compare the following 3GPP specifications: {', '.join(ids) or spec_ids}.
{catalogue}
Focus on: {aspects}.

## Comparison Structure

### 1. Scope and Purpose
What each specification covers and why it exists.

### 2. Side-by-Side Table
One row per aspect, one column per specification.

### 3. Key Differences
The changes that matter to an implementer, with the reason for each.

### 4. Relationship
Whether one replaces, extends or depends on the other.

### 5. Migration Notes
What an existing implementation must change.

Call compare_specifications and get_specification_details for catalogue facts.
"""

    return 2
