"""
Structure Tools - Explain how 3GPP is organized.

Tools:
- explain_3gpp_structure: Overview, specification series, working groups or releases

The reference tables below are also served by the tgpp://knowledge/series
resource.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tgpp_guidance.core.exceptions import InvalidParameterError

from .formatting import ResponseFormatter

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase

logger = logging.getLogger(__name__)


# ============================================================================
# Reference Data
# ============================================================================

SERIES_REFERENCE: dict[str, dict[str, str]] = {
    "21": {"scope": "Requirements", "group": "Requirements and architecture"},
    "22": {"scope": "Service aspects and requirements", "group": "Requirements and architecture"},
    "23": {"scope": "Technical realization and system architecture", "group": "Requirements and architecture"},
    "24": {"scope": "Core network signalling protocols (NAS)", "group": "Requirements and architecture"},
    "25": {"scope": "UTRA radio access (3G)", "group": "Requirements and architecture"},
    "26": {"scope": "Codecs and media processing", "group": "Requirements and architecture"},
    "27": {"scope": "Data and terminal interfaces", "group": "Requirements and architecture"},
    "28": {"scope": "Management and orchestration", "group": "Requirements and architecture"},
    "29": {"scope": "Core network and service-based interfaces", "group": "Requirements and architecture"},
    "31": {"scope": "SIM / USIM", "group": "Implementation and testing"},
    "32": {"scope": "Telecom management and charging", "group": "Implementation and testing"},
    "33": {"scope": "Security architecture and procedures", "group": "Implementation and testing"},
    "34": {"scope": "UE conformance test specifications", "group": "Implementation and testing"},
    "35": {"scope": "Cryptographic algorithms", "group": "Implementation and testing"},
    "36": {"scope": "LTE / E-UTRA radio access (4G)", "group": "Technology specific"},
    "37": {"scope": "Multiple radio access technologies", "group": "Technology specific"},
    "38": {"scope": "NR radio access (5G)", "group": "Technology specific"},
}

WORKING_GROUPS: dict[str, dict[str, str]] = {
    "SA": {
        "name": "Service and System Aspects",
        "SA1": "Services and requirements",
        "SA2": "System architecture",
        "SA3": "Security and privacy",
        "SA4": "Codecs and media",
        "SA5": "Management, orchestration and charging",
        "SA6": "Mission-critical and vertical applications",
    },
    "CT": {
        "name": "Core Network and Terminals",
        "CT1": "UE to core network protocols (NAS)",
        "CT3": "Interworking with external networks, policy",
        "CT4": "Core network protocols and service-based interfaces",
        "CT6": "Smart card applications",
    },
    "RAN": {
        "name": "Radio Access Network",
        "RAN1": "Physical layer",
        "RAN2": "Radio interface protocols (RRC, PDCP, RLC, MAC)",
        "RAN3": "RAN architecture and interfaces",
        "RAN4": "Radio performance",
        "RAN5": "UE conformance testing",
    },
}

RELEASES: tuple[tuple[str, str, str], ...] = (
    ("Rel-8", "2008", "Initial LTE and EPC"),
    ("Rel-9", "2009", "LTE enhancements"),
    ("Rel-10", "2011", "LTE-Advanced"),
    ("Rel-11", "2012", "LTE-Advanced enhancements"),
    ("Rel-12", "2014", "Small cells, device-to-device"),
    ("Rel-13", "2016", "LTE-Advanced Pro, NB-IoT"),
    ("Rel-14", "2017", "V2X, CUPS"),
    ("Rel-15", "2018", "First 5G NR and 5G core"),
    ("Rel-16", "2020", "5G enhancements, industrial IoT, URLLC"),
    ("Rel-17", "2022", "5G evolution, RedCap, NTN"),
    ("Rel-18", "2024", "5G-Advanced"),
)

STRUCTURE_FOCUSES = ("overview", "series", "working_groups", "releases")


# ============================================================================
# Renderers
# ============================================================================

def render_overview() -> str:
    return """# 3GPP Organization Overview

## What is 3GPP?
The 3rd Generation Partnership Project (3GPP) develops the technical
specifications for mobile systems from GSM to LTE and 5G.

## Technical Specification Groups
- **SA** (Service and System Aspects): requirements, architecture, security, charging
- **CT** (Core Network and Terminals): core network and UE protocols
- **RAN** (Radio Access Network): radio interface

## How specifications are written
1. Stage 1: service requirements (22 series)
2. Stage 2: architecture and procedures (23 series)
3. Stage 3: protocols and encodings (24, 29, 36, 38 series)
4. Testing and conformance (34 series)

## How to navigate
1. Start with architecture specifications (23 series)
2. Move to protocol specifications (24 and 38 series)
3. Add security (33 series)
4. Check conformance testing (34 series)
"""


def render_series(knowledge_base: KnowledgeBase | None = None) -> str:
    lines = ["# 3GPP Specification Series\n"]
    current_group = None
    for series, info in SERIES_REFERENCE.items():
        if info["group"] != current_group:
            current_group = info["group"]
            lines.append(f"\n## {current_group}\n")
        entry = f"- **{series}.xxx**: {info['scope']}"
        if knowledge_base is not None:
            catalogued = [s.id for s in knowledge_base.specifications() if s.series == series]
            if catalogued:
                entry += f" (catalogued: {', '.join(catalogued)})"
        lines.append(entry)
    lines.append(
        "\n## Reading strategy\n"
        "1. Architecture first (23.xxx)\n"
        "2. Protocol detail next (24.xxx, 38.xxx)\n"
        "3. Security (33.xxx)\n"
        "4. Conformance testing (34.xxx)"
    )
    return "\n".join(lines)


def render_working_groups(knowledge_base: KnowledgeBase | None = None) -> str:
    owned: dict[str, list[str]] = {}
    if knowledge_base is not None:
        for spec in knowledge_base.specifications():
            owned.setdefault(spec.working_group, []).append(spec.id)

    lines = ["# 3GPP Working Groups\n"]
    for tsg, groups in WORKING_GROUPS.items():
        lines.append(f"\n## {groups['name']} ({tsg})\n")
        for wg, scope in groups.items():
            if wg == "name":
                continue
            entry = f"- **{wg}**: {scope}"
            if owned.get(wg):
                entry += f" (owns {', '.join(sorted(owned[wg]))})"
            lines.append(entry)
    lines.append(
        "\nSA sets requirements and architecture, CT and RAN turn them into "
        "protocols. Knowing the owning group tells you where change requests "
        "for a specification are discussed."
    )
    return "\n".join(lines)


def render_releases() -> str:
    lines = ["# 3GPP Release Evolution\n", "| Release | Frozen | Highlights |", "|---|---|---|"]
    lines.extend(f"| {name} | {year} | {highlights} |" for name, year, highlights in RELEASES)
    lines.append(
        "\n## Researching by release\n"
        "1. Find the release that introduced the feature\n"
        "2. Follow how later releases changed it\n"
        "3. Check dependencies on features from other releases"
    )
    return "\n".join(lines)


def register_structure_tools(mcp: FastMCP, knowledge_base: KnowledgeBase) -> None:
    """Register 3GPP structure tools (1 tool)."""

    @mcp.tool()
    def explain_3gpp_structure(focus: str = "overview") -> str:
        """
        Explain how 3GPP organizes its work.

        Args:
            focus: "overview" (default), "series", "working_groups" or "releases"
        """
        logger.info("Explaining 3GPP structure: %s", focus)
        key = (focus or "overview").strip().lower().replace(" ", "_")
        if key not in STRUCTURE_FOCUSES:
            return ResponseFormatter.error(
                InvalidParameterError("focus", focus, "one of: " + ", ".join(STRUCTURE_FOCUSES))
            )

        if key == "series":
            return render_series(knowledge_base)
        if key == "working_groups":
            return render_working_groups(knowledge_base)
        if key == "releases":
            return render_releases()
        return render_overview()
