"""
Shared utilities for the 3GPP Guidance server.

Provides:
- Opt-in MCP tool profiling (TGPP_PROFILING=1)
"""

from .profiling import (
    format_metrics_report,
    get_metrics,
    install_profiling,
    profiling_enabled,
    reset_metrics,
)

__all__ = [
    "install_profiling",
    "profiling_enabled",
    "get_metrics",
    "reset_metrics",
    "format_metrics_report",
]
