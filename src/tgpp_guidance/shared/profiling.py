"""
Lightweight MCP tool performance profiling.

Toggle via environment variable: TGPP_PROFILING=1

Features:
- Per-tool execution time tracking (count, min, max, avg, p95)
- In-memory rolling window (last N calls per tool)
- Zero overhead when disabled (nothing is patched)

Usage:
    # In server.py after create_server():
    from tgpp_guidance.shared.profiling import install_profiling
    install_profiling(mcp)

    # Query metrics (when profiling enabled, auto-registers MCP tool):
    get_performance_metrics()
"""

from __future__ import annotations

import json
import logging
import os
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)

PROFILING_ENV = "TGPP_PROFILING"
MAX_HISTORY_PER_TOOL = 200  # Rolling window size


def profiling_enabled() -> bool:
    return os.environ.get(PROFILING_ENV, "").lower() in ("1", "true", "yes")


@dataclass
class ToolStats:
    """Rolling timing window for a single tool."""

    durations_ms: list[float] = field(default_factory=list)
    errors: int = 0

    def record(self, elapsed_ms: float, failed: bool = False) -> None:
        self.durations_ms.append(elapsed_ms)
        if failed:
            self.errors += 1
        if len(self.durations_ms) > MAX_HISTORY_PER_TOOL:
            self.durations_ms = self.durations_ms[-MAX_HISTORY_PER_TOOL:]

    @property
    def count(self) -> int:
        return len(self.durations_ms)

    @property
    def avg(self) -> float:
        return sum(self.durations_ms) / self.count if self.durations_ms else 0.0

    @property
    def min(self) -> float:
        return min(self.durations_ms, default=0.0)

    @property
    def max(self) -> float:
        return max(self.durations_ms, default=0.0)

    @property
    def p95(self) -> float:
        if not self.durations_ms:
            return 0.0
        ordered = sorted(self.durations_ms)
        return ordered[min(int(len(ordered) * 0.95), len(ordered) - 1)]

    def summary_dict(self) -> dict[str, Any]:
        return {
            "calls": self.count,
            "errors": self.errors,
            "ms": {
                "avg": round(self.avg, 2),
                "min": round(self.min, 2),
                "max": round(self.max, 2),
                "p95": round(self.p95, 2),
            },
        }


_metrics: dict[str, ToolStats] = defaultdict(ToolStats)


def get_metrics() -> dict[str, ToolStats]:
    return dict(_metrics)


def reset_metrics() -> None:
    _metrics.clear()


def format_metrics_report() -> str:
    """Human-readable table of all recorded tools, slowest first."""
    if not _metrics:
        return f"No performance data recorded yet.\n\nEnsure `{PROFILING_ENV}=1` is set."

    lines = ["**MCP Tool Performance Report**\n"]
    lines.append(f"{'Tool':<36} {'Calls':>5} {'Avg':>9} {'P95':>9} {'Max':>9} {'Err':>4}")
    lines.append("-" * 76)
    for name, stats in sorted(_metrics.items(), key=lambda item: item[1].avg, reverse=True):
        lines.append(
            f"{name:<36} {stats.count:>5} "
            f"{stats.avg:>7.1f}ms "
            f"{stats.p95:>7.1f}ms "
            f"{stats.max:>7.1f}ms "
            f"{stats.errors:>4}"
        )
    lines.append("-" * 76)
    lines.append(f"Total calls: {sum(s.count for s in _metrics.values())}")
    return "\n".join(lines)


def install_profiling(mcp: FastMCP, enabled: bool | None = None) -> bool:
    """
    Install performance profiling on the MCP server.

    Wraps mcp.call_tool() with timing and registers a
    `get_performance_metrics` tool for querying the results.

    Returns True if profiling was installed, False if disabled.
    """
    if enabled is None:
        enabled = profiling_enabled()
    if not enabled:
        logger.debug("Profiling disabled (set %s=1 to enable)", PROFILING_ENV)
        return False

    logger.info("Performance profiling ENABLED")

    original_call_tool = mcp.call_tool

    async def profiled_call_tool(name: str, arguments: dict[str, Any]) -> Sequence[Any] | dict[str, Any]:
        start = time.perf_counter()
        failed = False
        try:
            return await original_call_tool(name, arguments)
        except Exception:
            failed = True
            raise
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            _metrics[name].record(elapsed_ms, failed=failed)
            logger.info("[PERF] %s: %.1fms%s", name, elapsed_ms, " (failed)" if failed else "")

    mcp.call_tool = profiled_call_tool  # type: ignore[method-assign]

    @mcp.tool()
    def get_performance_metrics(tool_name: str = "", reset: bool = False) -> str:
        """
        [DEV] Get MCP tool execution performance metrics.

        Only available when TGPP_PROFILING=1.

        Args:
            tool_name: Filter to specific tool (empty = all tools)
            reset: Reset all metrics after reporting
        """
        if tool_name:
            stats = _metrics.get(tool_name)
            if not stats:
                return f"No metrics for tool '{tool_name}'"
            report = f"**{tool_name}** Performance\n\n"
            report += f"```json\n{json.dumps(stats.summary_dict(), indent=2)}\n```\n"
            recent = stats.durations_ms[-5:]
            report += "\nLast 5 calls (ms): " + ", ".join(f"{ms:.1f}" for ms in recent)
            return report

        report = format_metrics_report()
        if reset:
            count = sum(s.count for s in _metrics.values())
            reset_metrics()
            report += f"\n\nMetrics reset ({count} records cleared)"
        return report

    logger.info("Registered dev tool: get_performance_metrics")
    return True
