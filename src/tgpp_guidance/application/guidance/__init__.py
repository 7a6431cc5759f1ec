"""
Guidance - Turn analyzed queries into leveled guidance.

- GuidanceGenerator: section assembly, confidence, next steps
- GuidanceEngine: analyze_query / generate_guidance facade
"""

from .engine import GuidanceEngine
from .generator import GuidanceGenerator

__all__ = ["GuidanceEngine", "GuidanceGenerator"]
