"""YAML-backed knowledge catalogue loading."""

from .loader import DEFAULT_DATA_DIR, KnowledgeLoader, load_knowledge

__all__ = ["DEFAULT_DATA_DIR", "KnowledgeLoader", "load_knowledge"]
