"""
Application Layer - Use cases over the knowledge catalogue.

Subpackages:
- search: query analysis and relevance ranking
- knowledge: indexed, read-only knowledge base
- guidance: leveled guidance generation and the GuidanceEngine facade

Import from the subpackages directly; this package re-exports nothing so
that importing one subpackage never pulls in the others.
"""
