"""
Application DI Container (dependency-injector).

Builds the immutable knowledge base once and wires it into the analyzer,
the generator and the GuidanceEngine facade.

Usage::

    from tgpp_guidance.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict({"data_dir": None})

    engine = container.guidance_engine()

    # In tests, override any provider:
    container.knowledge_base.override(providers.Object(fake_kb))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)


def _create_relevance_ranker() -> object:
    from tgpp_guidance.application.search.relevance_ranker import RelevanceRanker

    return RelevanceRanker()


def _create_knowledge_base(data_dir: str | None, ranker: object) -> object:
    """Load the catalogue (bundled YAML data when ``data_dir`` is empty)."""
    from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase

    kb = KnowledgeBase.load(data_dir or None, ranker=ranker)
    logger.info("Knowledge base ready: %s", kb.stats())
    return kb


def _create_query_analyzer(knowledge_base: object) -> object:
    from tgpp_guidance.application.search.query_analyzer import QueryAnalyzer

    return QueryAnalyzer(knowledge_base)


def _create_guidance_generator(knowledge_base: object, ranker: object) -> object:
    from tgpp_guidance.application.guidance.generator import GuidanceGenerator

    return GuidanceGenerator(knowledge_base, ranker)


def _create_guidance_engine(analyzer: object, generator: object) -> object:
    from tgpp_guidance.application.guidance.engine import GuidanceEngine

    return GuidanceEngine(analyzer, generator)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for the 3GPP guidance application.

    - ``relevance_ranker``: stateless specification scorer
    - ``knowledge_base``: catalogue snapshot loaded from YAML
    - ``query_analyzer``: intent / domain / concept classification
    - ``guidance_generator``: leveled guidance assembly
    - ``guidance_engine``: analyze_query / generate_guidance facade
    """

    config = providers.Configuration()

    relevance_ranker = providers.Singleton(_create_relevance_ranker)

    knowledge_base = providers.Singleton(
        _create_knowledge_base,
        data_dir=config.data_dir,
        ranker=relevance_ranker,
    )

    query_analyzer = providers.Singleton(
        _create_query_analyzer,
        knowledge_base=knowledge_base,
    )

    guidance_generator = providers.Singleton(
        _create_guidance_generator,
        knowledge_base=knowledge_base,
        ranker=relevance_ranker,
    )

    guidance_engine = providers.Singleton(
        _create_guidance_engine,
        analyzer=query_analyzer,
        generator=guidance_generator,
    )


__all__ = ["ApplicationContainer"]
