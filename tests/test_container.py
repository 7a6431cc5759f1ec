"""Tests for DI container and application lifecycle."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from dependency_injector import providers

from tgpp_guidance.application.guidance.engine import GuidanceEngine
from tgpp_guidance.application.knowledge.knowledge_base import KnowledgeBase
from tgpp_guidance.container import ApplicationContainer
from tgpp_guidance.core.exceptions import KnowledgeLoadError

# ============================================================================
# DI Container Tests
# ============================================================================


def make_container(data_dir=None) -> ApplicationContainer:
    container = ApplicationContainer()
    container.config.from_dict({"data_dir": data_dir})
    return container


class TestApplicationContainer:
    """Test the DI container manages services correctly."""

    def test_container_config(self) -> None:
        container = make_container("/tmp/tgpp-data")
        assert container.config.data_dir() == "/tmp/tgpp-data"

    def test_knowledge_base_singleton(self) -> None:
        container = make_container()
        kb1 = container.knowledge_base()
        kb2 = container.knowledge_base()
        assert kb1 is kb2
        assert isinstance(kb1, KnowledgeBase)

    def test_engine_singleton(self) -> None:
        container = make_container()
        e1 = container.guidance_engine()
        e2 = container.guidance_engine()
        assert e1 is e2
        assert isinstance(e1, GuidanceEngine)

    def test_ranker_shared(self) -> None:
        container = make_container()
        ranker = container.relevance_ranker()
        assert container.knowledge_base()._ranker is ranker
        assert container.guidance_generator()._ranker is ranker

    def test_engine_works_end_to_end(self) -> None:
        engine = make_container().guidance_engine()
        guidance = engine.generate_guidance("explain how NAS protocol works")
        assert guidance.sections

    def test_custom_data_dir(self, data_dir_copy) -> None:
        container = make_container(str(data_dir_copy))
        assert container.knowledge_base().stats()["specifications"] == 18

    def test_bad_data_dir_fails_at_load(self, tmp_path) -> None:
        container = make_container(str(tmp_path / "missing"))
        with pytest.raises(KnowledgeLoadError):
            container.knowledge_base()

    def test_override_provider(self) -> None:
        """Container supports provider overriding for tests."""
        container = make_container()

        mock_kb = MagicMock()
        container.knowledge_base.override(providers.Object(mock_kb))
        assert container.knowledge_base() is mock_kb

        # Reset override
        container.knowledge_base.reset_override()
        assert container.knowledge_base() is not mock_kb

    def test_override_flows_into_engine(self, knowledge_base) -> None:
        container = make_container()
        container.knowledge_base.override(providers.Object(knowledge_base))
        assert container.guidance_generator()._kb is knowledge_base

    def test_container_reset(self) -> None:
        """Container reset clears all singletons."""
        container = make_container()
        kb1 = container.knowledge_base()
        container.reset_singletons()
        kb2 = container.knowledge_base()
        assert kb1 is not kb2
