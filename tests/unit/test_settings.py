"""
Tests for settings, provider factories and logging processors.
"""

import pytest

from heirloom.config import PipelineConfig, get_settings, reset_settings
from heirloom.config.logging import classify_error_kind
from heirloom.config.settings import EmbeddingSettings, LLMSettings, Settings
from heirloom.infrastructure.access import OwnerOrSharedPolicy
from heirloom.infrastructure.embeddings import (
    OllamaEmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_embedding_provider,
)
from heirloom.infrastructure.llm import OllamaProvider, OpenAIProvider, create_llm_provider
from heirloom.infrastructure.vector import InMemoryVectorIndex, create_vector_index


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.llm.provider == "openai"
        assert settings.embedding.dimension == 1536
        assert settings.search.default_top_k == 10
        assert settings.search.variant_top_k == 5
        assert settings.api.user_header == "X-User-Id"

    def test_env_prefixes(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "ollama")
        monkeypatch.setenv("EMBED_DIMENSION", "768")
        monkeypatch.setenv("VECTOR_BACKEND", "memory")
        monkeypatch.setenv("SEARCH_RESULT_LIMIT", "20")
        reset_settings()

        settings = get_settings()

        assert settings.llm.provider == "ollama"
        assert settings.embedding.dimension == 768
        assert settings.vector.backend == "memory"
        assert settings.search.result_limit == 20

    def test_settings_cached(self):
        assert get_settings() is get_settings()

    def test_pipeline_config_from_settings(self, monkeypatch):
        monkeypatch.setenv("SEARCH_MAX_VARIANTS", "2")
        monkeypatch.setenv("VECTOR_INDEX_NAME", "heirlooms")
        reset_settings()

        config = PipelineConfig.from_settings(get_settings())

        assert config.max_variants == 2
        assert config.vector_index_name == "heirlooms"
        assert config.default_top_k == 10


class TestFactories:
    """Tests for provider factories."""

    def test_llm_provider(self):
        assert isinstance(create_llm_provider(LLMSettings(provider="openai")), OpenAIProvider)
        assert isinstance(create_llm_provider(LLMSettings(provider="ollama")), OllamaProvider)

    def test_embedding_provider(self):
        assert isinstance(
            create_embedding_provider(EmbeddingSettings(provider="openai")), OpenAIEmbeddingProvider
        )
        assert isinstance(
            create_embedding_provider(EmbeddingSettings(provider="ollama")), OllamaEmbeddingProvider
        )

    def test_memory_index(self, monkeypatch):
        monkeypatch.setenv("VECTOR_BACKEND", "memory")
        monkeypatch.setenv("EMBED_DIMENSION", "8")
        reset_settings()

        index = create_vector_index()

        assert isinstance(index, InMemoryVectorIndex)
        assert index.dimension == 8


class TestOwnerOrSharedPolicy:
    """Tests for the visibility predicate."""

    def test_default_fields(self):
        assert OwnerOrSharedPolicy().visibility_filter("u1") == {
            "$or": [{"isPrivate": {"$eq": False}}, {"userId": {"$eq": "u1"}}]
        }

    def test_custom_fields(self):
        policy = OwnerOrSharedPolicy(owner_field="owner", private_field="hidden")

        assert policy.visibility_filter("u2") == {
            "$or": [{"hidden": {"$eq": False}}, {"owner": {"$eq": "u2"}}]
        }


class TestClassifyErrorKind:
    """Tests for the error_kind log processor."""

    @pytest.mark.parametrize(
        "code,kind",
        [
            ("PROVIDER_CONFIGURATION_ERROR", "configuration"),
            ("EMBEDDING_FAILED", "transient"),
            ("SEARCH_ERROR", "transient"),
        ],
    )
    def test_tags_error_events(self, code, kind):
        event = classify_error_kind(None, "error", {"event": "x", "error_code": code})
        assert event["error_kind"] == kind

    def test_ignores_events_without_code(self):
        assert "error_kind" not in classify_error_kind(None, "info", {"event": "x"})
