"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from dataclasses import dataclass
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Generation provider configuration."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    provider: Literal["openai", "ollama"] = "openai"
    model_name: str = "gpt-4o-mini"
    host: str = "https://api.openai.com"
    api_key: str | None = None
    timeout: int = 60
    max_tokens: int = 500
    temperature: float = 0.7

    # Circuit breaker settings
    failure_threshold: int = 3
    cooldown_seconds: int = 60

    # Retry settings
    max_retries: int = 2
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration."""

    model_config = SettingsConfigDict(env_prefix="EMBED_")

    provider: Literal["openai", "ollama"] = "openai"
    model_name: str = "text-embedding-ada-002"
    host: str = "https://api.openai.com"
    api_key: str | None = None
    dimension: int = 1536
    timeout: int = 30


class VectorIndexSettings(BaseSettings):
    """Vector index configuration."""

    model_config = SettingsConfigDict(env_prefix="VECTOR_")

    backend: Literal["pinecone", "memory"] = "pinecone"
    index_name: str = "family-archive"
    host: str = ""  # Pinecone index host, e.g. https://family-archive-abc123.svc.pinecone.io
    api_key: str | None = None
    namespace: str = ""
    timeout: int = 30

    # Metadata fields used by filters
    owner_field: str = "userId"
    private_field: str = "isPrivate"
    timestamp_field: str = "timestamp"


class SearchSettings(BaseSettings):
    """Search pipeline and RAG configuration."""

    model_config = SettingsConfigDict(env_prefix="SEARCH_")

    default_top_k: int = 10
    variant_top_k: int = 5
    max_variants: int = 5
    result_limit: int = 10

    # Query expansion
    expansion_count: int = 3
    expansion_max_tokens: int = 150
    expansion_temperature: float = 0.7

    # RAG context
    max_context_length: int = 4000

    # Indexing
    chunk_size: int = 1000
    chunk_overlap: int = 200


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Header set by the upstream authentication provider
    user_header: str = "X-User-Id"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Heirloom Archive Search"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    llm: LLMSettings = Field(default_factory=LLMSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    vector: VectorIndexSettings = Field(default_factory=VectorIndexSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    api: APISettings = Field(default_factory=APISettings)


@dataclass(frozen=True)
class PipelineConfig:
    """
    Explicit configuration for the search pipeline.

    Passed to the orchestrator at construction time so the core
    never reads the environment.
    """

    vector_index_name: str = "family-archive"
    embedding_dimension: int = 1536
    default_top_k: int = 10
    variant_top_k: int = 5
    max_variants: int = 5
    result_limit: int = 10

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineConfig":
        return cls(
            vector_index_name=settings.vector.index_name,
            embedding_dimension=settings.embedding.dimension,
            default_top_k=settings.search.default_top_k,
            variant_top_k=settings.search.variant_top_k,
            max_variants=settings.search.max_variants,
            result_limit=settings.search.result_limit,
        )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
