"""
Embedding provider factory.
"""

from heirloom.config import get_logger, get_settings
from heirloom.config.settings import EmbeddingSettings
from heirloom.core.interfaces import IEmbeddingProvider
from heirloom.infrastructure.embeddings.http import OllamaEmbeddingProvider
from heirloom.infrastructure.embeddings.openai import OpenAIEmbeddingProvider

logger = get_logger(__name__)


def create_embedding_provider(settings: EmbeddingSettings | None = None) -> IEmbeddingProvider:
    """Build the embedding provider named in configuration."""
    settings = settings or get_settings().embedding

    if settings.provider == "openai":
        return OpenAIEmbeddingProvider(settings)
    elif settings.provider == "ollama":
        return OllamaEmbeddingProvider(settings)
    else:
        raise ValueError(f"Unknown embedding provider: {settings.provider}")


_embedding_provider: IEmbeddingProvider | None = None


def get_embedding_provider() -> IEmbeddingProvider:
    """Get or create the embedding provider singleton."""
    global _embedding_provider
    if _embedding_provider is None:
        _embedding_provider = create_embedding_provider()
        logger.info("embedding_provider_created", provider=get_settings().embedding.provider)
    return _embedding_provider
