"""Embedding providers."""

from heirloom.infrastructure.embeddings.factory import (
    create_embedding_provider,
    get_embedding_provider,
)
from heirloom.infrastructure.embeddings.http import OllamaEmbeddingProvider, classify_status
from heirloom.infrastructure.embeddings.openai import OpenAIEmbeddingProvider

__all__ = [
    "create_embedding_provider",
    "get_embedding_provider",
    "OllamaEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "classify_status",
]
