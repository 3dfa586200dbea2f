"""
Dependency injection container for FastAPI.

Provides the authenticated user and use case instances to route handlers.
"""

from fastapi import Request

from heirloom.application.use_cases import (
    ChatWithContextUseCase,
    IndexContentUseCase,
    SearchArchiveUseCase,
)
from heirloom.config import get_settings
from heirloom.core.exceptions import AuthenticationRequiredError
from heirloom.core.interfaces import IEmbeddingProvider, ILLMProvider, IVectorIndex


def get_current_user_id(request: Request) -> str:
    """
    Resolve the requesting user.

    The upstream authentication provider sets the identity header;
    requests without it are rejected before any pipeline work.
    """
    user_id = request.headers.get(get_settings().api.user_header, "").strip()
    if not user_id:
        raise AuthenticationRequiredError()
    return user_id


# Provider dependencies
def get_llm() -> ILLMProvider:
    """Get the generation provider."""
    from heirloom.infrastructure.llm import get_llm_provider

    return get_llm_provider()


def get_embedder() -> IEmbeddingProvider:
    """Get the embedding provider."""
    from heirloom.infrastructure.embeddings import get_embedding_provider

    return get_embedding_provider()


def get_index() -> IVectorIndex:
    """Get the vector index."""
    from heirloom.infrastructure.vector import get_vector_index

    return get_vector_index()


# Use case dependencies
def get_search_archive_use_case() -> SearchArchiveUseCase:
    return SearchArchiveUseCase()


def get_chat_use_case() -> ChatWithContextUseCase:
    return ChatWithContextUseCase()


def get_index_content_use_case() -> IndexContentUseCase:
    return IndexContentUseCase()
