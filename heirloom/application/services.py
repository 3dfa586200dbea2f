"""
Service factory functions for dependency injection.

Wires infrastructure implementations to core services from Settings.
Use cases should import from here.
"""

from typing import TYPE_CHECKING

from heirloom.config import PipelineConfig, get_settings
from heirloom.core.services import (
    ArchiveChatService,
    ContentIndexingService,
    EmbeddingClient,
    QueryExpander,
    ResultMerger,
    SearchOrchestrator,
    VectorSearchClient,
)

if TYPE_CHECKING:
    from heirloom.core.interfaces import (
        IAccessPolicy,
        IEmbeddingProvider,
        ILLMProvider,
        IVectorIndex,
    )


# Singleton service instances
_search_orchestrator: SearchOrchestrator | None = None
_chat_service: ArchiveChatService | None = None
_indexing_service: ContentIndexingService | None = None


def build_search_orchestrator(
    llm_provider: "ILLMProvider",
    embedding_provider: "IEmbeddingProvider",
    vector_index: "IVectorIndex",
    access_policy: "IAccessPolicy",
    config: PipelineConfig | None = None,
) -> SearchOrchestrator:
    """
    Assemble a SearchOrchestrator from explicit collaborators.

    Args:
        llm_provider: Generation provider used for query expansion
        embedding_provider: Embedding provider
        vector_index: Vector index
        access_policy: Visibility rule for the requesting user
        config: Pipeline configuration (default from settings)

    Returns:
        Configured SearchOrchestrator
    """
    settings = get_settings()
    config = config or PipelineConfig.from_settings(settings)

    return SearchOrchestrator(
        expander=QueryExpander(
            llm_provider,
            variant_count=settings.search.expansion_count,
            max_variants=config.max_variants,
            max_tokens=settings.search.expansion_max_tokens,
            temperature=settings.search.expansion_temperature,
        ),
        embedder=EmbeddingClient(embedding_provider, config.embedding_dimension),
        searcher=VectorSearchClient(vector_index),
        merger=ResultMerger(top_k=config.result_limit),
        access_policy=access_policy,
        config=config,
    )


def get_search_orchestrator() -> SearchOrchestrator:
    """Get or create the SearchOrchestrator singleton."""
    global _search_orchestrator

    if _search_orchestrator is not None:
        return _search_orchestrator

    # Lazy import infrastructure
    from heirloom.infrastructure.access import OwnerOrSharedPolicy
    from heirloom.infrastructure.embeddings import get_embedding_provider
    from heirloom.infrastructure.llm import get_llm_provider
    from heirloom.infrastructure.vector import get_vector_index

    settings = get_settings()
    _search_orchestrator = build_search_orchestrator(
        llm_provider=get_llm_provider(),
        embedding_provider=get_embedding_provider(),
        vector_index=get_vector_index(),
        access_policy=OwnerOrSharedPolicy(
            owner_field=settings.vector.owner_field,
            private_field=settings.vector.private_field,
        ),
    )
    return _search_orchestrator


def get_chat_service(
    orchestrator: SearchOrchestrator | None = None,
    llm_provider: "ILLMProvider | None" = None,
) -> ArchiveChatService:
    """
    Get or create ArchiveChatService instance.

    Overrides bypass the singleton.
    """
    global _chat_service

    if _chat_service is not None and orchestrator is None and llm_provider is None:
        return _chat_service

    from heirloom.infrastructure.llm import get_llm_provider

    service = ArchiveChatService(
        orchestrator=orchestrator or get_search_orchestrator(),
        llm=llm_provider or get_llm_provider(),
        max_context_length=get_settings().search.max_context_length,
    )

    if orchestrator is None and llm_provider is None:
        _chat_service = service

    return service


def get_indexing_service(
    embedding_provider: "IEmbeddingProvider | None" = None,
    vector_index: "IVectorIndex | None" = None,
) -> ContentIndexingService:
    """
    Get or create ContentIndexingService instance.

    Overrides bypass the singleton.
    """
    global _indexing_service

    if _indexing_service is not None and embedding_provider is None and vector_index is None:
        return _indexing_service

    from heirloom.infrastructure.embeddings import get_embedding_provider
    from heirloom.infrastructure.vector import get_vector_index

    settings = get_settings()
    service = ContentIndexingService(
        embedder=EmbeddingClient(
            embedding_provider or get_embedding_provider(),
            settings.embedding.dimension,
        ),
        index=vector_index or get_vector_index(),
        chunk_size=settings.search.chunk_size,
        chunk_overlap=settings.search.chunk_overlap,
        owner_field=settings.vector.owner_field,
        private_field=settings.vector.private_field,
        timestamp_field=settings.vector.timestamp_field,
    )

    if embedding_provider is None and vector_index is None:
        _indexing_service = service

    return service


def reset_services() -> None:
    """Drop cached service instances (for testing)."""
    global _search_orchestrator, _chat_service, _indexing_service
    _search_orchestrator = None
    _chat_service = None
    _indexing_service = None
