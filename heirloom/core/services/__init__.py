"""Core services: the search pipeline and its consumers."""

from heirloom.core.services.chat_service import ArchiveChatService, ChatAnswer, build_context
from heirloom.core.services.embedding_client import EmbeddingClient
from heirloom.core.services.indexing_service import ContentIndexingService, split_text
from heirloom.core.services.query_expander import (
    QueryExpander,
    build_expansion_prompt,
    parse_variants,
)
from heirloom.core.services.result_merger import ResultMerger, merge_results
from heirloom.core.services.search_orchestrator import (
    SearchOrchestrator,
    format_result,
    validate_request,
)
from heirloom.core.services.vector_search_client import VectorSearchClient

__all__ = [
    "ArchiveChatService",
    "ChatAnswer",
    "build_context",
    "ContentIndexingService",
    "split_text",
    "EmbeddingClient",
    "QueryExpander",
    "build_expansion_prompt",
    "parse_variants",
    "ResultMerger",
    "merge_results",
    "SearchOrchestrator",
    "format_result",
    "validate_request",
    "VectorSearchClient",
]
