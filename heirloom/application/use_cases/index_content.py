"""
Index Content Use Case.

Best-effort vectorization of archive items.
"""

from datetime import datetime, timezone
from typing import Any

from heirloom.application.dto.requests import IndexContentRequest
from heirloom.application.dto.responses import IndexContentResponse
from heirloom.application.services import get_indexing_service
from heirloom.config import get_logger
from heirloom.core.entities import ArchiveItem, BestEffortResult
from heirloom.core.services import ContentIndexingService

logger = get_logger(__name__)


class IndexContentUseCase:
    """
    Use case for indexing and removing archive items.

    The caller becomes the owner of indexed content.
    """

    def __init__(self, indexing_service: ContentIndexingService | None = None):
        self._indexer = indexing_service

    def _get_indexer(self) -> ContentIndexingService:
        if self._indexer is None:
            self._indexer = get_indexing_service()
        return self._indexer

    async def execute(self, request: IndexContentRequest, user_id: str) -> BestEffortResult[int]:
        """Index one item on behalf of `user_id`."""
        item = ArchiveItem(
            document_id=request.document_id,
            owner_id=user_id,
            title=request.title or "Untitled",
            content_type=request.content_type,
            text=request.text,
            tags=request.tags,
            uploaded_by=request.uploaded_by or user_id,
            uploaded_at=request.uploaded_at or datetime.now(timezone.utc),
            is_private=request.is_private,
            preview=request.preview,
        )
        return await self._get_indexer().index_item(item)

    async def remove(self, document_id: str, user_id: str) -> BestEffortResult[str]:
        """Remove an item's records; only its owner may do so."""
        return await self._get_indexer().remove_item(document_id, user_id)

    async def stats(self) -> dict[str, Any]:
        return await self._get_indexer().stats()

    def to_response(self, document_id: str, result: BestEffortResult[int]) -> IndexContentResponse:
        """Convert to API response format."""
        return IndexContentResponse(
            document_id=document_id,
            indexed=result.is_ok,
            chunks=result.value_or(0),
            reason=result.reason,
        )
