"""
Search Archive Use Case.

Maps the HTTP request onto the search pipeline and back.
"""

from heirloom.application.dto.requests import SearchArchiveRequest
from heirloom.application.dto.responses import (
    AppliedFiltersResponse,
    SearchArchiveResponse,
    SearchMetadataResponse,
    SearchResultResponse,
    TimeRangeResponse,
)
from heirloom.application.services import get_search_orchestrator
from heirloom.config import get_logger
from heirloom.core.entities import (
    DisplayRecord,
    SearchRequest,
    SearchResponse,
    TimeRange,
)
from heirloom.core.services import SearchOrchestrator

logger = get_logger(__name__)


def to_search_request(request: SearchArchiveRequest, user_id: str) -> SearchRequest:
    """Build the core request; the user id comes from the authenticated caller."""
    return SearchRequest(
        query=request.query,
        requesting_user_id=user_id,
        content_type=request.content_type,
        context_item_id=request.context_id,
        time_range=(
            TimeRange(start=request.time_range.start, end=request.time_range.end)
            if request.time_range
            else None
        ),
        tag_filter=frozenset(request.tags) if request.tags else None,
    )


def to_result_response(record: DisplayRecord) -> SearchResultResponse:
    return SearchResultResponse(
        id=record.id,
        title=record.title,
        type=record.type,
        preview=record.preview,
        tags=record.tags,
        uploaded_by=record.uploaded_by,
        uploaded_at=record.uploaded_at,
        score=record.score,
    )


class SearchArchiveUseCase:
    """
    Use case for multi-query semantic search over the archive.
    """

    def __init__(self, orchestrator: SearchOrchestrator | None = None):
        self._orchestrator = orchestrator

    def _get_orchestrator(self) -> SearchOrchestrator:
        if self._orchestrator is None:
            self._orchestrator = get_search_orchestrator()
        return self._orchestrator

    async def execute(self, request: SearchArchiveRequest, user_id: str) -> SearchResponse:
        """
        Execute search use case.

        Args:
            request: Search request body
            user_id: Authenticated requesting user

        Returns:
            Core SearchResponse
        """
        return await self._get_orchestrator().search(to_search_request(request, user_id))

    def to_response(self, result: SearchResponse) -> SearchArchiveResponse:
        """Convert to API response format."""
        filters = result.applied_filters

        return SearchArchiveResponse(
            results=[to_result_response(r) for r in result.results],
            metadata=SearchMetadataResponse(
                total_results=len(result.results),
                expanded_queries=result.expanded_queries,
                applied_filters=AppliedFiltersResponse(
                    content_type=filters.content_type.value if filters.content_type else None,
                    time_range=(
                        TimeRangeResponse(start=filters.time_range.start, end=filters.time_range.end)
                        if filters.time_range
                        else None
                    ),
                    tags=filters.tags,
                ),
                degraded=result.degraded,
            ),
        )
