"""
Content indexing endpoints.
"""

from fastapi import APIRouter, Depends

from heirloom.api.dependencies import get_current_user_id, get_index_content_use_case
from heirloom.application.dto.requests import IndexContentRequest
from heirloom.application.dto.responses import IndexContentResponse, IndexStatsResponse
from heirloom.application.use_cases import IndexContentUseCase

router = APIRouter(prefix="/api/content", tags=["content"])


@router.post(
    "/index",
    response_model=IndexContentResponse,
)
async def index_content(
    request: IndexContentRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: IndexContentUseCase = Depends(get_index_content_use_case),
) -> IndexContentResponse:
    """
    Vectorize an archive item for search.

    Best-effort: provider failures are reported in the body, not as errors.
    """
    result = await use_case.execute(request, user_id)
    return use_case.to_response(request.document_id, result)


@router.delete(
    "/{document_id}/index",
    response_model=IndexContentResponse,
)
async def remove_content(
    document_id: str,
    user_id: str = Depends(get_current_user_id),
    use_case: IndexContentUseCase = Depends(get_index_content_use_case),
) -> IndexContentResponse:
    """Remove every indexed record of an archive item owned by the caller."""
    result = await use_case.remove(document_id, user_id)
    return IndexContentResponse(
        document_id=document_id,
        indexed=False,
        reason=result.reason,
    )


@router.get(
    "/index/stats",
    response_model=IndexStatsResponse,
)
async def index_stats(
    user_id: str = Depends(get_current_user_id),
    use_case: IndexContentUseCase = Depends(get_index_content_use_case),
) -> IndexStatsResponse:
    """Vector index statistics."""
    return IndexStatsResponse(stats=await use_case.stats())
