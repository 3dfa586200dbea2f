"""
Search endpoints.
"""

from fastapi import APIRouter, Depends

from heirloom.api.dependencies import get_current_user_id, get_search_archive_use_case
from heirloom.application.dto.requests import SearchArchiveRequest
from heirloom.application.dto.responses import SearchArchiveResponse
from heirloom.application.use_cases import SearchArchiveUseCase

router = APIRouter(prefix="/api/search", tags=["search"])


@router.post(
    "",
    response_model=SearchArchiveResponse,
)
async def search_archive(
    request: SearchArchiveRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: SearchArchiveUseCase = Depends(get_search_archive_use_case),
) -> SearchArchiveResponse:
    """
    Semantic search over the family archive.

    The query is expanded into variant phrasings, each is embedded and
    matched against the index, and the merged results are returned.
    Only items the caller may see are included.
    """
    result = await use_case.execute(request, user_id)
    return use_case.to_response(result)
