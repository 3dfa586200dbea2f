"""
Chat endpoints.
"""

from fastapi import APIRouter, Depends

from heirloom.api.dependencies import get_chat_use_case, get_current_user_id
from heirloom.application.dto.requests import ChatRequest
from heirloom.application.dto.responses import ChatResponse
from heirloom.application.use_cases import ChatWithContextUseCase

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post(
    "",
    response_model=ChatResponse,
)
async def chat(
    request: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    use_case: ChatWithContextUseCase = Depends(get_chat_use_case),
) -> ChatResponse:
    """
    Ask a question about the family history.

    The answer is grounded in archive items visible to the caller,
    unless an explicit context is supplied.
    """
    answer = await use_case.execute(request, user_id)
    return use_case.to_response(answer)
