"""
Chat With Context Use Case.

Handles archive-grounded chat conversations.
"""

from heirloom.application.dto.requests import ChatRequest
from heirloom.application.dto.responses import ChatResponse
from heirloom.application.services import get_chat_service
from heirloom.application.use_cases.search_archive import to_result_response
from heirloom.config import get_logger
from heirloom.core.entities import SearchRequest
from heirloom.core.services import ArchiveChatService, ChatAnswer

logger = get_logger(__name__)


class ChatWithContextUseCase:
    """
    Use case for retrieval-augmented chat.

    Retrieval runs the search pipeline on the latest user message,
    scoped to the requesting user's visibility.
    """

    def __init__(self, chat_service: ArchiveChatService | None = None):
        self._chat = chat_service

    def _get_chat(self) -> ArchiveChatService:
        if self._chat is None:
            self._chat = get_chat_service()
        return self._chat

    async def execute(self, request: ChatRequest, user_id: str) -> ChatAnswer:
        """
        Execute chat use case.

        Args:
            request: Chat request with message history
            user_id: Authenticated requesting user

        Returns:
            ChatAnswer with reply and sources
        """
        messages = [{"role": m.role, "content": m.content} for m in request.messages]

        last_user = next(
            (m.content for m in reversed(request.messages) if m.role == "user" and m.content.strip()),
            None,
        )

        search_request = None
        if request.context is None and last_user is not None:
            search_request = SearchRequest(
                query=last_user,
                requesting_user_id=user_id,
                content_type=request.content_type,
                tag_filter=frozenset(request.tags) if request.tags else None,
            )

        logger.info(
            "chat_started",
            messages=len(messages),
            explicit_context=request.context is not None,
        )

        return await self._get_chat().answer(messages, request=search_request, context=request.context)

    def to_response(self, answer: ChatAnswer) -> ChatResponse:
        """Convert to API response format."""
        return ChatResponse(
            content=answer.content,
            sources=[to_result_response(r) for r in answer.sources],
            degraded=answer.degraded,
        )
