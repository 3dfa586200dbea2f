"""
Archive chat service.

Grounds a conversational answer in search results.
"""

from dataclasses import dataclass, field

from heirloom.config import get_logger
from heirloom.core.entities import BestEffortResult, DisplayRecord, SearchRequest
from heirloom.core.exceptions import ChatError, InvalidRequestError, LLMError
from heirloom.core.interfaces import ILLMProvider
from heirloom.core.services.search_orchestrator import SearchOrchestrator

logger = get_logger(__name__)

HISTORIAN_PROMPT = (
    "You are a helpful family historian. Use this context to answer questions: {context}"
)
ARCHIVE_ASSISTANT_PROMPT = (
    "You are a helpful assistant for a family legacy archive. "
    "Answer questions about family history and documents."
)


@dataclass
class ChatAnswer:
    """Answer produced by the chat service."""

    content: str
    sources: list[DisplayRecord] = field(default_factory=list)
    degraded: list[str] = field(default_factory=list)


def build_context(records: list[DisplayRecord], max_length: int = 4000) -> str:
    """
    Format records as a numbered context block.

    Each entry is "[n] title (type): preview". The block is cut at
    max_length; a partially fitting entry is kept only if more than
    100 characters of it fit.
    """
    parts: list[str] = []
    total = 0

    for i, record in enumerate(records):
        entry = f"[{i + 1}] {record.title}"
        if record.type:
            entry += f" ({record.type})"
        if record.preview:
            entry += f": {record.preview}"

        if total + len(entry) > max_length:
            remaining = max_length - total
            if remaining > 100:
                parts.append(entry[: remaining - 3] + "...")
            break

        parts.append(entry)
        total += len(entry) + 2  # +2 for the joining blank line

    return "\n\n".join(parts)


class ArchiveChatService:
    """
    Retrieval-augmented chat over the archive.

    Retrieval is best-effort: when search fails the answer is generated
    without archive context and the degradation is reported.
    """

    def __init__(
        self,
        orchestrator: SearchOrchestrator,
        llm: ILLMProvider,
        max_context_length: int = 4000,
    ):
        self._orchestrator = orchestrator
        self._llm = llm
        self._max_context_length = max_context_length

    async def retrieve(self, request: SearchRequest) -> BestEffortResult[list[DisplayRecord]]:
        """Run the search pipeline for chat grounding."""
        try:
            response = await self._orchestrator.search(request)
        except InvalidRequestError:
            raise
        except Exception as e:
            logger.warning("chat_retrieval_failed", error=str(e), error_type=type(e).__name__)
            return BestEffortResult.degraded(f"retrieval_failed: {type(e).__name__}")

        return BestEffortResult.ok(response.results)

    async def answer(
        self,
        messages: list[dict[str, str]],
        request: SearchRequest | None = None,
        context: str | None = None,
    ) -> ChatAnswer:
        """
        Answer the latest user message.

        Args:
            messages: Conversation so far, last entry is the user's question
            request: Search scoping for retrieval; None skips retrieval
            context: Caller-supplied context, used verbatim instead of retrieval

        Returns:
            ChatAnswer with the reply and the records used as context
        """
        if not messages:
            raise InvalidRequestError("messages", "must contain at least one message")

        sources: list[DisplayRecord] = []
        degraded: list[str] = []

        if context is None and request is not None:
            retrieval = await self.retrieve(request)
            if retrieval.is_ok:
                sources = retrieval.value_or([])
                context = build_context(sources, self._max_context_length) or None
            else:
                degraded.append(retrieval.reason or "retrieval_failed")

        system_prompt = HISTORIAN_PROMPT.format(context=context) if context else ARCHIVE_ASSISTANT_PROMPT

        try:
            response = await self._llm.chat(
                [{"role": "system", "content": system_prompt}, *messages],
            )
        except LLMError:
            raise
        except Exception as e:
            logger.error("chat_failed", error=str(e))
            raise ChatError(f"Failed to get AI response: {e}")

        logger.info(
            "chat_complete",
            sources=len(sources),
            response_len=len(response.text),
            degraded=degraded,
        )

        return ChatAnswer(content=response.text, sources=sources, degraded=degraded)
