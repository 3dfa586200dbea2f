"""
Query expansion.

Asks a generation provider for alternate phrasings of a search query.
"""

from heirloom.config import get_logger
from heirloom.core.entities import BestEffortResult, SearchRequest
from heirloom.core.interfaces import ILLMProvider

logger = get_logger(__name__)


def build_expansion_prompt(request: SearchRequest, variant_count: int = 3) -> str:
    """
    Build the instruction sent to the generation provider.

    Folds in the literal query and any context item, content type
    and tags present on the request.
    """
    lines = [f'Search query: "{request.query.strip()}"']

    if request.context_item_id:
        lines.append("Consider this specific content item for context.")
    if request.content_type:
        lines.append(f"Focus on {request.content_type.value} content.")
    if request.tag_filter:
        lines.append(f"Related tags: {', '.join(sorted(request.tag_filter))}")

    lines.append(
        f"Generate {variant_count} semantic search variations for family history context."
    )
    lines.append("Return one variation per line.")
    return "\n".join(lines)


def parse_variants(text: str, max_variants: int | None = None) -> list[str]:
    """
    Split a free-text provider response into query variants.

    One variant per line; blank lines are dropped and each kept line is
    trimmed. Duplicates are kept. Returns at most `max_variants` entries.
    """
    variants = [line.strip() for line in text.splitlines() if line.strip()]
    if max_variants is not None:
        variants = variants[:max_variants]
    return variants


class QueryExpander:
    """
    Generates variant phrasings for a search request.

    Expansion is an enhancement: any provider failure yields an empty
    variant list, never an exception.
    """

    def __init__(
        self,
        llm: ILLMProvider,
        variant_count: int = 3,
        max_variants: int = 5,
        max_tokens: int = 150,
        temperature: float = 0.7,
    ):
        self._llm = llm
        self._variant_count = variant_count
        self._max_variants = max_variants
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def try_expand(self, request: SearchRequest) -> BestEffortResult[list[str]]:
        """Expand a request, reporting degradation explicitly."""
        prompt = build_expansion_prompt(request, self._variant_count)

        try:
            response = await self._llm.generate(
                prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as e:
            logger.warning(
                "query_expansion_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return BestEffortResult.degraded(f"expansion_failed: {type(e).__name__}")

        variants = parse_variants(response.text, self._max_variants)
        logger.debug("query_expanded", variants=len(variants))
        return BestEffortResult.ok(variants)

    async def expand(self, request: SearchRequest) -> list[str]:
        """Return variant queries only, excluding the original."""
        result = await self.try_expand(request)
        return result.value_or([])
