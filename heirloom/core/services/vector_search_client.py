"""
Vector search client.

Issues filtered nearest-neighbor queries against the vector index.
"""

from heirloom.config import get_logger
from heirloom.core.entities import FilterExpression, ScoredMatch
from heirloom.core.exceptions import ProviderConfigurationError, VectorQueryError
from heirloom.core.interfaces import IVectorIndex

logger = get_logger(__name__)


class VectorSearchClient:
    """
    Thin client over an IVectorIndex.

    The index adapter translates the FilterExpression into its own
    predicate syntax. Match order from the provider is preserved.
    """

    def __init__(self, index: IVectorIndex):
        self._index = index

    async def query(
        self,
        vector: list[float],
        filter: FilterExpression,
        top_k: int,
        position: int = 0,
    ) -> list[ScoredMatch]:
        """
        Run one filtered query.

        Args:
            vector: Query embedding
            filter: Shared filter for the request
            top_k: Maximum matches for this query
            position: Index of the originating query, for error reporting

        Raises:
            VectorQueryError: Provider or network failure
        """
        try:
            matches = await self._index.query(vector, filter, top_k)
        except ProviderConfigurationError:
            raise
        except Exception as e:
            raise VectorQueryError(str(e), position=position) from e

        logger.debug("vector_query_complete", position=position, top_k=top_k, matches=len(matches))
        return list(matches)
