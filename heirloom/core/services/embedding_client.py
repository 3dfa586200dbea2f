"""
Embedding client.

Wraps an embedding provider with the dimension contract of the index.
"""

from heirloom.config import get_logger
from heirloom.core.exceptions import (
    ArchiveSearchError,
    EmbeddingDimensionMismatchError,
    EmbeddingError,
    ProviderConfigurationError,
)
from heirloom.core.interfaces import IEmbeddingProvider

logger = get_logger(__name__)


class EmbeddingClient:
    """
    Turns text into fixed-dimension vectors.

    No retries and no caching. Failures surface as EmbeddingError carrying
    the text's position in the batch so the caller can drop a variant or
    abort; a dimension mismatch surfaces as ProviderConfigurationError.
    """

    def __init__(self, provider: IEmbeddingProvider, dimension: int):
        self._provider = provider
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str, position: int = 0) -> list[float]:
        """
        Embed one text.

        Args:
            text: Non-empty input text
            position: Index of the text in the current query batch

        Raises:
            EmbeddingError: Provider or network failure
            ProviderConfigurationError: Vector dimension differs from the index
        """
        try:
            vector = await self._provider.embed(text)
        except ProviderConfigurationError:
            raise
        except EmbeddingError as e:
            raise EmbeddingError(
                e.details.get("reason", e.message),
                position=position,
                reason_kind=e.reason_kind,
            ) from e
        except ArchiveSearchError as e:
            raise EmbeddingError(e.message, position=position) from e
        except Exception as e:
            raise EmbeddingError(str(e), position=position) from e

        if len(vector) != self._dimension:
            error = EmbeddingDimensionMismatchError(
                self._provider.__class__.__name__,
                expected=self._dimension,
                actual=len(vector),
            )
            logger.error(
                "provider_configuration_error",
                error_code=error.code,
                expected=self._dimension,
                actual=len(vector),
                position=position,
            )
            raise error

        return vector
