"""
OpenAI embedding provider.

Uses the official SDK (AsyncOpenAI) with SDK retries disabled; one
request per text, as the HTTP adapters do.
"""

import time

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    BadRequestError,
    PermissionDeniedError,
    RateLimitError,
    UnprocessableEntityError,
)

from heirloom.config import get_logger
from heirloom.config.settings import EmbeddingSettings
from heirloom.core.exceptions import EmbeddingError, ProviderConfigurationError
from heirloom.infrastructure.embeddings.http import HTTPEmbeddingProvider, classify_status

logger = get_logger(__name__)


class OpenAIEmbeddingProvider(HTTPEmbeddingProvider):
    """OpenAI embeddings API (text-embedding-ada-002 by default)."""

    provider_name = "openai"

    def __init__(
        self,
        settings: EmbeddingSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(settings, transport)
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if not self.settings.api_key:
            raise ProviderConfigurationError("openai", "EMBED_API_KEY is not set")

        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=f"{self.host}/v1",
                timeout=self.timeout,
                max_retries=0,
                http_client=(
                    httpx.AsyncClient(transport=self._transport, timeout=self.timeout)
                    if self._transport
                    else None
                ),
            )
        return self._client

    async def embed(self, text: str) -> list[float]:
        """Embed one text with a single API call."""
        client = self._get_client()
        start_time = time.time()

        try:
            response = await client.embeddings.create(
                model=self.model, input=text, encoding_format="float"
            )
        except APITimeoutError as e:
            raise EmbeddingError(f"timeout: {e}", reason_kind="timeout") from e
        except APIConnectionError as e:
            raise EmbeddingError(f"network error: {e}", reason_kind="unavailable") from e
        except (AuthenticationError, PermissionDeniedError) as e:
            raise ProviderConfigurationError(
                "openai", f"HTTP {e.status_code}: credentials rejected"
            ) from e
        except RateLimitError as e:
            raise EmbeddingError(f"HTTP 429: {e.message[:200]}", reason_kind="rate_limited") from e
        except (BadRequestError, UnprocessableEntityError) as e:
            raise EmbeddingError(
                f"HTTP {e.status_code}: {e.message[:200]}", reason_kind="invalid_input"
            ) from e
        except APIStatusError as e:
            raise EmbeddingError(
                f"HTTP {e.status_code}: {e.message[:200]}",
                reason_kind=classify_status(e.status_code),
            ) from e

        try:
            vector = [float(v) for v in response.data[0].embedding]
        except (ValueError, IndexError, TypeError) as e:
            raise EmbeddingError(f"malformed response: {e}", reason_kind="unavailable") from e

        logger.debug(
            "embedding_complete",
            provider=self.provider_name,
            model=self.model,
            text_len=len(text),
            dimension=len(vector),
            elapsed_ms=int((time.time() - start_time) * 1000),
        )
        return vector
