"""
HTTP embedding providers.

Ollama (/api/embed) adapter over httpx.
One request per text; no retries and no local length validation.
"""

import time
from typing import Any

import httpx

from heirloom.config import get_logger
from heirloom.config.settings import EmbeddingSettings
from heirloom.core.exceptions import EmbeddingError, ProviderConfigurationError
from heirloom.core.interfaces import HealthStatus, IEmbeddingProvider

logger = get_logger(__name__)

INVALID_INPUT_STATUSES = frozenset({400, 413, 422})


def classify_status(status_code: int) -> str:
    """Map an HTTP status to an embedding failure kind."""
    if status_code == 429:
        return "rate_limited"
    if status_code in INVALID_INPUT_STATUSES:
        return "invalid_input"
    return "unavailable"


class HTTPEmbeddingProvider(IEmbeddingProvider):
    """Shared request handling for HTTP embedding APIs."""

    provider_name = "embedding"
    endpoint = ""

    def __init__(
        self,
        settings: EmbeddingSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self.host = settings.host.rstrip("/")
        self.model = settings.model_name
        self.dimension = settings.dimension
        self.timeout = settings.timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {}

    def _payload(self, text: str) -> dict[str, Any]:
        return {"model": self.model, "input": text}

    def _extract(self, body: dict[str, Any]) -> list[float]:
        raise NotImplementedError

    def get_dimension(self) -> int:
        return self.dimension

    async def embed(self, text: str) -> list[float]:
        """Embed one text with a single provider call."""
        url = f"{self.host}/{self.endpoint}"
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=self._payload(text), headers=self._headers())
        except httpx.TimeoutException as e:
            raise EmbeddingError(f"timeout: {e}", reason_kind="timeout") from e
        except httpx.TransportError as e:
            raise EmbeddingError(f"network error: {e}", reason_kind="unavailable") from e

        if response.status_code in (401, 403):
            raise ProviderConfigurationError(
                self.provider_name, f"HTTP {response.status_code}: credentials rejected"
            )

        if response.status_code != 200:
            raise EmbeddingError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                reason_kind=classify_status(response.status_code),
            )

        try:
            vector = self._extract(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
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

    async def check_health(self) -> HealthStatus:
        """Embed a short text and report reachability."""
        start_time = time.time()
        try:
            await self.embed("health check")
        except Exception as e:
            return HealthStatus(
                available=False, provider=self.provider_name, model=self.model, error=str(e)
            )
        return HealthStatus(
            available=True,
            provider=self.provider_name,
            model=self.model,
            response_time_ms=(time.time() - start_time) * 1000,
        )


class OllamaEmbeddingProvider(HTTPEmbeddingProvider):
    """Ollama embed API."""

    provider_name = "ollama"
    endpoint = "api/embed"

    def _extract(self, body: dict[str, Any]) -> list[float]:
        return [float(v) for v in body["embeddings"][0]]
