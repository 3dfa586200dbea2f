"""
Ollama LLM provider implementation.

Provides HTTP client for the Ollama generate and chat APIs.
"""

import time

import httpx

from heirloom.config import get_logger
from heirloom.config.settings import LLMSettings
from heirloom.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
)
from heirloom.core.interfaces import HealthStatus, LLMResponse
from heirloom.infrastructure.llm.base import BaseLLMProvider, normalize_messages

logger = get_logger(__name__)


class OllamaProvider(BaseLLMProvider):
    """Ollama HTTP API provider."""

    provider_name = "ollama"

    def __init__(
        self,
        settings: LLMSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(settings)
        self.host = self.settings.host.rstrip("/")
        self.model = self.settings.model_name
        self.timeout = self.settings.timeout
        self.max_tokens = self.settings.max_tokens
        self.temperature = self.settings.temperature
        self._transport = transport

    async def _make_request(self, endpoint: str, payload: dict) -> dict:
        """Make HTTP request to Ollama API."""
        url = f"{self.host}/{endpoint}"

        async with httpx.AsyncClient(timeout=self.timeout + 5, transport=self._transport) as client:
            response = await client.post(url, json=payload, timeout=self.timeout)

            if response.status_code == 404:
                raise ModelNotFoundError(payload.get("model", "unknown"), "ollama")

            if response.status_code != 200:
                raise LLMUnavailableError("ollama", f"HTTP {response.status_code}: {response.text[:200]}")

            return response.json()

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
    ) -> LLMResponse:
        """Generate text completion."""
        payload: dict = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": temperature if temperature is not None else self.temperature,
                "num_predict": max_tokens or self.max_tokens,
            },
        }

        if system_prompt:
            payload["system"] = system_prompt

        if stop:
            payload["options"]["stop"] = stop

        async def _do_generate() -> LLMResponse:
            start_time = time.time()
            result = await self._make_request("api/generate", payload)
            elapsed = time.time() - start_time

            response_text = result.get("response", "")
            if not response_text.strip():
                raise LLMResponseError(
                    f"Empty response (done_reason={result.get('done_reason')})",
                    response_text,
                )

            logger.info(
                "ollama_generate",
                model=self.model,
                prompt_len=len(prompt),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )

            return LLMResponse(
                text=response_text,
                model=self.model,
                done=result.get("done", True),
                done_reason=result.get("done_reason"),
                prompt_tokens=result.get("prompt_eval_count", 0),
                completion_tokens=result.get("eval_count", 0),
            )

        return await self._with_resilience(_do_generate)

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Chat completion with message history."""
        payload = {
            "model": self.model,
            "messages": normalize_messages(messages),
            "stream": False,
            "options": {
                "temperature": temperature if temperature is not None else self.temperature,
                "num_predict": max_tokens or self.max_tokens,
            },
        }

        async def _do_chat() -> LLMResponse:
            start_time = time.time()
            result = await self._make_request("api/chat", payload)
            elapsed = time.time() - start_time

            response_text = result.get("message", {}).get("content", "")
            if not response_text.strip():
                raise LLMResponseError("Empty chat response", response_text)

            logger.info(
                "ollama_chat",
                model=self.model,
                messages=len(messages),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )

            return LLMResponse(
                text=response_text,
                model=self.model,
                done=result.get("done", True),
            )

        return await self._with_resilience(_do_chat)

    async def check_health(self) -> HealthStatus:
        """Check if Ollama is running and the model is pulled."""
        start_time = time.time()

        try:
            async with httpx.AsyncClient(timeout=10, transport=self._transport) as client:
                response = await client.get(f"{self.host}/api/tags")

            if response.status_code != 200:
                return self._update_health_cache(
                    HealthStatus(available=False, provider="ollama", error=f"HTTP {response.status_code}")
                )

            models = [m.get("name", "") for m in response.json().get("models", [])]
            if self.model not in models and not any(self.model in m for m in models):
                return self._update_health_cache(
                    HealthStatus(
                        available=False,
                        provider="ollama",
                        model=self.model,
                        error=f"Model '{self.model}' not installed. Run: ollama pull {self.model}",
                    )
                )

            return self._update_health_cache(
                HealthStatus(
                    available=True,
                    provider="ollama",
                    model=self.model,
                    response_time_ms=(time.time() - start_time) * 1000,
                )
            )

        except httpx.ConnectError:
            return self._update_health_cache(
                HealthStatus(
                    available=False,
                    provider="ollama",
                    error=f"Cannot connect to Ollama at {self.host}. Is 'ollama serve' running?",
                )
            )

        except Exception as e:
            return self._update_health_cache(
                HealthStatus(available=False, provider="ollama", error=str(e))
            )
