"""
OpenAI chat completions provider.

Uses the official SDK (AsyncOpenAI). SDK retries are disabled; retry and
circuit breaking come from BaseLLMProvider.
"""

import time

import httpx
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
)

from heirloom.config import get_logger
from heirloom.config.settings import LLMSettings
from heirloom.core.exceptions import (
    LLMResponseError,
    LLMUnavailableError,
    ModelNotFoundError,
    ProviderConfigurationError,
)
from heirloom.core.interfaces import HealthStatus, LLMResponse
from heirloom.infrastructure.llm.base import BaseLLMProvider, normalize_messages

logger = get_logger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI-compatible chat completions API."""

    provider_name = "openai"

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
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        if not self.settings.api_key:
            raise ProviderConfigurationError("openai", "LLM_API_KEY is not set")

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

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
    ) -> LLMResponse:
        """Single-turn completion built on the chat endpoint."""
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        return await self._complete(messages, temperature, max_tokens, stop, operation="generate")

    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """Chat completion with message history."""
        return await self._complete(
            normalize_messages(messages), temperature, max_tokens, None, operation="chat"
        )

    async def _create(self, **params) -> object:
        """
        Call the completions endpoint, mapping SDK errors.

        Timeouts and connection errors are re-raised as the builtin types
        so the resilience layer retries them.
        """
        try:
            return await self._get_client().chat.completions.create(**params)
        except APITimeoutError as e:
            raise TimeoutError(str(e)) from e
        except APIConnectionError as e:
            raise ConnectionError(str(e)) from e
        except NotFoundError as e:
            raise ModelNotFoundError(params.get("model", "unknown"), "openai") from e
        except (AuthenticationError, PermissionDeniedError) as e:
            raise ProviderConfigurationError(
                "openai", f"HTTP {e.status_code}: credentials rejected"
            ) from e
        except APIStatusError as e:
            raise LLMUnavailableError("openai", f"HTTP {e.status_code}: {e.message[:200]}") from e

    async def _complete(
        self,
        messages: list[dict[str, str]],
        temperature: float | None,
        max_tokens: int | None,
        stop: list[str] | None,
        operation: str,
    ) -> LLMResponse:
        params: dict = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        if stop:
            params["stop"] = stop

        async def _do_complete() -> LLMResponse:
            start_time = time.time()
            completion = await self._create(**params)
            elapsed = time.time() - start_time

            if not completion.choices:
                raise LLMResponseError("No choices in response")

            choice = completion.choices[0]
            response_text = (choice.message.content if choice.message else None) or ""
            if not response_text.strip():
                raise LLMResponseError(
                    f"Empty response (finish_reason={choice.finish_reason})",
                    response_text,
                )

            usage = completion.usage

            logger.info(
                f"openai_{operation}",
                model=self.model,
                messages=len(messages),
                response_len=len(response_text),
                elapsed_ms=int(elapsed * 1000),
            )

            return LLMResponse(
                text=response_text,
                model=completion.model or self.model,
                done=True,
                done_reason=choice.finish_reason,
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
            )

        return await self._with_resilience(_do_complete)

    async def check_health(self) -> HealthStatus:
        """Check that the API is reachable and the model exists."""
        start_time = time.time()

        try:
            await self._get_client().models.retrieve(self.model)

        except APIStatusError as e:
            return self._update_health_cache(
                HealthStatus(
                    available=False,
                    provider="openai",
                    model=self.model,
                    error=f"HTTP {e.status_code}",
                )
            )

        except Exception as e:
            return self._update_health_cache(
                HealthStatus(available=False, provider="openai", model=self.model, error=str(e))
            )

        return self._update_health_cache(
            HealthStatus(
                available=True,
                provider="openai",
                model=self.model,
                response_time_ms=(time.time() - start_time) * 1000,
            )
        )
