"""
Abstract interfaces for generation and embedding providers.

Defines contracts that the OpenAI and Ollama adapters must fulfill.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class LLMResponse:
    """Response from text generation."""

    text: str
    model: str
    done: bool = True
    done_reason: str | None = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    error: str | None = None


@dataclass
class HealthStatus:
    """Provider health status."""

    available: bool
    provider: str
    model: str | None = None
    error: str | None = None
    response_time_ms: float | None = None


class ILLMProvider(ABC):
    """
    Abstract interface for text generation providers.

    Implementations: OpenAIProvider, OllamaProvider
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        stop: list[str] | None = None,
    ) -> LLMResponse:
        """
        Generate text completion.

        Args:
            prompt: User prompt
            system_prompt: Optional system prompt
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum tokens to generate
            stop: Stop sequences

        Returns:
            LLMResponse with generated text
        """
        pass

    @abstractmethod
    async def chat(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Chat completion with message history.

        Args:
            messages: List of {"role": "user"|"assistant"|"system", "content": "..."}
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with assistant reply
        """
        pass

    @abstractmethod
    async def check_health(self) -> HealthStatus:
        """Check if the provider is reachable."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Synchronous availability check (cached)."""
        pass


class IEmbeddingProvider(ABC):
    """
    Abstract interface for embedding providers.

    Implementations: OpenAIEmbeddingProvider, OllamaEmbeddingProvider
    """

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """
        Generate embedding for a single text.

        No local length validation and no retries; provider
        errors propagate to the caller.
        """
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the configured embedding dimension."""
        pass

    @abstractmethod
    async def check_health(self) -> HealthStatus:
        """Check if the provider is reachable."""
        pass
