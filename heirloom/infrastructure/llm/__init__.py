"""Generation providers."""

from heirloom.infrastructure.llm.base import BaseLLMProvider, CircuitBreakerState
from heirloom.infrastructure.llm.factory import (
    create_llm_provider,
    get_llm_provider,
)
from heirloom.infrastructure.llm.ollama import OllamaProvider
from heirloom.infrastructure.llm.openai import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "CircuitBreakerState",
    "create_llm_provider",
    "get_llm_provider",
    "OllamaProvider",
    "OpenAIProvider",
]
