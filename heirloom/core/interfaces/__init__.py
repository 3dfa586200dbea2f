"""Core interfaces (ports) for dependency injection."""

from heirloom.core.interfaces.llm import (
    HealthStatus,
    IEmbeddingProvider,
    ILLMProvider,
    LLMResponse,
)
from heirloom.core.interfaces.vector import IAccessPolicy, IVectorIndex

__all__ = [
    # Provider interfaces
    "ILLMProvider",
    "IEmbeddingProvider",
    "LLMResponse",
    "HealthStatus",
    # Index interfaces
    "IVectorIndex",
    "IAccessPolicy",
]
