"""
Domain exceptions for the archive search service.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class ArchiveSearchError(Exception):
    """Base exception for all archive search errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(ArchiveSearchError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )


class InvalidRequestError(ValidationError):
    """Search request is malformed. Raised before any provider call."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(field, message, value)
        self.code = "INVALID_REQUEST"


class AuthenticationRequiredError(ArchiveSearchError):
    """No authenticated user is attached to the request."""

    def __init__(self) -> None:
        super().__init__("Authentication required", code="AUTH_REQUIRED")


class ForbiddenError(ArchiveSearchError):
    """The requesting user does not own the content item."""

    def __init__(self, document_id: str):
        super().__init__(
            f"Content item '{document_id}' belongs to another user",
            code="FORBIDDEN",
            details={"document_id": document_id},
        )


# LLM Exceptions
class LLMError(ArchiveSearchError):
    """Base exception for generation provider operations."""

    pass


class LLMUnavailableError(LLMError):
    """Generation provider is not available."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"LLM provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(LLMError):
    """Generation request timed out."""

    def __init__(self, timeout: int, operation: str = "generation"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """Generation provider returned an invalid or empty response."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class ModelNotFoundError(LLMError):
    """Requested model not found."""

    def __init__(self, model: str, provider: str):
        super().__init__(
            f"Model '{model}' not found on {provider}",
            code="MODEL_NOT_FOUND",
            details={"model": model, "provider": provider},
        )


class CircuitBreakerOpenError(LLMError):
    """Circuit breaker is open due to repeated failures."""

    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"Circuit breaker open for {provider}, retry in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


# Search Exceptions
class SearchError(ArchiveSearchError):
    """Base exception for search pipeline operations."""

    pass


class EmbeddingError(SearchError):
    """
    Embedding generation failed.

    `position` is the index of the offending text in the query batch
    (0 is the original query).
    """

    def __init__(self, reason: str, position: int = 0, reason_kind: str = "unavailable"):
        super().__init__(
            f"Embedding generation failed: {reason}",
            code="EMBEDDING_FAILED",
            details={"reason": reason, "position": position, "reason_kind": reason_kind},
        )
        self.position = position
        self.reason_kind = reason_kind


class VectorQueryError(SearchError):
    """A single vector index query failed."""

    def __init__(self, reason: str, position: int = 0):
        super().__init__(
            f"Vector query failed: {reason}",
            code="VECTOR_QUERY_FAILED",
            details={"reason": reason, "position": position},
        )
        self.position = position


class SearchFailedError(SearchError):
    """The pipeline reached a fatal state and produced no response."""

    def __init__(self, reason: str, stage: str):
        super().__init__(
            "Search failed",
            code="SEARCH_ERROR",
            details={"reason": reason, "stage": stage},
        )
        self.stage = stage


class ChatError(ArchiveSearchError):
    """Error during chat operations."""

    pass


class ConfigurationError(ArchiveSearchError):
    """Configuration error."""

    pass


class ProviderConfigurationError(ConfigurationError):
    """
    A provider broke its contract in a way that signals a deployment bug.

    Never retried.
    """

    def __init__(self, provider: str, reason: str, expected: Any = None, actual: Any = None):
        super().__init__(
            f"Provider '{provider}' misconfigured: {reason}",
            code="PROVIDER_CONFIGURATION_ERROR",
            details={
                "provider": provider,
                "reason": reason,
                "expected": expected,
                "actual": actual,
            },
        )


class EmbeddingDimensionMismatchError(ProviderConfigurationError):
    """Embedding vector dimension differs from the index dimension."""

    def __init__(self, provider: str, expected: int, actual: int):
        super().__init__(
            provider,
            f"embedding dimension {actual} does not match index dimension {expected}",
            expected=expected,
            actual=actual,
        )
