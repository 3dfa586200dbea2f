"""
Base LLM provider with retry and circuit breaker patterns.

Provides resilience patterns for all generation adapters.
"""

import time
from abc import ABC
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar, cast

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from heirloom.config import get_logger, get_settings
from heirloom.config.settings import LLMSettings
from heirloom.core.exceptions import (
    CircuitBreakerOpenError,
    LLMTimeoutError,
    LLMUnavailableError,
)
from heirloom.core.interfaces import HealthStatus, ILLMProvider

logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_ERRORS = (TimeoutError, ConnectionError, httpx.TransportError)


@dataclass
class CircuitBreakerState:
    """State for circuit breaker pattern."""

    provider: str = "llm"
    failures: int = 0
    last_failure_time: float = 0.0
    is_open: bool = False
    cooldown_seconds: int = 60
    failure_threshold: int = 3

    def record_failure(self) -> None:
        """Record a failure and potentially open the circuit."""
        self.failures += 1
        self.last_failure_time = time.time()

        if self.failures >= self.failure_threshold:
            self.is_open = True
            logger.warning(
                "circuit_breaker_opened",
                provider=self.provider,
                failures=self.failures,
                cooldown=self.cooldown_seconds,
            )

    def record_success(self) -> None:
        """Record a success and reset the circuit."""
        if self.is_open:
            logger.info("circuit_breaker_closed", provider=self.provider)
        self.failures = 0
        self.is_open = False

    def check(self) -> None:
        """
        Check if circuit allows requests.

        Raises CircuitBreakerOpenError if circuit is open and cooldown not elapsed.
        """
        if not self.is_open:
            return

        elapsed = time.time() - self.last_failure_time
        if elapsed < self.cooldown_seconds:
            raise CircuitBreakerOpenError(self.provider, self.cooldown_remaining)

        # Half-open: let one request through
        logger.info("circuit_breaker_half_open", provider=self.provider)

    @property
    def cooldown_remaining(self) -> int:
        """Seconds remaining in cooldown."""
        if not self.is_open:
            return 0
        elapsed = time.time() - self.last_failure_time
        return max(0, int(self.cooldown_seconds - elapsed))


class BaseLLMProvider(ILLMProvider, ABC):
    """
    Base class for generation providers with resilience patterns.

    Provides:
    - Retries with exponential backoff on transport errors
    - Circuit breaker for cascading failure prevention
    - Health check caching
    """

    provider_name = "llm"

    def __init__(self, settings: LLMSettings | None = None) -> None:
        self.settings = settings or get_settings().llm
        self.circuit_breaker = CircuitBreakerState(
            provider=self.provider_name,
            failure_threshold=self.settings.failure_threshold,
            cooldown_seconds=self.settings.cooldown_seconds,
        )
        self._health_cache: HealthStatus | None = None
        self._health_cache_time: float = 0.0
        self._health_cache_ttl: float = 30.0

    def _get_retry_decorator(self) -> Any:
        """Get tenacity retry decorator with current settings."""
        delay = self.settings.retry_delay
        return retry(
            stop=stop_after_attempt(max(self.settings.max_retries, 1)),
            wait=wait_exponential(
                multiplier=delay,
                min=delay,
                max=delay * (self.settings.retry_multiplier**3),
            ),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "llm_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _with_resilience(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Execute operation with retry and circuit breaker.

        Raises:
            CircuitBreakerOpenError: If circuit is open
            LLMTimeoutError: If operation times out
            LLMUnavailableError: If provider is unreachable
        """
        self.circuit_breaker.check()

        try:
            retry_decorator = self._get_retry_decorator()
            result = await retry_decorator(operation)(*args, **kwargs)

            self.circuit_breaker.record_success()
            return cast(T, result)

        except (TimeoutError, httpx.TimeoutException):
            self.circuit_breaker.record_failure()
            raise LLMTimeoutError(self.settings.timeout)

        except (ConnectionError, OSError, httpx.TransportError) as e:
            self.circuit_breaker.record_failure()
            raise LLMUnavailableError(self.provider_name, str(e))

        except LLMUnavailableError:
            self.circuit_breaker.record_failure()
            raise

        except Exception as e:
            # Invalid responses do not trip the circuit
            logger.error("llm_error", error=str(e), error_type=type(e).__name__)
            raise

    def is_available(self) -> bool:
        """
        Synchronous availability check with caching.

        Uses cached health status to avoid blocking calls.
        """
        if self.circuit_breaker.is_open:
            return False

        now = time.time()
        if self._health_cache and (now - self._health_cache_time) < self._health_cache_ttl:
            return self._health_cache.available

        return True

    def _update_health_cache(self, status: HealthStatus) -> HealthStatus:
        self._health_cache = status
        self._health_cache_time = time.time()
        return status


def normalize_messages(messages: list[dict[str, str]]) -> list[dict[str, str]]:
    """Coerce chat messages to {"role", "content"} pairs."""
    return [
        {"role": msg.get("role", "user"), "content": msg.get("content", "")} for msg in messages
    ]
