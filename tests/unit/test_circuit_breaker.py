"""
Tests for the generation provider circuit breaker.
"""

import time

import pytest

from heirloom.core.exceptions import CircuitBreakerOpenError
from heirloom.infrastructure.llm import CircuitBreakerState


class TestCircuitBreakerState:
    """Tests for CircuitBreakerState."""

    def test_opens_at_threshold(self):
        breaker = CircuitBreakerState(provider="openai", failure_threshold=3)

        breaker.record_failure()
        breaker.record_failure()
        assert not breaker.is_open

        breaker.record_failure()
        assert breaker.is_open

    def test_open_circuit_rejects(self):
        breaker = CircuitBreakerState(failure_threshold=1, cooldown_seconds=60)
        breaker.record_failure()

        with pytest.raises(CircuitBreakerOpenError):
            breaker.check()

        assert 0 < breaker.cooldown_remaining <= 60

    def test_half_open_after_cooldown(self):
        breaker = CircuitBreakerState(failure_threshold=1, cooldown_seconds=10)
        breaker.record_failure()
        breaker.last_failure_time = time.time() - 11

        breaker.check()

    def test_success_resets(self):
        breaker = CircuitBreakerState(failure_threshold=2)
        breaker.record_failure()
        breaker.record_failure()

        breaker.record_success()

        assert not breaker.is_open
        assert breaker.failures == 0
        assert breaker.cooldown_remaining == 0
