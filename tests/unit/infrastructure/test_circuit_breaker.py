"""Tests for CircuitBreaker."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from jium.infrastructure.resilience import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitOpenError,
)
from jium.infrastructure.resilience.circuit_breaker import CircuitState


@pytest.fixture
def breaker():
    return CircuitBreaker(
        name="test",
        config=CircuitBreakerConfig(failure_threshold=2, recovery_timeout=0.1, success_threshold=1),
    )


class TestCircuitBreaker:
    @pytest.mark.asyncio
    async def test_passes_result_through(self, breaker):
        assert await breaker.call(AsyncMock(return_value="ok")) == "ok"

    @pytest.mark.asyncio
    async def test_opens_after_threshold(self, breaker):
        failing = AsyncMock(side_effect=ConnectionError("down"))
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)
        assert breaker.state is CircuitState.OPEN
        with pytest.raises(CircuitOpenError):
            await breaker.call(AsyncMock(return_value="ok"))

    @pytest.mark.asyncio
    async def test_recovers_after_timeout(self, breaker):
        failing = AsyncMock(side_effect=ConnectionError("down"))
        for _ in range(2):
            with pytest.raises(ConnectionError):
                await breaker.call(failing)
        await asyncio.sleep(0.15)
        assert await breaker.call(AsyncMock(return_value="ok")) == "ok"
        assert breaker.state is CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_cancellation_is_not_a_failure(self, breaker):
        cancelled = AsyncMock(side_effect=asyncio.CancelledError())
        for _ in range(3):
            with pytest.raises(asyncio.CancelledError):
                await breaker.call(cancelled)
        assert breaker.state is CircuitState.CLOSED

    def test_stats(self, breaker):
        assert breaker.get_stats() == {"name": "test", "state": "closed", "failure_count": 0, "success_count": 0}
