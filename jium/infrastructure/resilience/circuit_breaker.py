"""Circuit Breaker - stop hammering a generation backend that keeps failing.

States:
- CLOSED: calls pass through
- OPEN: calls are rejected immediately until recovery_timeout elapses
- HALF_OPEN: trial calls decide whether to close again
"""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")

_registry_lock = threading.Lock()


class CircuitState(Enum):
    """Circuit Breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreakerConfig:
    """Circuit Breaker thresholds."""

    failure_threshold: int = 5  # Consecutive failures before opening
    recovery_timeout: float = 30.0  # Seconds before a trial call
    success_threshold: int = 2  # Trial successes needed to close

    def __post_init__(self) -> None:
        if self.failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if self.recovery_timeout <= 0:
            raise ValueError("recovery_timeout must be > 0")
        if self.success_threshold < 1:
            raise ValueError("success_threshold must be >= 1")


class CircuitOpenError(Exception):
    """The circuit is open; the call was not attempted."""


@dataclass
class CircuitBreaker:
    """Wraps async calls to one backend.

    Usage:
        breaker = get_circuit_breaker("gemini")
        response = await breaker.call(client.post, url, json=body)
    """

    name: str
    config: CircuitBreakerConfig = field(default_factory=CircuitBreakerConfig)

    _state: CircuitState = field(default=CircuitState.CLOSED, init=False)
    _failure_count: int = field(default=0, init=False)
    _success_count: int = field(default=0, init=False)
    _last_failure_time: float = field(default=0.0, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)

    @property
    def state(self) -> CircuitState:
        return self._state

    def _should_try_reset(self) -> bool:
        if self._state != CircuitState.OPEN:
            return False
        return time.monotonic() - self._last_failure_time >= self.config.recovery_timeout

    async def call(self, func: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        """Run *func* through the breaker.

        Raises:
            CircuitOpenError: the circuit is open.

        """
        async with self._lock:
            if self._state == CircuitState.OPEN:
                if self._should_try_reset():
                    self._state = CircuitState.HALF_OPEN
                    self._success_count = 0
                    logger.debug("Circuit '%s' transitioned to HALF_OPEN", self.name)
                else:
                    retry_in = max(0.0, self.config.recovery_timeout - (time.monotonic() - self._last_failure_time))
                    raise CircuitOpenError(f"Circuit '{self.name}' is OPEN. Retry in {retry_in:.1f}s")

        try:
            result = await func(*args, **kwargs)
        except asyncio.CancelledError:
            raise
        except Exception:
            await self._on_failure()
            raise
        await self._on_success()
        return result

    async def _on_success(self) -> None:
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._success_count += 1
                if self._success_count >= self.config.success_threshold:
                    self._state = CircuitState.CLOSED
                    self._failure_count = 0
                    self._success_count = 0
                    logger.info("Circuit '%s' transitioned to CLOSED", self.name)
            elif self._state == CircuitState.CLOSED:
                self._failure_count = 0

    async def _on_failure(self) -> None:
        async with self._lock:
            self._failure_count += 1
            self._last_failure_time = time.monotonic()
            if self._state == CircuitState.HALF_OPEN or self._failure_count >= self.config.failure_threshold:
                if self._state != CircuitState.OPEN:
                    logger.warning("Circuit '%s' transitioned to OPEN after %d failures", self.name, self._failure_count)
                self._state = CircuitState.OPEN

    def reset(self) -> None:
        """Close the circuit and clear counters (for tests)."""
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time = 0.0

    def get_stats(self) -> dict:
        return {
            "name": self.name,
            "state": self._state.value,
            "failure_count": self._failure_count,
            "success_count": self._success_count,
        }


_breakers: dict[str, CircuitBreaker] = {}


def get_circuit_breaker(name: str, config: CircuitBreakerConfig | None = None) -> CircuitBreaker:
    """Get or create the breaker registered under *name*."""
    if name in _breakers:
        return _breakers[name]
    with _registry_lock:
        if name not in _breakers:
            _breakers[name] = CircuitBreaker(name=name, config=config or CircuitBreakerConfig())
        return _breakers[name]


def get_all_breakers() -> dict[str, dict]:
    """Stats of every registered breaker."""
    with _registry_lock:
        return {name: b.get_stats() for name, b in _breakers.items()}


def reset_all_breakers() -> None:
    """Reset every registered breaker (for tests)."""
    with _registry_lock:
        for breaker in _breakers.values():
            breaker.reset()
