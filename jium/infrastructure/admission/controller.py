"""Admission controller - moving-window limit on synthesis attempts per caller.

Backed by the ``limits`` library: ``MovingWindowRateLimiter.hit`` is an
atomic check-and-increment in both the in-memory and the Redis storage, so
concurrent conversations cannot push one identity past its limit.
"""

import logging

from limits import RateLimitItemPerSecond
from limits.aio.storage import Storage
from limits.aio.strategies import MovingWindowRateLimiter
from limits.storage import storage_from_string

from jium.domain.ports.admission import AdmissionDecision
from jium.domain.ports.config import AdmissionConfig

logger = logging.getLogger(__name__)

NAMESPACE = "synthesis"


def create_storage(uri: str) -> Storage:
    """Async limits storage for *uri* ("async+memory://", "async+redis://...")."""
    storage = storage_from_string(uri)
    if not isinstance(storage, Storage):
        raise ValueError(f"Admission storage must be async (use an 'async+' URI), got {uri!r}")
    return storage


class AdmissionController:
    """Allows at most ``limit`` attempts per ``window_seconds`` for each identity."""

    def __init__(self, config: AdmissionConfig, storage: Storage | None = None) -> None:
        self._config = config
        self._storage = storage or create_storage(config.storage_uri)
        self._strategy = MovingWindowRateLimiter(self._storage)
        self._item = RateLimitItemPerSecond(config.limit, config.window_seconds)

    @property
    def limit(self) -> int:
        return self._config.limit

    @property
    def window_seconds(self) -> int:
        return self._config.window_seconds

    def _resolve_identity(self, identity: str | None) -> str | None:
        """Identity to count against; None means the caller is denied outright."""
        if identity:
            return identity
        if self._config.unknown_origin_policy == "deny":
            return None
        return self._config.fallback_identity

    async def admit(self, identity: str | None) -> AdmissionDecision:
        """Count one attempt for *identity*; storage failures deny the attempt."""
        key = self._resolve_identity(identity)
        if key is None:
            logger.warning("Admission denied: caller origin unavailable and policy is 'deny'")
            return AdmissionDecision.THROTTLED
        try:
            allowed = await self._strategy.hit(self._item, NAMESPACE, key)
        except Exception:
            logger.exception("Admission storage unavailable; throttling identity=%s", key)
            return AdmissionDecision.THROTTLED
        if not allowed:
            logger.warning(
                "Admission throttled identity=%s (limit %d per %ds)",
                key,
                self._config.limit,
                self._config.window_seconds,
            )
            return AdmissionDecision.THROTTLED
        return AdmissionDecision.ALLOWED
