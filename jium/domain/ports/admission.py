"""Admission Port - per-caller gate in front of synthesis."""

from enum import Enum
from typing import Protocol


class AdmissionDecision(Enum):
    """Outcome of one admission check."""

    ALLOWED = "allowed"
    THROTTLED = "throttled"


class AdmissionPort(Protocol):
    """Counts synthesis attempts per caller identity."""

    async def admit(self, identity: str | None) -> AdmissionDecision:
        """Record one attempt for *identity* and decide whether it may proceed."""
        ...
