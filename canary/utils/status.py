"""Probe status enumeration."""

from enum import Enum


class ProbeStatus(Enum):
    """Reachability of a single target."""

    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @property
    def is_available(self) -> bool:
        return self is ProbeStatus.AVAILABLE
