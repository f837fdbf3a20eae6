"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a Driver and their availability status.
Instances are immutable snapshots; the registry swaps them out on change.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from geo.models import Coordinate


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DriverStatus(str, Enum):
    """
    Standardizes the state a driver can be in.
    AVAILABLE <-> UNAVAILABLE; a match moves AVAILABLE -> UNAVAILABLE.
    """
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Driver:
    """
    A purely stateless representation of a Driver at a specific point in time.
    """
    id: int
    location: Coordinate
    status: DriverStatus

    # When the driver last moved or last became free.
    # Older values win near-ties during matching.
    last_active_at: datetime

    @property
    def is_available(self) -> bool:
        return self.status == DriverStatus.AVAILABLE
