"""
Purpose: Domain models for ride requests.
What it does:
- RideRequest (id, pickup coordinate, requested_at, status)
- RideRequestStatus = PENDING | MATCHED | EXPIRED

Rule: No matching logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from geo.models import Coordinate


class RideRequestStatus(Enum):
    PENDING = "PENDING"
    MATCHED = "MATCHED"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class RideRequest:
    """
    A rider waiting for a driver. Only PENDING requests live in the queue;
    MATCHED and EXPIRED are terminal and returned to the caller on removal.
    """

    id: int
    location: Coordinate
    requested_at: datetime
    status: RideRequestStatus = RideRequestStatus.PENDING

    def age_seconds(self, now: datetime) -> float:
        return (now - self.requested_at).total_seconds()
