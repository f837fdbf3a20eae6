"""
Purpose: Core value types for the geo domain.
What it does:
Defines an immutable Coordinate with great-circle distance math.
Rule: No indexing or matching logic here. Models only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Mean Earth radius used for Haversine distances
EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """
    A (latitude, longitude) pair in degrees.
    Range is not enforced on construction; see is_valid().
    """
    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0

    def distance_to(self, other: Coordinate) -> float:
        """
        Great-circle distance in kilometers (Haversine formula).
        """
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        dlat = math.radians(other.latitude - self.latitude)
        dlon = math.radians(other.longitude - self.longitude)

        a = (
            math.sin(dlat / 2) ** 2
            + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        )
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

        return EARTH_RADIUS_KM * c
