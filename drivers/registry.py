"""
Purpose: Owns driver records and keeps the geohash trie in sync with them.
What it does:
- allocates driver ids and stores Driver snapshots by id
- remembers each driver's current geohash so it can be removed on relocation
- applies availability transitions through dispatch.state_machines.driver_state

Rule: Registry owns driver state. Matching reads it, and only flips
availability through mark_assigned().
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional

from geo.geohash import DEFAULT_PRECISION, encode
from geo.models import Coordinate
from geo.spatial_index import GeohashTrie
from dispatch.state_machines.driver_state import (
    handle_availability_change,
    handle_driver_assignment,
)

from .models import Driver, DriverStatus, utc_now

logger = logging.getLogger(__name__)


class DriverNotFoundError(LookupError):
    """Raised when a driver id is not registered."""

    def __init__(self, driver_id: int):
        super().__init__(f"Driver #{driver_id} not found")
        self.driver_id = driver_id


class DriverRegistry:
    """
    In-memory driver store plus write-through trie maintenance.

    Invariant: a driver id is stored in exactly one trie node, the one for
    its current geohash. relocate() removes the old entry before inserting
    the new one; callers sharing the registry across threads must hold a
    single lock around each call (see dispatch.system.RideSharingSystem).
    """

    def __init__(
        self,
        index: Optional[GeohashTrie] = None,
        *,
        precision: int = DEFAULT_PRECISION,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.index = index if index is not None else GeohashTrie()
        self.precision = precision
        self._clock = clock or utc_now

        self._drivers: Dict[int, Driver] = {}
        self._geohashes: Dict[int, str] = {}
        self._next_id = 1

    # --- Public API ---

    def register(self, coordinate: Coordinate) -> int:
        driver_id = self._next_id
        self._next_id += 1

        self._drivers[driver_id] = Driver(
            id=driver_id,
            location=coordinate,
            status=DriverStatus.AVAILABLE,
            last_active_at=self._clock(),
        )

        geohash = encode(coordinate, self.precision)
        self._geohashes[driver_id] = geohash
        self.index.insert(geohash, driver_id)

        logger.info(
            "Added driver #%s at (%s, %s) with geohash %s",
            driver_id, coordinate.latitude, coordinate.longitude, geohash,
        )
        return driver_id

    def relocate(self, driver_id: int, coordinate: Coordinate) -> None:
        driver = self.get(driver_id)

        old_geohash = self._geohashes.get(driver_id)
        if old_geohash is not None:
            self.index.remove(old_geohash, driver_id)

        self._drivers[driver_id] = replace(
            driver, location=coordinate, last_active_at=self._clock()
        )

        geohash = encode(coordinate, self.precision)
        self._geohashes[driver_id] = geohash
        self.index.insert(geohash, driver_id)

        logger.info(
            "Updated driver #%s location to (%s, %s) with geohash %s",
            driver_id, coordinate.latitude, coordinate.longitude, geohash,
        )

    def set_availability(self, driver_id: int, available: bool) -> None:
        driver = self.get(driver_id)
        self._drivers[driver_id] = handle_availability_change(driver, available, self._clock())

        logger.info(
            "Set driver #%s availability to %s",
            driver_id, "available" if available else "unavailable",
        )

    def mark_assigned(self, driver_id: int) -> Driver:
        """
        AVAILABLE -> UNAVAILABLE as the side effect of a successful match.
        """
        driver = handle_driver_assignment(self.get(driver_id))
        self._drivers[driver_id] = driver
        return driver

    # --- Lookups ---

    def get(self, driver_id: int) -> Driver:
        driver = self._drivers.get(driver_id)
        if driver is None:
            raise DriverNotFoundError(driver_id)
        return driver

    def geohash_of(self, driver_id: int) -> Optional[str]:
        return self._geohashes.get(driver_id)

    def all(self) -> List[Driver]:
        return list(self._drivers.values())

    def available(self) -> List[Driver]:
        return [driver for driver in self._drivers.values() if driver.is_available]

    def idle_seconds(self, driver_id: int, now: Optional[datetime] = None) -> float:
        """
        Seconds since the driver last moved or became free.
        """
        now = now or self._clock()
        return (now - self.get(driver_id).last_active_at).total_seconds()

    def __contains__(self, driver_id: int) -> bool:
        return driver_id in self._drivers

    def __len__(self) -> int:
        return len(self._drivers)
