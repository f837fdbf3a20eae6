"""
Purpose: The single entry point a control surface (menu, request handler) talks to.
What it does:
Wires registry + trie + pending queue + dispatcher together behind one lock,
and exposes the operation set:

register_driver / relocate_driver / set_driver_availability
request_ride / attempt_match / process_expired_requests / snapshot_stats

Rule: No rendering here. Stats come back as data; pandas frames are offered
for callers that want to print tables.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set

import pandas as pd

from drivers.models import utc_now
from drivers.registry import DriverRegistry
from geo.models import Coordinate
from geo.spatial_index import GeohashTrie
from rides.queue import RideRequestQueue

from .dispatcher import Dispatcher, MatchResult
from .policy import MatchingPolicy, default_matching_policy


class InvalidCoordinateError(ValueError):
    """Raised for out-of-range input when coordinate validation is enabled."""
    pass


@dataclass(frozen=True)
class AvailableDriverRow:
    driver_id: int
    latitude: float
    longitude: float
    idle_seconds: float


@dataclass(frozen=True)
class SystemStats:
    total_drivers: int
    available_drivers: int
    pending_requests: int

    # driver_id -> seconds since last move / became free (all drivers)
    driver_idle_seconds: Dict[int, float] = field(default_factory=dict)
    # request_id -> seconds pending
    request_wait_seconds: Dict[int, float] = field(default_factory=dict)
    available_driver_rows: List[AvailableDriverRow] = field(default_factory=list)

    now: datetime = field(default_factory=utc_now)

    def available_drivers_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "driver_id": row.driver_id,
                    "latitude": row.latitude,
                    "longitude": row.longitude,
                    "idle_seconds": row.idle_seconds,
                }
                for row in self.available_driver_rows
            ],
            columns=["driver_id", "latitude", "longitude", "idle_seconds"],
        )

    def pending_requests_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            sorted(self.request_wait_seconds.items()),
            columns=["request_id", "wait_seconds"],
        )


class RideSharingSystem:
    """
    Facade over the matching core.

    One re-entrant lock guards registry, trie and queue together, so a
    relocation (remove old cell, move, insert new cell) and a match
    (scan, then commit) never interleave with each other.
    """

    def __init__(
        self,
        policy: Optional[MatchingPolicy] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.policy = policy or default_matching_policy()
        self.policy.validate()
        self._clock = clock or utc_now
        self._lock = threading.RLock()

        self.index = GeohashTrie()
        self.registry = DriverRegistry(
            self.index, precision=self.policy.geohash_precision, clock=self._clock
        )
        self.queue = RideRequestQueue(clock=self._clock)
        self.dispatcher = Dispatcher(self.registry, self.queue, self.policy)

    # --- Drivers ---

    def register_driver(self, latitude: float, longitude: float) -> int:
        coordinate = self._coordinate(latitude, longitude)
        with self._lock:
            return self.registry.register(coordinate)

    def relocate_driver(self, driver_id: int, latitude: float, longitude: float) -> None:
        coordinate = self._coordinate(latitude, longitude)
        with self._lock:
            self.registry.relocate(driver_id, coordinate)

    def set_driver_availability(self, driver_id: int, available: bool) -> None:
        with self._lock:
            self.registry.set_availability(driver_id, available)

    # --- Ride requests ---

    def request_ride(self, latitude: float, longitude: float) -> MatchResult:
        """
        Queue a request and try to match it straight away.
        The returned result carries the new request id either way.
        """
        coordinate = self._coordinate(latitude, longitude)
        with self._lock:
            request_id = self.queue.submit(coordinate)
            return self.dispatcher.attempt_match(request_id)

    def attempt_match(self, request_id: int) -> MatchResult:
        with self._lock:
            return self.dispatcher.attempt_match(request_id)

    def process_expired_requests(self, now: Optional[datetime] = None) -> Set[int]:
        with self._lock:
            return self.queue.sweep_expired(
                now=now, timeout_seconds=self.policy.request_timeout_seconds
            )

    # --- Stats ---

    def snapshot_stats(self, now: Optional[datetime] = None) -> SystemStats:
        now = now or self._clock()
        with self._lock:
            drivers = sorted(self.registry.all(), key=lambda driver: driver.id)
            pending = sorted(self.queue.pending(), key=lambda request: request.id)

            idle = {
                driver.id: (now - driver.last_active_at).total_seconds() for driver in drivers
            }
            rows = [
                AvailableDriverRow(
                    driver_id=driver.id,
                    latitude=driver.location.latitude,
                    longitude=driver.location.longitude,
                    idle_seconds=idle[driver.id],
                )
                for driver in sorted(self.registry.available(), key=lambda driver: driver.id)
            ]

            return SystemStats(
                total_drivers=len(drivers),
                available_drivers=len(rows),
                pending_requests=len(pending),
                driver_idle_seconds=idle,
                request_wait_seconds={request.id: request.age_seconds(now) for request in pending},
                available_driver_rows=rows,
                now=now,
            )

    # --- Helpers ---

    def _coordinate(self, latitude: float, longitude: float) -> Coordinate:
        coordinate = Coordinate(latitude, longitude)
        if self.policy.validate_coordinates and not coordinate.is_valid():
            raise InvalidCoordinateError(f"Coordinate out of range: ({latitude}, {longitude})")
        return coordinate
