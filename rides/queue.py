"""
Purpose: Holds pending ride requests (PENDING -> MATCHED | EXPIRED).
What it does:
- Owns the in-memory pending pool keyed by request id

Provides operations:
   - submit(coordinate)
   - complete(request_id)   (matched, removed)
   - sweep_expired(now)     (timed out, removed)

Applies time rules (not matching):
 - "when has a request waited too long?"

Expiry is poll-driven: nothing leaves the queue until sweep_expired() is called.

Rule: Queue owns request lifecycle, dispatch owns matching logic.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set

from geo.models import Coordinate
from drivers.models import utc_now
from dispatch.state_machines.request_state import (
    transition_request_to_expired,
    transition_request_to_matched,
)

from .models import RideRequest

logger = logging.getLogger(__name__)

# 5 minutes
REQUEST_TIMEOUT_SECONDS = 300


class RideRequestNotFoundError(LookupError):
    """Raised when a request id is not pending."""

    def __init__(self, request_id: int):
        super().__init__(f"Ride request #{request_id} not found")
        self.request_id = request_id


class RideRequestQueue:
    """
    In-memory pending pool.

    Requests are never updated in place: they are created on submit and
    removed on match or expiry.
    """

    def __init__(self, *, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now
        self._pending: Dict[int, RideRequest] = {}
        self._next_id = 1

    # --- Public API ---

    def submit(self, coordinate: Coordinate) -> int:
        request_id = self._next_id
        self._next_id += 1

        self._pending[request_id] = RideRequest(
            id=request_id,
            location=coordinate,
            requested_at=self._clock(),
        )

        logger.info(
            "New ride request #%s at (%s, %s)",
            request_id, coordinate.latitude, coordinate.longitude,
        )
        return request_id

    def complete(self, request_id: int) -> RideRequest:
        """
        Remove a request that has been matched and return it as MATCHED.
        """
        request = transition_request_to_matched(self.get(request_id))
        del self._pending[request_id]
        return request

    def sweep_expired(
        self,
        now: Optional[datetime] = None,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    ) -> Set[int]:
        """
        Remove every request older than timeout_seconds and return their ids.
        Age is counted in whole seconds, so a request is kept until it has
        waited at least timeout_seconds + 1.
        """
        now = now or self._clock()
        expired: Set[int] = set()

        #iterate over a snapshot to allow removals
        for request_id, request in list(self._pending.items()):
            wait_seconds = int(request.age_seconds(now))
            if wait_seconds <= timeout_seconds:
                continue

            expired_request = transition_request_to_expired(request)
            del self._pending[request_id]
            expired.add(request_id)

            logger.info(
                "Ride request #%s %s after waiting for %s seconds",
                request_id, expired_request.status.value, wait_seconds,
            )

        return expired

    # --- Lookups ---

    def get(self, request_id: int) -> RideRequest:
        request = self._pending.get(request_id)
        if request is None:
            raise RideRequestNotFoundError(request_id)
        return request

    def pending(self) -> List[RideRequest]:
        return list(self._pending.values())

    def wait_seconds(self, request_id: int, now: Optional[datetime] = None) -> float:
        """
        How long a request has been pending.
        """
        now = now or self._clock()
        return self.get(request_id).age_seconds(now)

    def __contains__(self, request_id: int) -> bool:
        return request_id in self._pending

    def __len__(self) -> int:
        return len(self._pending)
