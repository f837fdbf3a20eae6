"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Takes a pending ride request, gathers nearby available drivers from the
geohash trie, picks the best one and commits the match:
the driver goes UNAVAILABLE and the request leaves the pending queue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from drivers.registry import DriverRegistry
from rides.queue import RideRequestQueue

from .candidate_filter import build_base_candidates
from .policy import MatchingPolicy, default_matching_policy
from .scoring import select_best_candidate

logger = logging.getLogger(__name__)


class MatchStatus(str, Enum):
    MATCHED = "matched"
    NO_AVAILABLE_MATCH = "no_available_match"


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of one match attempt. NO_AVAILABLE_MATCH is a normal outcome:
    the request stays pending and can be retried later.
    """
    status: MatchStatus
    request_id: int
    driver_id: Optional[int] = None
    distance_km: Optional[float] = None

    @property
    def matched(self) -> bool:
        return self.status == MatchStatus.MATCHED


class Dispatcher:
    """
    Matches one pending request at a time to the nearest available driver.

    attempt_match() reads candidates and then commits; it is not safe to run
    two attempts concurrently without an outer lock (RideSharingSystem holds one).
    """

    def __init__(
        self,
        registry: DriverRegistry,
        queue: RideRequestQueue,
        policy: Optional[MatchingPolicy] = None,
    ):
        self.registry = registry
        self.queue = queue
        self.policy = policy or default_matching_policy()

    def attempt_match(self, request_id: int) -> MatchResult:
        """
        Raises RideRequestNotFoundError if the request is not pending.
        """
        request = self.queue.get(request_id)

        candidates = build_base_candidates(request.location, self.registry, self.policy)
        logger.debug("Ride request #%s has %s candidate drivers", request_id, len(candidates))

        best = select_best_candidate(candidates, self.policy.tie_tolerance_km)
        if best is None:
            logger.info("No available drivers found for ride request #%s", request_id)
            return MatchResult(status=MatchStatus.NO_AVAILABLE_MATCH, request_id=request_id)

        # Commit: driver first, so a state error leaves the request pending
        self.registry.mark_assigned(best.driver_id)
        matched_request = self.queue.complete(request_id)

        logger.info(
            "Ride request #%s %s with driver #%s (distance: %.2f km)",
            request_id, matched_request.status.value, best.driver_id, best.distance_km,
        )
        return MatchResult(
            status=MatchStatus.MATCHED,
            request_id=request_id,
            driver_id=best.driver_id,
            distance_km=best.distance_km,
        )
