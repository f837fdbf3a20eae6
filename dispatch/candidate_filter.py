#Purpose: Spatial candidate gathering plus hard eligibility filtering.
#Builds the base candidate set before ranking:
#request geohash + its sibling cells
#coarse trie lookup by the first `search_prefix_length` symbols of each cell
#dedupe, then drop drivers that are not AVAILABLE
#Output: Candidate records with true distance (still not ranked).

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Set

from drivers.registry import DriverRegistry
from geo.geohash import encode, neighbors
from geo.models import Coordinate

from .policy import MatchingPolicy


@dataclass(frozen=True)
class Candidate:
    """
    A driver eligible for one request, with the metrics ranking needs.
    Transient: built per match attempt, never stored.
    """
    driver_id: int
    distance_km: float
    last_active_at: datetime


def candidate_cells(geohash: str) -> Set[str]:
    """
    The request's own cell plus its (approximate) neighbours.
    """
    return {geohash} | neighbors(geohash)


def build_base_candidates(
    pickup: Coordinate,
    registry: DriverRegistry,
    policy: MatchingPolicy,
) -> List[Candidate]:
    """
    Collect available drivers near `pickup` and measure their true distance.

    Returned in driver id order so downstream ranking is deterministic.
    """
    geohash = encode(pickup, policy.geohash_precision)

    #cells sharing a search prefix would return the same ids, query each prefix once
    prefixes = {cell[:policy.search_prefix_length] for cell in candidate_cells(geohash)}

    driver_ids: Set[int] = set()
    for prefix in prefixes:
        driver_ids |= registry.index.query_by_prefix(prefix)

    candidates: List[Candidate] = []
    for driver_id in sorted(driver_ids):
        if driver_id not in registry:
            continue
        driver = registry.get(driver_id)
        if not driver.is_available:
            continue

        candidates.append(
            Candidate(
                driver_id=driver_id,
                distance_km=pickup.distance_to(driver.location),
                last_active_at=driver.last_active_at,
            )
        )

    return candidates
