"""
Purpose: Central configuration for geohash matching.
What it does:

Stores all tunable thresholds for finding and ranking drivers:

GEOHASH_PRECISION = 6
SEARCH_PREFIX_LENGTH = 3
TIE_TOLERANCE_KM = 0.001
REQUEST_TIMEOUT_SECONDS = 300

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from geo.geohash import DEFAULT_PRECISION
from rides.queue import REQUEST_TIMEOUT_SECONDS


@dataclass(frozen=True)
class MatchingPolicy:
    """
    Central configuration for driver search and ranking.
    """

    # --- Indexing ---
    # Length of the geohash stored per driver and computed per request.
    geohash_precision: int = DEFAULT_PRECISION

    # --- Search radius ---
    # Candidate cells are queried by their first N symbols only.
    # 3 symbols is a ~156km x 156km catchment: high recall, many false positives
    # that the distance ranking then sorts out.
    search_prefix_length: int = 3

    # --- Tie-break ---
    # Distances closer than this (km) count as equal; the driver idle longest wins.
    tie_tolerance_km: float = 0.001

    # --- Expiry ---
    request_timeout_seconds: int = REQUEST_TIMEOUT_SECONDS

    # --- Input checks ---
    # Off by default: out-of-range input silently maps to an edge cell.
    validate_coordinates: bool = False

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.geohash_precision < 1:
            raise ValueError("geohash_precision must be >= 1")

        if not 1 <= self.search_prefix_length <= self.geohash_precision:
            raise ValueError("search_prefix_length must be between 1 and geohash_precision")

        if self.tie_tolerance_km < 0:
            raise ValueError("tie_tolerance_km must be >= 0")

        if self.request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")


def default_matching_policy() -> MatchingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = MatchingPolicy()
    p.validate()
    return p


def matching_policy_from_env() -> MatchingPolicy:
    """
    Build a policy from environment variables (a .env file is honoured).

    Example in .env:
    GEOHASH_PRECISION=6
    SEARCH_PREFIX_LENGTH=3
    TIE_TOLERANCE_KM=0.001
    REQUEST_TIMEOUT_SECONDS=300
    VALIDATE_COORDINATES=false
    """
    load_dotenv()
    defaults = MatchingPolicy()

    p = MatchingPolicy(
        geohash_precision=int(os.getenv("GEOHASH_PRECISION", defaults.geohash_precision)),
        search_prefix_length=int(os.getenv("SEARCH_PREFIX_LENGTH", defaults.search_prefix_length)),
        tie_tolerance_km=float(os.getenv("TIE_TOLERANCE_KM", defaults.tie_tolerance_km)),
        request_timeout_seconds=int(os.getenv("REQUEST_TIMEOUT_SECONDS", defaults.request_timeout_seconds)),
        validate_coordinates=os.getenv("VALIDATE_COORDINATES", "false").strip().lower() in ("1", "true", "yes"),
    )
    p.validate()
    return p
