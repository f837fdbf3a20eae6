#Purpose: Ranking/selection model (the "who is best" layer).
#Takes candidates (already eligible) with distance + activity time.
#Ordering:
#closest first
#candidates within tolerance of the closest one count as tied; the tie goes to the
#driver idle longest (older last_active_at), so drivers who just became free cannot
#starve long-waiting ones
#driver id as the last, deterministic tie-break
#Output: ranked candidates, or the single best.

from __future__ import annotations

from typing import List, Optional, Sequence

from .candidate_filter import Candidate


def select_best_candidate(candidates: Sequence[Candidate], tie_tolerance_km: float) -> Optional[Candidate]:
    """
    Single best candidate, or None when there are none.

    Ties are measured against the closest distance only, so the winner is never
    more than tie_tolerance_km farther than the nearest driver, and input order
    does not matter.
    """
    if not candidates:
        return None

    closest_km = min(candidate.distance_km for candidate in candidates)
    tied = [
        candidate for candidate in candidates
        if candidate.distance_km - closest_km < tie_tolerance_km
    ]
    return min(tied, key=lambda candidate: (candidate.last_active_at, candidate.driver_id))


def rank_candidates(candidates: Sequence[Candidate], tie_tolerance_km: float) -> List[Candidate]:
    """
    Full offer order: repeatedly take the best of what is left.
    """
    remaining = list(candidates)
    ranked: List[Candidate] = []
    while remaining:
        best = select_best_candidate(remaining, tie_tolerance_km)
        ranked.append(best)
        remaining.remove(best)
    return ranked
