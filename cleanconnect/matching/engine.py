"""
Provider matching engine.

Filters a provider pool down to the candidates who may be offered a job:
verified, active, within their own service radius of the job, and open
for the full requested slot. Pure computation; the caller fetches the
pool and passes it in.
"""

import logging
from typing import Iterable, Optional

from cleanconnect.matching.geo import calculate_distance
from cleanconnect.scheduling.availability import is_available
from cleanconnect.schemas.provider_schema import JobRequest, ProviderCandidate

logger = logging.getLogger(__name__)


def distance_to_job(job: JobRequest, candidate: ProviderCandidate) -> Optional[float]:
    """Miles from the candidate's service location to the job, if a location is declared."""
    if candidate.service_location is None:
        return None
    return calculate_distance(
        job.location.latitude,
        job.location.longitude,
        candidate.service_location.latitude,
        candidate.service_location.longitude,
    )


def within_service_area(job: JobRequest, candidate: ProviderCandidate) -> bool:
    """Radius check. Candidates without a declared area serve any location."""
    if not candidate.has_service_area:
        return True
    return distance_to_job(job, candidate) <= candidate.service_radius_miles


def find_candidates(
    job: JobRequest, provider_pool: Iterable[ProviderCandidate]
) -> list[ProviderCandidate]:
    """Return every eligible provider for the job, in pool order.

    No ranking is applied here. An empty list is a valid result.
    """
    matches: list[ProviderCandidate] = []
    for candidate in provider_pool:
        if not candidate.is_eligible:
            continue
        if not within_service_area(job, candidate):
            continue
        if not is_available(candidate.availability, job.start_time, job.duration_minutes):
            continue
        matches.append(candidate)

    logger.debug(
        "Matched %d provider(s) for job at (%.4f, %.4f) on %s",
        len(matches),
        job.location.latitude,
        job.location.longitude,
        job.start_time.isoformat(),
    )
    return matches


def rank_by_distance(
    job: JobRequest, candidates: Iterable[ProviderCandidate]
) -> list[ProviderCandidate]:
    """Order candidates nearest first; those without a location go last."""

    def _key(candidate: ProviderCandidate) -> tuple[bool, float]:
        distance = distance_to_job(job, candidate)
        return (distance is None, distance if distance is not None else 0.0)

    return sorted(candidates, key=_key)
