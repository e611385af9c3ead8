"""Candidate service: creation, listing and cached age metrics.

``get_metrics`` is a read-through cache over the Redis snapshot.  A
successful creation evicts that snapshot and publishes a recalculation
trigger on the queue; the trigger is consumed asynchronously by the queue
gateway and the recalculation listener.

Failure policy:
- ``ValidationError`` / ``DuplicateError`` propagate to the caller.
- Cache and queue failures after the insert are logged only; the candidate
  is already stored and the metrics heal on the next read or trigger.
"""

from __future__ import annotations

import logging
from datetime import date

from app.core.config import settings
from app.core.constants import MAX_AGE_DIFFERENCE_YEARS
from app.core.exceptions import TransientInfrastructureError, ValidationError
from app.models.candidate import Candidate, CandidateCreate, CandidateResponse
from app.models.metrics import MetricsSnapshot
from app.services.candidate_store import find_all_candidates, save_candidate
from app.services.metrics import calculate_candidate_metrics
from app.services.metrics_cache import (
    evict_cached_metrics,
    get_cached_metrics,
    set_cached_metrics,
)
from app.services.queue_gateway import get_queue_gateway

logger = logging.getLogger(__name__)


def years_between(start: date, end: date) -> int:
    """Whole calendar years elapsed from *start* to *end*."""
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def validate_age(declared_age: int, birth_date: date, today: date | None = None) -> None:
    """Raise ``ValidationError`` if *declared_age* is off by more than a year."""
    calculated_age = years_between(birth_date, today or date.today())
    if abs(declared_age - calculated_age) > MAX_AGE_DIFFERENCE_YEARS:
        raise ValidationError(
            f"The provided age ({declared_age}) does not match the birth date. "
            f"Calculated age: {calculated_age}"
        )


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

def create_candidate(request: CandidateCreate, today: date | None = None) -> Candidate:
    """Validate, persist, evict cached metrics and publish a trigger."""
    logger.info(
        "candidate_create_started",
        extra={"firstname": request.firstname, "lastname": request.lastname},
    )

    validate_age(request.age, request.birth_date, today)
    candidate = save_candidate(request)

    logger.info(
        "candidate_created",
        extra={"candidate_id": candidate.id, "email": candidate.email},
    )

    try:
        evict_cached_metrics()
    except TransientInfrastructureError as exc:
        logger.error(
            "metrics_cache_eviction_failed",
            extra={"candidate_id": candidate.id, "error_message": str(exc)},
        )

    _publish_recalculation_trigger(candidate)
    return candidate


def _publish_recalculation_trigger(candidate: Candidate) -> None:
    try:
        get_queue_gateway().publish(candidate.trigger_id)
    except Exception as exc:
        # Gateway construction or executor shutdown; the insert already succeeded
        logger.error(
            "recalculation_trigger_publish_failed",
            extra={"candidate_id": candidate.id, "error_message": str(exc)},
        )


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

def get_candidates() -> list[CandidateResponse]:
    """Return every candidate with its life expectancy date."""
    return [CandidateResponse.from_candidate(c) for c in find_all_candidates()]


def get_metrics() -> MetricsSnapshot:
    """Return cached metrics, computing and caching them on a miss.

    Raises ``NotFoundError`` when no candidates exist.
    """
    try:
        cached = get_cached_metrics()
    except TransientInfrastructureError as exc:
        logger.warning("metrics_cache_read_failed", extra={"error_message": str(exc)})
        cached = None

    if cached is not None:
        logger.info("metrics_cache_hit")
        return cached

    logger.info("metrics_cache_miss")
    snapshot = _compute_metrics()
    try:
        set_cached_metrics(snapshot, settings.METRICS_CACHE_TTL_SECONDS)
    except TransientInfrastructureError as exc:
        logger.warning("metrics_cache_write_failed", extra={"error_message": str(exc)})
    return snapshot


def recalculate_metrics() -> MetricsSnapshot:
    """Recompute metrics and overwrite the cache with a fresh TTL.

    Errors propagate; the asynchronous caller is responsible for isolating
    them.
    """
    snapshot = _compute_metrics()
    set_cached_metrics(snapshot, settings.METRICS_CACHE_TTL_SECONDS)
    logger.info(
        "metrics_recalculated",
        extra={
            "average_age": snapshot.average_age,
            "age_standard_deviation": snapshot.age_standard_deviation,
        },
    )
    return snapshot


def _compute_metrics() -> MetricsSnapshot:
    return calculate_candidate_metrics(find_all_candidates())
