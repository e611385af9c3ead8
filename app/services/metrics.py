"""Candidate age statistics.

Pure functions over the full candidate set: no I/O, no caching.  Standard
deviation uses the population formula (divide by N), so a single candidate
always yields ``0.0``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from app.core.exceptions import NotFoundError
from app.models.candidate import Candidate
from app.models.metrics import MetricsSnapshot

logger = logging.getLogger(__name__)


def calculate_metrics(ages: Sequence[int]) -> MetricsSnapshot:
    """Compute mean age and population standard deviation.

    Raises ``NotFoundError`` when *ages* is empty.
    """
    if not ages:
        logger.warning("metrics_no_candidates")
        raise NotFoundError("No candidates registered to calculate metrics.")

    count = len(ages)
    average = sum(ages) / count
    variance = sum((age - average) ** 2 for age in ages) / count

    return MetricsSnapshot(
        average_age=average,
        age_standard_deviation=math.sqrt(variance),
    )


def calculate_candidate_metrics(candidates: Iterable[Candidate]) -> MetricsSnapshot:
    """Compute metrics over the ``age`` of each candidate record."""
    return calculate_metrics([candidate.age for candidate in candidates])
