"""Recalculation listener.

The only subscriber of the recalculation notifier.  It recomputes the cached
metrics and never raises: a failed recalculation must not be mistaken for a
failed candidate creation and must not reach the queue delete path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.exceptions import NotFoundError, TransientInfrastructureError
from app.models.events import RecalculateSignal
from app.models.metrics import MetricsSnapshot
from app.services.candidates import recalculate_metrics
from app.services.notifier import RecalculationNotifier, notifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecalculationResult:
    """Outcome of handling one signal."""

    candidate_id: str
    snapshot: MetricsSnapshot | None = None
    error_kind: str | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


def handle_recalculate_signal(signal: RecalculateSignal) -> RecalculationResult:
    """Recalculate metrics for *signal*, logging instead of raising."""
    try:
        snapshot = recalculate_metrics()
    except NotFoundError as exc:
        error_kind = "not_found"
        logger.warning(
            "recalculation_skipped",
            extra={
                "candidate_id": signal.candidate_id,
                "error_kind": error_kind,
                "error_message": str(exc),
            },
        )
    except TransientInfrastructureError as exc:
        error_kind = "infrastructure"
        logger.error(
            "recalculation_failed",
            extra={
                "candidate_id": signal.candidate_id,
                "error_kind": error_kind,
                "error_message": str(exc),
            },
        )
    except Exception as exc:
        error_kind = "unexpected"
        logger.exception(
            "recalculation_failed",
            extra={
                "candidate_id": signal.candidate_id,
                "error_kind": error_kind,
                "error_message": str(exc),
            },
        )
    else:
        logger.info(
            "recalculation_event_processed",
            extra={"candidate_id": signal.candidate_id},
        )
        return RecalculationResult(candidate_id=signal.candidate_id, snapshot=snapshot)

    return RecalculationResult(candidate_id=signal.candidate_id, error_kind=error_kind)


def register_recalculation_listener(target: RecalculationNotifier = notifier) -> None:
    """Subscribe ``handle_recalculate_signal`` to *target*."""
    target.subscribe(handle_recalculate_signal)
