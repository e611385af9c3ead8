"""APScheduler job definitions and scheduler management.

Initializes a BackgroundScheduler with an IntervalTrigger that polls the
recalculation queue.  The fast-path poll after each publish handles the
common case; this job picks up redelivered messages and triggers whose
fast-path poll ran before they became visible.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.services.queue_gateway import get_queue_gateway

logger = logging.getLogger(__name__)

# Module-level scheduler instance (singleton)
scheduler = BackgroundScheduler()


def _queue_poll_job() -> None:
    """Wrapper that APScheduler calls on each interval tick.

    Retries a failed queue URL resolution before polling, then waits for the
    cycle so overlapping ticks are skipped by APScheduler.
    """
    gateway = get_queue_gateway()
    gateway.retry_resolution()
    deleted = gateway.poll_once().result()
    logger.debug("queue_poll_job_completed", extra={"deleted": deleted})


def start_scheduler() -> None:
    """Configure and start the background scheduler."""
    scheduler.add_job(
        _queue_poll_job,
        IntervalTrigger(seconds=settings.QUEUE_POLL_INTERVAL_SECONDS),
        id="queue_poll",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(
        "scheduler_started",
        extra={
            "poll_interval_seconds": settings.QUEUE_POLL_INTERVAL_SECONDS,
        },
    )


def shutdown_scheduler() -> None:
    """Shutdown the scheduler gracefully.

    Called during FastAPI lifespan cleanup.
    """
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")


def is_scheduler_running() -> bool:
    """Check if the scheduler is currently running."""
    return scheduler.running
