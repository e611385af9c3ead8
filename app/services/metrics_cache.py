"""Redis-backed cache for the metrics snapshot.

A single key holds the last computed ``MetricsSnapshot`` as JSON with a TTL.
Every Redis failure is re-raised as ``TransientInfrastructureError`` so the
candidate service can decide whether to log it or let it propagate.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError
from redis import RedisError

from app.core.constants import METRICS_CACHE_KEY
from app.core.exceptions import TransientInfrastructureError
from app.db.redis import get_redis
from app.models.metrics import MetricsSnapshot

logger = logging.getLogger(__name__)


def get_cached_metrics() -> MetricsSnapshot | None:
    """Return the cached snapshot, or ``None`` on a miss.

    A payload that no longer matches ``MetricsSnapshot`` counts as a miss.
    """
    try:
        raw = get_redis().get(METRICS_CACHE_KEY)
    except RedisError as exc:
        raise TransientInfrastructureError(f"Cache read failed: {exc}") from exc

    if raw is None:
        return None

    try:
        return MetricsSnapshot.model_validate_json(raw)
    except PydanticValidationError:
        logger.warning("metrics_cache_payload_invalid", extra={"key": METRICS_CACHE_KEY})
        return None


def set_cached_metrics(snapshot: MetricsSnapshot, ttl_seconds: int) -> None:
    """Store *snapshot*, replacing any previous entry and resetting its TTL."""
    try:
        get_redis().set(METRICS_CACHE_KEY, snapshot.model_dump_json(), ex=ttl_seconds)
    except RedisError as exc:
        raise TransientInfrastructureError(f"Cache write failed: {exc}") from exc


def evict_cached_metrics() -> None:
    """Remove the cached snapshot so the next read recomputes it."""
    try:
        get_redis().delete(METRICS_CACHE_KEY)
    except RedisError as exc:
        raise TransientInfrastructureError(f"Cache eviction failed: {exc}") from exc


def ping_cache() -> bool:
    """Return True when Redis answers PING."""
    try:
        return bool(get_redis().ping())
    except RedisError:
        logger.warning("metrics_cache_ping_failed", exc_info=True)
        return False
