"""Redis client singleton for the metrics cache.

Provides ``get_redis()`` which returns a lazily-initialized, process-wide
Redis client built from ``settings.REDIS_URL``.  redis-py clients hold a
connection pool and are safe to share across threads.
"""

from redis import Redis

from app.core.config import settings

_client: Redis | None = None


def get_redis() -> Redis:
    """Return the singleton Redis client, creating it on first call."""
    global _client
    if _client is None:
        _client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    return _client
