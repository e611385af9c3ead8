"""Application constants.

Cache keys, queue receive limits and candidate domain constants.
"""

# ---------------------------------------------------------------------------
# Metrics cache
# ---------------------------------------------------------------------------
METRICS_CACHE_KEY: str = "candidateMetrics"

# ---------------------------------------------------------------------------
# Recalculation queue
# Long polling: one receive waits up to QUEUE_WAIT_SECONDS for messages.
# ---------------------------------------------------------------------------
QUEUE_MAX_MESSAGES: int = 10
QUEUE_WAIT_SECONDS: int = 5

# SQS error codes reported when GetQueueUrl targets a missing queue
QUEUE_NOT_FOUND_ERROR_CODES: frozenset[str] = frozenset({
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
})

# ---------------------------------------------------------------------------
# Candidate domain
# ---------------------------------------------------------------------------
LIFE_EXPECTANCY_YEARS: int = 80
MAX_AGE_DIFFERENCE_YEARS: int = 1

# Postgres SQLSTATE for unique_violation, surfaced by PostgREST
UNIQUE_VIOLATION_CODE: str = "23505"
