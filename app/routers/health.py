"""Health check endpoint.

Returns service status including database connectivity, cache reachability,
queue URL resolution state and scheduler state.  Unauthenticated.
"""

import logging
from typing import Any

from fastapi import APIRouter
from starlette.responses import JSONResponse

from app.db.supabase import CANDIDATES_TABLE, get_supabase
from app.scheduler.jobs import is_scheduler_running
from app.services.metrics_cache import ping_cache
from app.services.queue_gateway import queue_gateway_status

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check() -> Any:
    """Return health status with a real Supabase connectivity test.

    Returns 200 OK when the database is reachable, 503 otherwise.  Cache
    and queue problems only degrade the status: metrics still compute
    without the cache and recalculation heals through the TTL.
    """
    db_status = "disconnected"

    try:
        client = get_supabase()
        result = client.table(CANDIDATES_TABLE).select("id").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    cache_status = "connected" if ping_cache() else "disconnected"

    queue_status = queue_gateway_status()

    scheduler_status = "running" if is_scheduler_running() else "stopped"

    healthy = db_status == "connected" and cache_status == "connected" and queue_status != "failed"
    payload: dict[str, str] = {
        "status": "ok" if healthy else "degraded",
        "database": db_status,
        "cache": cache_status,
        "queue": queue_status,
        "scheduler": scheduler_status,
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
