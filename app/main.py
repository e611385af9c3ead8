"""FastAPI application entry point.

Configures CORS, structured logging, lifespan events (recalculation listener,
APScheduler queue poller, queue gateway shutdown), router registration and the
uvicorn ``run`` entry point.
"""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.routers import candidates, health
from app.scheduler.jobs import shutdown_scheduler, start_scheduler
from app.services.listener import register_recalculation_listener
from app.services.queue_gateway import open_queue_gateway, shutdown_queue_gateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: startup and shutdown hooks.

    The listener is subscribed before the scheduler starts so the first
    poll already has a consumer for its signals.
    """
    setup_logging()
    logger.info("Application starting up")
    register_recalculation_listener()
    open_queue_gateway()
    start_scheduler()
    yield
    shutdown_scheduler()
    shutdown_queue_gateway()
    logger.info("Application shutting down")


app = FastAPI(
    title="Candidate Management API",
    description="Candidate registration with cached age metrics recalculated through SQS",
    version="0.1.0",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# CORS Configuration
# ---------------------------------------------------------------------------
_raw_origins = settings.ALLOWED_ORIGINS.strip()
if _raw_origins == "*":
    _allowed_origins: list[str] = ["*"]
else:
    _allowed_origins = [o.strip() for o in _raw_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Router Registration
# ---------------------------------------------------------------------------
app.include_router(health.router, tags=["Health"])
app.include_router(candidates.router, prefix="/api/v1/candidates", tags=["Candidates"])


def run() -> None:
    """Serve the application with uvicorn (``candidate-metrics-api`` script)."""
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
