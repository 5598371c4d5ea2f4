"""Conference Status API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ConferenceStatusError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - One process-wide ReconciliationJob, owned by the lifespan: started after the
      database is initialized, stopped before the engine is disposed

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - The job lives on app.state so routes reach it through a dependency, never a global
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from conference_status.api.error_handlers import register_error_handlers
from conference_status.api.routes import (
    conference_countdown, conferences, health, reconciliation,
)
from conference_status.config import get_settings
from conference_status.infrastructure.conference_repository import SqlConferenceRepository
from conference_status.infrastructure.database import init_db
from conference_status.infrastructure.observability import setup_logging
from conference_status.services.reconciliation_job import ReconciliationJob

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    job = None
    if settings.reconciliation_enabled:
        job = ReconciliationJob(
            SqlConferenceRepository(manager.session),
            interval_seconds=settings.reconciliation_interval_seconds,
            run_timeout_seconds=settings.reconciliation_timeout_seconds,
        )
        await job.start()
    app.state.reconciliation_job = job
    logger.info("Conference Status API started")
    yield
    logger.info("Conference Status API shutting down")
    if job is not None:
        await job.stop(wait_for_inflight=True)
    app.state.reconciliation_job = None
    await manager.dispose()


app = FastAPI(
    title="Conference Status API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(conferences.router)
app.include_router(conference_countdown.router)
app.include_router(reconciliation.router)

register_error_handlers(app)
