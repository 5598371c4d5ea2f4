"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if database is unreachable (readiness)
    - Readiness reports the reconciliation scheduler state but never fails on it

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from load balancer
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from conference_status.api.dependencies import get_reconciliation_job
from conference_status.infrastructure import database
from conference_status.services.reconciliation_job import ReconciliationJob

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "conference-status-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(
    job: ReconciliationJob | None = Depends(get_reconciliation_job),
):
    """Readiness probe — includes database connectivity."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {
        "status": "ready",
        "checks": {
            "database": "healthy",
            "reconciliation": (
                "running" if job is not None and job.running else "stopped"
            ),
        },
    }
