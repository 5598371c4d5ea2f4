"""Reconciliation Routes — on-demand pass and job observability.

Invariants:
    - POST /run executes run_once synchronously and returns its update count;
      a listing failure surfaces as 503 TRANSIENT_STORE_ERROR
    - When the app runs without a scheduled job, /run still works against a one-off job
    - GET /status never touches the store
"""

from fastapi import APIRouter, Depends

from conference_status.api.dependencies import (
    get_clock, get_reconciliation_job, get_repository,
)
from conference_status.config import get_settings
from conference_status.core.clock import Clock
from conference_status.core.repository_protocols import ConferenceRepository
from conference_status.schemas.conference import (
    ReconciliationRunResponse, ReconciliationStatusResponse,
)
from conference_status.services.reconciliation_job import ReconciliationJob

router = APIRouter(prefix="/api/v1/reconciliation", tags=["reconciliation"])


@router.post("/run", response_model=ReconciliationRunResponse)
async def run_reconciliation(
    job: ReconciliationJob | None = Depends(get_reconciliation_job),
    repository: ConferenceRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Run one reconciliation pass now."""
    if job is None:
        job = ReconciliationJob(
            repository, clock=clock,
            interval_seconds=get_settings().reconciliation_interval_seconds,
        )
    updated = await job.run_once()
    last = job.last_result.to_dict() if job.last_result else None
    return ReconciliationRunResponse(updated=updated, result=last)


@router.get("/status", response_model=ReconciliationStatusResponse)
async def reconciliation_status(
    job: ReconciliationJob | None = Depends(get_reconciliation_job),
):
    """Scheduler state and the outcome of the last pass."""
    settings = get_settings()
    if job is None:
        return ReconciliationStatusResponse(
            enabled=False, running=False, in_flight=False,
            interval_seconds=settings.reconciliation_interval_seconds,
            ticks_skipped=0,
        )
    return ReconciliationStatusResponse(
        enabled=True,
        running=job.running,
        in_flight=job.in_flight,
        interval_seconds=job.interval_seconds,
        ticks_skipped=job.ticks_skipped,
        last_result=job.last_result.to_dict() if job.last_result else None,
    )
