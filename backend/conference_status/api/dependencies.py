"""Route Dependencies — repository, clock and job handles injected into routes.

Invariants:
    - Routes never read the system clock directly; they depend on get_clock
    - The reconciliation job is owned by the app lifespan (app.state), not by any route

Design Decisions:
    - FastAPI Depends over module globals: tests swap the clock and repository through
      app.dependency_overrides without patching imports
"""

from fastapi import Request

from conference_status.core.clock import Clock, utc_now
from conference_status.infrastructure.conference_repository import SqlConferenceRepository
from conference_status.infrastructure.database import get_db_manager
from conference_status.services.reconciliation_job import ReconciliationJob


def get_clock() -> Clock:
    return utc_now


def get_repository() -> SqlConferenceRepository:
    return SqlConferenceRepository(get_db_manager().session)


def get_reconciliation_job(request: Request) -> ReconciliationJob | None:
    return getattr(request.app.state, "reconciliation_job", None)
