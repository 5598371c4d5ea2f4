"""Conference Routes — create, read, catalog, and organizer start/end overrides.

Invariants:
    - Every response carries the stored status and the status computed at request time
    - Catalog buckets come from build_catalog (view_status at `now`), not stored labels alone
    - Start/end overrides go through services/conference_actions.py (forward-only)
    - /catalog is registered before /{conference_id} so it is never read as an id

Design Decisions:
    - Create writes through the request's AsyncSession (get_db); reads and overrides go
      through the ConferenceRepository so they share the job's document mapping
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from conference_status.api.dependencies import get_clock, get_repository
from conference_status.config import get_settings
from conference_status.core.catalog import build_catalog
from conference_status.core.clock import Clock
from conference_status.core.domain_types import ConferenceId
from conference_status.core.errors import MalformedRecordError, ResourceNotFoundError
from conference_status.core.records import record_from_document
from conference_status.core.repository_protocols import ConferenceRepository
from conference_status.infrastructure.database import get_db
from conference_status.models.conference import Conference
from conference_status.schemas.conference import (
    ConferenceCatalogResponse, ConferenceCreate, ConferenceResponse,
)
from conference_status.services.conference_actions import (
    check_schedule, end_conference, start_conference,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/conferences", tags=["conferences"])


@router.post(
    "", response_model=ConferenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conference(
    body: ConferenceCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
):
    """Create a conference. Status defaults to upcoming."""
    check_schedule(body.start_time, body.end_time)
    now = clock()
    conference = Conference(
        title=body.title,
        description=body.description,
        organizer_id=body.organizer_id,
        youtube_url=body.youtube_url,
        venue=body.venue,
        is_public=body.is_public,
        status=body.status,
        start_time=body.start_time,
        end_time=body.end_time,
        created_at=now,
        updated_at=now,
    )
    db.add(conference)
    await db.commit()
    await db.refresh(conference)
    logger.info(
        "Conference created", extra={"conference_id": conference.id},
    )
    document = conference.to_document()
    return ConferenceResponse.build(document, record_from_document(document), now)


@router.get("/catalog", response_model=ConferenceCatalogResponse)
async def get_catalog(
    past_limit: int | None = Query(None, ge=0, le=100),
    repository: ConferenceRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Live, upcoming and past conferences as of now."""
    now = clock()
    limit = get_settings().catalog_past_limit if past_limit is None else past_limit
    documents = {}
    records = []
    for document in await repository.list_documents():
        try:
            record = record_from_document(document)
        except MalformedRecordError as e:
            logger.warning(
                f"Catalog skipping malformed conference: {e.message}",
                extra={"conference_id": e.context.conference_id, "error_code": e.code},
            )
            continue
        documents[record.id] = document
        records.append(record)

    catalog = build_catalog(records, now, past_limit=limit)

    def render(bucket):
        return [ConferenceResponse.build(documents[r.id], r, now) for r in bucket]

    return ConferenceCatalogResponse(
        live=render(catalog.live),
        upcoming=render(catalog.upcoming),
        past=render(catalog.past),
    )


@router.get("/{conference_id}", response_model=ConferenceResponse)
async def get_conference(
    conference_id: str,
    repository: ConferenceRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Single conference with stored and computed status."""
    document = await _get_document_or_404(repository, ConferenceId(conference_id))
    return ConferenceResponse.build(document, record_from_document(document), clock())


@router.post("/{conference_id}/start", response_model=ConferenceResponse)
async def start(
    conference_id: str,
    repository: ConferenceRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Organizer override: go live now."""
    now = clock()
    record = await start_conference(repository, ConferenceId(conference_id), now)
    document = await _get_document_or_404(repository, record.id)
    return ConferenceResponse.build(document, record, now)


@router.post("/{conference_id}/end", response_model=ConferenceResponse)
async def end(
    conference_id: str,
    repository: ConferenceRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Organizer override: end now (end_time pulled in to now)."""
    now = clock()
    record = await end_conference(repository, ConferenceId(conference_id), now)
    document = await _get_document_or_404(repository, record.id)
    return ConferenceResponse.build(document, record, now)


async def _get_document_or_404(
    repository: ConferenceRepository, conference_id: ConferenceId,
) -> dict:
    document = await repository.get_document(conference_id)
    if document is None:
        raise ResourceNotFoundError("Conference", conference_id)
    return document
