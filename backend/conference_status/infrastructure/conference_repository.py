"""SQL Conference Repository — ConferenceRepository over SQLAlchemy async sessions.

Invariants:
    - One short-lived session per operation: a failed write never poisons other records
    - list_documents is a full scan (no filter) ordered by id for stable logs
    - update_fields touches only the named columns and always bumps updated_at
    - update_fields on an unknown id raises ResourceNotFoundError; a field outside the
      writable set raises UnknownFieldError before any session is opened
    - Errors surface as ConferenceStatusError subclasses (mapped by DatabaseSessionManager)

Design Decisions:
    - Session provider injected (callable returning an async context manager) so the
      background job, routes and tests share one implementation
    - Returns raw documents; normalization happens in core/records.py per record
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from conference_status.core.domain_types import ConferenceId, ConferenceStatus
from conference_status.core.errors import ResourceNotFoundError, UnknownFieldError
from conference_status.core.repository_protocols import ConferenceDocument
from conference_status.models.conference import Conference

logger = logging.getLogger(__name__)

SessionProvider = Callable[[], AbstractAsyncContextManager[AsyncSession]]

_UPDATABLE = frozenset({
    "status", "start_time", "end_time", "title", "description",
    "youtube_url", "venue", "is_public", "updated_at",
})


class SqlConferenceRepository:
    """Conference persistence backed by the `conferences` table."""

    def __init__(self, session_provider: SessionProvider):
        self._session_provider = session_provider

    async def list_documents(self) -> list[ConferenceDocument]:
        async with self._session_provider() as db:
            result = await db.execute(select(Conference).order_by(Conference.id))
            return [row.to_document() for row in result.scalars().all()]

    async def get_document(
        self, conference_id: ConferenceId,
    ) -> ConferenceDocument | None:
        async with self._session_provider() as db:
            row = await db.get(Conference, conference_id)
            return row.to_document() if row else None

    async def update_fields(
        self, conference_id: ConferenceId, **fields: object,
    ) -> None:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise UnknownFieldError(sorted(unknown))
        values = {
            key: (value.value if isinstance(value, ConferenceStatus) else value)
            for key, value in fields.items()
        }
        values.setdefault("updated_at", datetime.now(timezone.utc))
        async with self._session_provider() as db:
            result = await db.execute(
                update(Conference)
                .where(Conference.id == conference_id)
                .values(**values),
            )
            if result.rowcount == 0:
                await db.rollback()
                raise ResourceNotFoundError("Conference", conference_id)
            await db.commit()
        logger.debug(
            "Updated conference fields: %s", sorted(values),
            extra={"conference_id": conference_id},
        )
