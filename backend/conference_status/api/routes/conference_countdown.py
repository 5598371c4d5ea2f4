"""Conference Countdown Stream — SSE "ends in HH:MM:SS" ticks for a live conference.

Invariants:
    - Only a conference that is live at request time and has an end time gets a stream
      (otherwise 409 CONFERENCE_NOT_LIVE)
    - One countdown event per tick; the last one is 00:00:00, followed by a done event
    - Client disconnect closes the generator, which stops the ticking

Design Decisions:
    - Iterates services.countdown_engine.ticks directly: the generator's lifetime is the
      response's lifetime, so there is no timer to leak
"""

import json
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from conference_status.api.dependencies import get_clock, get_repository
from conference_status.config import get_settings
from conference_status.core.clock import Clock
from conference_status.core.domain_types import ConferenceId, ConferenceStatus
from conference_status.core.errors import ConferenceNotLiveError, ErrorContext
from conference_status.core.repository_protocols import ConferenceRepository
from conference_status.core.status_resolver import view_status
from conference_status.services.conference_actions import load_record
from conference_status.services.countdown_engine import ticks

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/conferences", tags=["countdown"])

# SSE headers prevent proxy/browser buffering of streamed events.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@router.get("/{conference_id}/countdown")
async def stream_countdown(
    conference_id: str,
    repository: ConferenceRepository = Depends(get_repository),
    clock: Clock = Depends(get_clock),
):
    """Stream the time left until the conference ends, once per tick."""
    record = await load_record(repository, ConferenceId(conference_id))
    computed = view_status(record, clock())
    if computed != ConferenceStatus.LIVE or record.end_time is None:
        raise ConferenceNotLiveError(
            computed.value, ErrorContext(conference_id=record.id),
        )
    tick_seconds = get_settings().countdown_tick_seconds

    async def event_generator():
        async for value in ticks(
            record.end_time, clock=clock, tick_seconds=tick_seconds,
        ):
            yield _sse_line({"type": "countdown", "data": value.to_dict()})
        yield _sse_line({"type": "done", "data": {"conference_id": record.id}})

    return StreamingResponse(
        event_generator(), media_type="text/event-stream", headers=SSE_HEADERS,
    )


def _sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"
