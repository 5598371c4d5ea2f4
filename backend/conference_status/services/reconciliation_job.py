"""Reconciliation Job — keeps stored conference status in step with the clock.

Invariants:
    - run_once: one full scan, `now` read once per pass, writes only forward transitions
      (plan_transition), returns the number of records written
    - Records whose planned status equals the stored one are never written (idempotent)
    - A malformed record is skipped for this pass; a failed write is logged and skipped —
      neither aborts the scan
    - A failed listing raises TransientStoreError to a direct run_once caller only;
      the scheduler logs it and tries again next period
    - At most one pass in flight per job: an overlapping tick or call is skipped, not queued
    - stop() cancels the schedule (no tick fires after it returns) but never interrupts
      a pass that is already running unless asked to wait for it

Design Decisions:
    - Fixed-rate schedule: each period starts a pass as its own task, so a slow pass
      makes the next tick skip instead of drifting the whole schedule
    - Repository + clock injected: the job is tested against an in-memory fake with a
      frozen clock, production wires SqlConferenceRepository and utc_now
    - Per-record writes are sequential: record counts are small and one writer keeps the
      store load predictable
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime

from conference_status.core.clock import Clock, utc_now
from conference_status.core.errors import (
    ConferenceStatusError,
    MalformedRecordError,
    ReconciliationTimeoutError,
    TransientStoreError,
)
from conference_status.core.records import record_from_document
from conference_status.core.repository_protocols import ConferenceRepository
from conference_status.core.status_resolver import plan_transition

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0


@dataclass
class ReconciliationResult:
    """Outcome of one pass, kept for observability."""
    started_at: datetime
    finished_at: datetime | None = None
    scanned: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    transitions: dict[str, tuple[str, str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "scanned": self.scanned,
            "updated": self.updated,
            "skipped": self.skipped,
            "failed": self.failed,
            "transitions": {
                cid: {"from": old, "to": new}
                for cid, (old, new) in self.transitions.items()
            },
        }


class ReconciliationJob:
    """Periodic full-scan reconciliation of conference lifecycle status."""

    def __init__(
        self,
        repository: ConferenceRepository,
        *,
        clock: Clock = utc_now,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        run_timeout_seconds: float | None = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._repository = repository
        self._clock = clock
        self.interval_seconds = interval_seconds
        self.run_timeout_seconds = run_timeout_seconds
        self._lock = asyncio.Lock()
        self._scheduler: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None
        self.last_result: ReconciliationResult | None = None
        self.ticks_skipped = 0

    # ─── Lifecycle ───────────────────────────────────────────────

    @property
    def running(self) -> bool:
        return self._scheduler is not None and not self._scheduler.done()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    async def start(self) -> None:
        """Run a pass now, then one every interval. No-op if already started."""
        if self.running:
            return
        logger.info(
            "Starting conference status reconciliation (every %gs)",
            self.interval_seconds,
        )
        self._scheduler = asyncio.get_running_loop().create_task(
            self._schedule(), name="conference-status-reconciliation",
        )

    async def stop(self, wait_for_inflight: bool = False) -> None:
        """Cancel the schedule. Idempotent; safe if never started."""
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None and not scheduler.done():
            scheduler.cancel()
            try:
                await scheduler
            except asyncio.CancelledError:
                pass
            logger.info("Stopped conference status reconciliation")
        inflight = self._inflight
        if wait_for_inflight and inflight is not None and not inflight.done():
            await asyncio.wait({inflight})

    # ─── Passes ──────────────────────────────────────────────────

    async def run_once(self) -> int:
        """Reconcile every record once. Returns the number of records written.

        Raises TransientStoreError if the records cannot be listed at all.
        Returns 0 without scanning when another pass is already in flight.
        """
        if self._lock.locked():
            logger.info("Reconciliation pass already in flight, skipping")
            return 0
        async with self._lock:
            result = await self._reconcile()
        return result.updated

    async def _reconcile(self) -> ReconciliationResult:
        now = self._clock()
        started = time.monotonic()
        result = ReconciliationResult(started_at=now)
        documents = await self._list_documents()

        for document in documents:
            result.scanned += 1
            try:
                record = record_from_document(document)
            except MalformedRecordError as e:
                result.skipped += 1
                logger.warning(
                    f"Skipping malformed conference: {e.message}",
                    extra={
                        "conference_id": e.context.conference_id,
                        "error_code": e.code,
                    },
                )
                continue

            target = plan_transition(
                record.status, record.start_time, record.end_time, now,
            )
            if target is None:
                continue

            previous = record.status.value if record.status else "unset"
            try:
                await self._repository.update_fields(
                    record.id, status=target, updated_at=now,
                )
            except ConferenceStatusError as e:
                result.failed += 1
                logger.error(
                    f"Failed to update conference status: {e.message}",
                    extra={"conference_id": record.id, "error_code": e.code},
                )
                continue
            except Exception as e:
                result.failed += 1
                logger.error(
                    f"Unexpected error updating conference status: {e}",
                    extra={"conference_id": record.id},
                    exc_info=True,
                )
                continue

            result.updated += 1
            result.transitions[record.id] = (previous, target.value)
            logger.info(
                f"Conference status {previous} -> {target.value}",
                extra={
                    "conference_id": record.id,
                    "from_status": previous,
                    "to_status": target.value,
                },
            )

        result.finished_at = self._clock()
        self.last_result = result
        logger.info(
            f"Reconciled {result.scanned} conferences, updated {result.updated}",
            extra={
                "scanned": result.scanned,
                "updated": result.updated,
                "skipped": result.skipped,
                "failed": result.failed,
                "duration_ms": round((time.monotonic() - started) * 1000),
            },
        )
        return result

    async def _list_documents(self) -> list:
        try:
            return await self._repository.list_documents()
        except TransientStoreError:
            raise
        except ConferenceStatusError as e:
            raise TransientStoreError(e.message, "list") from e
        except Exception as e:
            raise TransientStoreError(str(e), "list") from e

    # ─── Scheduling ──────────────────────────────────────────────

    async def _schedule(self) -> None:
        while True:
            if self._lock.locked():
                self.ticks_skipped += 1
                logger.warning(
                    "Previous reconciliation pass still running, tick skipped",
                )
            else:
                self._inflight = asyncio.get_running_loop().create_task(
                    self._tick(),
                )
            await asyncio.sleep(self.interval_seconds)

    async def _tick(self) -> None:
        """One scheduled pass. Never raises."""
        try:
            if self.run_timeout_seconds:
                await asyncio.wait_for(self.run_once(), self.run_timeout_seconds)
            else:
                await self.run_once()
        except asyncio.TimeoutError:
            err = ReconciliationTimeoutError(self.run_timeout_seconds)
            logger.warning(err.message, extra={"error_code": err.code})
        except ConferenceStatusError as e:
            logger.warning(
                f"Reconciliation tick aborted: {e.message}",
                extra={"error_code": e.code},
            )
        except Exception as e:
            logger.error(
                f"Unexpected reconciliation failure: {e}", exc_info=True,
            )
