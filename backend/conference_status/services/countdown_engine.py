"""Countdown Engine — per-subscription ticking of the time left until a conference ends.

Invariants:
    - Emits immediately on start, then once per tick, until the remaining time is zero
    - The zero value is emitted exactly once, then the stream ends (terminal state)
    - Never emits negative components (clamped by core/countdown.py)
    - start(None) does not run; start(target) always resets this engine's previous timer
    - After stop() returns, no further tick is delivered
    - Engines share no mutable state — one per displayed conference

Design Decisions:
    - asyncio task per engine over a shared scheduler: cancellation is per subscription
      and cannot starve sibling countdowns
    - ticks() async generator is the primitive; CountdownEngine wraps it for
      callback-style consumers, the SSE route iterates it directly
    - clock and sleep injectable: tests drive time without real waiting
"""

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime

from conference_status.core.clock import Clock, utc_now
from conference_status.core.countdown import RemainingTime, remaining_time

logger = logging.getLogger(__name__)

TickCallback = Callable[[RemainingTime], "Awaitable[None] | None"]
Sleep = Callable[[float], Awaitable[None]]

DEFAULT_TICK_SECONDS = 1.0


async def ticks(
    target: datetime,
    *,
    clock: Clock = utc_now,
    tick_seconds: float = DEFAULT_TICK_SECONDS,
    sleep: Sleep = asyncio.sleep,
) -> AsyncIterator[RemainingTime]:
    """Yield the remaining time every tick; the last value yielded is zero."""
    while True:
        value = remaining_time(target, clock())
        yield value
        if value.is_zero:
            return
        await sleep(tick_seconds)


class CountdownEngine:
    """Callback-driven countdown with an explicit stop."""

    def __init__(
        self,
        on_tick: TickCallback,
        *,
        clock: Clock = utc_now,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ):
        if tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self._on_tick = on_tick
        self._clock = clock
        self._tick_seconds = tick_seconds
        self._sleep = sleep
        self._task: asyncio.Task | None = None
        self._last_value: RemainingTime | None = None
        self.target: datetime | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_value(self) -> RemainingTime | None:
        return self._last_value

    def start(self, target: datetime | None) -> None:
        """(Re)start ticking toward target. Must be called inside a running loop."""
        self.stop()
        self.target = target
        if target is None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(target))

    def stop(self) -> None:
        """Dispose the timer. Idempotent."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def wait(self) -> None:
        """Wait until the countdown reaches its terminal state (or is stopped)."""
        task = self._task
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    async def _run(self, target: datetime) -> None:
        async for value in ticks(
            target, clock=self._clock,
            tick_seconds=self._tick_seconds, sleep=self._sleep,
        ):
            self._last_value = value
            try:
                outcome = self._on_tick(value)
                if inspect.isawaitable(outcome):
                    await outcome
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.error("Countdown subscriber failed", exc_info=True)
