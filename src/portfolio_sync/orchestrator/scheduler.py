"""Refresh scheduler — wall-clock aligned timer plus one run at startup."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any, NamedTuple

import structlog

log = structlog.get_logger("scheduler")

HOURLY_S = 3600
HOURLY_CRON = "0 * * * *"

# Floor for re-sleeps when the wall clock lags the loop clock near a tick.
_MIN_SLEEP_S = 0.001

RefreshTarget = Callable[[], Awaitable[Any]]


class Trigger(NamedTuple):
    cron: str
    interval_s: float
    target: RefreshTarget


def cron_for_interval(interval_s: float) -> str:
    """Cron-style description of a wall-clock aligned interval."""
    if interval_s == HOURLY_S:
        return HOURLY_CRON
    if interval_s % 60 == 0 and HOURLY_S % interval_s == 0:
        return f"*/{int(interval_s // 60)} * * * *"
    if interval_s % HOURLY_S == 0 and 86400 % interval_s == 0:
        return f"0 */{int(interval_s // HOURLY_S)} * * *"
    return f"@every {interval_s:g}s"


def next_tick_after(ts: float, interval_s: float) -> float:
    """First multiple of *interval_s* since the epoch strictly after *ts*."""
    return (ts // interval_s + 1) * interval_s


def seconds_until_next_tick(now: datetime, interval_s: float) -> float:
    """Seconds from *now* to the next multiple of *interval_s* since the epoch.

    Always strictly positive: a *now* sitting exactly on a tick waits a full
    interval.
    """
    ts = now.timestamp()
    return next_tick_after(ts, interval_s) - ts


class RefreshScheduler:
    """Fires *target* every *interval_s* seconds on wall-clock boundaries.

    Each fire dispatches the target as its own task and does not wait for
    it; overlapping runs are left to the target to handle. *clock* returns
    wall-clock epoch seconds.
    """

    def __init__(
        self,
        target: RefreshTarget,
        interval_s: float = HOURLY_S,
        run_on_start: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.target = target
        self.interval_s = interval_s
        self.run_on_start = run_on_start
        self._clock = clock
        self.triggers: list[Trigger] = []
        self._timers: list[asyncio.Task] = []
        self._inflight: set[asyncio.Task] = set()

    def start(self) -> Trigger:
        """Register the recurring trigger and return without blocking.

        Must be called from inside a running event loop. Each call registers
        an independent trigger.
        """
        loop = asyncio.get_running_loop()
        trigger = Trigger(
            cron=cron_for_interval(self.interval_s),
            interval_s=self.interval_s,
            target=self.target,
        )
        self.triggers.append(trigger)
        self._timers.append(loop.create_task(self._timer(trigger)))
        log.info("refresh_scheduled", cron=trigger.cron, interval_s=trigger.interval_s)

        if self.run_on_start:
            self._dispatch(trigger.target)
        return trigger

    async def stop(self) -> None:
        """Cancel timer loops and any refresh still in flight."""
        tasks = [*self._timers, *self._inflight]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._timers.clear()
        self._inflight.clear()
        log.info("scheduler_stopped")

    async def _timer(self, trigger: Trigger) -> None:
        interval = trigger.interval_s
        next_tick = next_tick_after(self._clock(), interval)
        while True:
            # The event loop sleeps on the monotonic clock, which can run
            # ahead of a slewed wall clock; only fire once the tick is reached.
            remaining = next_tick - self._clock()
            if remaining > 0:
                await asyncio.sleep(max(remaining, _MIN_SLEEP_S))
                continue
            try:
                self._dispatch(trigger.target)
            except Exception:
                log.exception("scheduler_tick_error", cron=trigger.cron)
            next_tick += interval
            now = self._clock()
            if next_tick <= now:
                # Clock jumped forward past whole ticks; resume on the next one.
                log.warning("scheduler_ticks_missed", cron=trigger.cron)
                next_tick = next_tick_after(now, interval)

    def _dispatch(self, target: RefreshTarget) -> asyncio.Task:
        task = asyncio.ensure_future(target())
        self._inflight.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("refresh_task_error", error=str(exc))
