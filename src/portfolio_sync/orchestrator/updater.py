"""Refresh cycle — fetch the profile, persist it as the current snapshot."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Protocol

import structlog

log = structlog.get_logger("orchestrator")


class ProfileFetcher(Protocol):
    async def fetch_profile(self, token: str) -> Any: ...


class SnapshotStore(Protocol):
    async def save(self, snapshot: Any) -> None: ...


@dataclass(frozen=True)
class RefreshResult:
    ok: bool
    error: BaseException | None = None
    skipped: bool = False
    duration_ms: int = 0


class PortfolioUpdater:
    """Runs one fetch-then-save cycle per call to ``run_once``.

    ``run_once`` is meant to be called unattended by a timer, so every
    failure ends in a log event and a normal return. A call made while
    another cycle is still in flight is skipped.
    """

    def __init__(self, fetcher: ProfileFetcher, storage: SnapshotStore, token: str = ""):
        self.fetcher = fetcher
        self.storage = storage
        self._token = token
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    async def run_once(self) -> RefreshResult:
        if self._running:
            log.warning("refresh_skipped", reason="previous refresh still running")
            return RefreshResult(ok=False, skipped=True)

        self._running = True
        t0 = time.perf_counter()
        log.info("refresh_started")
        try:
            snapshot = await self.fetcher.fetch_profile(self._token)
            await self.storage.save(snapshot)
        except Exception as exc:
            elapsed_ms = int((time.perf_counter() - t0) * 1000)
            log.exception("refresh_failed", error=str(exc), duration_ms=elapsed_ms)
            return RefreshResult(ok=False, error=exc, duration_ms=elapsed_ms)
        finally:
            self._running = False

        elapsed_ms = int((time.perf_counter() - t0) * 1000)
        log.info("refresh_completed", duration_ms=elapsed_ms)
        return RefreshResult(ok=True, duration_ms=elapsed_ms)
