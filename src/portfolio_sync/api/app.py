"""FastAPI application serving the cached portfolio snapshot."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Protocol

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_sync.config.schema import DEFAULT_NOT_FOUND_MESSAGE
from portfolio_sync.orchestrator.scheduler import RefreshScheduler

logger = structlog.get_logger("api")


class SnapshotReader(Protocol):
    async def read(self) -> Any | None: ...


def create_app(
    storage: SnapshotReader,
    *,
    not_found_message: str = DEFAULT_NOT_FOUND_MESSAGE,
    scheduler: RefreshScheduler | None = None,
    on_shutdown: Sequence[Callable[[], Awaitable[Any]]] = (),
) -> FastAPI:
    """Build the API around an already constructed storage service.

    When *scheduler* is given it is started with the app and stopped on
    shutdown, followed by every callable in *on_shutdown*.
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()
            for hook in on_shutdown:
                await hook()
            logger.info("api_shutdown")

    app = FastAPI(
        title="Portfolio Sync API",
        description="Serves the latest synchronized profile snapshot",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/portfolio")
    async def get_portfolio():
        """Latest stored snapshot, verbatim, or 404 when none exists yet."""
        data = await storage.read()
        if data is None:
            return JSONResponse(status_code=404, content={"message": not_found_message})
        return JSONResponse(content=data)

    return app
