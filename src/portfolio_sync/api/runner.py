#!/usr/bin/env python3
"""FastAPI server runner — wires the services and serves them with uvicorn."""

from __future__ import annotations

from dataclasses import dataclass

import uvicorn
import structlog
from fastapi import FastAPI

from portfolio_sync.api.app import create_app
from portfolio_sync.config.loader import load_config
from portfolio_sync.config.schema import AppConfig
from portfolio_sync.logging.setup import setup_logging
from portfolio_sync.orchestrator.scheduler import RefreshScheduler
from portfolio_sync.orchestrator.updater import PortfolioUpdater
from portfolio_sync.profile.client import ProfileClient
from portfolio_sync.storage.json_store import JsonStorageService

logger = structlog.get_logger()


@dataclass
class Services:
    storage: JsonStorageService
    fetcher: ProfileClient
    updater: PortfolioUpdater
    scheduler: RefreshScheduler


def build_services(config: AppConfig) -> Services:
    """Construct the single instance of each service for this process."""
    storage = JsonStorageService(config.storage.path)
    fetcher = ProfileClient(
        base_url=config.profile.base_url,
        profile_path=config.profile.profile_path,
        timeout_s=config.profile.timeout_s,
    )
    updater = PortfolioUpdater(fetcher, storage, token=config.profile.token)
    scheduler = RefreshScheduler(
        updater.run_once,
        interval_s=config.schedule.interval_s,
        run_on_start=config.schedule.run_on_start,
    )
    return Services(storage=storage, fetcher=fetcher, updater=updater, scheduler=scheduler)


def build_app(config: AppConfig) -> FastAPI:
    services = build_services(config)
    return create_app(
        services.storage,
        not_found_message=config.not_found_message,
        scheduler=services.scheduler,
        on_shutdown=[services.fetcher.close],
    )


async def refresh_once(config: AppConfig) -> bool:
    """Run a single refresh cycle outside the server; True on success."""
    services = build_services(config)
    try:
        result = await services.updater.run_once()
    finally:
        await services.fetcher.close()
    return result.ok


def main(config_path: str | None = None) -> None:
    """Run the FastAPI server with the refresh scheduler attached."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)
    app = build_app(config)

    logger.info(
        "Starting FastAPI server",
        host=config.server.host,
        port=config.server.port,
        storage=config.storage.path,
    )

    try:
        uvicorn.run(
            app,
            host=config.server.host,
            port=config.server.port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    main()
