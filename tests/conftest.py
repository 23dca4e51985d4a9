"""Shared test fixtures and fakes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest
import structlog

from portfolio_sync.storage.json_store import JsonStorageService


class FakeFetcher:
    """Stands in for ProfileClient; returns *result* or raises *error*."""

    def __init__(self, result: Any = None, error: BaseException | None = None):
        self.result = result
        self.error = error
        self.tokens: list[str] = []
        self.gate: asyncio.Event | None = None

    async def fetch_profile(self, token: str) -> Any:
        self.tokens.append(token)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


class FakeStorage:
    """In-memory snapshot store recording every save/read call."""

    def __init__(self, snapshot: Any = None, save_error: BaseException | None = None):
        self.snapshot = snapshot
        self.save_error = save_error
        self.saved: list[Any] = []
        self.reads = 0

    async def save(self, snapshot: Any) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(snapshot)
        self.snapshot = snapshot

    async def read(self) -> Any | None:
        self.reads += 1
        return self.snapshot


@pytest.fixture(autouse=True)
def _reset_structlog():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "public" / "portfolio-data.json"


@pytest.fixture
def json_storage(storage_path):
    return JsonStorageService(storage_path)
