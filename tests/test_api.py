"""Tests for the portfolio query API."""

from __future__ import annotations

import asyncio
import threading

import pytest
from fastapi.testclient import TestClient

from portfolio_sync.api.app import create_app
from portfolio_sync.orchestrator.scheduler import RefreshScheduler

from conftest import FakeStorage


@pytest.fixture()
def storage():
    return FakeStorage()


@pytest.fixture()
def client(storage):
    return TestClient(create_app(storage))


class TestGetPortfolio:
    def test_returns_snapshot_when_present(self, client, storage):
        storage.snapshot = {"user": "Manfred"}
        resp = client.get("/api/portfolio")
        assert resp.status_code == 200
        assert resp.json() == {"user": "Manfred"}
        assert storage.reads == 1

    def test_404_when_absent(self, client):
        resp = client.get("/api/portfolio")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Aucune donnée générée pour le moment."}

    def test_custom_not_found_message(self, storage):
        client = TestClient(create_app(storage, not_found_message="No data yet."))
        assert client.get("/api/portfolio").json() == {"message": "No data yet."}

    def test_non_object_snapshot_served_verbatim(self, client, storage):
        storage.snapshot = ["a", 1, {"b": None}]
        resp = client.get("/api/portfolio")
        assert resp.status_code == 200
        assert resp.json() == ["a", 1, {"b": None}]

    def test_empty_object_is_still_data(self, client, storage):
        storage.snapshot = {}
        resp = client.get("/api/portfolio")
        assert resp.status_code == 200
        assert resp.json() == {}

    def test_served_from_real_storage(self, json_storage):
        asyncio.run(json_storage.save({"user": "Manfred", "city": "Genève"}))
        resp = TestClient(create_app(json_storage)).get("/api/portfolio")
        assert resp.status_code == 200
        assert resp.json() == {"user": "Manfred", "city": "Genève"}

    def test_cors_header(self, client, storage):
        storage.snapshot = {"user": "Manfred"}
        resp = client.get("/api/portfolio", headers={"Origin": "https://example.com"})
        assert resp.headers["access-control-allow-origin"] == "*"


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_lifespan_starts_and_stops_scheduler(storage):
    refreshed = threading.Event()
    closed = []

    async def refresh():
        refreshed.set()

    async def close_fetcher():
        closed.append(True)

    scheduler = RefreshScheduler(refresh)
    app = create_app(storage, scheduler=scheduler, on_shutdown=[close_fetcher])

    with TestClient(app) as client:
        assert refreshed.wait(timeout=5)
        assert client.get("/api/health").status_code == 200
        assert len(scheduler.triggers) == 1

    assert closed == [True]


def test_non_finite_file_content_is_404(json_storage, storage_path):
    storage_path.parent.mkdir(parents=True)
    storage_path.write_text('{"score": NaN}', encoding="utf-8")
    resp = TestClient(create_app(json_storage)).get("/api/portfolio")
    assert resp.status_code == 404
