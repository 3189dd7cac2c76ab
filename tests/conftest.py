"""Shared test fixtures for the Trip Catalog API."""

import asyncio
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from trip_catalog_api.app.core.cache import SimpleCache
from trip_catalog_api.app.core.collection import TripCollection
from trip_catalog_api.app.core.config import Settings
from trip_catalog_api.app.core.db import Database
from trip_catalog_api.app.main import create_app
from trip_catalog_api.app.schemas.trip import TripCreate
from trip_catalog_api.app.services.trip_service import TripService


class FakeClock:
    """Monotonic clock the tests move forward by hand."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def run(coro):
    """Drive an async service method to completion."""
    return asyncio.run(coro)


@pytest.fixture
def make_trip():
    """Return a factory for valid trip payloads."""

    def _make(code: str = "ABC123", **overrides) -> dict:
        payload = {
            "code": code,
            "name": f"Trip {code}",
            "length": 7,
            "start": datetime(2025, 2, 14, 8, 0, tzinfo=timezone.utc).isoformat(),
            "resort": "Aspen",
            "per_person": 1000.0,
            "image": "aspen.jpg",
            "description": "A week of skiing in the mountains.",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def database(tmp_path):
    db = Database(str(tmp_path / "trips.db"))
    db.init_db()
    return db


@pytest.fixture
def collection(database):
    return TripCollection(database)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return SimpleCache(clock=clock)


@pytest.fixture
def service(collection, cache):
    return TripService(collection, cache)


@pytest.fixture
def add_trip(service, make_trip):
    """Insert a trip through the service and return it."""

    def _add(code: str = "ABC123", **overrides):
        return run(service.add_trip(TripCreate(**make_trip(code, **overrides))))

    return _add


@pytest.fixture
def client(tmp_path):
    app = create_app(Settings(database_url=str(tmp_path / "api.db"), secret_key="test-secret"))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    response = client.post(
        "/api/v1/register",
        json={"email": "admin@example.com", "name": "Admin", "password": "correct-horse"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
