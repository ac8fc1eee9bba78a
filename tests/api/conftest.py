"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from skytrack.api.app import create_app
from skytrack.config import Settings
from skytrack.rendering.geojson import GeoJSONRenderer
from skytrack.session import TrackerSession
from tests.factories import flight_payload, raw_sample
from tests.fake_backend import FakeBackend


@pytest.fixture
def backend():
    """In-memory backend with one active flight and a three-point path."""
    fake = FakeBackend()
    fake.flights["AA123"] = flight_payload("AA123")
    fake.paths["AA123"] = [raw_sample("AA123", m) for m in (0, 10, 20)]
    return fake


@pytest.fixture
async def test_app(backend):
    """FastAPI app whose session talks to the fake backend."""
    app = create_app(Settings(map_token="pk.test"))
    gateway = backend.client()
    app.state.session = TrackerSession(gateway, renderer=GeoJSONRenderer())
    yield app
    app.state.session.close()
    await gateway.aclose()


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
