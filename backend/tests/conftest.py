"""Pytest configuration and shared fixtures."""

import os
from datetime import datetime, timezone

# Use in-memory sqlite for tests; set before app imports so the engine uses it
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("STRAVA_CLIENT_ID", "12345")
os.environ.setdefault("STRAVA_CLIENT_SECRET", "test-secret")
os.environ.setdefault("STRAVA_MIN_SYNC_INTERVAL_SECONDS", "0")

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_now, get_strava_client
from app.db import Base, SessionLocal, engine
from app.main import app
from app.services.strava_client import StravaClient

# Day 100 of 2025 at midnight UTC
NOW = datetime(2025, 4, 11, tzinfo=timezone.utc)


class FakeStrava:
    """Canned Strava responses served through httpx.MockTransport."""

    def __init__(self):
        self.pages: list[list[dict]] = []
        self.token_status = 200
        self.token_payload: dict = {
            "token_type": "Bearer",
            "access_token": "new-access",
            "refresh_token": "new-refresh",
            "expires_at": int(NOW.timestamp()) + 6 * 3600,
            "athlete": {"id": 42},
        }
        self.list_status = 200
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/oauth/token":
            return httpx.Response(self.token_status, json=self.token_payload)
        if path == "/api/v3/athlete/activities":
            if self.list_status != 200:
                return httpx.Response(self.list_status, text="unavailable")
            page = int(request.url.params.get("page", "1"))
            data = self.pages[page - 1] if page <= len(self.pages) else []
            return httpx.Response(200, json=data)
        if path == "/api/v3/athlete":
            return httpx.Response(200, json={"id": 42, "firstname": "Test"})
        return httpx.Response(404, text="not found")

    def client(self) -> StravaClient:
        return StravaClient(transport=httpx.MockTransport(self.handler))

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture(autouse=True)
def clean_db():
    """Recreate all tables so every test starts from an empty database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def fake_strava():
    return FakeStrava()


@pytest.fixture
def client(fake_strava):
    """TestClient with a fixed clock and Strava served by fake_strava."""
    app.dependency_overrides[get_now] = lambda: NOW
    app.dependency_overrides[get_strava_client] = fake_strava.client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
