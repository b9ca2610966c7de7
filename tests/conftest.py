"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from protocol_server.application.app import create_app  # noqa: E402
from protocol_server.core.config.settings import Settings  # noqa: E402
from protocol_server.session.store import SessionStore  # noqa: E402

GREETING_PROMPT = "Hello, world!"


# ============================================================================
# Clock Fixtures
# ============================================================================


class FakeClock:
    """Manually advanced wall clock for TTL tests."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def clock():
    return FakeClock()


# ============================================================================
# Session Store Fixtures
# ============================================================================


@pytest.fixture
def store(clock):
    """SessionStore with a 30 minute TTL driven by the fake clock."""
    return SessionStore(ttl=timedelta(minutes=30), lock_stripes=4, clock=clock)


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def test_settings():
    """Settings with stream pacing disabled so streamed tests finish instantly."""
    return Settings(
        STREAM_CHUNK_DELAY_SECONDS=0,
        LOG_FORMAT="console",
        ENVIRONMENT="development",
    )


@pytest.fixture
def app(test_settings, store):
    """App whose session store is the fake-clock store above."""
    application = create_app(test_settings)
    application.state.session_store = store
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session_id(client):
    """A live session opened through the API."""
    response = client.post("/v1/session", json={"id": "req-open"})
    return response.json()["session_id"]
