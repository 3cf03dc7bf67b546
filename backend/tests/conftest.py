"""
pytest configuration and fixtures for Trippy Tracker backend tests.
"""

import json
import os
import tempfile

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Set environment variables before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["STORAGE_BACKEND"] = "jsonl"
os.environ["DATA_DIR"] = os.path.join(tempfile.gettempdir(), "trippy-tracker-tests")
os.environ["LANDING_BASE"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "DEBUG"

LANDING_BASE = "https://example.com/land"


@pytest.fixture
def data_dir(tmp_path) -> str:
    """Fresh per-test data directory."""
    return str(tmp_path)


@pytest.fixture
def jsonl_store(data_dir):
    """JSON-lines store on a temporary directory."""
    from app.db.jsonl_store import JsonlEventStore

    return JsonlEventStore(data_dir)


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """SQLite-backed store with tables created."""
    from app.db.sql_store import SqlEventStore

    store = SqlEventStore(f"sqlite+aiosqlite:///{tmp_path / 'events.db'}")
    await store.init()
    yield store
    await store.close()


@pytest.fixture
def make_event():
    """Factory for Event objects with sensible defaults."""
    from app.schemas.event import Event, EventType
    from app.utils.tracking import derive_industry

    def _make(event_type=EventType.CLICK, lead_id="lead-1", campaign="restaurants_v1", **kwargs):
        return Event(
            type=event_type,
            lead_id=lead_id,
            campaign=campaign,
            industry=kwargs.pop("industry", derive_industry(campaign)),
            timestamp=kwargs.pop("timestamp", "2026-01-15T10:30:00+00:00"),
            user_agent=kwargs.pop("user_agent", "pytest"),
            ip_hash=kwargs.pop("ip_hash", "abcdef0123456789"),
        )

    return _make


@pytest.fixture
def app_settings(monkeypatch, data_dir):
    """Point the shared settings at a temporary jsonl store with a landing base."""
    from app.core.config import settings

    monkeypatch.setattr(settings, "data_dir", data_dir)
    monkeypatch.setattr(settings, "storage_backend", "jsonl")
    monkeypatch.setattr(settings, "landing_base", LANDING_BASE)
    return settings


@pytest.fixture
def client(app_settings):
    """TestClient with the lifespan (and so the event store) running."""
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def read_jsonl():
    """Parse every line of an events.jsonl file."""

    def _read(path: str) -> list:
        with open(path, encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

    return _read
