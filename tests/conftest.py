"""
Test fixtures for the campus portal.

Provides app, client, store, and a seeded demo campus. Every app gets a fresh
in-memory store and its own upload folder under tmp_path.
"""

from __future__ import annotations

import pytest
from datetime import datetime

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))


FIXED_NOW = datetime(2024, 10, 21, 9, 30, 0)


@pytest.fixture
def app(tmp_path):
    """Create app with an empty store for testing."""
    from app import create_app

    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    })
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    """Test client; no authentication layer to log in through."""
    return app.test_client()


@pytest.fixture
def store(app):
    """The app's entity store, pinned to a fixed clock."""
    from database import get_store

    s = get_store()
    s.clock = lambda: FIXED_NOW
    return s


@pytest.fixture
def hub(app):
    from push import get_hub
    return get_hub()


@pytest.fixture
def seeded(store):
    """Load the demo campus (two students, teacher, parents, three courses)."""
    from seed_demo_data import seed

    seed(store)
    return store


@pytest.fixture
def register(client):
    """POST /api/register with sensible student defaults."""
    def _register(**fields):
        body = {
            "type": "student",
            "email": "alice@example.com",
            "password": "s3cret-pass",
            "name": "Alice",
            "department": "computer_science",
        }
        body.update(fields)
        return client.post("/api/register", json=body)
    return _register
