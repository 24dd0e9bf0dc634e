"""
Shared pytest fixtures for backend tests.
Uses a temp-file SQLite database for isolation.
"""
import pytest
import sqlite3
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
from models import IntentParams, IntentResponse


@pytest.fixture
def test_db(monkeypatch, tmp_path):
    """
    Create an isolated test database for each test.
    Uses a temp file (not :memory:) because database.py opens new connections per operation.
    """
    db_path = str(tmp_path / "test.db")
    monkeypatch.setattr(database, "DATABASE_PATH", db_path)
    monkeypatch.setattr(database, "init_db", lambda: None)

    # Create tables directly (skip alembic for tests)
    conn = sqlite3.connect(db_path)
    conn.executescript("""
        CREATE TABLE tasks (
            id TEXT PRIMARY KEY,
            text TEXT NOT NULL,
            completed INTEGER DEFAULT 0,
            time_slot TEXT,
            date TEXT,
            created_at TEXT NOT NULL,
            archived INTEGER DEFAULT 0
        );

        CREATE TABLE conversations (
            id INTEGER PRIMARY KEY,
            messages TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
    """)
    conn.commit()
    conn.close()

    yield db_path


@pytest.fixture
def store(test_db):
    return database.TaskStore()


class FakeClassifier:
    """Returns a canned intent and remembers what it was asked."""

    def __init__(self, intent=None, **params):
        self.response = None
        if intent is not None:
            self.response = IntentResponse(intent=intent, params=IntentParams(**params))
        self.calls = []

    async def classify(self, utterance, tasks=None):
        self.calls.append(utterance)
        return self.response


@pytest.fixture
def fake_classifier():
    return FakeClassifier


@pytest.fixture
def app_client(test_db, monkeypatch):
    """
    Create a test client for the FastAPI app.
    Mocks init_db to skip alembic migrations.
    """
    from fastapi.testclient import TestClient
    import main

    # Never reach the network from tests
    monkeypatch.setattr(main.dispatcher, "classifier", FakeClassifier())
    monkeypatch.setattr(main.responder, "enabled", False)
    main.interaction_log.clear()

    with TestClient(main.app) as client:
        yield client
