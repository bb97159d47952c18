"""
Test configuration and fixtures for the marketplace backend test suite.

Provides:
- In-memory SQLite test database (isolated per test, production schema)
- FastAPI TestClient fixture
"""
import sqlite3
from contextlib import contextmanager
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from backend.core.db.base import SCHEMA


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

def _create_test_db() -> sqlite3.Connection:
    """Create an in-memory SQLite database with the full marketplace schema."""
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA)
    return conn


@contextmanager
def _test_get_db(conn: sqlite3.Connection):
    """Replacement for get_db() that uses the shared test connection."""
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise


@pytest.fixture()
def test_db():
    """Provide a fresh in-memory SQLite database for each test."""
    conn = _create_test_db()
    yield conn
    conn.close()


@pytest.fixture()
def patch_db(test_db):
    """
    Patch the get_db context manager across all db modules so that
    every database call uses the in-memory test database.
    """
    cm = lambda: _test_get_db(test_db)  # noqa: E731

    with (
        patch("backend.core.db.base.get_db", cm),
        patch("backend.core.db.projects.get_db", cm),
        patch("backend.core.db.vendors.get_db", cm),
        patch("backend.core.db.distributions.get_db", cm),
        patch("backend.core.db.quotes.get_db", cm),
        patch("backend.core.db.templates.get_db", cm),
    ):
        yield test_db


@pytest.fixture()
def client(patch_db):
    """
    Provide a FastAPI TestClient with the database patched.

    Skips init_db and the worker so no file database or APScheduler
    threads are created during tests.
    """
    from backend.api.main import app

    with patch("backend.api.main.init_db"), \
         patch("backend.api.main.init_worker"), \
         patch("backend.api.main.stop_scheduler"):
        with TestClient(app) as c:
            yield c
