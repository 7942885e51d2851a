"""
Test configuration: repo root on sys.path and live DB guards.

Every test runs with YAM_DASHBOARD_HOME pointed at a temp directory and a
fresh process-wide store, so nothing ever touches
~/.yam_dashboard/data/yam_dashboard.db. sqlite3.connect is additionally
guarded against the live path.
"""

import sqlite3
import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import lib.*, api.*, cli.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tests.fixtures.fixture_db import LIVE_DB_PATH, create_fixture_db  # noqa: E402

# =============================================================================
# DETERMINISM GUARD: Block live database access
# =============================================================================

_original_sqlite_connect = sqlite3.connect


def _extract_path_from_uri(database: str) -> str:
    """Extract filesystem path from SQLite URI format (file:/path?mode=ro)."""
    if not database.startswith("file:"):
        return database
    return database[5:].split("?")[0]


def _guarded_sqlite_connect(database, *args, **kwargs):
    """Intercept sqlite3.connect to block live DB access."""
    actual_path = _extract_path_from_uri(str(database))
    if actual_path != ":memory:" and Path(actual_path).expanduser() == LIVE_DB_PATH:
        raise RuntimeError(
            f"DETERMINISM VIOLATION: Test attempted to access live DB at {database}.\n"
            "Tests must use the fixture DB from tests/fixtures/fixture_db.py."
        )
    return _original_sqlite_connect(database, *args, **kwargs)


@pytest.fixture(autouse=True)
def guard_live_db_access(monkeypatch, tmp_path):
    """Isolate every test: temp app home, no live DB, fresh store."""
    from lib.state_store import reset_store

    monkeypatch.setattr(sqlite3, "connect", _guarded_sqlite_connect)
    monkeypatch.setenv("YAM_DASHBOARD_HOME", str(tmp_path / "home"))
    monkeypatch.delenv("YAM_DASHBOARD_DB", raising=False)
    reset_store()
    yield
    reset_store()


# =============================================================================
# FIXTURE DB FOR INTEGRATION TESTS
# =============================================================================


@pytest.fixture
def fixture_db_path(tmp_path):
    """Seeded fixture DB, one per test (tests write to it)."""
    db_path = tmp_path / "fixture_test.db"
    conn = create_fixture_db(db_path)
    conn.close()
    return db_path


@pytest.fixture
def store(fixture_db_path):
    """StateStore over the seeded fixture DB, with its own cache."""
    from lib.cache import DataCache
    from lib.state_store import StateStore

    return StateStore(str(fixture_db_path), cache=DataCache())


@pytest.fixture
def empty_store(tmp_path):
    """StateStore over a brand-new, empty database."""
    from lib.state_store import StateStore

    return StateStore(str(tmp_path / "empty.db"))


@pytest.fixture
def api_client(fixture_db_path, monkeypatch):
    """TestClient whose process-wide store is the seeded fixture DB."""
    from fastapi.testclient import TestClient

    from api.server import app

    monkeypatch.setenv("YAM_DASHBOARD_DB", str(fixture_db_path))
    with TestClient(app) as client:
        yield client
