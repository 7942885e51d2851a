"""
Determinism Guard Tests.

These tests verify that:
1. Live DB access is blocked
2. The fixture DB is seeded and isolated per test
3. The process-wide store never resolves to the live path

Run with: pytest tests/test_determinism_guards.py -v
"""

import sqlite3

import pytest

from tests.fixtures import create_fixture_db, get_fixture_db_path, guard_no_live_db
from tests.fixtures.fixture_db import LIVE_DB_PATH


class TestLiveDBGuard:
    """Verify live database access is blocked."""

    def test_live_db_path_blocked(self):
        with pytest.raises(RuntimeError, match="DETERMINISM VIOLATION"):
            sqlite3.connect(str(LIVE_DB_PATH))

    def test_uri_form_blocked(self):
        with pytest.raises(RuntimeError, match="DETERMINISM VIOLATION"):
            sqlite3.connect(f"file:{LIVE_DB_PATH}?mode=ro", uri=True)

    def test_memory_db_allowed(self):
        conn = sqlite3.connect(":memory:")
        conn.execute("SELECT 1")
        conn.close()

    def test_temp_db_allowed(self, tmp_path):
        conn = sqlite3.connect(str(tmp_path / "test.db"))
        conn.execute("SELECT 1")
        conn.close()


class TestGuardNoLiveDbFunction:
    """Test the guard_no_live_db helper function."""

    def test_raises_on_live_path(self):
        with pytest.raises(RuntimeError, match="DETERMINISM VIOLATION"):
            guard_no_live_db(LIVE_DB_PATH)

    def test_passes_on_fixture_path(self, tmp_path):
        guard_no_live_db(tmp_path / "fixture.db")


class TestFixtureDB:
    """Fixture database is seeded from seed.json."""

    def test_seeded_clients_and_projects(self):
        conn = create_fixture_db(":memory:")
        assert conn.execute("SELECT COUNT(*) FROM clients").fetchone()[0] == 2
        assert conn.execute("SELECT COUNT(*) FROM projects").fetchone()[0] == 5
        conn.close()

    def test_json_columns_stored_as_text(self):
        conn = create_fixture_db(":memory:")
        row = conn.execute(
            "SELECT progress_amounts FROM projects WHERE id = 'proj-balanced'"
        ).fetchone()
        assert row[0] == "[600]"
        conn.close()

    def test_each_path_is_independent(self, tmp_path):
        (tmp_path / "a").mkdir()
        (tmp_path / "b").mkdir()
        first = get_fixture_db_path(tmp_path / "a")
        second = get_fixture_db_path(tmp_path / "b")
        conn = sqlite3.connect(str(first))
        conn.execute("DELETE FROM calls")
        conn.commit()
        conn.close()
        conn = sqlite3.connect(str(second))
        assert conn.execute("SELECT COUNT(*) FROM calls").fetchone()[0] == 1
        conn.close()


class TestStoreIsolation:
    """The process-wide store points at the per-test home."""

    def test_store_not_live(self, tmp_path):
        from lib.state_store import get_store

        assert get_store().db_path != str(LIVE_DB_PATH)
        assert get_store().db_path.startswith(str(tmp_path.resolve()))
