"""
Tests for the StateStore and the database layer beneath it.
"""

import pytest

from lib import db, schema
from lib.cache import DataCache
from lib.state_store import StateStore, get_store, reset_store


class TestStateStoreCrud:
    def test_get_seeded_row(self, store):
        row = store.get("clients", "client-acme")
        assert row["name"] == "Acme Studio"
        assert row["created_at"]

    def test_get_missing(self, store):
        assert store.get("clients", "client-missing") is None

    def test_insert_encodes_lists(self, store):
        store.insert(
            "projects",
            {"id": "proj-x", "client_id": "client-acme", "name": "X", "progress_amounts": [1, 2]},
        )
        assert store.get("projects", "proj-x")["progress_amounts"] == "[1, 2]"

    def test_find_with_where_and_order(self, store):
        rows = store.find("projects", {"client_id": "client-bloom"}, order_by="name")
        assert [r["id"] for r in rows] == ["proj-products", "proj-balanced", "proj-noquote"]

    def test_update_and_delete_report_matches(self, store):
        assert store.update("clients", "client-acme", {"name": "Acme"}) is True
        assert store.update("clients", "client-missing", {"name": "X"}) is False
        assert store.update("clients", "client-acme", {}) is False
        assert store.delete("calls", "call-kickoff") is True
        assert store.delete("calls", "call-kickoff") is False

    def test_count(self, store):
        assert store.count("deliverables") == 4
        assert store.count("deliverables", where="project_id IS NULL") == 1

    def test_upsert_on_conflict(self, store):
        row = {"id": "plan-1", "client_id": "client-acme", "deadline": "2026-04-01", "tasks": []}
        store.upsert("retroplanning", row, conflict=["client_id"])
        store.upsert("retroplanning", {**row, "deadline": "2026-05-01"}, conflict=["client_id"])
        rows = store.find("retroplanning", {"client_id": "client-acme"})
        assert len(rows) == 1
        assert rows[0]["deadline"] == "2026-05-01"

    def test_invalid_identifier(self, store):
        with pytest.raises(ValueError):
            store.get("clients; DROP TABLE clients", "x")


class TestStateStoreCache:
    """Writes bump the cache token; reads do not."""

    def test_write_invalidates(self, store):
        store.cache.set("snapshot", 1)
        store.update("clients", "client-acme", {"name": "Acme"})
        assert store.cache.get("snapshot") is None

    def test_read_keeps_cache(self, store):
        store.cache.set("snapshot", 1)
        store.find("clients")
        assert store.cache.get("snapshot") == 1

    def test_noop_update_keeps_cache(self, store):
        store.cache.set("snapshot", 1)
        store.update("clients", "client-missing", {"name": "X"})
        assert store.cache.is_fresh("snapshot")

    def test_transaction_invalidates_once(self, store):
        before = store.cache.token.version
        with store.transaction(reason="batch") as conn:
            conn.execute("UPDATE clients SET status = 'prospect'")
            conn.execute("UPDATE projects SET in_backlog = 1")
        assert store.cache.token.version == before + 1

    def test_transaction_rolls_back(self, store):
        with pytest.raises(RuntimeError):
            with store.transaction() as conn:
                conn.execute("UPDATE clients SET name = 'Changed' WHERE id = 'client-acme'")
                raise RuntimeError("boom")
        assert store.get("clients", "client-acme")["name"] == "Acme Studio"


class TestForeignKeys:
    def test_deleting_client_cascades(self, store):
        store.delete("clients", "client-acme")
        assert store.get("projects", "proj-quoted") is None
        assert store.get("deliverables", "deliv-logo") is None

    def test_deleting_deliverable_removes_history(self, store):
        store.delete("deliverables", "deliv-flyer")
        assert store.find("billing_history", {"deliverable_id": "deliv-flyer"}) == []


class TestSingletonAndSchema:
    def test_get_store_uses_app_home(self, tmp_path):
        store = get_store()
        assert store.db_path.startswith(str((tmp_path / "home").resolve()))
        assert get_store() is store
        reset_store()
        assert get_store() is not store

    def test_env_override(self, tmp_path, monkeypatch):
        target = tmp_path / "custom.db"
        monkeypatch.setenv("YAM_DASHBOARD_DB", str(target))
        assert get_store().db_path == str(target.resolve())

    def test_empty_store_has_schema(self, empty_store):
        info = db.get_db_info(empty_store.db_path)
        assert info["exists"]
        assert info["user_version"] == schema.SCHEMA_VERSION
        for table in schema.CRITICAL_TABLES:
            assert empty_store.count(table) == 0

    def test_migrations_idempotent(self, tmp_path):
        path = tmp_path / "twice.db"
        StateStore(str(path), cache=DataCache())
        result = db.run_startup_migrations(path)
        assert result["status"] == "skipped"
