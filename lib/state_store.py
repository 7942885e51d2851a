"""
State Store - single access point to the dashboard database.

Every record module reads and writes through here. The store also owns the
DataCache whose token is bumped on every write, so cached snapshots never
outlive the data they were built from.
"""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Any

from lib import db as db_module
from lib import paths, safe_sql
from lib.cache import DataCache

logger = logging.getLogger(__name__)


def _encode(value: Any) -> Any:
    return json.dumps(value) if isinstance(value, dict | list) else value


class StateStore:
    """
    SQLite for persistence, DataCache for derived snapshots.
    One connection per operation.
    """

    def __init__(self, db_path: str | None = None, cache: DataCache | None = None):
        self.db_path = str(db_path or db_module.get_db_path_str())
        if db_path is None:
            paths.data_dir()  # ensures directory exists

        logger.info("StateStore initializing with DB: %s", self.db_path)

        self.cache = cache or DataCache()

        # Schema convergence: schema_engine creates/migrates all tables
        db_module.ensure_migrations(self.db_path)

        logger.info("StateStore ready, DB path: %s", self.db_path)

    @contextmanager
    def connection(self):
        """Connection context; commits on success, rolls back on error."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def transaction(self, reason: str | None = None):
        """Several writes in one commit; invalidates the cache once."""
        with self.connection() as conn:
            yield conn
        self.cache.invalidate(reason)

    # ==================== CRUD Operations ====================

    def insert(self, table: str, data: dict) -> str:
        """Insert a row. Returns ID."""
        db_module.validate_identifier(table)
        columns = list(data.keys())
        values = [_encode(v) for v in data.values()]

        with self.connection() as conn:
            conn.execute(safe_sql.insert(table, columns), values)

        self.cache.invalidate(f"insert:{table}")
        return data.get("id", "")

    def upsert(self, table: str, data: dict, conflict: list[str]) -> None:
        """Insert, or update every non-conflict column when *conflict* matches."""
        db_module.validate_identifier(table)
        columns = list(data.keys())
        values = [_encode(v) for v in data.values()]

        with self.connection() as conn:
            conn.execute(safe_sql.upsert(table, columns, conflict), values)

        self.cache.invalidate(f"upsert:{table}")

    def get(self, table: str, id: str) -> dict | None:
        """Get a single row by ID."""
        db_module.validate_identifier(table)
        with self.connection() as conn:
            row = conn.execute(safe_sql.select(table, where="id = ?"), [id]).fetchone()
            return dict(row) if row else None

    def find(
        self,
        table: str,
        where: dict | None = None,
        order_by: str | None = None,
    ) -> list[dict]:
        """Rows where every column in *where* equals the given value."""
        db_module.validate_identifier(table)
        where = where or {}
        conditions = [f"{db_module.validate_identifier(col)} = ?" for col in where]
        sql = safe_sql.select(
            table, where=safe_sql.where_and(conditions) or None, order_by=order_by
        )
        return self.query(sql, list(where.values()))

    def update(self, table: str, id: str, data: dict) -> bool:
        """Update a row. Returns False when nothing matched."""
        if not data:
            return False

        db_module.validate_identifier(table)
        values = [_encode(v) for v in data.values()]
        values.append(id)

        with self.connection() as conn:
            result = conn.execute(safe_sql.update(table, list(data.keys())), values)
            changed = result.rowcount > 0

        if changed:
            self.cache.invalidate(f"update:{table}")
        return changed

    def delete(self, table: str, id: str) -> bool:
        """Delete a row."""
        db_module.validate_identifier(table)
        with self.connection() as conn:
            result = conn.execute(safe_sql.delete(table), [id])
            deleted = result.rowcount > 0

        if deleted:
            self.cache.invalidate(f"delete:{table}")
        return deleted

    def query(self, sql: str, params: list | None = None) -> list[dict]:
        """Execute raw query. Returns list of dicts."""
        with self.connection() as conn:
            rows = conn.execute(sql, params or []).fetchall()
            return [dict(row) for row in rows]

    def count(self, table: str, where: str | None = None, params: list | None = None) -> int:
        db_module.validate_identifier(table)
        with self.connection() as conn:
            row = conn.execute(safe_sql.select_count(table, where=where), params or []).fetchone()
            return row["c"] if row else 0


# Singleton accessor
_store: StateStore | None = None
_store_lock = threading.Lock()


def get_store(db_path: str | None = None) -> StateStore:
    """Get the process-wide state store."""
    global _store  # noqa: PLW0603
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = StateStore(db_path)
    return _store


def reset_store() -> None:
    """Forget the process-wide store (tests, CLI re-init)."""
    global _store  # noqa: PLW0603
    _store = None
