"""
Centralized Database Access for the YAM dashboard.

Single source of truth for:
- DB path resolution
- Connection factory
- Schema convergence (delegated to schema_engine)
- Startup validation

Schema is declared in lib/schema.  Convergence logic lives in lib/schema_engine.
This module wires them together and provides the public API that the rest of
the codebase calls.
"""

import logging
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from lib import paths, safe_sql, schema, schema_engine

logger = logging.getLogger(__name__)

# ============================================================
# SQL IDENTIFIER VALIDATION
# ============================================================


def validate_identifier(name: str) -> str:
    """Validate that *name* is a safe SQL identifier (table or column name).

    Returns the name unchanged if valid; raises ``ValueError`` otherwise.
    """
    return safe_sql.identifier(name)


# ============================================================
# DB PATH RESOLUTION
# ============================================================


def get_db_path() -> Path:
    """
    Get the canonical DB path.

    Resolution order:
    1. YAM_DASHBOARD_DB env var (explicit override)
    2. ~/.yam_dashboard/data/yam_dashboard.db (default via paths.db_path())
    """
    return paths.db_path()


def get_db_path_str() -> str:
    return str(get_db_path())


# ============================================================
# CONNECTION FACTORY
# ============================================================


@contextmanager
def get_connection(
    db_path: str | Path | None = None,
    row_factory: bool = True,
) -> Generator[sqlite3.Connection, None, None]:
    """
    Get a database connection with proper setup.

    Usage:
        with get_connection() as conn:
            conn.execute(...)
    """
    path = Path(db_path) if db_path else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    if row_factory:
        conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON")
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


# ============================================================
# SCHEMA INTROSPECTION
# ============================================================


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' AND name=?", (table,))
    return cursor.fetchone() is not None


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Get current schema version from PRAGMA user_version."""
    return conn.execute("PRAGMA user_version").fetchone()[0]


# ============================================================
# STARTUP ENTRY POINT
# ============================================================

_migrations_run: set[str] = set()


def run_startup_migrations(db_path: str | Path | None = None) -> dict:
    """
    Converge the schema at startup. Safe to call multiple times.
    """
    path = Path(db_path) if db_path else get_db_path()

    logger.info("Database startup: %s (exists=%s)", path, path.exists())
    logger.info("Target SCHEMA_VERSION: %s", schema.SCHEMA_VERSION)

    with get_connection(path) as conn:
        version_before = get_schema_version(conn)
        if version_before >= schema.SCHEMA_VERSION and str(path) in _migrations_run:
            logger.info("Schema already converged, skipping")
            return {"status": "skipped", "schema_version": version_before}

        results = schema_engine.converge(conn)
        results["previous_version"] = version_before

        if results["tables_created"]:
            logger.info("Tables created: %s", results["tables_created"])
        if results["columns_added"]:
            logger.info("Columns added: %s", results["columns_added"])
        if results["errors"]:
            logger.warning("Convergence errors: %s", results["errors"])

        for critical in schema.CRITICAL_TABLES:
            if not table_exists(conn, critical):
                logger.error("MISSING %s", critical)

        logger.info("Final user_version: %s", results["schema_version"])

    _migrations_run.add(str(path))
    return results


def ensure_migrations(db_path: str | Path | None = None) -> None:
    """Ensure schema has converged. Called by StateStore and other entry points."""
    path = str(db_path or get_db_path())
    if path not in _migrations_run:
        run_startup_migrations(path)


# ============================================================
# DEBUG INFO
# ============================================================


def get_db_info(db_path: str | Path | None = None) -> dict:
    """Path, size and schema version of the database, for health checks."""
    path = Path(db_path) if db_path else get_db_path()
    info = {
        "resolved_db_path": str(path),
        "exists": path.exists(),
        "file_size": None,
        "sqlite_version": sqlite3.sqlite_version,
        "user_version": None,
        "target_schema_version": schema.SCHEMA_VERSION,
    }
    if path.exists():
        info["file_size"] = path.stat().st_size
        with get_connection(path) as conn:
            info["user_version"] = get_schema_version(conn)
    return info
