"""
Centralized SQL construction with validated identifiers.

All dynamic SQL assembly lives here. Table and column names are validated
by identifier() before interpolation. Values are always passed
as parameterized ?, never interpolated.

SQLite does not support parameterized identifiers (? works only for values,
not table/column names). Every f-string in this file is a
validated-identifier interpolation.
"""

# ruff: noqa: S608 - All identifiers validated via identifier() before interpolation.

from __future__ import annotations

import re

_SAFE_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def identifier(name: str) -> str:
    """Return *name* unchanged if it is a safe SQL identifier, else raise ValueError."""
    if not _SAFE_IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


# ────────────────────────────────────────────────────────────
# PRAGMA helpers
# ────────────────────────────────────────────────────────────


def pragma_table_info(table: str) -> str:
    return f"PRAGMA table_info([{identifier(table)}])"


def pragma_user_version_set(version: int) -> str:
    """PRAGMA user_version = N with int validation."""
    if not isinstance(version, int) or version < 0:
        raise ValueError(f"Invalid schema version: {version!r}")
    return f"PRAGMA user_version = {version}"


# ────────────────────────────────────────────────────────────
# DML: SELECT, INSERT, UPDATE, DELETE, COUNT
# ────────────────────────────────────────────────────────────


def select(
    table: str,
    columns: str = "*",
    where: str | None = None,
    order_by: str | None = None,
    suffix: str = "",
) -> str:
    """Build SELECT with validated table name.

    *where* is a raw WHERE clause without the keyword (e.g. ``"id = ?"``)
    and must use ``?`` for all values.
    """
    sql = f"SELECT {columns} FROM {identifier(table)}"
    if where:
        sql += f" WHERE {where}"
    if order_by:
        sql += f" ORDER BY {order_by}"
    if suffix:
        sql += f" {suffix}"
    return sql


def select_count(table: str, where: str | None = None) -> str:
    sql = f"SELECT COUNT(*) as c FROM {identifier(table)}"
    if where:
        sql += f" WHERE {where}"
    return sql


def insert(table: str, columns: list[str]) -> str:
    """Build a plain INSERT; duplicate keys raise sqlite3.IntegrityError."""
    identifier(table)
    for col in columns:
        identifier(col)
    placeholders = ",".join("?" for _ in columns)
    return f"INSERT INTO {table} ({','.join(columns)}) VALUES ({placeholders})"


def upsert(table: str, columns: list[str], conflict: list[str]) -> str:
    """Build INSERT ... ON CONFLICT(conflict) DO UPDATE for every non-conflict column."""
    sql = insert(table, columns)
    for col in conflict:
        identifier(col)
    sets = ",".join(f"{col} = excluded.{col}" for col in columns if col not in conflict)
    return f"{sql} ON CONFLICT({','.join(conflict)}) DO UPDATE SET {sets}"


def update(table: str, set_columns: list[str], where: str = "id = ?") -> str:
    """Build UPDATE SET with validated table+column names."""
    identifier(table)
    for col in set_columns:
        identifier(col)
    sets = ",".join(f"{col} = ?" for col in set_columns)
    return f"UPDATE {table} SET {sets} WHERE {where}"


def delete(table: str, where: str = "id = ?") -> str:
    return f"DELETE FROM {identifier(table)} WHERE {where}"


# ────────────────────────────────────────────────────────────
# DDL
# ────────────────────────────────────────────────────────────


def alter_add_column(table: str, column: str, column_type: str) -> str:
    """Build ALTER TABLE ADD COLUMN with validated identifiers."""
    identifier(table)
    identifier(column)
    # column_type comes from lib/schema, not from callers
    return f"ALTER TABLE [{table}] ADD COLUMN [{column}] {column_type}"


def drop_table(name: str) -> str:
    return f"DROP TABLE IF EXISTS [{identifier(name)}]"


# ────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────


def where_and(conditions: list[str]) -> str:
    """Join conditions with AND. Returns empty string if no conditions."""
    if not conditions:
        return ""
    return " AND ".join(conditions)
