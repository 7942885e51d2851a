"""
Declarative Schema Definition: the single source of truth.

Every table, column and index of the dashboard database lives here.
Nothing else defines schema. The schema_engine reads this and converges
any database to match.

Adding a column = add one line here. The engine handles the rest.

Column definitions use CREATE TABLE syntax. The schema_engine knows how
to derive ALTER TABLE ADD COLUMN DDL (strips PK, adjusts NOT NULL, etc.).
"""

from collections import OrderedDict

# =============================================================================
# Schema version: bump when you change this file
# =============================================================================
SCHEMA_VERSION = 3

# =============================================================================
# Table Definitions
#
# Format: TABLES[name] = {"columns": [(col_name, col_ddl), ...]}
# =============================================================================

TABLES: dict[str, dict] = OrderedDict()

# ---------------------------------------------------------------------------
# Clients and their satellites
# ---------------------------------------------------------------------------
TABLES["clients"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("name", "TEXT NOT NULL"),
        ("status", "TEXT NOT NULL DEFAULT 'prospect'"),
        ("created_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
        ("updated_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
    ],
}

TABLES["contacts"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("client_id", "TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE"),
        ("name", "TEXT NOT NULL"),
        ("role", "TEXT NOT NULL DEFAULT ''"),
        ("email", "TEXT NOT NULL DEFAULT ''"),
        ("phone", "TEXT"),
    ],
}

TABLES["client_links"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("client_id", "TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE"),
        ("label", "TEXT NOT NULL"),
        ("url", "TEXT NOT NULL"),
    ],
}

TABLES["documents"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("client_id", "TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE"),
        ("project_id", "TEXT"),
        ("type", "TEXT NOT NULL DEFAULT 'note'"),
        ("title", "TEXT NOT NULL"),
        ("content", "TEXT NOT NULL DEFAULT ''"),
        ("created_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
        ("updated_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
    ],
}

TABLES["team"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("name", "TEXT NOT NULL"),
        ("initials", "TEXT"),
        ("role", "TEXT"),
        ("color", "TEXT"),
    ],
}

# ---------------------------------------------------------------------------
# Projects and deliverables
# ---------------------------------------------------------------------------
TABLES["projects"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("client_id", "TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE"),
        ("name", "TEXT NOT NULL"),
        # Billing (JSON arrays for the progress payments)
        ("quote_amount", "REAL"),
        ("quote_date", "TEXT"),
        ("deposit_amount", "REAL"),
        ("deposit_date", "TEXT"),
        ("progress_amounts", "TEXT NOT NULL DEFAULT '[]'"),
        ("progress_dates", "TEXT NOT NULL DEFAULT '[]'"),
        ("balance_amount", "REAL"),
        ("balance_date", "TEXT"),
        ("potentiel", "REAL"),
        ("in_backlog", "INTEGER NOT NULL DEFAULT 0"),
        ("created_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
        ("updated_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
    ],
}

TABLES["deliverables"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("client_id", "TEXT REFERENCES clients(id) ON DELETE CASCADE"),
        ("project_id", "TEXT REFERENCES projects(id) ON DELETE SET NULL"),
        ("name", "TEXT NOT NULL"),
        ("due_date", "TEXT"),
        ("type", "TEXT NOT NULL DEFAULT 'other'"),
        ("status", "TEXT NOT NULL DEFAULT 'to_quote'"),
        ("category", "TEXT"),
        ("assignee_id", "TEXT"),
        ("delivered_at", "TEXT"),
        ("external_contractor", "TEXT"),
        ("notes", "TEXT"),
        ("prix_facture", "REAL"),
        ("cout_sous_traitance", "REAL"),
        ("is_potentiel", "INTEGER NOT NULL DEFAULT 0"),
        ("billing_status", "TEXT NOT NULL DEFAULT 'pending'"),
        ("quote_amount", "REAL"),
        ("deposit_amount", "REAL"),
        ("progress_amount", "REAL"),
        ("balance_amount", "REAL"),
        ("total_invoiced", "REAL"),
        ("in_backlog", "INTEGER NOT NULL DEFAULT 0"),
        ("created_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
    ],
}

TABLES["billing_history"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("deliverable_id", "TEXT NOT NULL REFERENCES deliverables(id) ON DELETE CASCADE"),
        ("status", "TEXT NOT NULL"),
        ("amount", "REAL"),
        ("notes", "TEXT"),
        ("changed_at", "TEXT NOT NULL"),
        ("changed_by", "TEXT"),
    ],
}

# ---------------------------------------------------------------------------
# Calls and planning
# ---------------------------------------------------------------------------
TABLES["calls"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("client_id", "TEXT REFERENCES clients(id) ON DELETE CASCADE"),
        ("title", "TEXT NOT NULL"),
        ("scheduled_at", "TEXT"),
        ("duration", "INTEGER NOT NULL DEFAULT 30"),
        ("assignee_id", "TEXT"),
        ("call_type", "TEXT NOT NULL DEFAULT 'call'"),
        ("notes", "TEXT"),
        ("created_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
    ],
}

TABLES["retroplanning"] = {
    "columns": [
        ("id", "TEXT PRIMARY KEY"),
        ("client_id", "TEXT NOT NULL REFERENCES clients(id) ON DELETE CASCADE"),
        ("deadline", "TEXT NOT NULL"),
        ("tasks", "TEXT NOT NULL DEFAULT '[]'"),
        ("generated_at", "TEXT"),
        ("updated_at", "TEXT NOT NULL DEFAULT (datetime('now'))"),
    ],
    "unique": [("client_id",)],
}

# =============================================================================
# Indexes: (name, table, columns, where)
# =============================================================================

INDEXES: list[tuple[str, str, str, str | None]] = [
    ("idx_contacts_client", "contacts", "client_id", None),
    ("idx_documents_client", "documents", "client_id", None),
    ("idx_projects_client", "projects", "client_id", None),
    ("idx_deliverables_project", "deliverables", "project_id", None),
    ("idx_deliverables_client", "deliverables", "client_id", None),
    ("idx_billing_history_deliverable", "billing_history", "deliverable_id, changed_at", None),
    ("idx_calls_client", "calls", "client_id", None),
    ("idx_calls_scheduled", "calls", "scheduled_at", "scheduled_at IS NOT NULL"),
]

# Tables every running instance must have; checked at startup.
CRITICAL_TABLES = ("clients", "projects", "deliverables", "billing_history", "retroplanning")
