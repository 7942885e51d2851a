"""
Record operations for clients, contacts, projects, deliverables and calls.

Thin layer over the StateStore: id generation, partial updates with the
"omitted = untouched, None = cleared" convention, and the few cross-table
rules (deleting a project detaches its deliverables). Every write goes
through the store, which invalidates the data cache.
"""

import logging
import secrets
import time
from datetime import UTC, datetime

from lib import safe_sql
from lib.entities import (
    Call,
    Client,
    ClientStatus,
    Contact,
    Deliverable,
    DeliverableStatus,
    Project,
)
from lib.errors import InputError, NotFoundError
from lib.state_store import StateStore, get_store

logger = logging.getLogger(__name__)

_ID_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

PROJECT_FIELDS = {
    "client_id",
    "name",
    "quote_amount",
    "quote_date",
    "deposit_amount",
    "deposit_date",
    "progress_amounts",
    "progress_dates",
    "balance_amount",
    "balance_date",
    "potentiel",
    "in_backlog",
}

DELIVERABLE_FIELDS = {
    "client_id",
    "project_id",
    "name",
    "due_date",
    "type",
    "status",
    "category",
    "assignee_id",
    "delivered_at",
    "external_contractor",
    "notes",
    "prix_facture",
    "cout_sous_traitance",
    "is_potentiel",
    "billing_status",
    "quote_amount",
    "deposit_amount",
    "progress_amount",
    "balance_amount",
    "total_invoiced",
    "in_backlog",
}

# NOT NULL in the schema: a None in an update is dropped, not written.
PROJECT_NOT_NULL = {"client_id", "name", "in_backlog"}
DELIVERABLE_NOT_NULL = {"billing_status", "status", "name", "type", "in_backlog", "is_potentiel"}

CALL_FIELDS = {
    "client_id",
    "title",
    "scheduled_at",
    "duration",
    "assignee_id",
    "call_type",
    "notes",
}

_REFS = {
    "client_id": ("clients", "client"),
    "project_id": ("projects", "project"),
}

# Kanban checkbox cycle; to_quote enters the cycle at pending.
TOGGLE_ORDER = [
    DeliverableStatus.PENDING.value,
    DeliverableStatus.IN_PROGRESS.value,
    DeliverableStatus.COMPLETED.value,
]


def generate_id(prefix: str, suffix_len: int = 7) -> str:
    """``{prefix}-{epoch ms}-{random base36}``, e.g. ``proj-1718000000000-k3f9a``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(suffix_len))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _check_fields(changes: dict, allowed: set[str], entity: str) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise InputError(f"Champs inconnus pour {entity}: {', '.join(sorted(unknown))}")


def _require_refs(store: StateStore, fields: dict) -> None:
    """Foreign keys must point at existing rows; None is allowed."""
    for column, (table, entity) in _REFS.items():
        ref_id = fields.get(column)
        if ref_id is not None and store.get(table, ref_id) is None:
            raise NotFoundError(entity, ref_id)


def _row_values(changes: dict) -> dict:
    return {k: getattr(v, "value", v) for k, v in changes.items()}


# ============================================================
# Clients and contacts
# ============================================================


def _name_key(name: str) -> str:
    return name.strip().casefold()


def _client_rows(store: StateStore) -> tuple[dict, ...]:
    return store.cache.get_or_load(
        "clients", lambda: tuple(store.find("clients", order_by="name COLLATE NOCASE"))
    )


def add_client(
    name: str, status: str = ClientStatus.PROSPECT.value, store: StateStore | None = None
) -> tuple[Client, bool]:
    """
    Create a client, or return the existing one with the same name.

    Names are compared trimmed and case-insensitively, with Unicode case
    folding done in Python (SQLite's lower() only folds ASCII). Returns
    ``(client, is_existing)``.
    """
    store = store or get_store()
    trimmed = name.strip()
    if not trimmed:
        raise InputError("Le nom est requis")

    key = _name_key(trimmed)
    for row in _client_rows(store):
        if _name_key(row["name"]) == key:
            return Client.from_row(row), True

    now = _now()
    client = Client(
        id=generate_id("client"),
        name=trimmed,
        status=ClientStatus(status).value,
        created_at=now,
        updated_at=now,
    )
    store.insert("clients", client.to_row())
    logger.info("Created client %s (%s)", client.id, client.name)
    return client, False


def get_client(client_id: str, store: StateStore | None = None) -> Client:
    store = store or get_store()
    row = store.get("clients", client_id)
    if row is None:
        raise NotFoundError("client", client_id)
    return Client.from_row(row)


def list_clients(store: StateStore | None = None) -> list[Client]:
    store = store or get_store()
    return [Client.from_row(r) for r in _client_rows(store)]


def add_contact(
    client_id: str,
    name: str,
    role: str,
    email: str,
    phone: str | None = None,
    store: StateStore | None = None,
) -> Contact:
    store = store or get_store()
    get_client(client_id, store=store)
    contact = Contact(
        id=generate_id("contact"),
        client_id=client_id,
        name=name,
        role=role,
        email=email,
        phone=phone,
    )
    store.insert("contacts", contact.to_row())
    return contact


def list_contacts(client_id: str, store: StateStore | None = None) -> list[Contact]:
    store = store or get_store()
    return [Contact.from_row(r) for r in store.find("contacts", {"client_id": client_id})]


# ============================================================
# Projects
# ============================================================


def add_project(
    client_id: str, name: str, store: StateStore | None = None, **fields
) -> Project:
    store = store or get_store()
    _check_fields(fields, PROJECT_FIELDS, "project")
    _require_refs(store, {"client_id": client_id})
    now = _now()
    project = Project(
        id=generate_id("proj", suffix_len=5),
        client_id=client_id,
        name=name,
        created_at=now,
        updated_at=now,
        **fields,
    )
    store.insert("projects", project.to_row())
    logger.info("Created project %s for client %s", project.id, client_id)
    return project


def get_project(project_id: str, store: StateStore | None = None) -> Project:
    store = store or get_store()
    row = store.get("projects", project_id)
    if row is None:
        raise NotFoundError("project", project_id)
    return Project.from_row(row)


def list_projects(client_id: str | None = None, store: StateStore | None = None) -> list[Project]:
    store = store or get_store()
    where = {"client_id": client_id} if client_id else None
    rows = store.cache.get_or_load(
        f"projects:{client_id or '*'}",
        lambda: tuple(store.find("projects", where, order_by="created_at")),
    )
    return [Project.from_row(r) for r in rows]


def update_project(project_id: str, changes: dict, store: StateStore | None = None) -> Project:
    """
    Apply *changes* to a project.

    Keys absent from *changes* are untouched; a key mapped to None clears
    the column (e.g. removing the quote).
    """
    store = store or get_store()
    _check_fields(changes, PROJECT_FIELDS, "project")
    _require_refs(store, changes)
    data = {
        k: v for k, v in _row_values(changes).items() if not (v is None and k in PROJECT_NOT_NULL)
    }
    if "progress_amounts" in data and data["progress_amounts"] is None:
        data["progress_amounts"] = []
    if "progress_dates" in data and data["progress_dates"] is None:
        data["progress_dates"] = []
    data["updated_at"] = _now()

    if not store.update("projects", project_id, data):
        raise NotFoundError("project", project_id)
    return get_project(project_id, store=store)


def delete_project(project_id: str, store: StateStore | None = None) -> None:
    """Delete a project; its deliverables stay, detached from it."""
    store = store or get_store()
    get_project(project_id, store=store)
    with store.transaction(reason=f"delete_project:{project_id}") as conn:
        conn.execute(
            safe_sql.update("deliverables", ["project_id"], where="project_id = ?"),
            [None, project_id],
        )
        conn.execute(safe_sql.delete("projects"), [project_id])
    logger.info("Deleted project %s", project_id)


def assign_deliverable_to_project(
    deliverable_id: str, project_id: str | None, store: StateStore | None = None
) -> Deliverable:
    store = store or get_store()
    if project_id is not None:
        get_project(project_id, store=store)
    if not store.update("deliverables", deliverable_id, {"project_id": project_id}):
        raise NotFoundError("deliverable", deliverable_id)
    return get_deliverable(deliverable_id, store=store)


# ============================================================
# Deliverables
# ============================================================


def add_deliverable(name: str, store: StateStore | None = None, **fields) -> Deliverable:
    store = store or get_store()
    _check_fields(fields, DELIVERABLE_FIELDS, "deliverable")
    _require_refs(store, fields)
    fields = {k: v for k, v in _row_values(fields).items() if not (v is None and k in DELIVERABLE_NOT_NULL)}
    deliverable = Deliverable(
        id=generate_id("deliv"),
        name=name,
        created_at=_now(),
        **fields,
    )
    store.insert("deliverables", deliverable.to_row())
    logger.info("Created deliverable %s", deliverable.id)
    return deliverable


def get_deliverable(deliverable_id: str, store: StateStore | None = None) -> Deliverable:
    store = store or get_store()
    row = store.get("deliverables", deliverable_id)
    if row is None:
        raise NotFoundError("deliverable", deliverable_id)
    return Deliverable.from_row(row)


def list_deliverables(
    project_id: str | None = None,
    client_id: str | None = None,
    store: StateStore | None = None,
) -> list[Deliverable]:
    store = store or get_store()
    where = {}
    if project_id:
        where["project_id"] = project_id
    if client_id:
        where["client_id"] = client_id
    rows = store.find("deliverables", where, order_by="created_at")
    return [Deliverable.from_row(r) for r in rows]


def update_deliverable(
    deliverable_id: str, changes: dict, store: StateStore | None = None
) -> Deliverable:
    """
    Apply *changes* to a deliverable.

    None clears nullable columns; for NOT NULL columns a None is ignored.
    """
    store = store or get_store()
    _check_fields(changes, DELIVERABLE_FIELDS, "deliverable")
    _require_refs(store, changes)
    data = {
        k: v
        for k, v in _row_values(changes).items()
        if not (v is None and k in DELIVERABLE_NOT_NULL)
    }
    if data and not store.update("deliverables", deliverable_id, data):
        raise NotFoundError("deliverable", deliverable_id)
    return get_deliverable(deliverable_id, store=store)


def delete_deliverable(deliverable_id: str, store: StateStore | None = None) -> None:
    store = store or get_store()
    if not store.delete("deliverables", deliverable_id):
        raise NotFoundError("deliverable", deliverable_id)


def toggle_deliverable_status(deliverable_id: str, store: StateStore | None = None) -> Deliverable:
    """Advance pending -> in-progress -> completed -> pending."""
    store = store or get_store()
    current = get_deliverable(deliverable_id, store=store).status
    index = TOGGLE_ORDER.index(current) if current in TOGGLE_ORDER else -1
    next_status = TOGGLE_ORDER[(index + 1) % len(TOGGLE_ORDER)]
    store.update("deliverables", deliverable_id, {"status": next_status})
    return get_deliverable(deliverable_id, store=store)


# ============================================================
# Calls
# ============================================================


def add_call(title: str, store: StateStore | None = None, **fields) -> Call:
    store = store or get_store()
    _check_fields(fields, CALL_FIELDS, "call")
    _require_refs(store, fields)
    fields = {k: v for k, v in _row_values(fields).items() if v is not None}
    call = Call(id=generate_id("call"), title=title, created_at=_now(), **fields)
    store.insert("calls", call.to_row())
    return call


def get_call(call_id: str, store: StateStore | None = None) -> Call:
    store = store or get_store()
    row = store.get("calls", call_id)
    if row is None:
        raise NotFoundError("call", call_id)
    return Call.from_row(row)


def list_calls(client_id: str | None = None, store: StateStore | None = None) -> list[Call]:
    store = store or get_store()
    where = {"client_id": client_id} if client_id else None
    rows = store.find("calls", where, order_by="scheduled_at IS NULL, scheduled_at")
    return [Call.from_row(r) for r in rows]


def update_call(call_id: str, changes: dict, store: StateStore | None = None) -> Call:
    """Apply the non-None values of *changes* to a call."""
    store = store or get_store()
    _check_fields(changes, CALL_FIELDS, "call")
    _require_refs(store, changes)
    data = {k: v for k, v in _row_values(changes).items() if v is not None}
    if data and not store.update("calls", call_id, data):
        raise NotFoundError("call", call_id)
    return get_call(call_id, store=store)


def delete_call(call_id: str, store: StateStore | None = None) -> None:
    store = store or get_store()
    if not store.delete("calls", call_id):
        raise NotFoundError("call", call_id)
