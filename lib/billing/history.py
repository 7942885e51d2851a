"""
Deliverable billing status and its history.

Each status change appends a billing_history row. The deliverable's
``billing_status`` always mirrors the most recent entry; deleting that entry
rolls the status back to the previous one (or "pending").
"""

import logging
import uuid
from datetime import UTC, datetime

from lib import safe_sql
from lib.entities import BillingHistory, BillingStatus
from lib.errors import NotFoundError
from lib.state_store import StateStore, get_store

logger = logging.getLogger(__name__)

TABLE = "billing_history"

_UNSET = object()

_NEWEST_FIRST = "changed_at DESC, rowid DESC"


def _require_deliverable(store: StateStore, deliverable_id: str) -> dict:
    row = store.get("deliverables", deliverable_id)
    if row is None:
        raise NotFoundError("deliverable", deliverable_id)
    return row


def load_history(deliverable_id: str, store: StateStore | None = None) -> list[BillingHistory]:
    """History of a deliverable, oldest first."""
    store = store or get_store()
    rows = store.find(
        TABLE, {"deliverable_id": deliverable_id}, order_by="changed_at ASC, rowid ASC"
    )
    return [BillingHistory.from_row(r) for r in rows]


def update_deliverable_billing_status(
    deliverable_id: str,
    status: str | BillingStatus,
    amount: float | None = None,
    notes: str | None = None,
    changed_by: str | None = None,
    store: StateStore | None = None,
) -> BillingHistory:
    """Set the deliverable's billing status and append a history entry."""
    store = store or get_store()
    _require_deliverable(store, deliverable_id)
    status = BillingStatus(status).value

    entry = BillingHistory(
        id=str(uuid.uuid4()),
        deliverable_id=deliverable_id,
        status=status,
        amount=amount,
        notes=notes,
        changed_at=datetime.now(UTC).isoformat(),
        changed_by=changed_by,
    )
    row = entry.to_row()
    with store.transaction(reason=f"billing_status:{deliverable_id}") as conn:
        conn.execute(
            safe_sql.update("deliverables", ["billing_status"]), [status, deliverable_id]
        )
        conn.execute(safe_sql.insert(TABLE, list(row)), list(row.values()))

    logger.info("Deliverable %s billing status -> %s", deliverable_id, status)
    return entry


def update_history_entry(
    history_id: str,
    amount: float | None = _UNSET,
    notes: str | None = _UNSET,
    store: StateStore | None = None,
) -> BillingHistory:
    """Edit amount and/or notes of an entry. Omitted fields are left as they are."""
    store = store or get_store()
    changes = {}
    if amount is not _UNSET:
        changes["amount"] = amount
    if notes is not _UNSET:
        changes["notes"] = notes

    if changes:
        store.update(TABLE, history_id, changes)
    row = store.get(TABLE, history_id)
    if row is None:
        raise NotFoundError("billing_history", history_id)
    return BillingHistory.from_row(row)


def delete_history_entry(
    history_id: str, deliverable_id: str, store: StateStore | None = None
) -> str:
    """
    Delete an entry. Returns the deliverable's billing status afterwards.

    When the entry was the most recent one, the deliverable reverts to the
    status of the entry now on top, or "pending" when none remain.
    """
    store = store or get_store()
    deliverable = _require_deliverable(store, deliverable_id)
    entry = store.get(TABLE, history_id)
    if entry is None or entry["deliverable_id"] != deliverable_id:
        raise NotFoundError("billing_history", history_id)

    history_sql = safe_sql.select(
        TABLE, where="deliverable_id = ?", order_by=_NEWEST_FIRST, suffix="LIMIT 1"
    )
    with store.transaction(reason=f"billing_history_delete:{deliverable_id}") as conn:
        newest = conn.execute(history_sql, [deliverable_id]).fetchone()
        was_most_recent = newest is not None and newest["id"] == history_id

        conn.execute(safe_sql.delete(TABLE), [history_id])

        status = deliverable["billing_status"]
        if was_most_recent:
            previous = conn.execute(history_sql, [deliverable_id]).fetchone()
            status = previous["status"] if previous else BillingStatus.PENDING.value
            conn.execute(
                safe_sql.update("deliverables", ["billing_status"]), [status, deliverable_id]
            )

    logger.info(
        "Deleted billing history %s (deliverable %s now %s)", history_id, deliverable_id, status
    )
    return status
