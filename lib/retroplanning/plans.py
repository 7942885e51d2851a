"""
Persistence of retroplanning plans, one plan per client.
"""

import logging
import uuid
from datetime import UTC, datetime

from lib.entities import RetroplanningPlan, RetroplanningTask
from lib.errors import NotFoundError
from lib.state_store import StateStore, get_store

logger = logging.getLogger(__name__)

TABLE = "retroplanning"


def load_plan(client_id: str, store: StateStore | None = None) -> RetroplanningPlan | None:
    store = store or get_store()
    rows = store.find(TABLE, {"client_id": client_id})
    return RetroplanningPlan.from_row(rows[0]) if rows else None


def save_plan(
    client_id: str,
    deadline: str,
    tasks: list[RetroplanningTask],
    generated_at: str | None = None,
    store: StateStore | None = None,
) -> RetroplanningPlan:
    """
    Upsert the client's plan.

    ``generated_at`` is kept when supplied, otherwise set to now; ``updated_at``
    is always refreshed. The row id of an existing plan is preserved.
    """
    store = store or get_store()
    if store.get("clients", client_id) is None:
        raise NotFoundError("client", client_id)
    now = datetime.now(UTC).isoformat()
    existing = load_plan(client_id, store=store)

    plan = RetroplanningPlan(
        id=existing.id if existing else str(uuid.uuid4()),
        client_id=client_id,
        deadline=deadline,
        tasks=list(tasks),
        generated_at=generated_at or now,
        updated_at=now,
    )
    store.upsert(TABLE, plan.to_row(), conflict=["client_id"])
    logger.info("Saved retroplanning for %s (%d tasks)", client_id, len(plan.tasks))
    return plan


def delete_plan(client_id: str, store: StateStore | None = None) -> bool:
    store = store or get_store()
    plan = load_plan(client_id, store=store)
    if plan is None:
        return False
    return store.delete(TABLE, plan.id)
