"""
Dashboard entities and their SQLite row mapping.

Rows come out of the StateStore as plain dicts with JSON-encoded list
columns; ``from_row`` decodes them into typed dataclasses and ``to_row``
does the reverse for inserts/updates.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any


class ClientStatus(str, Enum):
    PROSPECT = "prospect"
    CLIENT = "client"


class DeliverableType(str, Enum):
    CREATIVE = "creative"
    DOCUMENT = "document"
    OTHER = "other"


class DeliverableCategory(str, Enum):
    PRINT = "print"
    DIGITAL = "digital"
    OTHER = "other"


class DeliverableStatus(str, Enum):
    TO_QUOTE = "to_quote"
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class BillingStatus(str, Enum):
    """Billing state of a single deliverable (as opposed to a project)."""

    PENDING = "pending"
    DEPOSIT = "deposit"
    PROGRESS = "progress"
    BALANCE = "balance"


class CallType(str, Enum):
    CALL = "call"
    PRESENTATION = "presentation"


class DocumentType(str, Enum):
    BRIEF = "brief"
    REPORT = "report"
    NOTE = "note"
    CREATIVE_STRATEGY = "creative-strategy"
    WEB_BRIEF = "web-brief"
    SOCIAL_BRIEF = "social-brief"


class TaskColor(str, Enum):
    CYAN = "cyan"
    LIME = "lime"
    VIOLET = "violet"
    CORAL = "coral"
    AMBER = "amber"
    MAGENTA = "magenta"


TASK_COLORS: list[str] = [c.value for c in TaskColor]


def _json_list(value: Any) -> list:
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    return json.loads(value)


def _number(value: Any) -> float | None:
    return float(value) if value is not None else None


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class _RowMixin:
    """to_row(): dataclass -> dict of column values, lists JSON-encoded."""

    _json_columns: tuple[str, ...] = ()

    def to_row(self) -> dict:
        row = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in self._json_columns:
                value = json.dumps([asdict(v) if hasattr(v, "__dataclass_fields__") else v for v in value])
            elif isinstance(value, bool):
                value = int(value)
            row[f.name] = _enum_value(value)
        return row

    def to_dict(self) -> dict:
        return {k: _enum_value(v) for k, v in asdict(self).items()}


@dataclass
class Contact(_RowMixin):
    id: str
    client_id: str
    name: str
    role: str
    email: str
    phone: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "Contact":
        return cls(
            id=row["id"],
            client_id=row["client_id"],
            name=row["name"],
            role=row["role"],
            email=row["email"],
            phone=row.get("phone"),
        )


@dataclass
class Client(_RowMixin):
    id: str
    name: str
    status: str = ClientStatus.PROSPECT.value
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "Client":
        return cls(
            id=row["id"],
            name=row["name"],
            status=row.get("status") or ClientStatus.PROSPECT.value,
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass
class Project(_RowMixin):
    id: str
    client_id: str
    name: str
    quote_amount: float | None = None
    quote_date: str | None = None
    deposit_amount: float | None = None
    deposit_date: str | None = None
    progress_amounts: list[float] = field(default_factory=list)
    progress_dates: list[str] = field(default_factory=list)
    balance_amount: float | None = None
    balance_date: str | None = None
    potentiel: float | None = None
    in_backlog: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    _json_columns = ("progress_amounts", "progress_dates")

    @classmethod
    def from_row(cls, row: dict) -> "Project":
        return cls(
            id=row["id"],
            client_id=row["client_id"],
            name=row["name"],
            quote_amount=_number(row.get("quote_amount")),
            quote_date=row.get("quote_date"),
            deposit_amount=_number(row.get("deposit_amount")),
            deposit_date=row.get("deposit_date"),
            progress_amounts=[float(a) for a in _json_list(row.get("progress_amounts"))],
            progress_dates=_json_list(row.get("progress_dates")),
            balance_amount=_number(row.get("balance_amount")),
            balance_date=row.get("balance_date"),
            potentiel=_number(row.get("potentiel")),
            in_backlog=bool(row.get("in_backlog")),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass
class Deliverable(_RowMixin):
    id: str
    name: str
    client_id: str | None = None
    project_id: str | None = None
    due_date: str | None = None
    type: str = DeliverableType.OTHER.value
    status: str = DeliverableStatus.TO_QUOTE.value
    category: str | None = None
    assignee_id: str | None = None
    delivered_at: str | None = None
    external_contractor: str | None = None
    notes: str | None = None
    prix_facture: float | None = None
    cout_sous_traitance: float | None = None
    is_potentiel: bool = False
    billing_status: str = BillingStatus.PENDING.value
    quote_amount: float | None = None
    deposit_amount: float | None = None
    progress_amount: float | None = None
    balance_amount: float | None = None
    total_invoiced: float | None = None
    in_backlog: bool = False
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "Deliverable":
        return cls(
            id=row["id"],
            name=row["name"],
            client_id=row.get("client_id"),
            project_id=row.get("project_id"),
            due_date=row.get("due_date"),
            type=row.get("type") or DeliverableType.OTHER.value,
            status=row.get("status") or DeliverableStatus.TO_QUOTE.value,
            category=row.get("category"),
            assignee_id=row.get("assignee_id"),
            delivered_at=row.get("delivered_at"),
            external_contractor=row.get("external_contractor"),
            notes=row.get("notes"),
            prix_facture=_number(row.get("prix_facture")),
            cout_sous_traitance=_number(row.get("cout_sous_traitance")),
            is_potentiel=bool(row.get("is_potentiel")),
            billing_status=row.get("billing_status") or BillingStatus.PENDING.value,
            quote_amount=_number(row.get("quote_amount")),
            deposit_amount=_number(row.get("deposit_amount")),
            progress_amount=_number(row.get("progress_amount")),
            balance_amount=_number(row.get("balance_amount")),
            total_invoiced=_number(row.get("total_invoiced")),
            in_backlog=bool(row.get("in_backlog")),
            created_at=row.get("created_at"),
        )


@dataclass
class BillingHistory(_RowMixin):
    id: str
    deliverable_id: str
    status: str
    changed_at: str
    amount: float | None = None
    notes: str | None = None
    changed_by: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "BillingHistory":
        return cls(
            id=row["id"],
            deliverable_id=row["deliverable_id"],
            status=row["status"],
            changed_at=row["changed_at"],
            amount=_number(row.get("amount")),
            notes=row.get("notes"),
            changed_by=row.get("changed_by"),
        )


@dataclass
class Call(_RowMixin):
    id: str
    title: str
    client_id: str | None = None
    scheduled_at: str | None = None
    duration: int = 30
    assignee_id: str | None = None
    call_type: str = CallType.CALL.value
    notes: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "Call":
        return cls(
            id=row["id"],
            title=row["title"],
            client_id=row.get("client_id"),
            scheduled_at=row.get("scheduled_at"),
            duration=int(row.get("duration") or 30),
            assignee_id=row.get("assignee_id"),
            call_type=row.get("call_type") or CallType.CALL.value,
            notes=row.get("notes"),
            created_at=row.get("created_at"),
        )


@dataclass
class RetroplanningTask:
    id: str
    label: str
    duration_days: int
    color: str
    start_date: str | None = None
    end_date: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "RetroplanningTask":
        return cls(
            id=data["id"],
            label=data["label"],
            duration_days=int(data["duration_days"]),
            color=_enum_value(data["color"]),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
        )


@dataclass
class RetroplanningPlan(_RowMixin):
    id: str
    client_id: str
    deadline: str
    tasks: list[RetroplanningTask] = field(default_factory=list)
    generated_at: str | None = None
    updated_at: str | None = None

    _json_columns = ("tasks",)

    @classmethod
    def from_row(cls, row: dict) -> "RetroplanningPlan":
        return cls(
            id=row["id"],
            client_id=row["client_id"],
            deadline=row["deadline"],
            tasks=[RetroplanningTask.from_dict(t) for t in _json_list(row.get("tasks"))],
            generated_at=row.get("generated_at"),
            updated_at=row.get("updated_at"),
        )
