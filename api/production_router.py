"""
Production API Router - clients, projects, deliverables (kanban) and calls.

Endpoints:
- GET/POST /api/clients
- GET/POST /api/projects, PATCH/DELETE /api/projects/{project_id}
- GET/POST /api/deliverables, PATCH/DELETE /api/deliverables/{deliverable_id}
- PUT /api/deliverables/{deliverable_id}/project - attach to / detach from a project
- POST /api/deliverables/{deliverable_id}/toggle - checkbox cycle
- POST /api/deliverables/{deliverable_id}/transition - kanban drag, applied when allowed
- POST /api/deliverables/{deliverable_id}/cascade - status implied by a modal edit
- GET/POST /api/calls, PATCH/DELETE /api/calls/{call_id}
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from api.response_models import (
    ERROR_RESPONSES,
    CascadeResponse,
    ListResponse,
    MutationResponse,
    TransitionResponse,
)
from lib import records
from lib.entities import (
    BillingStatus,
    CallType,
    ClientStatus,
    DeliverableCategory,
    DeliverableStatus,
    DeliverableType,
)
from lib.production_rules import (
    DeliverableContext,
    can_transition_status,
    compute_status_cascade,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["production"], responses=ERROR_RESPONSES)


# Pydantic models for API
class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Matched case-insensitively on create")
    status: ClientStatus = ClientStatus.PROSPECT


class ProjectFields(BaseModel):
    """Project columns. In PATCH bodies an explicit null clears the column."""

    model_config = ConfigDict(extra="forbid")

    quote_amount: float | None = None
    quote_date: str | None = None
    deposit_amount: float | None = None
    deposit_date: str | None = None
    progress_amounts: list[float] | None = None
    progress_dates: list[str] | None = None
    balance_amount: float | None = None
    balance_date: str | None = None
    potentiel: float | None = None
    in_backlog: bool | None = None


class ProjectCreate(ProjectFields):
    client_id: str = Field(..., description="Owning client")
    name: str = Field(..., min_length=1)


class ProjectUpdate(ProjectFields):
    name: str | None = None
    client_id: str | None = None


class DeliverableFields(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client_id: str | None = None
    project_id: str | None = None
    due_date: str | None = None
    type: DeliverableType | None = None
    status: DeliverableStatus | None = None
    category: DeliverableCategory | None = None
    assignee_id: str | None = None
    delivered_at: str | None = None
    external_contractor: str | None = None
    notes: str | None = None
    prix_facture: float | None = None
    cout_sous_traitance: float | None = None
    is_potentiel: bool | None = None
    billing_status: BillingStatus | None = None
    quote_amount: float | None = None
    deposit_amount: float | None = None
    progress_amount: float | None = None
    balance_amount: float | None = None
    total_invoiced: float | None = None
    in_backlog: bool | None = None


class DeliverableCreate(DeliverableFields):
    name: str = Field(..., min_length=1)


class DeliverableUpdate(DeliverableFields):
    name: str | None = None


class AssignProjectRequest(BaseModel):
    project_id: str | None = Field(..., description="Target project, null to detach")


class TransitionRequest(BaseModel):
    new_status: DeliverableStatus = Field(..., description="Kanban column the card is dropped on")


class CascadeRequest(BaseModel):
    billing_status: BillingStatus = Field(..., description="Billing status chosen in the modal")
    prix_facture: float | None = Field(default=None, description="Price entered in the modal")


class CallCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., min_length=1)
    client_id: str | None = None
    scheduled_at: str | None = Field(default=None, description="ISO datetime, null = backlog")
    duration: int = Field(default=30, ge=15, description="Minutes")
    assignee_id: str | None = None
    call_type: CallType = CallType.CALL
    notes: str | None = None


class CallUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    client_id: str | None = None
    scheduled_at: str | None = None
    duration: int | None = Field(default=None, ge=15)
    assignee_id: str | None = None
    call_type: CallType | None = None
    notes: str | None = None


def _changes(model: BaseModel) -> dict:
    """Fields present in the request body, nulls included."""
    return model.model_dump(exclude_unset=True)


# ==== Clients ====


@router.get("/clients", response_model=ListResponse)
async def list_clients():
    return ListResponse.of([c.to_dict() for c in records.list_clients()])


@router.post("/clients")
async def create_client(request: ClientCreate):
    """Create a client; an existing one with the same name is returned instead."""
    client, is_existing = records.add_client(request.name, request.status)
    return {**client.to_dict(), "is_existing": is_existing}


# ==== Projects ====


@router.get("/projects", response_model=ListResponse)
async def list_projects(client_id: str | None = None):
    return ListResponse.of([p.to_dict() for p in records.list_projects(client_id)])


@router.post("/projects", status_code=201)
async def create_project(request: ProjectCreate):
    fields = request.model_dump(exclude_unset=True, exclude={"client_id", "name"})
    fields = {k: v for k, v in fields.items() if v is not None}
    project = records.add_project(request.client_id, request.name, **fields)
    return project.to_dict()


@router.patch("/projects/{project_id}")
async def patch_project(project_id: str, request: ProjectUpdate):
    return records.update_project(project_id, _changes(request)).to_dict()


@router.delete("/projects/{project_id}", response_model=MutationResponse)
async def delete_project(project_id: str):
    """Delete a project; its deliverables are kept and detached."""
    records.delete_project(project_id)
    return {"success": True}


# ==== Deliverables ====


@router.get("/deliverables", response_model=ListResponse)
async def list_deliverables(project_id: str | None = None, client_id: str | None = None):
    items = records.list_deliverables(project_id=project_id, client_id=client_id)
    return ListResponse.of([d.to_dict() for d in items])


@router.post("/deliverables", status_code=201)
async def create_deliverable(request: DeliverableCreate):
    fields = request.model_dump(exclude_unset=True, exclude={"name"})
    return records.add_deliverable(request.name, **fields).to_dict()


@router.patch("/deliverables/{deliverable_id}")
async def patch_deliverable(deliverable_id: str, request: DeliverableUpdate):
    return records.update_deliverable(deliverable_id, _changes(request)).to_dict()


@router.delete("/deliverables/{deliverable_id}", response_model=MutationResponse)
async def delete_deliverable(deliverable_id: str):
    records.delete_deliverable(deliverable_id)
    return {"success": True}


@router.put("/deliverables/{deliverable_id}/project")
async def assign_project(deliverable_id: str, request: AssignProjectRequest):
    return records.assign_deliverable_to_project(deliverable_id, request.project_id).to_dict()


@router.post("/deliverables/{deliverable_id}/toggle")
async def toggle_deliverable(deliverable_id: str):
    """Advance pending -> in-progress -> completed -> pending."""
    return records.toggle_deliverable_status(deliverable_id).to_dict()


@router.post("/deliverables/{deliverable_id}/transition", response_model=TransitionResponse)
async def transition_deliverable(deliverable_id: str, request: TransitionRequest):
    """
    Kanban drag. The move is checked against the production rules and
    applied only when allowed; a refused move returns the reason to show.
    """
    deliverable = records.get_deliverable(deliverable_id)
    project_quote = None
    if deliverable.project_id:
        project_quote = records.get_project(deliverable.project_id).quote_amount

    ctx = DeliverableContext(
        status=deliverable.status,
        billing_status=deliverable.billing_status,
        prix_facture=deliverable.prix_facture,
        project_quote_amount=project_quote,
    )
    result = can_transition_status(ctx, request.new_status)
    if not result.allowed:
        logger.info(
            "Refused move of %s: %s -> %s", deliverable_id, deliverable.status, request.new_status.value
        )
        return result.to_dict()

    if request.new_status.value != deliverable.status:
        deliverable = records.update_deliverable(
            deliverable_id, {"status": request.new_status.value}
        )
    return {**result.to_dict(), "deliverable": deliverable.to_dict()}


@router.post("/deliverables/{deliverable_id}/cascade", response_model=CascadeResponse)
async def status_cascade(deliverable_id: str, request: CascadeRequest):
    """Status the deliverable would take after the modal edit. Nothing is written."""
    deliverable = records.get_deliverable(deliverable_id)
    return compute_status_cascade(deliverable.status, request.billing_status, request.prix_facture)


# ==== Calls ====


@router.get("/calls", response_model=ListResponse)
async def list_calls(client_id: str | None = None):
    return ListResponse.of([c.to_dict() for c in records.list_calls(client_id)])


@router.post("/calls", status_code=201)
async def create_call(request: CallCreate):
    fields = request.model_dump(exclude={"title"})
    return records.add_call(request.title, **fields).to_dict()


@router.patch("/calls/{call_id}")
async def patch_call(call_id: str, request: CallUpdate):
    return records.update_call(call_id, _changes(request)).to_dict()


@router.delete("/calls/{call_id}", response_model=MutationResponse)
async def delete_call(call_id: str):
    records.delete_call(call_id)
    return {"success": True}
