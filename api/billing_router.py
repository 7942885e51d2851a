"""
Billing API Router - project billing status and deliverable billing history.

Endpoints:
- POST /api/billing/compute - billing status of a project given in the body
- GET /api/billing/labels - labels and colours for project and deliverable statuses
- GET /api/projects/{project_id}/billing - billing status of a stored project
- POST /api/deliverables/{deliverable_id}/billing-status - record a billing step
- GET /api/deliverables/{deliverable_id}/billing-history - steps, oldest first
- PATCH /api/billing-history/{history_id} - edit amount/notes of a step
- DELETE /api/billing-history/{history_id} - delete a step (may roll the status back)
"""

import logging

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from api.response_models import (
    ERROR_RESPONSES,
    ListResponse,
    MutationResponse,
    ProjectBillingResponse,
)
from lib import records
from lib.billing import (
    PROJECT_BILLING_COLORS,
    PROJECT_BILLING_LABELS,
    ProjectBillingInfo,
    compute_project_billing,
    format_euro,
)
from lib.billing import history as billing_history
from lib.billing.labels import BILLING_STATUS_LABELS
from lib.entities import BillingStatus, Deliverable, Project

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing"], responses=ERROR_RESPONSES)


# Pydantic models for API
class ProjectAmounts(BaseModel):
    """The project fields billing depends on."""

    id: str = Field(..., description="Project id, matched against deliverable.project_id")
    quote_amount: float | None = Field(default=None, description="Quoted total (EUR)")
    deposit_amount: float | None = Field(default=None, description="Deposit received (EUR)")
    progress_amounts: list[float] = Field(default_factory=list, description="Progress payments")


class DeliverableAmounts(BaseModel):
    id: str = ""
    project_id: str | None = None
    total_invoiced: float | None = Field(default=None, description="Invoiced on this product")


class BillingComputeRequest(BaseModel):
    project: ProjectAmounts
    deliverables: list[DeliverableAmounts] = Field(default_factory=list)


class BillingStatusRequest(BaseModel):
    status: BillingStatus = Field(..., description="pending|deposit|progress|balance")
    amount: float | None = None
    notes: str | None = None
    changed_by: str | None = None


class HistoryEntryUpdate(BaseModel):
    """Only the fields present in the body are changed; null clears."""

    amount: float | None = None
    notes: str | None = None


def billing_response(info: ProjectBillingInfo) -> dict:
    data = info.to_dict()
    data["label"] = PROJECT_BILLING_LABELS[data["status"]]
    data["formatted"] = {
        "total_paid": format_euro(info.total_paid),
        "remaining": format_euro(info.remaining),
        "total_product_invoiced": format_euro(info.total_product_invoiced),
    }
    return data


# Endpoints


@router.post("/billing/compute", response_model=ProjectBillingResponse)
async def compute_billing(request: BillingComputeRequest):
    """Billing status of a project and deliverables supplied by the caller."""
    project = Project(
        id=request.project.id,
        client_id="",
        name="",
        quote_amount=request.project.quote_amount,
        deposit_amount=request.project.deposit_amount,
        progress_amounts=list(request.project.progress_amounts),
    )
    deliverables = [
        Deliverable(id=d.id, name="", project_id=d.project_id, total_invoiced=d.total_invoiced)
        for d in request.deliverables
    ]
    return billing_response(compute_project_billing(project, deliverables))


@router.get("/billing/labels")
async def billing_labels():
    """Labels and colour classes for project and deliverable billing statuses."""
    return {
        "project": {
            status: {"label": label, **PROJECT_BILLING_COLORS[status]}
            for status, label in PROJECT_BILLING_LABELS.items()
        },
        "deliverable": BILLING_STATUS_LABELS,
    }


@router.get("/projects/{project_id}/billing", response_model=ProjectBillingResponse)
async def project_billing(project_id: str):
    """Billing status of a stored project and its deliverables."""
    project = records.get_project(project_id)
    deliverables = records.list_deliverables(project_id=project_id)
    return billing_response(compute_project_billing(project, deliverables))


@router.post("/deliverables/{deliverable_id}/billing-status", status_code=201)
async def set_billing_status(deliverable_id: str, request: BillingStatusRequest):
    """Set the deliverable's billing status and append it to the history."""
    entry = billing_history.update_deliverable_billing_status(
        deliverable_id,
        request.status,
        amount=request.amount,
        notes=request.notes,
        changed_by=request.changed_by,
    )
    return entry.to_dict()


@router.get("/deliverables/{deliverable_id}/billing-history", response_model=ListResponse)
async def get_billing_history(deliverable_id: str):
    records.get_deliverable(deliverable_id)
    entries = billing_history.load_history(deliverable_id)
    return ListResponse.of([e.to_dict() for e in entries])


@router.patch("/billing-history/{history_id}")
async def patch_history_entry(history_id: str, request: HistoryEntryUpdate):
    changes = request.model_dump(exclude_unset=True)
    entry = billing_history.update_history_entry(history_id, **changes)
    return entry.to_dict()


@router.delete("/billing-history/{history_id}", response_model=MutationResponse)
async def delete_history_entry(
    history_id: str,
    deliverable_id: str = Query(..., description="Deliverable the entry belongs to"),
):
    """Delete a step; returns the deliverable's billing status afterwards."""
    status = billing_history.delete_history_entry(history_id, deliverable_id)
    return {"success": True, "billing_status": status}
