"""
Retroplanning API Router - backward scheduling from a deadline.

Endpoints:
- POST /api/retroplanning/compute - date a list of steps backward from a deadline
- POST /api/retroplanning - generate steps from a brief with the model, then date them
- GET /api/clients/{client_id}/retroplanning - stored plan of a client
- PUT /api/clients/{client_id}/retroplanning - store (replace) a client's plan
- DELETE /api/clients/{client_id}/retroplanning - remove a client's plan
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from api.response_models import (
    ERROR_RESPONSES,
    MutationResponse,
    RetroplanningComputeResponse,
    RetroplanningGenerationResponse,
    RetroplanningPlanResponse,
)
from lib import records
from lib.dates import to_utc_day
from lib.entities import RetroplanningTask, TaskColor
from lib.errors import InputError, NotFoundError
from lib.retroplanning import compute_dates_from_deadline
from lib.retroplanning.generator import generate_retroplanning
from lib.retroplanning.plans import delete_plan, load_plan, save_plan

logger = logging.getLogger(__name__)

router = APIRouter(tags=["retroplanning"], responses=ERROR_RESPONSES)

DEADLINE_HELP = "deadline est requis (format YYYY-MM-DD)."


# Pydantic models for API
class TaskStub(BaseModel):
    """A step before dating. ``durationDays`` is accepted for ``duration_days``."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Stable step id, e.g. step-1")
    label: str = Field(..., description="Step name shown on the Gantt bar")
    duration_days: int = Field(..., ge=1, alias="durationDays", description="Calendar days")
    color: TaskColor = Field(..., description="cyan|lime|violet|coral|amber|magenta")


class ComputeRequest(BaseModel):
    deadline: str = Field(..., description="Last day of the last step (YYYY-MM-DD)")
    tasks: list[TaskStub] = Field(default_factory=list, description="Steps in project order")


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    brief_content: str = Field("", alias="briefContent", description="Brief text (markdown)")
    deadline: str = Field("", description="YYYY-MM-DD")
    client_name: str | None = Field(default=None, alias="clientName")
    client_id: str | None = Field(
        default=None, alias="clientId", description="When set, the plan is stored for this client"
    )


class PlanTask(TaskStub):
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")


class PlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deadline: str
    tasks: list[PlanTask] = Field(default_factory=list)
    generated_at: str | None = Field(default=None, alias="generatedAt")


def _deadline_day(value: str):
    try:
        return to_utc_day(value)
    except ValueError as e:
        raise InputError(DEADLINE_HELP) from e


# Endpoints


@router.post("/retroplanning/compute", response_model=RetroplanningComputeResponse)
async def compute_retroplanning(request: ComputeRequest):
    """Date the steps so the last one ends on the deadline, with no gaps."""
    deadline = _deadline_day(request.deadline)
    tasks = compute_dates_from_deadline(request.tasks, deadline)
    return {"deadline": deadline.isoformat(), "tasks": [t.to_dict() for t in tasks]}


@router.post("/retroplanning", response_model=RetroplanningGenerationResponse)
def create_retroplanning(request: GenerateRequest):
    """
    Generate a retroplanning from a brief.

    Sync handler: the Anthropic call blocks, so FastAPI runs it in its
    threadpool.
    """
    if request.client_id:
        records.get_client(request.client_id)

    generation = generate_retroplanning(
        request.brief_content, request.deadline, client_name=request.client_name
    )
    data = generation.to_dict()
    data["saved"] = False
    if request.client_id:
        save_plan(request.client_id, generation.deadline, generation.tasks)
        data["saved"] = True
    return data


@router.get("/clients/{client_id}/retroplanning", response_model=RetroplanningPlanResponse)
async def get_client_plan(client_id: str):
    plan = load_plan(client_id)
    if plan is None:
        raise NotFoundError("retroplanning", client_id)
    return plan.to_dict()


@router.put("/clients/{client_id}/retroplanning", response_model=RetroplanningPlanResponse)
async def put_client_plan(client_id: str, request: PlanRequest):
    """Store the plan as given; dates are not recomputed."""
    deadline = _deadline_day(request.deadline)
    tasks = [
        RetroplanningTask(
            id=t.id,
            label=t.label,
            duration_days=t.duration_days,
            color=t.color.value,
            start_date=t.start_date,
            end_date=t.end_date,
        )
        for t in request.tasks
    ]
    plan = save_plan(client_id, deadline.isoformat(), tasks, generated_at=request.generated_at)
    return plan.to_dict()


@router.delete("/clients/{client_id}/retroplanning", response_model=MutationResponse)
async def delete_client_plan(client_id: str):
    if not delete_plan(client_id):
        raise NotFoundError("retroplanning", client_id)
    return {"success": True}
