"""
Shared Pydantic models for API responses.

These give FastAPI the type information it needs for the OpenAPI schema.

Usage:
    from api.response_models import ListResponse

    @router.get("/projects", response_model=ListResponse)
    async def list_projects(): ...
"""

from typing import Any

from pydantic import BaseModel, Field

# ==== List Envelope ====
# Shape: {items, total}


class ListResponse(BaseModel):
    """Standard list endpoint response."""

    items: list[Any] = Field(default_factory=list, description="Result items")
    total: int = Field(description="Total count")

    @classmethod
    def of(cls, items: list) -> "ListResponse":
        return cls(items=items, total=len(items))


# ==== Mutation Result ====


class MutationResponse(BaseModel):
    """Result of a DELETE or other write without a body to return."""

    success: bool = Field(description="Whether the operation succeeded")

    model_config = {"extra": "allow"}


# ==== Errors ====


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx raised from an AppError."""

    error: str = Field(description="Message safe to show in the dashboard (French)")
    code: str = Field(description="Stable machine-readable code, e.g. PROJECT_NOT_FOUND")
    detail: str | None = Field(default=None, description="Technical message")


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ==== Health Check ====


class HealthCheckEntry(BaseModel):
    name: str
    status: str
    message: str
    latency_ms: float

    model_config = {"extra": "allow"}


class HealthResponse(BaseModel):
    """Health check result."""

    status: str = Field(description="healthy, degraded or unhealthy")
    timestamp: str = Field(description="ISO timestamp")
    checks: list[HealthCheckEntry] = Field(default_factory=list)


# ==== Billing ====


class ProjectBillingResponse(BaseModel):
    status: str = Field(description="none|quoted|deposit|progress|balanced")
    label: str = Field(description="French label of the status")
    total_product_invoiced: float
    total_project_payments: float
    total_paid: float
    remaining: float
    progress_percent: int
    formatted: dict[str, str] = Field(
        default_factory=dict, description="Amounts formatted in euros (fr-FR)"
    )


# ==== Retroplanning ====


class RetroplanningTaskResponse(BaseModel):
    id: str
    label: str
    duration_days: int
    color: str
    start_date: str | None = None
    end_date: str | None = None


class RetroplanningComputeResponse(BaseModel):
    deadline: str
    tasks: list[RetroplanningTaskResponse]


class GenerationCostResponse(BaseModel):
    input_tokens: int
    output_tokens: int
    estimated_usd: float


class RetroplanningGenerationResponse(BaseModel):
    deadline: str
    tasks: list[RetroplanningTaskResponse]
    model: str
    cost: GenerationCostResponse | None = None
    saved: bool = Field(default=False, description="Whether the plan was stored for a client")


class RetroplanningPlanResponse(BaseModel):
    id: str
    client_id: str
    deadline: str
    tasks: list[RetroplanningTaskResponse]
    generated_at: str | None = None
    updated_at: str | None = None


# ==== Production ====


class TransitionResponse(BaseModel):
    allowed: bool
    reason: str | None = None
    deliverable: dict[str, Any] | None = Field(
        default=None, description="The deliverable after the move, when it was applied"
    )


class CascadeResponse(BaseModel):
    status: str | None = Field(
        default=None, description="Status implied by the edit, absent when unchanged"
    )
