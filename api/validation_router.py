"""
Validation API Router - section registry and form checks for the dashboard.

Endpoints:
- GET /api/sections/roles - section roles, their layouts and the accepted aliases
- POST /api/sections/validate - resolve each section's layout and parse its content
- POST /api/forms/{form}/validate - check a contact/document/call/deliverable form
"""

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.response_models import ERROR_RESPONSES
from lib.errors import NotFoundError
from lib.sections import (
    ROLE_SIMILARITY_MAP,
    SECTION_TO_LAYOUT,
    ensure_section_ids,
    get_layout_for_role_with_fallback,
    parse_section_content,
)
from lib.validation import CallForm, ContactForm, DeliverableForm, DocumentForm, validate_form

logger = logging.getLogger(__name__)

router = APIRouter(tags=["validation"], responses=ERROR_RESPONSES)

FORMS = {
    "contact": ContactForm,
    "document": DocumentForm,
    "call": CallForm,
    "deliverable": DeliverableForm,
}


# Pydantic models for API
class SectionIn(BaseModel):
    id: str | None = Field(default=None, description="Stable section id, generated when missing")
    role: str = Field(..., description="Section role as produced by the structure agent")
    content: dict[str, Any] | None = None


class SectionsRequest(BaseModel):
    sections: list[SectionIn] = Field(default_factory=list)


# Endpoints


@router.get("/sections/roles")
async def section_roles():
    return {"layouts": SECTION_TO_LAYOUT, "aliases": ROLE_SIMILARITY_MAP}


@router.post("/sections/validate")
async def validate_sections(request: SectionsRequest):
    """
    Give every section an id, resolve its layout and parse its content.

    Sections whose role matches nothing keep ``layout: null`` and are
    counted in ``unmatched``.
    """
    sections = ensure_section_ids([s.model_dump() for s in request.sections])
    out = []
    unmatched = 0
    for section in sections:
        match = get_layout_for_role_with_fallback(section["role"])
        if match.matched is None:
            unmatched += 1
        out.append(
            {
                "id": section["id"],
                "role": section["role"],
                **match.to_dict(),
                "content": parse_section_content(section["role"], section["content"]).model_dump(),
            }
        )
    if unmatched:
        logger.info("%d section(s) without a matching layout", unmatched)
    return {"sections": out, "unmatched": unmatched}


@router.post("/forms/{form}/validate")
async def validate_form_payload(form: str, payload: dict[str, Any]):
    """``{"valid": true, "data": ...}`` or ``{"valid": false, "errors": {field: message}}``."""
    model = FORMS.get(form)
    if model is None:
        raise NotFoundError("form", form)
    parsed, errors = validate_form(model, payload)
    if parsed is None:
        return {"valid": False, "errors": errors}
    return {"valid": True, "data": parsed.model_dump()}
