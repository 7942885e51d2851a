"""
Form schemas for contacts, documents, calls and deliverables.

Validation happens once, when a form payload enters the system. Messages
are the French strings shown next to the offending field.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

DATE_REQUIRED = "La date est requise (ou cochez « À planifier plus tard »)"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _required(value: str, message: str) -> str:
    if not value:
        raise ValueError(message)
    return value


class FormModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_default=True)


class ContactForm(FormModel):
    name: str = ""
    role: str = ""
    email: str = ""
    phone: str | None = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v):
        return _required(v, "Le nom est requis")

    @field_validator("role")
    @classmethod
    def role_required(cls, v):
        return _required(v, "Le rôle est requis")

    @field_validator("email")
    @classmethod
    def email_valid(cls, v):
        _required(v, "L'email est requis")
        if not _EMAIL_RE.match(v):
            raise ValueError("L'email n'est pas valide")
        return v


class DocumentForm(FormModel):
    type: Literal["brief", "report", "note"]
    title: str = ""
    content: str = ""

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return _required(v, "Le titre est requis")

    @field_validator("content")
    @classmethod
    def content_required(cls, v):
        return _required(v, "Le contenu est requis")


class CallForm(FormModel):
    title: str = ""
    selected_client_id: str | None = None
    call_type: Literal["call", "presentation"] = "call"
    to_backlog: bool = False
    scheduled_date: str | None = None
    scheduled_time: str | None = None
    duration: int = 30
    assignee_id: str | None = None
    notes: str | None = None

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return _required(v, "Le titre est requis")

    @field_validator("duration")
    @classmethod
    def duration_minimum(cls, v):
        if v < 15:
            raise ValueError("Minimum 15 minutes")
        return v

    @model_validator(mode="after")
    def date_unless_backlog(self):
        if not self.to_backlog and not (self.scheduled_date and self.scheduled_date.strip()):
            raise ValueError(DATE_REQUIRED)
        return self


class DeliverableForm(FormModel):
    name: str = ""
    selected_client_id: str | None = None
    to_backlog: bool = False
    due_date: str | None = None
    due_time: str | None = None
    type: Literal["creative", "document", "other"] = "other"
    status: Literal["pending", "in-progress", "completed"] = "pending"
    assignee_id: str | None = None
    category: Literal["print", "digital", "other"] = "other"
    prix_facture: str | None = None
    cout_sous_traitance: str | None = None
    delivered_at: str | None = None
    external_contractor: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def name_required(cls, v):
        return _required(v, "Le nom est requis")

    @model_validator(mode="after")
    def date_unless_backlog(self):
        if not self.to_backlog and not (self.due_date and self.due_date.strip()):
            raise ValueError(DATE_REQUIRED)
        return self


# Form-level rule errors are reported on the date field, like the UI expects.
_MODEL_ERROR_FIELD = {
    CallForm: "scheduled_date",
    DeliverableForm: "due_date",
}


def form_errors(model: type[FormModel], exc: ValidationError) -> dict[str, str]:
    """Map a ValidationError to ``{field: first message}``."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"]) or _MODEL_ERROR_FIELD.get(model, "__root__")
        message = err["msg"].removeprefix("Value error, ")
        errors.setdefault(field, message)
    return errors


def validate_form(model: type[FormModel], data: dict) -> tuple[FormModel | None, dict[str, str]]:
    """Validate *data*; returns ``(form, {})`` or ``(None, errors)``."""
    try:
        return model.model_validate(data), {}
    except ValidationError as exc:
        return None, form_errors(model, exc)
