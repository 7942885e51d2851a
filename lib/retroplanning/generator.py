"""
LLM-assisted retroplanning.

Sends a client brief to Claude, which answers with an ordered list of steps
(label, duration, colour) inside a <structured_output> block. The steps are
validated, normalised and then scheduled backward from the deadline with the
deterministic scheduler; the model never produces dates.
"""

import json
import logging
import re
import uuid
from dataclasses import dataclass, field

import anthropic
import json_repair
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from lib import config
from lib.api_cost import GenerationCost, cost_from_usage
from lib.dates import to_utc_day
from lib.entities import TASK_COLORS, RetroplanningTask
from lib.errors import (
    ConfigurationError,
    InputError,
    RetroplanningGenerationError,
    get_error_message,
)
from lib.numbers import round_half_up
from lib.retroplanning.scheduler import compute_dates_from_deadline

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """Tu es un chef de projet senior dans une agence creative. Tu recois le contenu d'un brief client et une date de livraison finale. Tu generes un retroplanning : liste ordonnee d'etapes du debut du projet a la fin. Tu adaptes les etapes au type de projet (site web, identite visuelle, video, campagne...). Aucun template fixe : tu lis le brief et deduis ce qui est necessaire.

## Format de sortie

Tu reponds UNIQUEMENT avec un bloc <structured_output> contenant un tableau JSON d'etapes.

<structured_output>
[
  {
    "id": "uuid-v4",
    "label": "Nom de l'etape",
    "durationDays": 5,
    "color": "cyan"
  }
]
</structured_output>

## Regles

- Entre 4 et 10 etapes maximum.
- Les etapes sont ordonnees du debut du projet (index 0) a la fin.
- durationDays = estimation en jours calendaires (pas de dates absolues).
- color : une parmi "cyan", "lime", "violet", "coral", "amber", "magenta". Varie les couleurs.
- id : genere un identifiant unique (ex: "step-1", "step-2", etc.).
- Ne retourne PAS de dates absolues — seulement durationDays.
- Adapte les etapes au type de projet detecte dans le brief."""

_STRUCTURED_OUTPUT_RE = re.compile(
    r"<structured_output>(.*?)</structured_output>", re.IGNORECASE | re.DOTALL
)


class RawTask(BaseModel):
    """One step as returned by the model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    label: str
    duration_days: float = Field(..., alias="durationDays")
    color: str | None = None


@dataclass
class RetroplanningGeneration:
    deadline: str
    tasks: list[RetroplanningTask] = field(default_factory=list)
    model: str = ""
    cost: GenerationCost | None = None

    def to_dict(self) -> dict:
        return {
            "deadline": self.deadline,
            "tasks": [t.to_dict() for t in self.tasks],
            "model": self.model,
            "cost": self.cost.to_dict() if self.cost else None,
        }


def extract_tasks_from_response(text: str) -> list:
    """
    Pull the JSON array of steps out of a model answer.

    Uses the <structured_output> block when present, else the whole text,
    and decodes the slice between the first ``[`` and the last ``]``. Slices
    that are not strict JSON (trailing commas, unquoted keys) go through
    json_repair before giving up.
    """
    match = _STRUCTURED_OUTPUT_RE.search(text)
    raw = match.group(1).strip() if match else text

    first = raw.find("[")
    last = raw.rfind("]")
    if first == -1 or last <= first:
        raise RetroplanningGenerationError("Tableau JSON non trouvé dans la réponse")

    candidate = raw[first : last + 1]
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        parse_error = e

    try:
        repaired = json_repair.loads(candidate)
    except ValueError as e:
        raise RetroplanningGenerationError(
            f"JSON invalide: {parse_error}. Repair: {e}"
        ) from parse_error
    if not isinstance(repaired, list):
        raise RetroplanningGenerationError(
            f"JSON invalide: {parse_error}. Repair: tableau attendu, "
            f"{type(repaired).__name__} obtenu"
        ) from parse_error

    logger.warning("Model JSON repaired after parse error: %s", parse_error)
    return repaired


def normalize_tasks(raw_tasks: list) -> list[dict]:
    """
    Validate raw steps and coerce them into scheduler stubs.

    Keeps at most RETROPLANNING_MAX_TASKS steps. Missing ids get a UUID,
    durations are rounded and clamped to >= 1, unknown colours are replaced
    by the palette colour at the step's index.
    """
    if not isinstance(raw_tasks, list) or not raw_tasks:
        raise RetroplanningGenerationError("La réponse IA ne contient pas de tâches valides.")

    try:
        validated = [
            RawTask.model_validate(item) for item in raw_tasks[: config.RETROPLANNING_MAX_TASKS]
        ]
    except PydanticValidationError as e:
        raise RetroplanningGenerationError(
            f"La réponse IA ne contient pas de tâches valides: {e.error_count()} erreur(s)"
        ) from e

    stubs = []
    for index, task in enumerate(validated):
        stubs.append(
            {
                "id": (task.id or "").strip() or str(uuid.uuid4()),
                "label": task.label,
                "duration_days": max(1, round_half_up(task.duration_days)),
                "color": task.color
                if task.color in TASK_COLORS
                else TASK_COLORS[index % len(TASK_COLORS)],
            }
        )
    return stubs


def build_user_prompt(brief_content: str, deadline: str, client_name: str | None = None) -> str:
    client_label = f"Client : {client_name.strip()}\n" if client_name and client_name.strip() else ""
    brief = brief_content[: config.BRIEF_MAX_CHARS]
    return (
        f"{client_label}Date de livraison finale : {deadline}\n\n"
        f"Contenu du brief :\n{brief}\n\n"
        "Génère le retroplanning pour ce projet."
    )


def _response_text(message) -> str:
    for block in message.content:
        if getattr(block, "type", None) == "text":
            return block.text
    raise RetroplanningGenerationError("Réponse IA vide.")


def generate_retroplanning(
    brief_content: str | None,
    deadline: str | None,
    client_name: str | None = None,
    client: anthropic.Anthropic | None = None,
) -> RetroplanningGeneration:
    """
    Generate a dated retroplanning for a brief.

    *client* is an Anthropic client; one is built from ANTHROPIC_API_KEY
    when omitted. Raises ConfigurationError without a key, InputError for
    a blank brief or deadline, RetroplanningGenerationError when the model
    call fails or its answer holds no usable steps.
    """
    if client is None and not config.ANTHROPIC_API_KEY:
        raise ConfigurationError("ANTHROPIC_API_KEY manquante.")
    if not brief_content or not brief_content.strip():
        raise InputError("briefContent est requis.")
    if not deadline or not deadline.strip():
        raise InputError("deadline est requis (format YYYY-MM-DD).")

    deadline = deadline.strip()
    try:
        deadline_day = to_utc_day(deadline)
    except ValueError as e:
        raise InputError("deadline est requis (format YYYY-MM-DD).") from e

    if client is None:
        client = anthropic.Anthropic(api_key=config.ANTHROPIC_API_KEY)

    logger.info(
        "Generating retroplanning (deadline=%s, brief_chars=%d)", deadline, len(brief_content)
    )
    try:
        message = client.messages.create(
            model=config.ANTHROPIC_MODEL,
            max_tokens=config.RETROPLANNING_MAX_TOKENS,
            temperature=config.RETROPLANNING_TEMPERATURE,
            system=SYSTEM_PROMPT,
            messages=[
                {"role": "user", "content": build_user_prompt(brief_content, deadline, client_name)}
            ],
        )
    except anthropic.APIError as e:
        detail = get_error_message(e)
        logger.warning("Anthropic call failed: %s", detail)
        raise RetroplanningGenerationError(f"Appel IA échoué: {detail}") from e

    stubs = normalize_tasks(extract_tasks_from_response(_response_text(message)))
    tasks = compute_dates_from_deadline(stubs, deadline_day)
    cost = cost_from_usage(getattr(message, "usage", None))

    logger.info(
        "Retroplanning generated: %d tasks, %d/%d tokens",
        len(tasks),
        cost.input_tokens,
        cost.output_tokens,
    )
    return RetroplanningGeneration(
        deadline=deadline_day.isoformat(),
        tasks=tasks,
        model=config.ANTHROPIC_MODEL,
        cost=cost,
    )
