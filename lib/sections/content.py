"""
Typed section content.

Agents return section content as loose JSON. It is parsed once, here, into
typed models carrying the preview defaults, so renderers never have to poke at
for missing keys. Only absent or null keys fall back to a default; an empty
string is kept as written.
"""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from lib.sections.registry import get_layout_for_role_with_fallback


class _Content(BaseModel):
    model_config = ConfigDict(extra="ignore")


def _first(data: dict, *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _get(data: dict, key: str, default: str) -> Any:
    value = data.get(key)
    return default if value is None else value


def _items(data: dict, key: str = "items") -> list:
    raw = data.get(key)
    return raw if isinstance(raw, list) else []


class Cta(_Content):
    label: str
    url: str = "#"

    @classmethod
    def parse(cls, raw: Any, default_label: str) -> "Cta | None":
        if not isinstance(raw, dict):
            return None
        return cls(label=_get(raw, "label", default_label), url=_get(raw, "url", "#"))


# ============================================================
# Per-layout content
# ============================================================


class HeroContent(_Content):
    title: str = "Titre principal accrocheur"
    text: str = "Sous-titre ou proposition de valeur en une phrase."
    cta_primary: Cta | None = None
    cta_secondary: Cta | None = None

    @model_validator(mode="before")
    @classmethod
    def _fallbacks(cls, data):
        if not isinstance(data, dict):
            return {}
        out = {}
        title = _first(data, "title", "section_title")
        if title is not None:
            out["title"] = title
        text = _first(data, "subtitle", "text")
        if text is not None:
            out["text"] = text
        out["cta_primary"] = Cta.parse(data.get("cta_primary"), "Action principale")
        out["cta_secondary"] = Cta.parse(data.get("cta_secondary"), "En savoir plus")
        return out


class ValuePropContent(_Content):
    title: str = "Proposition de valeur"
    text: str = "Description de la section. Contenu générique pour prévisualisation."
    cta_primary: Cta | None = None
    cta_secondary: Cta | None = None

    @model_validator(mode="before")
    @classmethod
    def _fallbacks(cls, data):
        if not isinstance(data, dict):
            return {}
        out = {k: data[k] for k in ("title", "text") if data.get(k) is not None}
        out["cta_primary"] = Cta.parse(data.get("cta_primary"), "Découvrir")
        out["cta_secondary"] = Cta.parse(data.get("cta_secondary"), "En savoir plus")
        return out


class CtaFinalContent(_Content):
    title: str = "Prêt à commencer ?"
    text: str = "Dernier appel à l'action."
    cta_primary: Cta | None = None
    cta_secondary: Cta | None = None

    @model_validator(mode="before")
    @classmethod
    def _fallbacks(cls, data):
        if not isinstance(data, dict):
            return {}
        out = {k: data[k] for k in ("title", "text") if data.get(k) is not None}
        out["cta_primary"] = Cta.parse(data.get("cta_primary"), "Action principale")
        out["cta_secondary"] = Cta.parse(data.get("cta_secondary"), "En savoir plus")
        return out


class ServiceItem(_Content):
    title: str = "Service"
    desc: str = ""
    href: str = "#"


class ServicesTeaserContent(_Content):
    title: str = "Nos services"
    text: str = "Résumé des offres, liens vers les pages du menu."
    items: list[ServiceItem] = []

    @model_validator(mode="before")
    @classmethod
    def _fallbacks(cls, data):
        if not isinstance(data, dict):
            return {}
        out = {k: data[k] for k in ("title", "text") if data.get(k) is not None}
        out["items"] = [
            {
                "title": _get(i, "title", "Service"),
                "desc": _get(i, "text", ""),
                "href": _get(i, "url", "#"),
            }
            for i in _items(data)
            if isinstance(i, dict)
        ]
        return out


class FeatureItem(_Content):
    title: str = "—"
    desc: str = ""


class FeaturesContent(_Content):
    title: str = "Fonctionnalités"
    text: str = "Liste des principales fonctionnalités ou avantages."
    items: list[FeatureItem] = []

    @model_validator(mode="before")
    @classmethod
    def _fallbacks(cls, data):
        if not isinstance(data, dict):
            return {}
        out = {k: data[k] for k in ("title", "text") if data.get(k) is not None}
        out["items"] = [
            {"title": _get(i, "title", "—"), "desc": _get(i, "text", "")}
            for i in _items(data)
            if isinstance(i, dict)
        ]
        return out


class Quote(_Content):
    text: str = ""
    author: str = "—"
    role: str = ""


class TestimonialContent(_Content):
    title: str = "Témoignages"
    quotes: list[Quote] = []

    @model_validator(mode="before")
    @classmethod
    def _fallbacks(cls, data):
        if not isinstance(data, dict):
            return {}
        raw = data.get("quotes")
        if raw is None and isinstance(data.get("single_quote"), dict):
            raw = [data["single_quote"]]
        out = {"title": data["title"]} if data.get("title") is not None else {}
        out["quotes"] = [
            {
                "text": _get(q, "text", ""),
                "author": _get(q, "author_name", "—"),
                "role": _get(q, "role", ""),
            }
            for q in (raw if isinstance(raw, list) else [])
            if isinstance(q, dict)
        ]
        return out


class FaqItem(_Content):
    question: str = "?"
    answer: str = ""


DEFAULT_FAQ = [
    FaqItem(question="Question fréquente 1 ?", answer="Réponse courte. Contenu générique pour prévisualisation."),
    FaqItem(question="Question fréquente 2 ?", answer="Réponse courte. Description de la section."),
    FaqItem(question="Question fréquente 3 ?", answer="Réponse courte. Contenu neutre."),
]


class FaqContent(_Content):
    title: str = "Questions fréquentes"
    items: list[FaqItem] = []

    @model_validator(mode="before")
    @classmethod
    def _fallbacks(cls, data):
        if not isinstance(data, dict):
            return {}
        out = {"title": data["title"]} if data.get("title") is not None else {}
        items = [
            {"question": _get(i, "question", "?"), "answer": _get(i, "answer", "")}
            for i in _items(data)
            if isinstance(i, dict)
        ]
        out["items"] = items or [item.model_dump() for item in DEFAULT_FAQ]
        return out


class GenericContent(_Content):
    """Layouts that render fixed preview content; only title and text are carried."""

    title: str | None = None
    text: str | None = None


CONTENT_MODELS: dict[str, type[_Content]] = {
    "LayoutHero": HeroContent,
    "LayoutValueProp": ValuePropContent,
    "LayoutServicesTeaser": ServicesTeaserContent,
    "LayoutFeatures": FeaturesContent,
    "LayoutTestimonial": TestimonialContent,
    "LayoutFaq": FaqContent,
    "LayoutCtaFinal": CtaFinalContent,
}


def parse_section_content(role: str, content: dict | None) -> _Content:
    """
    Parse *content* for the layout that renders *role*.

    Aliased roles resolve like the registry does; unknown roles and layouts
    with fixed preview content parse to ``GenericContent``.
    """
    match = get_layout_for_role_with_fallback(role)
    model = CONTENT_MODELS.get(match.layout or "", GenericContent)
    return model.model_validate(content or {})


# ============================================================
# Section identity
# ============================================================


def generate_section_id() -> str:
    return str(uuid.uuid4())


def ensure_section_ids(sections: list[dict]) -> list[dict]:
    """Copy of *sections* where every section has an ``id``. Existing ids are kept."""
    return [s if s.get("id") else {**s, "id": generate_section_id()} for s in sections]
