"""
Section role registry.

Maps each section role produced by the page-structure agents to the layout
that renders it, and resolves the aliases the agents commonly emit
("testimonials", "about", ...) to a known role.
"""

from dataclasses import asdict, dataclass

SECTION_TO_LAYOUT: dict[str, str] = {
    "navbar": "LayoutNavbar",
    "hero": "LayoutHero",
    "value_proposition": "LayoutValueProp",
    "services_teaser": "LayoutServicesTeaser",
    "solutions_overview": "LayoutServicesTeaser",
    "features": "LayoutFeatures",
    "social_proof": "LayoutSocialProof",
    "testimonial": "LayoutTestimonial",
    "pricing": "LayoutPricing",
    "faq": "LayoutFaq",
    "cta_final": "LayoutCtaFinal",
    "contact_form": "LayoutContactForm",
    "footer": "LayoutFooter",
}

SECTION_ROLES = tuple(SECTION_TO_LAYOUT)

# Lowercase alias -> role
ROLE_SIMILARITY_MAP: dict[str, str] = {
    "about": "value_proposition",
    "team": "social_proof",
    "our_services": "services_teaser",
    "service_list": "services_teaser",
    "testimonials": "testimonial",
    "reviews": "testimonial",
    "stats": "features",
    "numbers": "features",
    "process": "features",
    "methodology": "features",
    "portfolio": "social_proof",
    "case_studies": "social_proof",
    "contact": "contact_form",
    "cta": "cta_final",
    "call_to_action": "cta_final",
}


@dataclass(frozen=True)
class LayoutMatch:
    layout: str | None
    matched: str | None
    is_exact: bool

    def to_dict(self) -> dict:
        return asdict(self)


NO_MATCH = LayoutMatch(layout=None, matched=None, is_exact=False)


def get_layout_for_role_with_fallback(role: str) -> LayoutMatch:
    """
    Resolve *role* to a layout.

    An exact role wins; otherwise the lowercased role is looked up in the
    alias map. Exact matching is case-sensitive.
    """
    if role in SECTION_TO_LAYOUT:
        return LayoutMatch(layout=SECTION_TO_LAYOUT[role], matched=role, is_exact=True)

    mapped = ROLE_SIMILARITY_MAP.get(role.lower())
    if mapped is not None:
        return LayoutMatch(layout=SECTION_TO_LAYOUT[mapped], matched=mapped, is_exact=False)

    return NO_MATCH


def get_layout_for_role(role: str) -> str | None:
    """Exact lookup only."""
    return SECTION_TO_LAYOUT.get(role)


def is_valid_section_role(role: str) -> bool:
    return role in SECTION_TO_LAYOUT
