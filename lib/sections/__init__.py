"""Section roles, layouts and typed section content."""

from .content import ensure_section_ids, generate_section_id, parse_section_content
from .registry import (
    ROLE_SIMILARITY_MAP,
    SECTION_ROLES,
    SECTION_TO_LAYOUT,
    LayoutMatch,
    get_layout_for_role,
    get_layout_for_role_with_fallback,
    is_valid_section_role,
)

__all__ = [
    "ROLE_SIMILARITY_MAP",
    "SECTION_ROLES",
    "SECTION_TO_LAYOUT",
    "LayoutMatch",
    "ensure_section_ids",
    "generate_section_id",
    "get_layout_for_role",
    "get_layout_for_role_with_fallback",
    "is_valid_section_role",
    "parse_section_content",
]
