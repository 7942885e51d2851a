"""
Centralized configuration for the YAM dashboard.

All hardcoded values that vary by deployment belong here.
Override via environment variables where marked.
"""

import os

# ============================================================
# Anthropic
# ============================================================

ANTHROPIC_API_KEY: str | None = os.environ.get("ANTHROPIC_API_KEY")
"""API key for retroplanning generation. Generation endpoints fail with 500 when unset."""

ANTHROPIC_MODEL: str = os.environ.get("YAM_ANTHROPIC_MODEL", "claude-sonnet-4-6")
"""Model used for document and planning generation."""

RETROPLANNING_MAX_TOKENS: int = int(os.environ.get("YAM_RETROPLANNING_MAX_TOKENS", "2000"))
RETROPLANNING_TEMPERATURE: float = float(os.environ.get("YAM_RETROPLANNING_TEMPERATURE", "0.5"))

BRIEF_MAX_CHARS: int = 6000
"""Briefs sent to the model are truncated to this many characters."""

RETROPLANNING_MAX_TASKS: int = 10

# ============================================================
# Generation cost (USD per million tokens)
# ============================================================

PRICE_INPUT_PER_M: float = float(os.environ.get("YAM_PRICE_INPUT_PER_M", "3"))
PRICE_OUTPUT_PER_M: float = float(os.environ.get("YAM_PRICE_OUTPUT_PER_M", "15"))

# ============================================================
# Billing
# ============================================================

BALANCE_TOLERANCE: float = 0.01
"""Remaining amounts at or below this are treated as fully paid."""

# ============================================================
# HTTP / logging
# ============================================================

CORS_ORIGINS: list[str] = [
    o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()
]
"""Allowed origins. "*" in development."""

LOG_LEVEL: str = os.environ.get("YAM_LOG_LEVEL", "INFO")

LOG_JSON: bool | None = (
    None if "YAM_LOG_JSON" not in os.environ else os.environ["YAM_LOG_JSON"] == "1"
)
"""Force JSON logs (1) or human logs (0). Unset = auto-detect from TTY."""

LOG_FILE: str | None = os.environ.get("YAM_LOG_FILE")

API_HOST: str = os.environ.get("YAM_API_HOST", "127.0.0.1")
API_PORT: int = int(os.environ.get("YAM_API_PORT", "8420"))
