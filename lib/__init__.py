# YAM Dashboard - Core Library
"""
Billing, retroplanning, production rules and the SQLite state store
shared by the API server and the CLI.
"""

from .billing import compute_project_billing, format_euro
from .production_rules import can_transition_status, compute_status_cascade
from .retroplanning import compute_dates_from_deadline
from .state_store import get_store

__all__ = [
    "can_transition_status",
    "compute_dates_from_deadline",
    "compute_project_billing",
    "compute_status_cascade",
    "format_euro",
    "get_store",
]
