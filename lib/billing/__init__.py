"""
Billing: derived project status, labels, euro formatting, and the
per-deliverable billing history.
"""

from .formatting import format_euro
from .labels import PROJECT_BILLING_COLORS, PROJECT_BILLING_LABELS
from .project_billing import (
    ProjectBillingInfo,
    ProjectBillingStatus,
    compute_project_billing,
)

__all__ = [
    "PROJECT_BILLING_COLORS",
    "PROJECT_BILLING_LABELS",
    "ProjectBillingInfo",
    "ProjectBillingStatus",
    "compute_project_billing",
    "format_euro",
]
