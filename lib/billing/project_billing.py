"""
Project billing computation.

Derives a project's billing status and totals from its quote, its
project-level payments (deposit + progress payments) and the amounts
invoiced on its deliverables. Nothing here is persisted: the status is
recomputed every time it is shown.
"""

import operator
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass
from enum import Enum
from functools import reduce

from lib import config
from lib.entities import Deliverable, Project
from lib.numbers import round_half_up


class ProjectBillingStatus(str, Enum):
    NONE = "none"
    QUOTED = "quoted"
    DEPOSIT = "deposit"
    PROGRESS = "progress"
    BALANCED = "balanced"


@dataclass(frozen=True)
class ProjectBillingInfo:
    status: ProjectBillingStatus
    total_product_invoiced: float
    total_project_payments: float
    total_paid: float
    remaining: float
    progress_percent: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


NO_QUOTE = ProjectBillingInfo(
    status=ProjectBillingStatus.NONE,
    total_product_invoiced=0,
    total_project_payments=0,
    total_paid=0,
    remaining=0,
    progress_percent=0,
)


@dataclass(frozen=True)
class _Totals:
    deposit: float
    progress: float
    product_invoiced: float
    paid: float
    remaining: float


# Evaluated top to bottom, first match wins. A project with a deposit and a
# progress payment is "progress" even though it also satisfies "deposit".
STATUS_RULES: list[tuple[Callable[[_Totals], bool], ProjectBillingStatus]] = [
    (lambda t: t.remaining <= config.BALANCE_TOLERANCE, ProjectBillingStatus.BALANCED),
    (lambda t: t.paid > 0 and t.deposit > 0 and t.progress > 0, ProjectBillingStatus.PROGRESS),
    (lambda t: t.paid > 0 and t.deposit > 0, ProjectBillingStatus.DEPOSIT),
    (lambda t: t.product_invoiced > 0 or t.progress > 0, ProjectBillingStatus.PROGRESS),
]


def _add_up(amounts: Iterable[float]) -> float:
    """Plain left-to-right float addition (no compensated summation)."""
    return reduce(operator.add, amounts, 0)


def derive_status(totals: _Totals) -> ProjectBillingStatus:
    for predicate, status in STATUS_RULES:
        if predicate(totals):
            return status
    return ProjectBillingStatus.QUOTED


def compute_project_billing(
    project: Project, deliverables: Iterable[Deliverable]
) -> ProjectBillingInfo:
    """
    Billing status and totals of *project*.

    *deliverables* may contain deliverables of other projects; only those
    whose ``project_id`` matches are counted. Amounts are not validated:
    negative values flow into ``total_paid``, only ``remaining`` is floored.
    """
    quote = project.quote_amount
    if not quote or quote <= 0:
        return NO_QUOTE

    product_invoiced = _add_up(
        (d.total_invoiced or 0) for d in deliverables if d.project_id == project.id
    )
    deposit = project.deposit_amount or 0
    progress = _add_up(project.progress_amounts or [])
    project_payments = deposit + progress

    paid = project_payments + product_invoiced
    remaining = max(0, quote - paid)
    percent = min(100, round_half_up(paid / quote * 100))

    totals = _Totals(
        deposit=deposit,
        progress=progress,
        product_invoiced=product_invoiced,
        paid=paid,
        remaining=remaining,
    )
    return ProjectBillingInfo(
        status=derive_status(totals),
        total_product_invoiced=product_invoiced,
        total_project_payments=project_payments,
        total_paid=paid,
        remaining=remaining,
        progress_percent=percent,
    )
