"""
Tests for project billing status derivation.

Tests cover:
- Reference scenarios (quoted, deposit, progress, balanced)
- No quote / zero quote / negative quote
- Deliverables of other projects are ignored
- Rule order (deposit + progress resolves to progress)
- Tolerance on remaining
- Overpayment: remaining floored, total_paid not clamped
- Percent rounding (half up) and cap at 100
"""

import pytest

from lib.billing import ProjectBillingStatus, compute_project_billing
from lib.billing.project_billing import NO_QUOTE, STATUS_RULES
from lib.entities import Deliverable, Project


def make_project(quote=None, deposit=None, progress=None, project_id="proj-1") -> Project:
    return Project(
        id=project_id,
        client_id="client-1",
        name="Projet",
        quote_amount=quote,
        deposit_amount=deposit,
        progress_amounts=list(progress or []),
    )


def make_deliverable(total_invoiced, project_id="proj-1", deliverable_id="deliv-1") -> Deliverable:
    return Deliverable(
        id=deliverable_id, name="Produit", project_id=project_id, total_invoiced=total_invoiced
    )


# =============================================================================
# Reference scenarios
# =============================================================================


class TestReferenceScenarios:
    """The four reference projects with a 1000 EUR quote."""

    def test_quoted_nothing_paid(self):
        info = compute_project_billing(make_project(1000, 0), [])
        assert info.status == ProjectBillingStatus.QUOTED
        assert info.total_paid == 0
        assert info.remaining == 1000
        assert info.progress_percent == 0

    def test_deposit_only(self):
        info = compute_project_billing(make_project(1000, 300), [])
        assert info.status == ProjectBillingStatus.DEPOSIT
        assert info.total_paid == 300
        assert info.remaining == 700
        assert info.progress_percent == 30

    def test_deposit_and_progress(self):
        info = compute_project_billing(make_project(1000, 300, [400]), [])
        assert info.status == ProjectBillingStatus.PROGRESS
        assert info.total_paid == 700
        assert info.remaining == 300
        assert info.progress_percent == 70

    def test_fully_paid(self):
        info = compute_project_billing(make_project(1000, 300, [700]), [])
        assert info.status == ProjectBillingStatus.BALANCED
        assert info.total_paid == 1000
        assert info.remaining == 0
        assert info.progress_percent == 100


# =============================================================================
# No quote
# =============================================================================


class TestNoQuote:
    """Projects without a positive quote are 'none' with zeroed totals."""

    @pytest.mark.parametrize("quote", [None, 0, -50])
    def test_no_positive_quote(self, quote):
        info = compute_project_billing(make_project(quote, 300, [200]), [make_deliverable(100)])
        assert info == NO_QUOTE
        assert info.status == ProjectBillingStatus.NONE

    def test_to_dict_uses_status_value(self):
        data = NO_QUOTE.to_dict()
        assert data["status"] == "none"
        assert data["total_paid"] == 0
        assert data["progress_percent"] == 0


# =============================================================================
# Deliverables
# =============================================================================


class TestDeliverables:
    """Invoiced products count towards the project they belong to."""

    def test_product_invoices_only_is_progress(self):
        info = compute_project_billing(make_project(2000), [make_deliverable(500)])
        assert info.status == ProjectBillingStatus.PROGRESS
        assert info.total_product_invoiced == 500
        assert info.total_project_payments == 0
        assert info.total_paid == 500
        assert info.progress_percent == 25

    def test_other_projects_ignored(self):
        deliverables = [
            make_deliverable(500, project_id="proj-other"),
            make_deliverable(200, project_id=None, deliverable_id="deliv-2"),
        ]
        info = compute_project_billing(make_project(1000), deliverables)
        assert info.status == ProjectBillingStatus.QUOTED
        assert info.total_product_invoiced == 0

    def test_missing_total_invoiced_counts_as_zero(self):
        info = compute_project_billing(make_project(1000), [make_deliverable(None)])
        assert info.total_product_invoiced == 0
        assert info.status == ProjectBillingStatus.QUOTED

    def test_products_can_balance_a_project(self):
        deliverables = [
            make_deliverable(600),
            make_deliverable(400, deliverable_id="deliv-2"),
        ]
        info = compute_project_billing(make_project(1000), deliverables)
        assert info.status == ProjectBillingStatus.BALANCED

    def test_inputs_not_mutated(self):
        project = make_project(1000, 300, [100, 200])
        deliverables = [make_deliverable(50)]
        compute_project_billing(project, deliverables)
        assert project.progress_amounts == [100, 200]
        assert deliverables[0].total_invoiced == 50


# =============================================================================
# Rule order and edge cases
# =============================================================================


class TestStatusRules:
    """Ordered decision table: first match wins."""

    def test_rule_order(self):
        statuses = [status for _, status in STATUS_RULES]
        assert statuses == [
            ProjectBillingStatus.BALANCED,
            ProjectBillingStatus.PROGRESS,
            ProjectBillingStatus.DEPOSIT,
            ProjectBillingStatus.PROGRESS,
        ]

    def test_progress_without_deposit(self):
        info = compute_project_billing(make_project(1000, None, [200]), [])
        assert info.status == ProjectBillingStatus.PROGRESS

    def test_deposit_with_product_invoice_is_deposit(self):
        info = compute_project_billing(make_project(1000, 300), [make_deliverable(100)])
        assert info.status == ProjectBillingStatus.DEPOSIT
        assert info.total_paid == 400

    def test_remaining_within_tolerance_is_balanced(self):
        info = compute_project_billing(make_project(1000, 999.995), [])
        assert info.status == ProjectBillingStatus.BALANCED
        assert info.progress_percent == 100
        # Balanced within the tolerance, but remaining is the exact shortfall
        assert info.remaining == 1000 - 999.995
        assert 0 < info.remaining <= 0.01

    def test_remaining_above_tolerance_is_not_balanced(self):
        info = compute_project_billing(make_project(1000, 999.5), [])
        assert info.status == ProjectBillingStatus.DEPOSIT

    def test_overpaid_remaining_floored_total_not_clamped(self):
        info = compute_project_billing(make_project(1000, 600, [600]), [])
        assert info.status == ProjectBillingStatus.BALANCED
        assert info.remaining == 0
        assert info.total_paid == 1200
        assert info.progress_percent == 100

    def test_negative_amounts_propagate(self):
        info = compute_project_billing(make_project(1000, -100), [])
        assert info.total_paid == -100
        assert info.remaining == 1100
        assert info.status == ProjectBillingStatus.QUOTED

    def test_percent_rounds_half_up(self):
        # 1/8 = 12.5% -> 13
        info = compute_project_billing(make_project(800, 100), [])
        assert info.progress_percent == 13

    def test_idempotent(self):
        project = make_project(1000, 300, [400])
        deliverables = [make_deliverable(50)]
        assert compute_project_billing(project, deliverables) == compute_project_billing(
            project, deliverables
        )

    def test_amounts_added_left_to_right(self):
        info = compute_project_billing(make_project(1000, None, [0.1, 0.2, 0.3]), [])
        assert info.total_project_payments == 0 + 0.1 + 0.2 + 0.3
        assert info.total_project_payments == 0.6000000000000001

    def test_product_invoices_added_left_to_right(self):
        deliverables = [
            make_deliverable(0.1),
            make_deliverable(0.2, deliverable_id="deliv-2"),
            make_deliverable(0.3, deliverable_id="deliv-3"),
        ]
        info = compute_project_billing(make_project(1000), deliverables)
        assert info.total_product_invoiced == 0.6000000000000001
