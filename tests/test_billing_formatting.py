"""
Tests for euro formatting, rounding helpers and billing labels.
"""

import pytest

from lib.billing import PROJECT_BILLING_COLORS, PROJECT_BILLING_LABELS, format_euro
from lib.billing.formatting import GROUP_SEPARATOR
from lib.billing.labels import BILLING_STATUS_LABELS, project_billing_style
from lib.billing.project_billing import ProjectBillingStatus
from lib.entities import BillingStatus
from lib.numbers import round_half_away, round_half_up

NNBSP = "\u202f"


# =============================================================================
# format_euro
# =============================================================================


class TestFormatEuro:
    """Whole euros with fr-FR grouping."""

    def test_group_separator_is_narrow_nbsp(self):
        assert GROUP_SEPARATOR == NNBSP

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (0, "0 €"),
            (999, "999 €"),
            (1234.0, f"1{NNBSP}234 €"),
            (1234567, f"1{NNBSP}234{NNBSP}567 €"),
            (1234.5, f"1{NNBSP}235 €"),
            (1234.49, f"1{NNBSP}234 €"),
        ],
    )
    def test_formats(self, amount, expected):
        assert format_euro(amount) == expected

    def test_negative_rounds_away_from_zero(self):
        assert format_euro(-1234.5) == f"-1{NNBSP}235 €"

    def test_small_negative_rounding_to_zero_has_no_sign(self):
        assert format_euro(-0.4) == "0 €"


# =============================================================================
# Rounding helpers
# =============================================================================


class TestRounding:
    @pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4, 2), (-2.5, -2), (12.5, 13)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (-2.5, -3), (0.5, 1), (2.4, 2)])
    def test_round_half_away(self, value, expected):
        assert round_half_away(value) == expected


# =============================================================================
# Labels
# =============================================================================


class TestBillingLabels:
    """Every status has a French label and colour classes."""

    def test_every_project_status_labelled(self):
        for status in ProjectBillingStatus:
            assert status.value in PROJECT_BILLING_LABELS
            assert status.value in PROJECT_BILLING_COLORS

    def test_project_labels(self):
        assert PROJECT_BILLING_LABELS["none"] == "Pas de devis"
        assert PROJECT_BILLING_LABELS["balanced"] == "Soldé"

    def test_every_deliverable_status_labelled(self):
        assert set(BILLING_STATUS_LABELS) == {s.value for s in BillingStatus}

    def test_project_billing_style(self):
        style = project_billing_style(ProjectBillingStatus.DEPOSIT)
        assert style.label == "Acompte"
        assert "accent-amber" in style.bg
        assert "accent-amber" in style.text

    def test_project_billing_style_accepts_string(self):
        assert project_billing_style("quoted").label == "Devisé"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            project_billing_style("paid")
