"""
Property-based tests for core invariants using Hypothesis.

These tests stress billing, scheduling and formatting invariants with
random inputs to find edge cases.
"""

from datetime import date, timedelta

from hypothesis import given, settings
from hypothesis import strategies as st

from lib.billing import ProjectBillingStatus, compute_project_billing, format_euro
from lib.entities import TASK_COLORS, Deliverable, DeliverableStatus, Project
from lib.numbers import round_half_away
from lib.production_rules import DeliverableContext, can_transition_status
from lib.retroplanning import compute_dates_from_deadline, days_between
from lib.sections import ensure_section_ids

amounts = st.floats(min_value=0, max_value=1_000_000, allow_nan=False, allow_infinity=False)
quotes = st.floats(min_value=0.01, max_value=1_000_000, allow_nan=False, allow_infinity=False)
deadlines = st.dates(min_value=date(2000, 1, 1), max_value=date(2100, 12, 31))


def make_project(quote, deposit, progress):
    return Project(
        id="p",
        client_id="c",
        name="P",
        quote_amount=quote,
        deposit_amount=deposit,
        progress_amounts=progress,
    )


# ============================================================================
# Project billing
# ============================================================================


@given(quote=quotes, deposit=amounts, progress=st.lists(amounts, max_size=5),
       invoiced=st.lists(amounts, max_size=5))
@settings(max_examples=200)
def test_billing_totals_consistent(quote, deposit, progress, invoiced):
    """Non-negative payments: percent in [0, 100], remaining never negative."""
    project = make_project(quote, deposit, progress)
    deliverables = [
        Deliverable(id=f"d{i}", name="D", project_id="p", total_invoiced=v)
        for i, v in enumerate(invoiced)
    ]
    info = compute_project_billing(project, deliverables)

    assert 0 <= info.progress_percent <= 100
    assert info.remaining >= 0
    assert info.status != ProjectBillingStatus.NONE
    assert info == compute_project_billing(project, deliverables)


@given(quote=quotes, deposit=amounts)
def test_balanced_iff_remaining_within_tolerance(quote, deposit):
    info = compute_project_billing(make_project(quote, deposit, []), [])
    assert (info.status == ProjectBillingStatus.BALANCED) == (info.remaining <= 0.01)


@given(quote=quotes, deposit=amounts)
def test_remaining_is_floored_shortfall(quote, deposit):
    # Balanced projects may still show a sub-cent remaining
    info = compute_project_billing(make_project(quote, deposit, []), [])
    assert info.remaining == max(0, quote - info.total_paid)


@given(quote=st.one_of(st.none(), st.floats(max_value=0, allow_nan=False)), deposit=amounts)
def test_no_positive_quote_is_none(quote, deposit):
    info = compute_project_billing(make_project(quote, deposit, [deposit]), [])
    assert info.status == ProjectBillingStatus.NONE
    assert info.total_paid == 0


# ============================================================================
# Retroplanning
# ============================================================================


@given(durations=st.lists(st.integers(min_value=1, max_value=60), max_size=12), deadline=deadlines)
@settings(max_examples=200)
def test_schedule_contiguous_and_ends_on_deadline(durations, deadline):
    stubs = [
        {"id": f"s{i}", "label": f"S{i}", "duration_days": d, "color": TASK_COLORS[i % 6]}
        for i, d in enumerate(durations)
    ]
    tasks = compute_dates_from_deadline(stubs, deadline)

    assert len(tasks) == len(durations)
    if not tasks:
        return
    assert tasks[-1].end_date == deadline.isoformat()
    for task, duration in zip(tasks, durations, strict=True):
        assert days_between(task.start_date, task.end_date) == duration
    for earlier, later in zip(tasks, tasks[1:], strict=False):
        gap = date.fromisoformat(later.start_date) - date.fromisoformat(earlier.end_date)
        assert gap == timedelta(days=1)
    total = sum(durations)
    assert date.fromisoformat(tasks[0].start_date) == deadline - timedelta(days=total - 1)


# ============================================================================
# Formatting and rounding
# ============================================================================


@given(st.floats(min_value=-1e9, max_value=1e9, allow_nan=False))
def test_round_half_away_is_symmetric(value):
    assert round_half_away(-value) == -round_half_away(value)


@given(st.floats(min_value=-1e9, max_value=1e9, allow_nan=False))
def test_format_euro_reads_back(value):
    text = format_euro(value)
    assert text.endswith(" €")
    digits = text[: -len(" €")].replace("\u202f", "")
    assert int(digits) == round_half_away(value)


# ============================================================================
# Rules and sections
# ============================================================================


@given(
    status=st.sampled_from([s.value for s in DeliverableStatus]),
    price=st.one_of(st.none(), amounts),
    quote=st.one_of(st.none(), amounts),
)
def test_staying_in_place_always_allowed(status, price, quote):
    ctx = DeliverableContext(status=status, prix_facture=price, project_quote_amount=quote)
    assert can_transition_status(ctx, status).allowed


@given(st.lists(st.one_of(st.none(), st.text(min_size=1, max_size=8)), max_size=10))
def test_section_ids_kept_or_generated(ids):
    sections = [{"role": "hero", **({"id": i} if i else {})} for i in ids]
    result = ensure_section_ids(sections)
    for original, out in zip(sections, result, strict=True):
        if original.get("id"):
            assert out["id"] == original["id"]
        else:
            assert out["id"]
