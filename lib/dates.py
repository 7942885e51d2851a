"""
Calendar-day arithmetic and fr-FR display formatting.

Two families live here:

- UTC calendar-day helpers used by the retroplanning scheduler. Any input
  (date, datetime, ISO string) is truncated to its UTC calendar day before
  arithmetic, so results never depend on the server timezone or DST.
- Display helpers producing the French strings shown in the dashboard
  ("samedi 14 février 2026", "14 févr.", "09:05").
"""

import math
from datetime import UTC, date, datetime, time, timedelta

DAY = timedelta(days=1)

MONTHS = [
    "janvier",
    "février",
    "mars",
    "avril",
    "mai",
    "juin",
    "juillet",
    "août",
    "septembre",
    "octobre",
    "novembre",
    "décembre",
]
MONTHS_SHORT = [
    "janv.",
    "févr.",
    "mars",
    "avr.",
    "mai",
    "juin",
    "juil.",
    "août",
    "sept.",
    "oct.",
    "nov.",
    "déc.",
]
WEEKDAYS = ["lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"]
WEEKDAYS_SHORT = ["lun.", "mar.", "mer.", "jeu.", "ven.", "sam.", "dim."]

DateLike = date | datetime | str


# ============================================================
# UTC calendar days
# ============================================================


def _parse_iso(value: str) -> date | datetime:
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def to_utc_datetime(value: DateLike) -> datetime:
    """Return an aware UTC datetime. Naive values and bare dates are taken as UTC."""
    if isinstance(value, str):
        value = _parse_iso(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    return datetime.combine(value, time.min, tzinfo=UTC)


def to_utc_day(value: DateLike) -> date:
    """Truncate a date, datetime or ISO string to its UTC calendar day."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return to_utc_datetime(value).date()


def format_calendar_day(value: DateLike) -> str:
    """YYYY-MM-DD for the UTC calendar day of *value*."""
    return to_utc_day(value).isoformat()


def add_days(value: DateLike, days: int) -> date:
    return to_utc_day(value) + timedelta(days=days)


def days_between(start: DateLike, end: DateLike) -> int:
    """
    Inclusive number of calendar days from *start* to *end*.

    Computed as round((end - start) / 1 day) + 1 with half-up rounding, so
    days_between("2025-03-06", "2025-03-10") == 5 and a same-day range is 1.
    Used to size Gantt bars.
    """
    delta = to_utc_datetime(end) - to_utc_datetime(start)
    return math.floor(delta / DAY + 0.5) + 1


# ============================================================
# fr-FR display
# ============================================================


def format_date(value: date) -> str:
    """Day and short month, e.g. "14 févr."."""
    return f"{value.day} {MONTHS_SHORT[value.month - 1]}"


def format_date_long(value: date) -> str:
    """e.g. "samedi 14 février 2026"."""
    return (
        f"{WEEKDAYS[value.weekday()]} {value.day} {MONTHS[value.month - 1]} {value.year}"
    )


def format_date_short(value: date) -> str:
    """e.g. "sam. 14 févr."."""
    return f"{WEEKDAYS_SHORT[value.weekday()]} {value.day} {MONTHS_SHORT[value.month - 1]}"


def format_header_date(value: date) -> str:
    """e.g. "samedi 14 février"."""
    return f"{WEEKDAYS[value.weekday()]} {value.day} {MONTHS[value.month - 1]}"


def format_time(value: datetime | time) -> str:
    return value.strftime("%H:%M")


def format_date_for_input(value: DateLike) -> str:
    """Value for an <input type="date">."""
    return format_calendar_day(value)


def is_same_day(a: date, b: date) -> bool:
    a_day = a.date() if isinstance(a, datetime) else a
    b_day = b.date() if isinstance(b, datetime) else b
    return a_day == b_day


def is_today(value: date, today: date | None = None) -> bool:
    return is_same_day(value, today or date.today())


def is_past(value: datetime, now: datetime | None = None) -> bool:
    return value < (now or datetime.now(tz=value.tzinfo))


def is_future(value: datetime, now: datetime | None = None) -> bool:
    return value > (now or datetime.now(tz=value.tzinfo))
