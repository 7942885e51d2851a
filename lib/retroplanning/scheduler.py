"""
Backward scheduling from a fixed deadline.

The last task ends on the deadline; each earlier task ends the day before
the next one starts. Ranges are inclusive on both ends, so a task lasting
N days spans N calendar days.
"""

from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

from lib.dates import DAY, DateLike, days_between, to_utc_day
from lib.entities import RetroplanningTask

__all__ = ["compute_dates_from_deadline", "days_between"]


def _field(stub: Any, *names: str) -> Any:
    for name in names:
        if isinstance(stub, Mapping):
            if name in stub:
                return stub[name]
        elif hasattr(stub, name):
            return getattr(stub, name)
    raise KeyError(names[0])


def compute_dates_from_deadline(
    tasks: Iterable[Any], deadline: DateLike
) -> list[RetroplanningTask]:
    """
    Assign start/end dates to *tasks* by walking backward from *deadline*.

    Each stub is a mapping or object exposing ``id``, ``label``,
    ``duration_days`` (``durationDays`` is accepted too) and ``color``.
    Input order and count are preserved. Durations are not validated: a
    zero duration yields a start one day after its end.
    """
    stubs = list(tasks)
    cursor = to_utc_day(deadline)
    result: list[RetroplanningTask | None] = [None] * len(stubs)

    for i in range(len(stubs) - 1, -1, -1):
        stub = stubs[i]
        duration = int(_field(stub, "duration_days", "durationDays"))
        end = cursor
        start = end - timedelta(days=duration - 1)

        color = _field(stub, "color")
        result[i] = RetroplanningTask(
            id=_field(stub, "id"),
            label=_field(stub, "label"),
            duration_days=duration,
            color=getattr(color, "value", color),
            start_date=start.isoformat(),
            end_date=end.isoformat(),
        )
        cursor = start - DAY

    return result
