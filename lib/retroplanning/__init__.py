"""
Retroplanning: backward scheduling from a deadline.

- scheduler: deterministic date assignment
- generator: step list from a brief via Claude
- plans: one stored plan per client
"""

from .scheduler import compute_dates_from_deadline, days_between

__all__ = ["compute_dates_from_deadline", "days_between"]
