"""Rolling window of dates a member may still edit themselves.

Admin paths never consult this policy.
"""

from __future__ import annotations

from datetime import date, timedelta

EDITABLE_DAYS_BACK = 2


def allowed_range(today: date | None = None) -> tuple[date, date]:
    """Return the inclusive (min_date, max_date) a member may edit on ``today``."""
    if today is None:
        today = date.today()
    return today - timedelta(days=EDITABLE_DAYS_BACK), today


def is_editable(entry_date: date, today: date | None = None) -> bool:
    """Whether ``entry_date`` falls inside the editable window for ``today``."""
    min_date, max_date = allowed_range(today)
    return min_date <= entry_date <= max_date
