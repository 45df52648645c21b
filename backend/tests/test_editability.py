"""Tests for the rolling editable-date window."""

from __future__ import annotations

from datetime import date

import pytest

from timesheet.services.editability import allowed_range, is_editable

TODAY = date(2024, 6, 10)


def test_allowed_range_spans_today_and_two_previous_days() -> None:
    assert allowed_range(TODAY) == (date(2024, 6, 8), date(2024, 6, 10))


@pytest.mark.parametrize(
    ("entry_date", "expected"),
    [
        (date(2024, 6, 7), False),
        (date(2024, 6, 8), True),
        (date(2024, 6, 9), True),
        (date(2024, 6, 10), True),
        (date(2024, 6, 11), False),
    ],
)
def test_is_editable(entry_date: date, expected: bool) -> None:
    assert is_editable(entry_date, TODAY) is expected


def test_window_crosses_month_boundary() -> None:
    assert allowed_range(date(2024, 3, 1)) == (date(2024, 2, 28), date(2024, 3, 1))
    assert is_editable(date(2024, 2, 29), date(2024, 3, 1))


def test_defaults_to_current_date() -> None:
    min_date, max_date = allowed_range()
    assert max_date == date.today()
    assert is_editable(min_date)
