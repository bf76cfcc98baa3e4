from datetime import date, datetime, timedelta

import pytest

from core.calendar_logic import (
    date_to_str,
    days_for_month_grid,
    days_in_range,
    month_calendar,
    parse_date,
    shift_month,
    weekday_name,
)
from core.exceptions import ValidationError
from core.models import DayMark, DayMarks


@pytest.mark.parametrize("year,month", [
    (2025, 1), (2025, 2), (2025, 6), (2026, 2), (2024, 2), (2026, 10), (2025, 12),
])
def test_month_grid_is_six_full_weeks_from_sunday(year, month):
    days = days_for_month_grid(year, month)

    assert len(days) == 42
    assert days[0].weekday() == 6
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))
    assert date(year, month, 1) in days


def test_month_grid_pads_with_neighbouring_months():
    # January 2025 starts on a Wednesday
    days = days_for_month_grid(2025, 1)

    assert days[0] == date(2024, 12, 29)
    assert days[3] == date(2025, 1, 1)
    assert days[-1] == date(2025, 2, 8)


def test_month_starting_on_sunday_has_no_leading_padding():
    assert days_for_month_grid(2026, 2)[0] == date(2026, 2, 1)


def test_invalid_month_is_rejected():
    with pytest.raises(ValidationError):
        days_for_month_grid(2025, 13)


def test_days_in_range_is_inclusive():
    days = days_in_range(date(2025, 1, 30), date(2025, 2, 2))

    assert days == [date(2025, 1, 30), date(2025, 1, 31), date(2025, 2, 1), date(2025, 2, 2)]


def test_days_in_range_single_day_and_empty():
    assert days_in_range(date(2025, 1, 1), date(2025, 1, 1)) == [date(2025, 1, 1)]
    assert days_in_range(date(2025, 1, 2), date(2025, 1, 1)) == []


def test_parse_date_inputs():
    assert parse_date("2025-01-06") == date(2025, 1, 6)
    assert parse_date(datetime(2025, 1, 6, 9, 30)) == date(2025, 1, 6)
    assert parse_date(date(2025, 1, 6)) == date(2025, 1, 6)


@pytest.mark.parametrize("value", ["06-01-2025", "2025-02-30", "", None])
def test_parse_date_rejects_malformed(value):
    with pytest.raises(ValidationError):
        parse_date(value)


def test_weekday_helpers():
    assert weekday_name(date(2025, 1, 6)) == "monday"
    assert weekday_name(date(2026, 2, 1)) == "sunday"
    assert date_to_str(date(2025, 1, 6)) == "2025-01-06"


def test_month_calendar_metadata(slots, today):
    marks = DayMarks({date(2025, 1, 6): DayMark.HOLIDAY})

    cells = month_calendar(2025, 1, slots, marks, today=today)
    by_date = {c.date: c for c in cells}

    assert len(cells) == 42
    assert not by_date[date(2024, 12, 31)].in_month
    assert by_date[date(2024, 12, 31)].is_past

    first = by_date[date(2025, 1, 1)]
    assert first.in_month and first.is_today and not first.is_past
    assert first.weekday == "wednesday"
    assert first.subject_ids == (1,)

    monday = by_date[date(2025, 1, 6)]
    assert monday.mark is DayMark.HOLIDAY
    assert monday.subject_ids == (1,)

    assert by_date[date(2025, 1, 5)].is_sunday
    assert by_date[date(2025, 1, 7)].subject_ids == (2,)
    assert by_date[date(2025, 1, 8)].mark is DayMark.NORMAL


def test_shift_month_wraps_years():
    assert shift_month(2025, 1, -1) == (2024, 12)
    assert shift_month(2025, 12, 1) == (2026, 1)
    assert shift_month(2025, 6, 0) == (2025, 6)
