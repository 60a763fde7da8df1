"""Tests for calendar helpers: local-date parsing, dd/mm/yyyy strings, windows and month arithmetic."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from vacation_engine.services.dates import (
    DateWindow,
    anniversary_in_year,
    apply_date_mask,
    complete_months_between,
    day_off_window,
    days_within_year,
    format_br_date,
    inclusive_days,
    is_birthday,
    is_valid_birth_date_string,
    parse_br_date,
    parse_local_date,
    ranges_overlap,
    years_spanned,
)

# ---------------------------------------------------------------------------
# Parsing and formatting
# ---------------------------------------------------------------------------


def test_parse_iso_date_keeps_written_day() -> None:
    assert parse_local_date("2025-03-01") == date(2025, 3, 1)


def test_parse_iso_datetime_string_ignores_time_and_offset() -> None:
    assert parse_local_date("2025-03-01T23:30:00-03:00") == date(2025, 3, 1)
    assert parse_local_date("2025-03-01T00:00:00Z") == date(2025, 3, 1)


def test_parse_br_string() -> None:
    assert parse_local_date("15/06/1990") == date(1990, 6, 15)


def test_parse_passes_dates_through() -> None:
    assert parse_local_date(date(2025, 1, 2)) == date(2025, 1, 2)
    assert parse_local_date(datetime(2025, 1, 2, 23, 59)) == date(2025, 1, 2)


@pytest.mark.parametrize("value", ["", "yesterday", "2025/01/02", "31/02/2025", 20250102])
def test_parse_rejects_garbage(value: object) -> None:
    with pytest.raises(ValueError):
        parse_local_date(value)


def test_format_br_date() -> None:
    assert format_br_date(date(2025, 6, 1)) == "01/06/2025"
    assert format_br_date(None) == ""


def test_parse_br_date_invalid_returns_none() -> None:
    assert parse_br_date("29/02/2023") is None
    assert parse_br_date("1/2/2023") is None
    assert parse_br_date("29/02/2024") == date(2024, 2, 29)


@pytest.mark.parametrize(
    ("typed", "masked"),
    [
        ("1", "1"),
        ("15", "15"),
        ("150", "15/0"),
        ("1506", "15/06"),
        ("15061", "15/06/1"),
        ("15061990", "15/06/1990"),
        ("15/06/1990", "15/06/1990"),
        ("1506199012", "15/06/1990"),
    ],
)
def test_apply_date_mask(typed: str, masked: str) -> None:
    assert apply_date_mask(typed) == masked


def test_birth_date_string_bounds() -> None:
    today = date(2025, 6, 2)
    assert is_valid_birth_date_string("01/01/1930", today)
    assert is_valid_birth_date_string("02/06/2025", today)
    assert not is_valid_birth_date_string("31/12/1929", today)
    assert not is_valid_birth_date_string("03/06/2025", today)
    assert not is_valid_birth_date_string("1990-06-15", today)


# ---------------------------------------------------------------------------
# Anniversaries and windows
# ---------------------------------------------------------------------------


def test_leap_day_anniversary_falls_back_to_feb_28() -> None:
    assert anniversary_in_year(date(2020, 2, 29), 2023) == date(2023, 2, 28)
    assert anniversary_in_year(date(2020, 2, 29), 2024) == date(2024, 2, 29)


def test_is_birthday() -> None:
    assert is_birthday(date(1990, 6, 15), date(2025, 6, 15))
    assert not is_birthday(date(1990, 6, 15), date(2025, 6, 16))


def test_day_off_window_opens_on_first_of_birth_month() -> None:
    window = day_off_window(date(1990, 6, 15), 2025)
    assert window == DateWindow(start=date(2025, 6, 1), end=date(2026, 6, 14))
    assert window.contains(date(2025, 6, 1))
    assert window.contains(date(2026, 6, 14))
    assert not window.contains(date(2025, 5, 31))
    assert not window.contains(date(2026, 6, 15))


def test_day_off_window_for_leap_day_birthday() -> None:
    window = day_off_window(date(2000, 2, 29), 2025)
    assert window.start == date(2025, 2, 1)
    assert window.end == date(2026, 2, 27)


# ---------------------------------------------------------------------------
# Day arithmetic
# ---------------------------------------------------------------------------


def test_inclusive_days() -> None:
    assert inclusive_days(date(2025, 3, 1), date(2025, 3, 1)) == 1
    assert inclusive_days(date(2025, 3, 1), date(2025, 3, 10)) == 10
    assert inclusive_days(date(2025, 3, 10), date(2025, 3, 1)) == 0


def test_days_within_year_clips_cross_year_ranges() -> None:
    start, end = date(2024, 12, 28), date(2025, 1, 3)
    assert days_within_year(start, end, 2024) == 4
    assert days_within_year(start, end, 2025) == 3
    assert days_within_year(start, end, 2026) == 0
    assert years_spanned(start, end) == [2024, 2025]


def test_ranges_overlap_is_inclusive() -> None:
    assert ranges_overlap(date(2025, 3, 5), date(2025, 3, 12), date(2025, 3, 1), date(2025, 3, 10))
    assert ranges_overlap(date(2025, 3, 10), date(2025, 3, 12), date(2025, 3, 1), date(2025, 3, 10))
    assert not ranges_overlap(date(2025, 3, 11), date(2025, 3, 12), date(2025, 3, 1), date(2025, 3, 10))


@pytest.mark.parametrize(
    ("start", "end", "months"),
    [
        (date(2025, 1, 1), date(2025, 1, 31), 0),
        (date(2025, 1, 1), date(2025, 2, 1), 1),
        (date(2025, 1, 15), date(2025, 7, 14), 5),
        (date(2025, 1, 15), date(2025, 7, 15), 6),
        (date(2025, 1, 31), date(2025, 2, 28), 1),
        (date(2024, 3, 10), date(2025, 3, 10), 12),
        (date(2025, 3, 1), date(2025, 2, 1), 0),
    ],
)
def test_complete_months_between(start: date, end: date, months: int) -> None:
    assert complete_months_between(start, end) == months
