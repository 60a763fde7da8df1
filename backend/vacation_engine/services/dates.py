"""Calendar helpers: local-date parsing, dd/mm/yyyy strings, anniversaries and windows.

Everything here is pure. Dates are calendar dates in the organisation's local
calendar; no function shifts a value across timezones.
"""

from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

_BR_FORMAT = "%d/%m/%Y"
_BR_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")
_ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_EARLIEST_BIRTH_DATE = date(1930, 1, 1)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def local_today(tz_name: str) -> date:
    """Today's date in the given IANA timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def parse_local_date(value: object) -> date:
    """Parse a value into a calendar date without any timezone shift.

    ISO strings (``YYYY-MM-DD`` optionally followed by a time part) keep the
    written day; ``dd/mm/yyyy`` strings are accepted too. Datetimes keep their
    own wall-clock date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        msg = f"Unrecognised date: {value!r}"
        raise ValueError(msg)

    text = value.strip()
    match = _ISO_DATE_PATTERN.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return date(year, month, day)

    parsed = parse_br_date(text)
    if parsed is None:
        msg = f"Unrecognised date: {value!r}"
        raise ValueError(msg)
    return parsed


def format_br_date(value: date | None) -> str:
    """Format a date as dd/mm/yyyy; empty string for None."""
    if value is None:
        return ""
    return value.strftime(_BR_FORMAT)


def parse_br_date(value: str) -> date | None:
    """Parse a dd/mm/yyyy string. Returns None for anything malformed or impossible."""
    if not value or not _BR_PATTERN.match(value):
        return None
    try:
        return datetime.strptime(value, _BR_FORMAT).date()
    except ValueError:
        return None


def apply_date_mask(value: str) -> str:
    """Progressively mask typed digits as dd/mm/yyyy."""
    digits = re.sub(r"\D", "", value)
    if len(digits) <= 2:
        return digits
    if len(digits) <= 4:
        return f"{digits[:2]}/{digits[2:]}"
    return f"{digits[:2]}/{digits[2:4]}/{digits[4:8]}"


def is_valid_birth_date_string(value: str, today: date) -> bool:
    """Whether a dd/mm/yyyy string is a plausible birth date (1930-01-01 up to today)."""
    parsed = parse_br_date(value)
    return parsed is not None and _EARLIEST_BIRTH_DATE <= parsed <= today


def anniversary_in_year(origin: date, year: int) -> date:
    """Realise origin's month/day in year. Feb 29 falls back to Feb 28 in common years."""
    try:
        return origin.replace(year=year)
    except ValueError:
        return date(year, 2, 28)


def is_birthday(birth_date: date, on: date) -> bool:
    return anniversary_in_year(birth_date, on.year) == on


def day_off_window(birth_date: date, year: int) -> DateWindow:
    """First day of the birth month in year through the day before the following year's birthday."""
    start = date(year, birth_date.month, 1)
    end = anniversary_in_year(birth_date, year + 1) - timedelta(days=1)
    return DateWindow(start=start, end=end)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days in [start, end]; zero for an empty range."""
    return max(0, (end - start).days + 1)


def days_within_year(start: date, end: date, year: int) -> int:
    """Days of [start, end] that fall inside the calendar year."""
    clipped_start = max(start, date(year, 1, 1))
    clipped_end = min(end, date(year, 12, 31))
    return inclusive_days(clipped_start, clipped_end)


def ranges_overlap(start: date, end: date, other_start: date, other_end: date) -> bool:
    """Inclusive ranges overlap when each starts no later than the other ends."""
    return start <= other_end and end >= other_start


def complete_months_between(start: date, end: date) -> int:
    """Whole months from start up to end.

    A month is complete once the same day-of-month (clamped to the month's
    length) has been reached.
    """
    if end < start:
        return 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if _add_months(start, months) > end:
        months -= 1
    return max(0, months)


def _add_months(origin: date, months: int) -> date:
    month_index = origin.month - 1 + months
    year = origin.year + month_index // 12
    month = month_index % 12 + 1
    _, days_in_month = monthrange(year, month)
    return date(year, month, min(origin.day, days_in_month))


def years_spanned(start: date, end: date) -> list[int]:
    """Calendar years touched by [start, end]."""
    return list(range(start.year, end.year + 1))
