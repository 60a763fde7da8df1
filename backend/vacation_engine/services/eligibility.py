"""Day-off eligibility: birthday-linked window, once per year, directors exempt."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vacation_engine.exceptions import (
    AlreadyUsedThisYearError,
    AppError,
    MissingBirthDateError,
    OutsideWindowError,
)
from vacation_engine.models.enums import LeaveType, RequestStatus
from vacation_engine.services.dates import DateWindow, day_off_window, format_br_date

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from vacation_engine.services.accrual import LeaveSpan


class IneligibilityReason(enum.StrEnum):
    """Why a day-off is not currently allowed."""

    MISSING_BIRTH_DATE = "MissingBirthDate"
    ALREADY_USED_THIS_YEAR = "AlreadyUsedThisYear"
    OUTSIDE_WINDOW = "OutsideWindow"


@dataclass(frozen=True)
class DayOffEligibility:
    allowed: bool
    reason: IneligibilityReason | None
    window: DateWindow | None
    message: str

    def raise_for_reason(self) -> None:
        """Raise the matching error when not allowed."""
        if self.allowed:
            return
        error: AppError
        if self.reason == IneligibilityReason.MISSING_BIRTH_DATE:
            error = MissingBirthDateError(self.message)
        elif self.reason == IneligibilityReason.ALREADY_USED_THIS_YEAR:
            error = AlreadyUsedThisYearError(self.message)
        else:
            error = OutsideWindowError(self.message, window_start=self.window.start if self.window else None)
        raise error


def has_used_day_off_this_year(requests: Iterable[LeaveSpan], year: int) -> bool:
    """Whether a finally-approved or completed day-off starts in year."""
    return any(
        r.type == LeaveType.DAY_OFF
        and r.status in (RequestStatus.APPROVED_FINAL, RequestStatus.COMPLETED)
        and r.start_date.year == year
        for r in requests
    )


def evaluate_day_off(
    birth_date: date | None,
    already_used_this_year: bool,
    is_director: bool,
    *,
    today: date,
    request_date: date | None = None,
) -> DayOffEligibility:
    """Decide whether a day-off may be taken on request_date (or today when omitted).

    Directors are exempt from every check by policy. Otherwise the birth date
    must be known, the yearly day-off must be unused, and the day must fall in
    the window that opens on the first day of this year's birth month and
    closes the day before next year's birthday.
    """
    window = day_off_window(birth_date, today.year) if birth_date is not None else None

    if is_director:
        return DayOffEligibility(allowed=True, reason=None, window=window, message="Directors may always take a day-off")

    if birth_date is None or window is None:
        return DayOffEligibility(
            allowed=False,
            reason=IneligibilityReason.MISSING_BIRTH_DATE,
            window=None,
            message="A birth date must be registered in the profile to request a day-off",
        )

    if already_used_this_year:
        return DayOffEligibility(
            allowed=False,
            reason=IneligibilityReason.ALREADY_USED_THIS_YEAR,
            window=window,
            message=f"Day-off already used this year. Next reset: 01/01/{today.year + 1}",
        )

    target = request_date or today
    if not window.contains(target):
        return DayOffEligibility(
            allowed=False,
            reason=IneligibilityReason.OUTSIDE_WINDOW,
            window=window,
            message=(
                f"Day-off available from {format_br_date(window.start)} "
                f"until {format_br_date(window.end)} (window starts {window.start.isoformat()})"
            ),
        )

    return DayOffEligibility(
        allowed=True,
        reason=None,
        window=window,
        message=f"1 day-off available until {format_br_date(window.end)}, the day before your next birthday",
    )
