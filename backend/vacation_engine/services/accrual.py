"""Accrual calculator: accrued, used and remaining vacation days for a person and year.

Accrual is anniversary-relative. The accrual period opens at the later of the
contract start date and the most recent contract anniversary on or before
January 1st of the target year, and closes at the evaluation point (today, or
December 31st for past years). Each complete month earns one twelfth of the
contract model's annual entitlement, rounded down, capped at the entitlement.

Used days are counted per calendar year: only the in-year days of VACATION and
DAY_OFF requests that reached APPROVED_FINAL or COMPLETED.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Protocol

from vacation_engine.exceptions import MissingContractDateError
from vacation_engine.models.enums import ContractModel, LeaveType, RequestStatus
from vacation_engine.services.dates import anniversary_in_year, complete_months_between, days_within_year

if TYPE_CHECKING:
    import uuid
    from collections.abc import Iterable

    from vacation_engine.services.context import AccrualRules
    from vacation_engine.services.people import PersonInfo

# Request types that consume the vacation balance.
BALANCE_TYPES = frozenset({LeaveType.VACATION, LeaveType.DAY_OFF})

# Statuses whose days count as used.
USED_STATUSES = frozenset({RequestStatus.APPROVED_FINAL, RequestStatus.COMPLETED})


class LeaveSpan(Protocol):
    """The slice of a leave request the calculator reads."""

    type: str
    status: str
    start_date: date
    end_date: date


@dataclass(frozen=True)
class BalanceComputation:
    """Automatically computed balance; balance_days == accrued_days - used_days."""

    person_id: uuid.UUID
    year: int
    accrued_days: int
    used_days: int
    balance_days: int
    contract_anniversary: date
    accumulation_warning: bool = False


# ---------------------------------------------------------------------------
# Pure computation helpers
# ---------------------------------------------------------------------------


def _accrual_period_start(contract_start: date, year: int) -> date:
    """Later of the contract start and the last anniversary on or before Jan 1 of year."""
    year_start = date(year, 1, 1)
    anniversary = anniversary_in_year(contract_start, year)
    if anniversary > year_start:
        anniversary = anniversary_in_year(contract_start, year - 1)
    return max(contract_start, anniversary)


def _evaluation_point(year: int, today: date) -> date:
    return min(today, date(year, 12, 31))


def compute_accrued_days(
    contract_start: date,
    contract_model: ContractModel,
    year: int,
    today: date,
    rules: AccrualRules,
) -> int:
    """Accrued days for year as of today, capped at the model's annual entitlement."""
    entitlement = rules.entitlement_for(contract_model)
    period_start = _accrual_period_start(contract_start, year)
    evaluation_point = _evaluation_point(year, today)
    if evaluation_point < period_start:
        return 0

    # The evaluation point is inclusive: a month ending on it is complete.
    months = complete_months_between(period_start, evaluation_point + timedelta(days=1))
    return min(entitlement, entitlement * months // 12)


def compute_used_days(requests: Iterable[LeaveSpan], year: int) -> int:
    """In-year days of balance-consuming requests that were finally approved or completed."""
    total = 0
    for request in requests:
        if request.type not in BALANCE_TYPES or request.status not in USED_STATUSES:
            continue
        total += days_within_year(request.start_date, request.end_date, year)
    return total


def has_accumulation_warning(contract_model: ContractModel, balance_days: int, rules: AccrualRules) -> bool:
    """PJ contracts get an advisory warning when the balance piles up past the threshold."""
    return contract_model == ContractModel.PJ and balance_days > rules.pj_accumulation_warning_days


def compute_balance(
    person: PersonInfo,
    year: int,
    requests: Iterable[LeaveSpan],
    *,
    today: date,
    rules: AccrualRules,
) -> BalanceComputation:
    """Compute the automatic balance for person in year.

    requests must be the person's own; any status or type may be passed and
    only balance-consuming, finally-approved spans are counted. Deterministic
    for identical inputs.
    """
    if person.contract_start_date is None:
        raise MissingContractDateError(person.id)

    accrued = compute_accrued_days(person.contract_start_date, person.contract_model, year, today, rules)
    used = compute_used_days(requests, year)
    balance = accrued - used

    return BalanceComputation(
        person_id=person.id,
        year=year,
        accrued_days=accrued,
        used_days=used,
        balance_days=balance,
        contract_anniversary=anniversary_in_year(person.contract_start_date, year),
        accumulation_warning=has_accumulation_warning(person.contract_model, balance, rules),
    )
