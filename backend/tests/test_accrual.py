"""Tests for the accrual calculator: anniversary-relative accrual, used days and warnings."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date

import pytest

from vacation_engine.exceptions import MissingContractDateError
from vacation_engine.models.enums import ContractModel, LeaveType, RequestStatus
from vacation_engine.services.accrual import (
    compute_accrued_days,
    compute_balance,
    compute_used_days,
    has_accumulation_warning,
)
from vacation_engine.services.context import AccrualRules
from vacation_engine.services.people import PersonInfo

TODAY = date(2025, 6, 2)
RULES = AccrualRules()


@dataclass
class _Span:
    type: str
    status: str
    start_date: date
    end_date: date


def _person(contract_start: date | None, model: ContractModel = ContractModel.CLT) -> PersonInfo:
    return PersonInfo(
        id=uuid.uuid4(),
        company_id=uuid.uuid4(),
        name="Test Person",
        email="test@example.com",
        contract_start_date=contract_start,
        contract_model=model,
    )


# ---------------------------------------------------------------------------
# Accrued days
# ---------------------------------------------------------------------------


def test_accrual_starts_at_last_anniversary_before_year_start() -> None:
    # Period opens 2024-03-10; 14 complete months by today, capped at 30.
    assert compute_accrued_days(date(2023, 3, 10), ContractModel.CLT, 2025, TODAY, RULES) == 30


def test_accrual_in_first_contract_year_is_proportional() -> None:
    # 2025-01-15 to 2025-06-02: 4 complete months -> floor(30 * 4 / 12).
    assert compute_accrued_days(date(2025, 1, 15), ContractModel.CLT, 2025, TODAY, RULES) == 10


def test_month_ending_on_evaluation_point_counts() -> None:
    # 2025-01-03 to 2025-06-02 inclusive is five complete months.
    assert compute_accrued_days(date(2025, 1, 3), ContractModel.CLT, 2025, TODAY, RULES) == 12
    assert compute_accrued_days(date(2025, 1, 4), ContractModel.CLT, 2025, TODAY, RULES) == 10


def test_past_year_is_evaluated_at_december_31() -> None:
    # 2024-04-01 to 2024-12-31 inclusive: 9 complete months -> 22 days.
    assert compute_accrued_days(date(2024, 4, 1), ContractModel.CLT, 2024, TODAY, RULES) == 22


def test_contract_in_the_future_accrues_nothing() -> None:
    assert compute_accrued_days(date(2025, 9, 1), ContractModel.CLT, 2025, TODAY, RULES) == 0


def test_allowance_models_accrue_like_clt() -> None:
    start = date(2025, 1, 15)
    values = {model: compute_accrued_days(start, model, 2025, TODAY, RULES) for model in ContractModel}
    assert set(values.values()) == {10}


def test_entitlement_table_overrides_per_model() -> None:
    rules = AccrualRules(entitlement_by_model={ContractModel.PJ: 24})
    assert compute_accrued_days(date(2025, 1, 15), ContractModel.PJ, 2025, TODAY, rules) == 8
    assert compute_accrued_days(date(2025, 1, 15), ContractModel.CLT, 2025, TODAY, rules) == 10


# ---------------------------------------------------------------------------
# Used days
# ---------------------------------------------------------------------------


def test_used_days_count_only_final_balance_consuming_requests() -> None:
    requests = [
        _Span(LeaveType.VACATION, RequestStatus.APPROVED_FINAL, date(2025, 3, 3), date(2025, 3, 7)),
        _Span(LeaveType.DAY_OFF, RequestStatus.COMPLETED, date(2025, 4, 1), date(2025, 4, 1)),
        _Span(LeaveType.VACATION, RequestStatus.AWAITING_DIRECTOR, date(2025, 7, 1), date(2025, 7, 10)),
        _Span(LeaveType.VACATION, RequestStatus.REJECTED, date(2025, 8, 1), date(2025, 8, 10)),
        _Span(LeaveType.VACATION, RequestStatus.CANCELLED, date(2025, 9, 1), date(2025, 9, 10)),
        _Span(LeaveType.MEDICAL_LEAVE, RequestStatus.APPROVED_FINAL, date(2025, 2, 1), date(2025, 2, 20)),
    ]
    assert compute_used_days(requests, 2025) == 6


def test_cross_year_request_counts_only_in_year_days() -> None:
    requests = [_Span(LeaveType.VACATION, RequestStatus.COMPLETED, date(2024, 12, 30), date(2025, 1, 2))]
    assert compute_used_days(requests, 2024) == 2
    assert compute_used_days(requests, 2025) == 2


# ---------------------------------------------------------------------------
# Full computation
# ---------------------------------------------------------------------------


def test_compute_balance() -> None:
    person = _person(date(2023, 3, 10))
    requests = [_Span(LeaveType.VACATION, RequestStatus.APPROVED_FINAL, date(2025, 3, 3), date(2025, 3, 7))]

    result = compute_balance(person, 2025, requests, today=TODAY, rules=RULES)

    assert result.accrued_days == 30
    assert result.used_days == 5
    assert result.balance_days == 25
    assert result.contract_anniversary == date(2025, 3, 10)
    assert result.accumulation_warning is False


def test_compute_balance_is_deterministic() -> None:
    person = _person(date(2024, 7, 20))
    requests = [_Span(LeaveType.VACATION, RequestStatus.COMPLETED, date(2025, 1, 6), date(2025, 1, 10))]

    first = compute_balance(person, 2025, requests, today=TODAY, rules=RULES)
    second = compute_balance(person, 2025, requests, today=TODAY, rules=RULES)

    assert first == second
    assert first.balance_days == first.accrued_days - first.used_days


def test_compute_balance_without_contract_date_raises() -> None:
    with pytest.raises(MissingContractDateError):
        compute_balance(_person(None), 2025, [], today=TODAY, rules=RULES)


def test_leap_day_contract_anniversary() -> None:
    result = compute_balance(_person(date(2020, 2, 29)), 2025, [], today=TODAY, rules=RULES)
    assert result.contract_anniversary == date(2025, 2, 28)


def test_overdrawn_balance_goes_negative() -> None:
    person = _person(date(2025, 1, 15))
    requests = [_Span(LeaveType.VACATION, RequestStatus.APPROVED_FINAL, date(2025, 5, 1), date(2025, 5, 20))]
    result = compute_balance(person, 2025, requests, today=TODAY, rules=RULES)
    assert result.balance_days == 10 - 20


# ---------------------------------------------------------------------------
# Accumulation warning
# ---------------------------------------------------------------------------


def test_accumulation_warning_only_for_pj() -> None:
    rules = AccrualRules(pj_accumulation_warning_days=20)
    assert has_accumulation_warning(ContractModel.PJ, 21, rules)
    assert not has_accumulation_warning(ContractModel.PJ, 20, rules)
    assert not has_accumulation_warning(ContractModel.CLT, 45, rules)


def test_pj_balance_above_threshold_is_flagged() -> None:
    rules = AccrualRules(pj_accumulation_warning_days=20)
    result = compute_balance(_person(date(2020, 3, 1), ContractModel.PJ), 2025, [], today=TODAY, rules=rules)
    assert result.balance_days == 30
    assert result.accumulation_warning is True
