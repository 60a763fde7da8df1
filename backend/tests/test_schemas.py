"""Unit tests for API payload validation."""

from __future__ import annotations

import uuid
from datetime import date

import pytest
from pydantic import ValidationError

from vacation_engine.models.enums import LeaveType, RequestStatus, Role
from vacation_engine.schemas.auth import AuthContext
from vacation_engine.schemas.balance import ManualBalancePayload
from vacation_engine.schemas.medical_leave import CreateMedicalLeavePayload
from vacation_engine.schemas.request import (
    DecisionPayload,
    HistoricalRequestPayload,
    ResubmitPayload,
    SubmitRequestPayload,
)

# ---------------------------------------------------------------------------
# Local dates
# ---------------------------------------------------------------------------


def test_submit_payload_accepts_iso_and_br_dates() -> None:
    payload = SubmitRequestPayload(type=LeaveType.VACATION, start_date="2025-07-01", end_date="10/07/2025")
    assert payload.start_date == date(2025, 7, 1)
    assert payload.end_date == date(2025, 7, 10)
    assert payload.draft is False


def test_submit_payload_ignores_time_of_day() -> None:
    payload = SubmitRequestPayload(
        type=LeaveType.DAY_OFF,
        start_date="2025-07-01T23:00:00-03:00",
        end_date="2025-07-01T00:00:00Z",
    )
    assert payload.start_date == payload.end_date == date(2025, 7, 1)


def test_submit_payload_rejects_unparseable_date() -> None:
    with pytest.raises(ValidationError):
        SubmitRequestPayload(type=LeaveType.VACATION, start_date="next monday", end_date="2025-07-01")


def test_submit_payload_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        SubmitRequestPayload(type="SABBATICAL", start_date="2025-07-01", end_date="2025-07-01")  # type: ignore[arg-type]


def test_resubmit_payload_is_all_optional() -> None:
    payload = ResubmitPayload()
    assert payload.start_date is None
    assert payload.end_date is None
    assert payload.comment is None


def test_medical_leave_payload_defaults() -> None:
    payload = CreateMedicalLeavePayload(person_id=uuid.uuid4(), start_date="01/06/2025", end_date="30/06/2025")
    assert payload.affects_team_capacity is True
    assert payload.start_date == date(2025, 6, 1)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def test_expected_version_must_be_positive() -> None:
    assert DecisionPayload(expected_version=3).expected_version == 3
    with pytest.raises(ValidationError):
        DecisionPayload(expected_version=0)


def test_comment_length_is_bounded() -> None:
    with pytest.raises(ValidationError):
        DecisionPayload(comment="x" * 2001)


# ---------------------------------------------------------------------------
# Historical requests
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "status",
    [RequestStatus.APPROVED_FINAL, RequestStatus.COMPLETED, RequestStatus.REJECTED, RequestStatus.CANCELLED],
)
def test_historical_accepts_final_statuses(status: RequestStatus) -> None:
    payload = HistoricalRequestPayload(
        requester_id=uuid.uuid4(),
        type=LeaveType.VACATION,
        start_date="2024-01-08",
        end_date="2024-01-12",
        status=status,
    )
    assert payload.status == status


def test_historical_defaults_to_completed() -> None:
    payload = HistoricalRequestPayload(
        requester_id=uuid.uuid4(), type=LeaveType.VACATION, start_date="2024-01-08", end_date="2024-01-12"
    )
    assert payload.status == RequestStatus.COMPLETED


@pytest.mark.parametrize(
    "status",
    [RequestStatus.DRAFT, RequestStatus.PENDING, RequestStatus.AWAITING_MANAGER, RequestStatus.INFO_REQUESTED],
)
def test_historical_rejects_in_flight_statuses(status: RequestStatus) -> None:
    with pytest.raises(ValidationError, match="Historical requests"):
        HistoricalRequestPayload(
            requester_id=uuid.uuid4(),
            type=LeaveType.VACATION,
            start_date="2024-01-08",
            end_date="2024-01-12",
            status=status,
        )


# ---------------------------------------------------------------------------
# Balances and auth
# ---------------------------------------------------------------------------


def test_manual_balance_accepts_negative_values() -> None:
    payload = ManualBalancePayload(balance_days=-3, justification="Advance granted in 2024")
    assert payload.balance_days == -3


def test_manual_balance_requires_justification_field() -> None:
    with pytest.raises(ValidationError):
        ManualBalancePayload(balance_days=10)  # type: ignore[call-arg]


def test_auth_context_director_flag() -> None:
    company_id, user_id = uuid.uuid4(), uuid.uuid4()
    assert AuthContext(company_id=company_id, user_id=user_id, role=Role.DIRECTOR).is_director
    assert not AuthContext(company_id=company_id, user_id=user_id).is_director
