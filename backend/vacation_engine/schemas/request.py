# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from vacation_engine.models.enums import ApprovalAction, ApprovalLevel, LeaveType, RequestStatus
from vacation_engine.schemas.common import LocalDate

_HISTORICAL_STATUSES = frozenset(
    {RequestStatus.APPROVED_FINAL, RequestStatus.COMPLETED, RequestStatus.REJECTED, RequestStatus.CANCELLED}
)

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitRequestPayload(BaseModel):
    """Request body for a new leave request. The requester is the calling user."""

    type: LeaveType
    start_date: LocalDate
    end_date: LocalDate
    reason: str | None = Field(default=None, max_length=2000)
    draft: bool = False


class TransitionPayload(BaseModel):
    """Optional body for transitions without a decision."""

    comment: str | None = Field(default=None, max_length=2000)
    expected_version: int | None = Field(default=None, ge=1)


class DecisionPayload(TransitionPayload):
    """Request body for approve/reject/request-info actions."""


class ResubmitPayload(TransitionPayload):
    """Answer to an information request; dates and reason may be revised."""

    start_date: LocalDate | None = None
    end_date: LocalDate | None = None
    reason: str | None = Field(default=None, max_length=2000)


class HistoricalRequestPayload(BaseModel):
    """Leave that happened before the system existed, recorded directly in a final state."""

    requester_id: uuid.UUID
    type: LeaveType
    start_date: LocalDate
    end_date: LocalDate
    status: RequestStatus = RequestStatus.COMPLETED
    reason: str | None = Field(default=None, max_length=2000)
    original_created_at: LocalDate | None = None
    original_channel: str | None = Field(default=None, max_length=100)
    admin_observations: str | None = Field(default=None, max_length=2000)

    @field_validator("status")
    @classmethod
    def _final_status(cls, value: RequestStatus) -> RequestStatus:
        if value not in _HISTORICAL_STATUSES:
            msg = "Historical requests must be APPROVED_FINAL, COMPLETED, REJECTED or CANCELLED"
            raise ValueError(msg)
        return value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    company_id: uuid.UUID
    requester_id: uuid.UUID
    type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str | None
    status: RequestStatus
    version: int
    conflict_flag: bool
    conflict_refs: list[uuid.UUID]
    is_historical: bool
    original_created_at: date | None
    original_channel: str | None
    admin_observations: str | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime
    warnings: list[str] = Field(default_factory=list)


class RequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[RequestResponse]
    total: int


class ApprovalResponse(BaseModel):
    """One approver decision."""

    id: uuid.UUID
    request_id: uuid.UUID
    approver_id: uuid.UUID
    level: ApprovalLevel
    action: ApprovalAction
    comment: str | None
    created_at: datetime


class SpecialApprovalResponse(BaseModel):
    id: uuid.UUID
    request_id: uuid.UUID
    medical_leave_id: uuid.UUID
    manager_id: uuid.UUID
    justification: str
    created_at: datetime


class ApprovalListResponse(BaseModel):
    """Decision history of a request, oldest first."""

    items: list[ApprovalResponse]
    special_approvals: list[SpecialApprovalResponse]
    total: int


class CompleteElapsedResponse(BaseModel):
    """Result of an elapse sweep."""

    completed: int
    request_ids: list[uuid.UUID]
