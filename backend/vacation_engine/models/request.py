# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from vacation_engine.models.base import DateRangeMixin, TimestampMixin, UpdatedAtMixin, UUIDBase, VersionedMixin
from vacation_engine.models.enums import RequestStatus


class LeaveRequest(UUIDBase, DateRangeMixin, VersionedMixin, TimestampMixin, UpdatedAtMixin, table=True):
    """A leave request moving through the approval state machine. Never deleted."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_company_status", "company_id", "status"),
        sa.Index("ix_leave_request_requester_range", "requester_id", "start_date", "end_date"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_range"),
    )

    company_id: uuid.UUID = Field(index=True)
    requester_id: uuid.UUID = Field(index=True)
    type: str = Field(max_length=50)
    reason: str | None = None
    status: str = Field(
        default=RequestStatus.DRAFT, max_length=50, index=True, sa_column_kwargs={"server_default": "DRAFT"}
    )
    conflict_flag: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    conflict_refs: str | None = None

    is_historical: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    original_created_at: date | None = None
    original_channel: str | None = Field(default=None, max_length=100)
    admin_observations: str | None = None
    completed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
