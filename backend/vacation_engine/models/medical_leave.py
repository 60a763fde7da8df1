# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from vacation_engine.models.base import DateRangeMixin, TimestampMixin, UpdatedAtMixin, UUIDBase
from vacation_engine.models.enums import MedicalLeaveStatus


class MedicalLeave(UUIDBase, DateRangeMixin, TimestampMixin, UpdatedAtMixin, table=True):
    """A medical leave; while ACTIVE and capacity-affecting it blocks new requests."""

    __tablename__ = "medical_leave"
    __table_args__ = (
        sa.Index("ix_medical_leave_company_status", "company_id", "status"),
        sa.CheckConstraint("start_date <= end_date", name="ck_medical_leave_range"),
    )

    company_id: uuid.UUID = Field(index=True)
    person_id: uuid.UUID = Field(index=True)
    status: str = Field(
        default=MedicalLeaveStatus.ACTIVE, max_length=50, sa_column_kwargs={"server_default": "ACTIVE"}
    )
    affects_team_capacity: bool = Field(default=True, sa_column_kwargs={"server_default": sa.true()})
    justification: str | None = None
    created_by: uuid.UUID
    ended_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
