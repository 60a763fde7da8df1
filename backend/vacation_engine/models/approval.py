# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from vacation_engine.models.base import TimestampMixin, UUIDBase


class Approval(UUIDBase, TimestampMixin, table=True):
    """Append-only record of one approver decision on a request."""

    __tablename__ = "approval"

    request_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("leave_request.id", ondelete="RESTRICT"), nullable=False, index=True
        ),
    )
    approver_id: uuid.UUID
    level: str = Field(max_length=50)
    action: str = Field(max_length=50)
    comment: str | None = None


class SpecialApproval(UUIDBase, TimestampMixin, table=True):
    """Manager approval granted despite a teammate's capacity-affecting medical leave."""

    __tablename__ = "special_approval"

    request_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("leave_request.id", ondelete="RESTRICT"), nullable=False, index=True
        ),
    )
    medical_leave_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("medical_leave.id", ondelete="RESTRICT"), nullable=False),
    )
    manager_id: uuid.UUID
    justification: str
