# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from vacation_engine.models.base import UpdatedAtMixin, VersionedMixin


class VacationBalance(VersionedMixin, UpdatedAtMixin, table=True):
    """Persisted balance for a person and year, either fully automatic or fully manual."""

    __tablename__ = "vacation_balance"
    __table_args__ = (sa.PrimaryKeyConstraint("company_id", "person_id", "year"),)

    company_id: uuid.UUID
    person_id: uuid.UUID = Field(index=True)
    year: int
    accrued_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    used_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    balance_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    contract_anniversary: date
    is_manual: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    manual_justification: str | None = None
    updated_by: uuid.UUID | None = None
    manual_updated_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
