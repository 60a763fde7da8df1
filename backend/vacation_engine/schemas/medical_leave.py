# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from vacation_engine.models.enums import MedicalLeaveStatus
from vacation_engine.schemas.common import LocalDate


class CreateMedicalLeavePayload(BaseModel):
    """Request body for registering a medical leave."""

    person_id: uuid.UUID
    start_date: LocalDate
    end_date: LocalDate
    affects_team_capacity: bool = True
    justification: str | None = Field(default=None, max_length=2000)


class MedicalLeaveResponse(BaseModel):
    id: uuid.UUID
    company_id: uuid.UUID
    person_id: uuid.UUID
    start_date: date
    end_date: date
    status: MedicalLeaveStatus
    affects_team_capacity: bool
    justification: str | None
    created_by: uuid.UUID
    ended_at: datetime | None
    created_at: datetime


class MedicalLeaveListResponse(BaseModel):
    items: list[MedicalLeaveResponse]
    total: int
