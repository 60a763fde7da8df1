# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel


class DayOffEligibilityResponse(BaseModel):
    """Whether the person may take a day-off on the evaluated date."""

    person_id: uuid.UUID
    evaluated_date: date
    allowed: bool
    reason: str | None
    window_start: date | None
    window_end: date | None
    message: str


class CapacityResponse(BaseModel):
    """Medical-leave block for one person on a date."""

    person_id: uuid.UUID
    on: date
    blocked: bool
    blocking_leave_ids: list[uuid.UUID]


class TeamMemberOnLeave(BaseModel):
    person_id: uuid.UUID
    name: str
    medical_leave_id: uuid.UUID
    start_date: date
    end_date: date


class TeamCapacityResponse(BaseModel):
    """Direct reports of a manager currently on capacity-affecting medical leave."""

    manager_id: uuid.UUID
    on: date
    blocked: bool
    team_size: int
    members_on_leave: list[TeamMemberOnLeave]
