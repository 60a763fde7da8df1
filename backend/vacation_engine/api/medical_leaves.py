# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status

from vacation_engine.api.deps import AuthDep, ContextDep, validate_company_scope
from vacation_engine.db import SessionDep
from vacation_engine.models.enums import MedicalLeaveStatus
from vacation_engine.schemas.medical_leave import (
    CreateMedicalLeavePayload,
    MedicalLeaveListResponse,
    MedicalLeaveResponse,
)
from vacation_engine.schemas.person import TeamCapacityResponse
from vacation_engine.services import medical_leave as medical_leave_service

medical_leaves_router = APIRouter(
    prefix="/companies/{company_id}/medical-leaves",
    tags=["medical-leaves"],
    dependencies=[Depends(validate_company_scope)],
)

teams_router = APIRouter(
    prefix="/companies/{company_id}/teams",
    tags=["medical-leaves"],
    dependencies=[Depends(validate_company_scope)],
)


@medical_leaves_router.post("", response_model=MedicalLeaveResponse, status_code=status.HTTP_201_CREATED)
async def create_medical_leave(
    payload: CreateMedicalLeavePayload,
    session: SessionDep,
    auth: AuthDep,
) -> MedicalLeaveResponse:
    """Register a medical leave."""
    return await medical_leave_service.create_medical_leave(session, auth, payload)


@medical_leaves_router.get("", response_model=MedicalLeaveListResponse)
async def list_medical_leaves(
    session: SessionDep,
    auth: AuthDep,
    person_id: uuid.UUID | None = Query(default=None),
    status_filter: MedicalLeaveStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> MedicalLeaveListResponse:
    """List medical leaves with optional filters."""
    return await medical_leave_service.list_medical_leaves(
        session, auth.company_id, person_id, status_filter, offset, limit
    )


@medical_leaves_router.post("/{leave_id}/end", response_model=MedicalLeaveResponse)
async def end_medical_leave(
    leave_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> MedicalLeaveResponse:
    """End an active medical leave, lifting its capacity block."""
    return await medical_leave_service.end_medical_leave(session, auth, leave_id)


@teams_router.get("/{manager_id}/capacity", response_model=TeamCapacityResponse)
async def get_team_capacity(
    manager_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    on: date | None = Query(default=None),
) -> TeamCapacityResponse:
    """Direct reports of a manager currently on capacity-affecting medical leave."""
    return await medical_leave_service.get_team_capacity(session, auth.company_id, manager_id, on or ctx.today)
