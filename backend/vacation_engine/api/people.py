# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from vacation_engine.api.deps import AuthDep, ContextDep, validate_company_scope
from vacation_engine.db import SessionDep
from vacation_engine.schemas.balance import BalanceResponse, ManualBalancePayload
from vacation_engine.schemas.person import CapacityResponse, DayOffEligibilityResponse
from vacation_engine.services import balance as balance_service
from vacation_engine.services import medical_leave as medical_leave_service
from vacation_engine.services import request as request_service

people_router = APIRouter(
    prefix="/companies/{company_id}/people/{person_id}",
    tags=["people"],
    dependencies=[Depends(validate_company_scope)],
)

Year = Annotated[int, Path(ge=1900, le=2200)]


@people_router.get("/day-off-eligibility", response_model=DayOffEligibilityResponse)
async def get_day_off_eligibility(
    person_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    on: date | None = Query(default=None),
) -> DayOffEligibilityResponse:
    """Whether the person may take a day-off on a date (today by default)."""
    return await request_service.get_day_off_eligibility(session, auth.company_id, person_id, ctx, on)


@people_router.get("/capacity", response_model=CapacityResponse)
async def get_capacity(
    person_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    on: date | None = Query(default=None),
) -> CapacityResponse:
    """Whether an active medical leave blocks the person's new requests."""
    return await medical_leave_service.get_person_capacity(session, auth.company_id, person_id, on or ctx.today)


@people_router.get("/balances/{year}", response_model=BalanceResponse)
async def get_balance(
    person_id: uuid.UUID,
    year: Year,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
) -> BalanceResponse:
    """Vacation balance for a year: the manual override or the automatic value."""
    return await balance_service.get_balance(session, auth.company_id, person_id, year, ctx)


@people_router.post("/balances/{year}/recompute", response_model=BalanceResponse)
async def recompute_balance(
    person_id: uuid.UUID,
    year: Year,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
) -> BalanceResponse:
    """Persist the automatic balance for a year."""
    return await balance_service.recompute_balance(session, auth, person_id, year, ctx)


@people_router.put("/balances/{year}/manual", response_model=BalanceResponse)
async def set_manual_balance(
    person_id: uuid.UUID,
    year: Year,
    payload: ManualBalancePayload,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
) -> BalanceResponse:
    """Override the balance with a justified manual value (directors and admins)."""
    return await balance_service.set_manual_balance(session, auth, person_id, year, payload, ctx)


@people_router.post("/balances/{year}/restore", response_model=BalanceResponse)
async def restore_automatic(
    person_id: uuid.UUID,
    year: Year,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
) -> BalanceResponse:
    """Drop a manual override and go back to the automatic balance."""
    return await balance_service.restore_automatic(session, auth, person_id, year, ctx)
