# ruff: noqa: B008
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from vacation_engine.api.deps import AuthDep, ContextDep, validate_company_scope
from vacation_engine.db import SessionDep
from vacation_engine.schemas.balance import BalanceExportResponse, VacationSummaryResponse
from vacation_engine.services import balance as balance_service

balances_router = APIRouter(
    prefix="/companies/{company_id}/balances",
    tags=["balances"],
    dependencies=[Depends(validate_company_scope)],
)


@balances_router.get("", response_model=BalanceExportResponse)
async def list_balances(
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    year: int | None = Query(default=None, ge=1900, le=2200),
) -> BalanceExportResponse:
    """Balances of every active person for a year (current year by default)."""
    return await balance_service.list_balances(session, auth.company_id, year or ctx.today.year, ctx)


@balances_router.get("/summary", response_model=VacationSummaryResponse)
async def vacation_summary(
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    year: int | None = Query(default=None, ge=1900, le=2200),
) -> VacationSummaryResponse:
    """Company-wide balance totals for a year."""
    return await balance_service.vacation_summary(session, auth.company_id, year or ctx.today.year, ctx)
