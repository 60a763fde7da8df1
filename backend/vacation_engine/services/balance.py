from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from vacation_engine.exceptions import ForbiddenError, JustificationRequiredError, NotFoundError
from vacation_engine.models.balance import VacationBalance
from vacation_engine.models.base import now_utc
from vacation_engine.models.enums import AuditAction, AuditEntityType
from vacation_engine.models.request import LeaveRequest
from vacation_engine.schemas.balance import (
    BalanceExportItem,
    BalanceExportResponse,
    BalanceResponse,
    VacationSummaryResponse,
)
from vacation_engine.services.accrual import BALANCE_TYPES, compute_balance, has_accumulation_warning
from vacation_engine.services.audit import model_to_audit_dict, write_audit_log
from vacation_engine.services.people import get_person_directory

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from vacation_engine.schemas.auth import AuthContext
    from vacation_engine.schemas.balance import ManualBalancePayload
    from vacation_engine.services.accrual import BalanceComputation
    from vacation_engine.services.context import AccrualRules, EngineContext
    from vacation_engine.services.people import PersonInfo

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_balance_response(row: VacationBalance, person: PersonInfo, rules: AccrualRules) -> BalanceResponse:
    """Map a stored balance row to its response schema."""
    return BalanceResponse(
        person_id=row.person_id,
        year=row.year,
        accrued_days=row.accrued_days,
        used_days=row.used_days,
        balance_days=row.balance_days,
        contract_anniversary=row.contract_anniversary,
        is_manual=row.is_manual,
        manual_justification=row.manual_justification,
        updated_by=row.updated_by,
        manual_updated_at=row.manual_updated_at,
        accumulation_warning=has_accumulation_warning(person.contract_model, row.balance_days, rules),
        persisted=True,
        version=row.version,
    )


def _build_computed_response(computation: BalanceComputation) -> BalanceResponse:
    """Map a fresh, unpersisted computation to the response schema."""
    return BalanceResponse(
        person_id=computation.person_id,
        year=computation.year,
        accrued_days=computation.accrued_days,
        used_days=computation.used_days,
        balance_days=computation.balance_days,
        contract_anniversary=computation.contract_anniversary,
        is_manual=False,
        manual_justification=None,
        updated_by=None,
        manual_updated_at=None,
        accumulation_warning=computation.accumulation_warning,
    )


async def get_person_or_404(company_id: uuid.UUID, person_id: uuid.UUID) -> PersonInfo:
    """Resolve a person from the directory. Raises 404 if unknown."""
    person = await get_person_directory().get_person(company_id, person_id)
    if person is None:
        msg = f"Person {person_id} not found"
        raise NotFoundError(msg)
    return person


def _require_override_rights(auth: AuthContext) -> None:
    if not (auth.is_director or auth.is_admin):
        msg = "Only directors or administrators may change balances manually"
        raise ForbiddenError(msg)


async def _load_person_requests(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID,
) -> list[LeaveRequest]:
    """All balance-consuming requests of a person, any status."""
    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.company_id) == company_id,
            col(LeaveRequest.requester_id) == person_id,
            col(LeaveRequest.type).in_([t.value for t in BALANCE_TYPES]),
        )
    )
    return list(result.scalars().all())


async def _get_balance_row(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID,
    year: int,
    *,
    for_update: bool = False,
) -> VacationBalance | None:
    query = select(VacationBalance).where(
        col(VacationBalance.company_id) == company_id,
        col(VacationBalance.person_id) == person_id,
        col(VacationBalance.year) == year,
    )
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def _compute(
    session: AsyncSession,
    person: PersonInfo,
    year: int,
    ctx: EngineContext,
) -> BalanceComputation:
    requests = await _load_person_requests(session, person.company_id, person.id)
    return compute_balance(person, year, requests, today=ctx.today, rules=ctx.rules)


def _apply_computation(row: VacationBalance, computation: BalanceComputation, actor_id: uuid.UUID | None) -> None:
    row.accrued_days = computation.accrued_days
    row.used_days = computation.used_days
    row.balance_days = computation.balance_days
    row.contract_anniversary = computation.contract_anniversary
    row.updated_by = actor_id
    row.updated_at = now_utc()
    row.version += 1


async def persist_automatic_balance(
    session: AsyncSession,
    person: PersonInfo,
    year: int,
    ctx: EngineContext,
    actor_id: uuid.UUID | None = None,
) -> tuple[VacationBalance, dict | None]:
    """Lock, recompute and store the automatic balance inside the caller's transaction.

    Manual rows are left untouched. Returns the row and its state before the
    write (None when the row was created). Does not commit.
    """
    row = await _get_balance_row(session, person.company_id, person.id, year, for_update=True)
    if row is not None and row.is_manual:
        logger.info("Skipping recompute for manual balance person=%s year=%d", person.id, year)
        return row, model_to_audit_dict(row)

    computation = await _compute(session, person, year, ctx)

    if row is None:
        row = VacationBalance(
            company_id=person.company_id,
            person_id=person.id,
            year=year,
            accrued_days=computation.accrued_days,
            used_days=computation.used_days,
            balance_days=computation.balance_days,
            contract_anniversary=computation.contract_anniversary,
            updated_by=actor_id,
        )
        session.add(row)
        await session.flush()
        return row, None

    before = model_to_audit_dict(row)
    _apply_computation(row, computation, actor_id)
    await session.flush()
    return row, before


async def effective_balance_days(
    session: AsyncSession,
    person: PersonInfo,
    year: int,
    ctx: EngineContext,
) -> int:
    """Current authoritative balance: the manual override, or the automatic value."""
    row = await _get_balance_row(session, person.company_id, person.id, year)
    if row is not None and row.is_manual:
        return row.balance_days
    computation = await _compute(session, person, year, ctx)
    return computation.balance_days


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_balance(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID,
    year: int,
    ctx: EngineContext,
) -> BalanceResponse:
    """The stored manual balance, or a fresh automatic computation (not persisted)."""
    person = await get_person_or_404(company_id, person_id)
    row = await _get_balance_row(session, company_id, person_id, year)
    if row is not None and row.is_manual:
        return _build_balance_response(row, person, ctx.rules)

    computation = await _compute(session, person, year, ctx)
    response = _build_computed_response(computation)
    if row is not None:
        response.persisted = (
            row.accrued_days == computation.accrued_days
            and row.used_days == computation.used_days
            and row.balance_days == computation.balance_days
        )
        response.version = row.version
        response.updated_by = row.updated_by
    return response


async def list_balances(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int,
    ctx: EngineContext,
) -> BalanceExportResponse:
    """Balances of every active person for year, in name order.

    This is the single source exporters read from. People without a contract
    date are listed with empty figures.
    """
    people = [p for p in await get_person_directory().list_people(company_id) if p.active]
    people.sort(key=lambda p: p.name.lower())

    rows_result = await session.execute(
        select(VacationBalance).where(
            col(VacationBalance.company_id) == company_id,
            col(VacationBalance.year) == year,
        )
    )
    rows = {row.person_id: row for row in rows_result.scalars().all()}

    requests_result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.company_id) == company_id,
            col(LeaveRequest.type).in_([t.value for t in BALANCE_TYPES]),
        )
    )
    requests_by_person: dict[uuid.UUID, list[LeaveRequest]] = defaultdict(list)
    for request in requests_result.scalars().all():
        requests_by_person[request.requester_id].append(request)

    items: list[BalanceExportItem] = []
    for person in people:
        item = BalanceExportItem(
            person_id=person.id,
            name=person.name,
            email=person.email,
            contract_model=person.contract_model,
            contract_start_date=person.contract_start_date,
            year=year,
            accrued_days=None,
            used_days=None,
            balance_days=None,
            is_manual=False,
            accumulation_warning=False,
            missing_contract_date=person.contract_start_date is None,
        )
        row = rows.get(person.id)
        if row is not None and row.is_manual:
            item.accrued_days = row.accrued_days
            item.used_days = row.used_days
            item.balance_days = row.balance_days
            item.is_manual = True
            item.accumulation_warning = has_accumulation_warning(person.contract_model, row.balance_days, ctx.rules)
        elif person.contract_start_date is not None:
            computation = compute_balance(
                person, year, requests_by_person[person.id], today=ctx.today, rules=ctx.rules
            )
            item.accrued_days = computation.accrued_days
            item.used_days = computation.used_days
            item.balance_days = computation.balance_days
            item.accumulation_warning = computation.accumulation_warning
        items.append(item)

    return BalanceExportResponse(items=items, total=len(items))


async def vacation_summary(
    session: AsyncSession,
    company_id: uuid.UUID,
    year: int,
    ctx: EngineContext,
) -> VacationSummaryResponse:
    """Aggregate the yearly export."""
    export = await list_balances(session, company_id, year, ctx)
    counted = [item for item in export.items if item.balance_days is not None]
    return VacationSummaryResponse(
        year=year,
        people_count=export.total,
        missing_contract_date_count=sum(1 for item in export.items if item.missing_contract_date),
        total_accrued_days=sum(item.accrued_days or 0 for item in counted),
        total_used_days=sum(item.used_days or 0 for item in counted),
        total_balance_days=sum(item.balance_days or 0 for item in counted),
        manual_count=sum(1 for item in counted if item.is_manual),
        accumulation_warning_count=sum(1 for item in counted if item.accumulation_warning),
    )


# ---------------------------------------------------------------------------
# Write path
# ---------------------------------------------------------------------------


async def recompute_balance(
    session: AsyncSession,
    auth: AuthContext,
    person_id: uuid.UUID,
    year: int,
    ctx: EngineContext,
) -> BalanceResponse:
    """Persist the automatic balance for (person, year). Manual balances are left as they are."""
    person = await get_person_or_404(auth.company_id, person_id)
    row, before = await persist_automatic_balance(session, person, year, ctx, auth.user_id)

    if not row.is_manual:
        await write_audit_log(
            session,
            company_id=auth.company_id,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.BALANCE,
            entity_id=person.id,
            action=AuditAction.RECOMPUTE,
            before_json=before,
            after_json=model_to_audit_dict(row),
        )

    await session.commit()
    await session.refresh(row)
    return _build_balance_response(row, person, ctx.rules)


async def set_manual_balance(
    session: AsyncSession,
    auth: AuthContext,
    person_id: uuid.UUID,
    year: int,
    payload: ManualBalancePayload,
    ctx: EngineContext,
) -> BalanceResponse:
    """Override the balance for (person, year) with a justified manual value.

    The automatic accrued and used days are refreshed and kept as advisory
    values; balance_days becomes the override.
    """
    _require_override_rights(auth)
    justification = payload.justification.strip()
    if not justification:
        msg = "A justification is required for a manual balance"
        raise JustificationRequiredError(msg)

    person = await get_person_or_404(auth.company_id, person_id)
    row = await _get_balance_row(session, auth.company_id, person_id, year, for_update=True)
    computation = await _compute(session, person, year, ctx)
    now = now_utc()

    before = model_to_audit_dict(row) if row is not None else None
    if row is None:
        row = VacationBalance(
            company_id=auth.company_id,
            person_id=person_id,
            year=year,
            accrued_days=computation.accrued_days,
            used_days=computation.used_days,
            balance_days=payload.balance_days,
            contract_anniversary=computation.contract_anniversary,
        )
        session.add(row)
    else:
        _apply_computation(row, computation, auth.user_id)
        row.balance_days = payload.balance_days

    row.is_manual = True
    row.manual_justification = justification
    row.updated_by = auth.user_id
    row.manual_updated_at = now
    row.updated_at = now
    await session.flush()

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.BALANCE,
        entity_id=person_id,
        action=AuditAction.MANUAL_OVERRIDE,
        before_json=before,
        after_json=model_to_audit_dict(row),
    )

    await session.commit()
    await session.refresh(row)
    logger.info(
        "Manual balance set person=%s year=%d balance=%d by=%s", person_id, year, row.balance_days, auth.user_id
    )
    return _build_balance_response(row, person, ctx.rules)


async def restore_automatic(
    session: AsyncSession,
    auth: AuthContext,
    person_id: uuid.UUID,
    year: int,
    ctx: EngineContext,
) -> BalanceResponse:
    """Drop a manual override and store the automatic values again. Idempotent."""
    _require_override_rights(auth)
    person = await get_person_or_404(auth.company_id, person_id)

    row = await _get_balance_row(session, auth.company_id, person_id, year, for_update=True)
    before = model_to_audit_dict(row) if row is not None else None
    if row is not None and row.is_manual:
        row.is_manual = False
        row.manual_justification = None
        row.manual_updated_at = None
        await session.flush()

    row, _ = await persist_automatic_balance(session, person, year, ctx, auth.user_id)

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.BALANCE,
        entity_id=person_id,
        action=AuditAction.RESTORE_AUTOMATIC,
        before_json=before,
        after_json=model_to_audit_dict(row),
    )

    await session.commit()
    await session.refresh(row)
    logger.info("Automatic balance restored person=%s year=%d", person_id, year)
    return _build_balance_response(row, person, ctx.rules)
