from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from vacation_engine.exceptions import DateRangeInvalidError, ForbiddenError, InvalidTransitionError, NotFoundError
from vacation_engine.models.base import now_utc
from vacation_engine.models.enums import AuditAction, AuditEntityType, MedicalLeaveStatus, Role
from vacation_engine.models.medical_leave import MedicalLeave
from vacation_engine.schemas.medical_leave import MedicalLeaveListResponse, MedicalLeaveResponse
from vacation_engine.schemas.person import CapacityResponse, TeamCapacityResponse, TeamMemberOnLeave
from vacation_engine.services.audit import model_to_audit_dict, write_audit_log
from vacation_engine.services.balance import get_person_or_404
from vacation_engine.services.capacity import check_medical_block
from vacation_engine.services.people import get_person_directory, list_direct_reports

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from vacation_engine.schemas.auth import AuthContext
    from vacation_engine.schemas.medical_leave import CreateMedicalLeavePayload

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_medical_leave_response(leave: MedicalLeave) -> MedicalLeaveResponse:
    return MedicalLeaveResponse(
        id=leave.id,
        company_id=leave.company_id,
        person_id=leave.person_id,
        start_date=leave.start_date,
        end_date=leave.end_date,
        status=MedicalLeaveStatus(leave.status),
        affects_team_capacity=leave.affects_team_capacity,
        justification=leave.justification,
        created_by=leave.created_by,
        ended_at=leave.ended_at,
        created_at=leave.created_at,
    )


def _require_leave_management(auth: AuthContext) -> None:
    if not (auth.is_admin or auth.role in (Role.MANAGER, Role.DIRECTOR)):
        msg = "Only managers, directors or administrators may manage medical leaves"
        raise ForbiddenError(msg)


async def _get_leave_or_404(session: AsyncSession, company_id: uuid.UUID, leave_id: uuid.UUID) -> MedicalLeave:
    result = await session.execute(
        select(MedicalLeave)
        .where(
            col(MedicalLeave.id) == leave_id,
            col(MedicalLeave.company_id) == company_id,
        )
        .with_for_update()
    )
    leave = result.scalar_one_or_none()
    if leave is None:
        msg = "Medical leave not found"
        raise NotFoundError(msg)
    return leave


async def load_active_medical_leaves(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_ids: list[uuid.UUID] | None = None,
) -> list[MedicalLeave]:
    """Active medical leaves of a company, optionally restricted to some people."""
    query = select(MedicalLeave).where(
        col(MedicalLeave.company_id) == company_id,
        col(MedicalLeave.status) == MedicalLeaveStatus.ACTIVE.value,
    )
    if person_ids is not None:
        query = query.where(col(MedicalLeave.person_id).in_(person_ids))
    result = await session.execute(query)
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_medical_leave(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateMedicalLeavePayload,
) -> MedicalLeaveResponse:
    """Register a medical leave. While active and capacity-affecting it blocks new requests."""
    _require_leave_management(auth)
    if payload.end_date < payload.start_date:
        raise DateRangeInvalidError
    await get_person_or_404(auth.company_id, payload.person_id)

    leave = MedicalLeave(
        company_id=auth.company_id,
        person_id=payload.person_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        affects_team_capacity=payload.affects_team_capacity,
        justification=payload.justification,
        created_by=auth.user_id,
    )
    session.add(leave)
    await session.flush()

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.MEDICAL_LEAVE,
        entity_id=leave.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(leave),
    )

    await session.commit()
    await session.refresh(leave)
    logger.info("Medical leave %s created for person=%s", leave.id, leave.person_id)
    return _build_medical_leave_response(leave)


async def end_medical_leave(
    session: AsyncSession,
    auth: AuthContext,
    leave_id: uuid.UUID,
) -> MedicalLeaveResponse:
    """End an active leave. The capacity block lifts at once; existing requests are untouched."""
    _require_leave_management(auth)
    leave = await _get_leave_or_404(session, auth.company_id, leave_id)
    if leave.status != MedicalLeaveStatus.ACTIVE:
        msg = "Medical leave has already ended"
        raise InvalidTransitionError(leave.status, "end", msg)

    before = model_to_audit_dict(leave)
    now = now_utc()
    leave.status = MedicalLeaveStatus.ENDED.value
    leave.ended_at = now
    leave.updated_at = now
    await session.flush()

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.MEDICAL_LEAVE,
        entity_id=leave.id,
        action=AuditAction.END,
        before_json=before,
        after_json=model_to_audit_dict(leave),
    )

    await session.commit()
    await session.refresh(leave)
    logger.info("Medical leave %s ended by %s", leave.id, auth.user_id)
    return _build_medical_leave_response(leave)


async def list_medical_leaves(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID | None = None,
    status_filter: MedicalLeaveStatus | None = None,
    offset: int = 0,
    limit: int = 50,
) -> MedicalLeaveListResponse:
    """List medical leaves, newest first."""
    base_filters = [col(MedicalLeave.company_id) == company_id]
    if person_id is not None:
        base_filters.append(col(MedicalLeave.person_id) == person_id)
    if status_filter is not None:
        base_filters.append(col(MedicalLeave.status) == status_filter.value)

    count_result = await session.execute(select(func.count()).select_from(MedicalLeave).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(MedicalLeave)
        .where(*base_filters)
        .order_by(col(MedicalLeave.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    return MedicalLeaveListResponse(
        items=[_build_medical_leave_response(leave) for leave in result.scalars().all()],
        total=total,
    )


async def get_person_capacity(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID,
    on: date,
) -> CapacityResponse:
    """Whether the person is blocked from submitting on the given date."""
    await get_person_or_404(company_id, person_id)
    leaves = await load_active_medical_leaves(session, company_id, [person_id])
    status = check_medical_block([person_id], leaves, on)
    return CapacityResponse(
        person_id=person_id,
        on=on,
        blocked=status.blocked,
        blocking_leave_ids=status.blocking_leave_ids,
    )


async def get_team_capacity(
    session: AsyncSession,
    company_id: uuid.UUID,
    manager_id: uuid.UUID,
    on: date,
) -> TeamCapacityResponse:
    """Direct reports of a manager on capacity-affecting medical leave on the given date."""
    await get_person_or_404(company_id, manager_id)
    team = await list_direct_reports(get_person_directory(), company_id, manager_id)
    by_id = {p.id: p for p in team}
    leaves = await load_active_medical_leaves(session, company_id, list(by_id))

    status = check_medical_block(by_id, leaves, on)
    blocking = set(status.blocking_leave_ids)
    members = [
        TeamMemberOnLeave(
            person_id=leave.person_id,
            name=by_id[leave.person_id].name,
            medical_leave_id=leave.id,
            start_date=leave.start_date,
            end_date=leave.end_date,
        )
        for leave in leaves
        if leave.id in blocking
    ]
    return TeamCapacityResponse(
        manager_id=manager_id,
        on=on,
        blocked=status.blocked,
        team_size=len(team),
        members_on_leave=members,
    )
