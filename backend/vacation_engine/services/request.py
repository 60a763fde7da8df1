# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlmodel import col

from vacation_engine.db import lock_person
from vacation_engine.exceptions import (
    AlreadyUsedThisYearError,
    CapacityBlockedError,
    DateRangeInvalidError,
    ForbiddenError,
    InsufficientBalanceError,
    JustificationRequiredError,
    MissingActorError,
    NotFoundError,
    OverlapConflictError,
    StaleStateError,
)
from vacation_engine.models.approval import Approval, SpecialApproval
from vacation_engine.models.base import now_utc
from vacation_engine.models.enums import (
    ApprovalAction,
    ApprovalLevel,
    AuditAction,
    AuditEntityType,
    LeaveType,
    RequestAction,
    RequestStatus,
)
from vacation_engine.models.request import LeaveRequest
from vacation_engine.schemas.person import DayOffEligibilityResponse
from vacation_engine.schemas.request import (
    ApprovalListResponse,
    ApprovalResponse,
    CompleteElapsedResponse,
    RequestListResponse,
    RequestResponse,
    SpecialApprovalResponse,
)
from vacation_engine.services.accrual import BALANCE_TYPES, USED_STATUSES
from vacation_engine.services.audit import model_to_audit_dict, write_audit_log
from vacation_engine.services.balance import effective_balance_days, get_person_or_404, persist_automatic_balance
from vacation_engine.services.capacity import (
    INACTIVE_STATUSES,
    check_medical_block,
    check_overlap,
    find_team_conflicts,
    find_team_medical_overlaps,
)
from vacation_engine.services.dates import days_within_year, inclusive_days, years_spanned
from vacation_engine.services.eligibility import evaluate_day_off, has_used_day_off_this_year
from vacation_engine.services.events import LifecycleEvent, build_event, publish_events
from vacation_engine.services.medical_leave import load_active_medical_leaves
from vacation_engine.services.people import get_person_directory, list_teammates
from vacation_engine.services.workflow import (
    SYSTEM_ACTOR,
    Actor,
    TransitionPlan,
    initial_status,
    plan_transition,
)

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from vacation_engine.schemas.auth import AuthContext
    from vacation_engine.schemas.request import (
        DecisionPayload,
        HistoricalRequestPayload,
        ResubmitPayload,
        SubmitRequestPayload,
        TransitionPayload,
    )
    from vacation_engine.services.context import EngineContext
    from vacation_engine.services.people import PersonInfo

logger = logging.getLogger(__name__)

_AUDIT_ACTIONS = {
    RequestAction.SUBMIT: AuditAction.SUBMIT,
    RequestAction.APPROVE: AuditAction.APPROVE,
    RequestAction.REJECT: AuditAction.REJECT,
    RequestAction.REQUEST_INFO: AuditAction.REQUEST_INFO,
    RequestAction.RESUBMIT: AuditAction.RESUBMIT,
    RequestAction.CANCEL: AuditAction.CANCEL,
    RequestAction.ELAPSE: AuditAction.COMPLETE,
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _actor(auth: AuthContext | None) -> Actor:
    if auth is None:
        msg = "Mutating operations require a resolved actor"
        raise MissingActorError(msg)
    return Actor(id=auth.user_id, role=auth.role, is_admin=auth.is_admin)


def _split_refs(refs: str | None) -> list[uuid.UUID]:
    if not refs:
        return []
    return [uuid.UUID(ref) for ref in refs.split(",") if ref]


def _build_request_response(request: LeaveRequest, warnings: list[str] | None = None) -> RequestResponse:
    """Map a request model to its response schema."""
    return RequestResponse(
        id=request.id,
        company_id=request.company_id,
        requester_id=request.requester_id,
        type=LeaveType(request.type),
        start_date=request.start_date,
        end_date=request.end_date,
        days=inclusive_days(request.start_date, request.end_date),
        reason=request.reason,
        status=RequestStatus(request.status),
        version=request.version,
        conflict_flag=request.conflict_flag,
        conflict_refs=_split_refs(request.conflict_refs),
        is_historical=request.is_historical,
        original_created_at=request.original_created_at,
        original_channel=request.original_channel,
        admin_observations=request.admin_observations,
        completed_at=request.completed_at,
        created_at=request.created_at,
        updated_at=request.updated_at,
        warnings=warnings or [],
    )


async def _get_request_or_404(
    session: AsyncSession,
    company_id: uuid.UUID,
    request_id: uuid.UUID,
) -> LeaveRequest:
    """Fetch a request by ID scoped to company. Raises 404 if not found."""
    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.id) == request_id,
            col(LeaveRequest.company_id) == company_id,
        )
    )
    request = result.scalar_one_or_none()
    if request is None:
        msg = "Request not found"
        raise NotFoundError(msg)
    return request


async def _load_person_requests(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID,
) -> list[LeaveRequest]:
    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.company_id) == company_id,
            col(LeaveRequest.requester_id) == person_id,
        )
    )
    return list(result.scalars().all())


def _validate_range(leave_type: LeaveType, start: date, end: date) -> None:
    if end < start:
        raise DateRangeInvalidError
    if leave_type == LeaveType.DAY_OFF and start != end:
        msg = "A day-off covers exactly one day"
        raise DateRangeInvalidError(msg)


async def _check_overlap(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID,
    start: date,
    end: date,
    exclude_id: uuid.UUID | None = None,
) -> None:
    """Raise 409 if a live request of the person intersects [start, end]."""
    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.company_id) == company_id,
            col(LeaveRequest.requester_id) == person_id,
            col(LeaveRequest.status).not_in([s.value for s in INACTIVE_STATUSES]),
            col(LeaveRequest.start_date) <= end,
            col(LeaveRequest.end_date) >= start,
        )
    )
    overlap = check_overlap(person_id, start, end, result.scalars().all(), exclude_id=exclude_id)
    if not overlap.ok:
        raise OverlapConflictError(overlap.conflicting_ids)


async def _check_submission_rules(
    session: AsyncSession,
    person: PersonInfo,
    leave_type: LeaveType,
    start: date,
    end: date,
    ctx: EngineContext,
) -> None:
    """Capacity, day-off eligibility and vacation balance. Raises on the first violation."""
    if leave_type != LeaveType.MEDICAL_LEAVE:
        leaves = await load_active_medical_leaves(session, person.company_id, [person.id])
        if check_medical_block([person.id], leaves, ctx.today).blocked:
            msg = "New requests are blocked while an active medical leave affects your capacity"
            raise CapacityBlockedError(msg)

    if leave_type == LeaveType.DAY_OFF:
        history = await _load_person_requests(session, person.company_id, person.id)
        eligibility = evaluate_day_off(
            person.birth_date,
            has_used_day_off_this_year(history, ctx.today.year),
            person.is_director,
            today=ctx.today,
            request_date=start,
        )
        eligibility.raise_for_reason()

    if leave_type == LeaveType.VACATION and ctx.enforce_vacation_balance:
        for year in years_spanned(start, end):
            requested = days_within_year(start, end, year)
            available = await effective_balance_days(session, person, year, ctx)
            if requested > available:
                raise InsufficientBalanceError(available=available, requested=requested)


async def _check_day_off_unused(session: AsyncSession, request: LeaveRequest, requester: PersonInfo | None) -> None:
    """Refuse final approval when another day-off of the same year is already approved or completed."""
    if requester is not None and requester.is_director:
        return
    await lock_person(session, request.requester_id)
    history = await _load_person_requests(session, request.company_id, request.requester_id)
    year = request.start_date.year
    if has_used_day_off_this_year([r for r in history if r.id != request.id], year):
        msg = f"Day-off already used in {year}. Next reset: 01/01/{year + 1}"
        raise AlreadyUsedThisYearError(msg)


async def _flag_team_conflicts(
    session: AsyncSession,
    request: LeaveRequest,
    person: PersonInfo,
) -> list[str]:
    """Mark advisory conflicts with teammates' booked vacations. Never blocks."""
    if request.type != LeaveType.VACATION:
        return []
    people = await get_person_directory().list_people(person.company_id)
    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.company_id) == person.company_id,
            col(LeaveRequest.start_date) <= request.end_date,
            col(LeaveRequest.end_date) >= request.start_date,
        )
    )
    conflicts = find_team_conflicts(person, request.start_date, request.end_date, people, result.scalars().all())
    refs = list(dict.fromkeys(ref for conflict in conflicts for ref in conflict.request_ids))
    request.conflict_flag = bool(refs)
    request.conflict_refs = ",".join(str(ref) for ref in refs) or None
    return [conflict.message for conflict in conflicts]


async def _recompute_balances(
    session: AsyncSession,
    request: LeaveRequest,
    from_status: RequestStatus | None,
    to_status: RequestStatus,
    ctx: EngineContext,
    actor_id: uuid.UUID,
) -> None:
    """Refresh stored balances when a request enters or leaves the counted statuses."""
    if request.type not in BALANCE_TYPES:
        return
    if (from_status in USED_STATUSES) == (to_status in USED_STATUSES):
        return

    person = await get_person_directory().get_person(request.company_id, request.requester_id)
    if person is None or person.contract_start_date is None:
        logger.warning("Balance not recomputed for request %s: requester has no contract date", request.id)
        return
    for year in years_spanned(request.start_date, request.end_date):
        await persist_automatic_balance(session, person, year, ctx, actor_id)


async def _apply_transition(
    session: AsyncSession,
    request: LeaveRequest,
    plan: TransitionPlan,
    actor_id: uuid.UUID,
    *,
    comment: str | None = None,
    expected_version: int | None = None,
    changes: dict[str, Any] | None = None,
) -> LifecycleEvent:
    """Move the request to plan.to_status with a version-checked UPDATE.

    Loses with StaleStateError when another writer bumped the version first.
    Appends the approval record and the audit row. Does not commit.
    """
    seen = request.version
    if expected_version is not None and expected_version != seen:
        raise StaleStateError

    before = model_to_audit_dict(request)
    now = now_utc()
    values: dict[str, Any] = {"status": plan.to_status.value, "updated_at": now, "version": seen + 1}
    if plan.to_status == RequestStatus.COMPLETED:
        values["completed_at"] = now
    if changes:
        values.update(changes)

    result = await session.execute(
        update(LeaveRequest)
        .where(col(LeaveRequest.id) == request.id, col(LeaveRequest.version) == seen)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:  # type: ignore[attr-defined]
        raise StaleStateError
    await session.refresh(request)

    if plan.approval_action is not None and plan.approval_level is not None:
        session.add(
            Approval(
                request_id=request.id,
                approver_id=actor_id,
                level=plan.approval_level.value,
                action=plan.approval_action.value,
                comment=comment,
            )
        )

    await write_audit_log(
        session,
        company_id=request.company_id,
        actor_id=actor_id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=request.id,
        action=_AUDIT_ACTIONS[plan.action],
        before_json=before,
        after_json=model_to_audit_dict(request),
    )
    await session.flush()

    logger.info(
        "Request %s %s: %s -> %s by %s", request.id, plan.action.value, plan.from_status, plan.to_status, actor_id
    )
    return build_event(
        company_id=request.company_id,
        request_id=request.id,
        from_state=plan.from_status,
        to_state=plan.to_status,
        actor_id=actor_id,
        comment=comment,
    )


async def _transition(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    action: RequestAction,
    payload: TransitionPayload | None,
    ctx: EngineContext,
    *,
    changes: dict[str, Any] | None = None,
) -> RequestResponse:
    """Shared flow for every actor-driven transition on an existing request."""
    actor = _actor(auth)
    request = await _get_request_or_404(session, auth.company_id, request_id)
    requester = await get_person_directory().get_person(request.company_id, request.requester_id)
    manager_id = requester.manager_id if requester is not None else None

    plan = plan_transition(
        request.status,
        action,
        actor,
        requester_id=request.requester_id,
        manager_id=manager_id,
        end_date=request.end_date,
        today=ctx.today,
    )
    comment = payload.comment if payload else None
    expected_version = payload.expected_version if payload else None

    special_leave_ids: list[uuid.UUID] = []
    if (
        plan.approval_action == ApprovalAction.APPROVED
        and plan.approval_level == ApprovalLevel.MANAGER
        and requester is not None
        and request.type != LeaveType.MEDICAL_LEAVE
    ):
        teammates = await list_teammates(get_person_directory(), requester)
        leaves = await load_active_medical_leaves(session, request.company_id, [p.id for p in teammates])
        special_leave_ids = find_team_medical_overlaps(teammates, leaves, request.start_date, request.end_date)
        if special_leave_ids and not (comment and comment.strip()):
            msg = "A teammate is on medical leave during this period; approving requires a justification"
            raise JustificationRequiredError(msg)

    if plan.to_status == RequestStatus.APPROVED_FINAL and request.type == LeaveType.DAY_OFF:
        await _check_day_off_unused(session, request, requester)

    warnings: list[str] = []
    if plan.action in (RequestAction.SUBMIT, RequestAction.RESUBMIT):
        if requester is None:
            msg = f"Person {request.requester_id} not found"
            raise NotFoundError(msg)
        await lock_person(session, request.requester_id)
        start = (changes or {}).get("start_date", request.start_date)
        end = (changes or {}).get("end_date", request.end_date)
        leave_type = LeaveType(request.type)
        _validate_range(leave_type, start, end)
        await _check_submission_rules(session, requester, leave_type, start, end, ctx)
        await _check_overlap(session, request.company_id, request.requester_id, start, end, exclude_id=request.id)

    event = await _apply_transition(
        session,
        request,
        plan,
        actor.id,
        comment=comment,
        expected_version=expected_version,
        changes=changes,
    )

    for leave_id in special_leave_ids:
        session.add(
            SpecialApproval(
                request_id=request.id,
                medical_leave_id=leave_id,
                manager_id=actor.id,
                justification=(comment or "").strip(),
            )
        )
    if plan.action in (RequestAction.SUBMIT, RequestAction.RESUBMIT) and requester is not None:
        warnings = await _flag_team_conflicts(session, request, requester)

    await _recompute_balances(session, request, plan.from_status, plan.to_status, ctx, actor.id)

    await session.commit()
    await session.refresh(request)
    await publish_events([event])
    return _build_request_response(request, warnings)


async def _elapse_due(
    session: AsyncSession,
    ctx: EngineContext,
    company_id: uuid.UUID | None = None,
    request_id: uuid.UUID | None = None,
) -> list[LifecycleEvent]:
    """Complete every finally-approved request whose end date has passed. Does not commit."""
    query = select(LeaveRequest).where(
        col(LeaveRequest.status) == RequestStatus.APPROVED_FINAL.value,
        col(LeaveRequest.end_date) < ctx.today,
    )
    if company_id is not None:
        query = query.where(col(LeaveRequest.company_id) == company_id)
    if request_id is not None:
        query = query.where(col(LeaveRequest.id) == request_id)

    result = await session.execute(query.order_by(col(LeaveRequest.end_date)))
    events: list[LifecycleEvent] = []
    for request in result.scalars().all():
        plan = plan_transition(
            request.status,
            RequestAction.ELAPSE,
            SYSTEM_ACTOR,
            requester_id=request.requester_id,
            manager_id=None,
            end_date=request.end_date,
            today=ctx.today,
        )
        try:
            events.append(await _apply_transition(session, request, plan, SYSTEM_ACTOR.id))
        except StaleStateError:
            logger.info("Request %s was completed concurrently; skipping", request.id)
            continue
        await _recompute_balances(session, request, plan.from_status, plan.to_status, ctx, SYSTEM_ACTOR.id)
    return events


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitRequestPayload,
    ctx: EngineContext,
) -> RequestResponse:
    """Create a leave request for the calling user.

    Flow:
    1. Validate the date range (day-offs are single-day)
    2. Resolve the requester in the person directory
    3. Unless saving a draft: capacity block, day-off eligibility, vacation balance
    4. Reject overlaps with the requester's live requests
    5. Insert in DRAFT, AWAITING_MANAGER or PENDING
    6. Flag advisory team conflicts
    7. Audit, commit, then publish the lifecycle event
    """
    actor = _actor(auth)
    _validate_range(payload.type, payload.start_date, payload.end_date)
    person = await get_person_or_404(auth.company_id, actor.id)
    await lock_person(session, person.id)

    if not payload.draft:
        await _check_submission_rules(session, person, payload.type, payload.start_date, payload.end_date, ctx)
    await _check_overlap(session, auth.company_id, person.id, payload.start_date, payload.end_date)

    status = initial_status(person.manager_id, draft=payload.draft)
    now = now_utc()
    request = LeaveRequest(
        company_id=auth.company_id,
        requester_id=person.id,
        type=payload.type.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        status=status.value,
        created_at=now,
        updated_at=now,
    )
    session.add(request)
    await session.flush()

    warnings: list[str] = []
    if not payload.draft:
        warnings = await _flag_team_conflicts(session, request, person)
        await session.flush()

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=actor.id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=request.id,
        action=AuditAction.CREATE if payload.draft else AuditAction.SUBMIT,
        after_json=model_to_audit_dict(request),
    )

    await session.commit()
    await session.refresh(request)
    logger.info("Request %s created in %s for person=%s", request.id, status, person.id)
    await publish_events(
        [
            build_event(
                company_id=request.company_id,
                request_id=request.id,
                from_state=None,
                to_state=status,
                actor_id=actor.id,
            )
        ]
    )
    return _build_request_response(request, warnings)


async def submit_draft(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: TransitionPayload | None,
    ctx: EngineContext,
) -> RequestResponse:
    """Send a saved draft for approval, running the submission checks."""
    return await _transition(session, auth, request_id, RequestAction.SUBMIT, payload, ctx)


async def approve_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: DecisionPayload | None,
    ctx: EngineContext,
) -> RequestResponse:
    """Approve at the current stage: manager stage to AWAITING_DIRECTOR, director stage to APPROVED_FINAL.

    A manager approving while a teammate is on capacity-affecting medical leave
    in the same period must justify it; one special approval is recorded per
    overlapping leave.
    """
    return await _transition(session, auth, request_id, RequestAction.APPROVE, payload, ctx)


async def reject_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: DecisionPayload | None,
    ctx: EngineContext,
) -> RequestResponse:
    return await _transition(session, auth, request_id, RequestAction.REJECT, payload, ctx)


async def request_info(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: DecisionPayload | None,
    ctx: EngineContext,
) -> RequestResponse:
    """Send the request back to the requester with a question."""
    return await _transition(session, auth, request_id, RequestAction.REQUEST_INFO, payload, ctx)


async def resubmit_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: ResubmitPayload | None,
    ctx: EngineContext,
) -> RequestResponse:
    """Answer an information request; revised dates go through the submission checks again."""
    changes: dict[str, Any] = {}
    if payload is not None:
        if payload.start_date is not None:
            changes["start_date"] = payload.start_date
        if payload.end_date is not None:
            changes["end_date"] = payload.end_date
        if payload.reason is not None:
            changes["reason"] = payload.reason
    return await _transition(session, auth, request_id, RequestAction.RESUBMIT, payload, ctx, changes=changes)


async def cancel_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: TransitionPayload | None,
    ctx: EngineContext,
) -> RequestResponse:
    """Cancel a non-terminal request. The requester or a director can cancel."""
    return await _transition(session, auth, request_id, RequestAction.CANCEL, payload, ctx)


async def complete_elapsed_requests(
    session: AsyncSession,
    ctx: EngineContext,
    company_id: uuid.UUID | None = None,
) -> CompleteElapsedResponse:
    """Move every APPROVED_FINAL request whose end date is before today to COMPLETED."""
    events = await _elapse_due(session, ctx, company_id=company_id)
    if events:
        await session.commit()
        await publish_events(events)
        logger.info("Completed %d elapsed request(s)", len(events))
    return CompleteElapsedResponse(completed=len(events), request_ids=[e.request_id for e in events])


async def get_request(
    session: AsyncSession,
    company_id: uuid.UUID,
    request_id: uuid.UUID,
    ctx: EngineContext,
) -> RequestResponse:
    """Get a single request, completing it first when its period has elapsed."""
    request = await _get_request_or_404(session, company_id, request_id)
    if request.status == RequestStatus.APPROVED_FINAL and request.end_date < ctx.today:
        events = await _elapse_due(session, ctx, company_id=company_id, request_id=request_id)
        if events:
            await session.commit()
            await session.refresh(request)
            await publish_events(events)
    return _build_request_response(request)


async def list_requests(
    session: AsyncSession,
    company_id: uuid.UUID,
    ctx: EngineContext,
    status_filter: RequestStatus | None = None,
    requester_id: uuid.UUID | None = None,
    type_filter: LeaveType | None = None,
    offset: int = 0,
    limit: int = 50,
) -> RequestListResponse:
    """List requests with optional filters, ordered by created_at DESC. Elapsed leave is completed first."""
    await complete_elapsed_requests(session, ctx, company_id=company_id)

    base_filters = [col(LeaveRequest.company_id) == company_id]
    if status_filter is not None:
        base_filters.append(col(LeaveRequest.status) == status_filter.value)
    if requester_id is not None:
        base_filters.append(col(LeaveRequest.requester_id) == requester_id)
    if type_filter is not None:
        base_filters.append(col(LeaveRequest.type) == type_filter.value)

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(*base_filters)
        .order_by(col(LeaveRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    return RequestListResponse(
        items=[_build_request_response(r) for r in requests],
        total=total,
    )


async def list_approvals(
    session: AsyncSession,
    company_id: uuid.UUID,
    request_id: uuid.UUID,
) -> ApprovalListResponse:
    """Decision history of a request, oldest first."""
    await _get_request_or_404(session, company_id, request_id)

    approvals_result = await session.execute(
        select(Approval).where(col(Approval.request_id) == request_id).order_by(col(Approval.created_at))
    )
    approvals = list(approvals_result.scalars().all())

    special_result = await session.execute(
        select(SpecialApproval)
        .where(col(SpecialApproval.request_id) == request_id)
        .order_by(col(SpecialApproval.created_at))
    )

    return ApprovalListResponse(
        items=[
            ApprovalResponse(
                id=a.id,
                request_id=a.request_id,
                approver_id=a.approver_id,
                level=ApprovalLevel(a.level),
                action=ApprovalAction(a.action),
                comment=a.comment,
                created_at=a.created_at,
            )
            for a in approvals
        ],
        special_approvals=[
            SpecialApprovalResponse(
                id=s.id,
                request_id=s.request_id,
                medical_leave_id=s.medical_leave_id,
                manager_id=s.manager_id,
                justification=s.justification,
                created_at=s.created_at,
            )
            for s in special_result.scalars().all()
        ],
        total=len(approvals),
    )


async def register_historical(
    session: AsyncSession,
    auth: AuthContext,
    payload: HistoricalRequestPayload,
    ctx: EngineContext,
) -> RequestResponse:
    """Record leave taken before the system existed, directly in a final state.

    Directors only. Approved entries get a director approval record and count
    toward balances like any other approved leave.
    """
    actor = _actor(auth)
    if not auth.is_director:
        msg = "Only directors may register historical requests"
        raise ForbiddenError(msg)

    _validate_range(payload.type, payload.start_date, payload.end_date)
    await get_person_or_404(auth.company_id, payload.requester_id)
    await lock_person(session, payload.requester_id)
    if payload.status not in INACTIVE_STATUSES:
        await _check_overlap(session, auth.company_id, payload.requester_id, payload.start_date, payload.end_date)

    now = now_utc()
    request = LeaveRequest(
        company_id=auth.company_id,
        requester_id=payload.requester_id,
        type=payload.type.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
        status=payload.status.value,
        is_historical=True,
        original_created_at=payload.original_created_at,
        original_channel=payload.original_channel,
        admin_observations=payload.admin_observations,
        completed_at=now if payload.status == RequestStatus.COMPLETED else None,
        created_at=now,
        updated_at=now,
    )
    session.add(request)
    await session.flush()

    if payload.status in USED_STATUSES:
        session.add(
            Approval(
                request_id=request.id,
                approver_id=actor.id,
                level=ApprovalLevel.DIRECTOR.value,
                action=ApprovalAction.APPROVED.value,
                comment=payload.admin_observations,
            )
        )

    await write_audit_log(
        session,
        company_id=auth.company_id,
        actor_id=actor.id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=request.id,
        action=AuditAction.HISTORICAL_CREATE,
        after_json=model_to_audit_dict(request),
    )
    await _recompute_balances(session, request, None, payload.status, ctx, actor.id)

    await session.commit()
    await session.refresh(request)
    logger.info("Historical request %s registered in %s by %s", request.id, payload.status, actor.id)
    await publish_events(
        [
            build_event(
                company_id=request.company_id,
                request_id=request.id,
                from_state=None,
                to_state=payload.status,
                actor_id=actor.id,
                comment=payload.admin_observations,
            )
        ]
    )
    return _build_request_response(request)


async def get_day_off_eligibility(
    session: AsyncSession,
    company_id: uuid.UUID,
    person_id: uuid.UUID,
    ctx: EngineContext,
    on: date | None = None,
) -> DayOffEligibilityResponse:
    """Whether the person may take a day-off on the given date (today when omitted)."""
    person = await get_person_or_404(company_id, person_id)
    history = await _load_person_requests(session, company_id, person_id)
    evaluated = on or ctx.today
    eligibility = evaluate_day_off(
        person.birth_date,
        has_used_day_off_this_year(history, ctx.today.year),
        person.is_director,
        today=ctx.today,
        request_date=evaluated,
    )
    return DayOffEligibilityResponse(
        person_id=person_id,
        evaluated_date=evaluated,
        allowed=eligibility.allowed,
        reason=eligibility.reason.value if eligibility.reason else None,
        window_start=eligibility.window.start if eligibility.window else None,
        window_end=eligibility.window.end if eligibility.window else None,
        message=eligibility.message,
    )
