# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status

from vacation_engine.api.deps import AuthDep, ContextDep, DirectorDep, validate_company_scope
from vacation_engine.db import SessionDep
from vacation_engine.models.enums import LeaveType, RequestStatus
from vacation_engine.schemas.request import (
    ApprovalListResponse,
    CompleteElapsedResponse,
    DecisionPayload,
    HistoricalRequestPayload,
    RequestListResponse,
    RequestResponse,
    ResubmitPayload,
    SubmitRequestPayload,
    TransitionPayload,
)
from vacation_engine.services import request as request_service

requests_router = APIRouter(
    prefix="/companies/{company_id}/requests",
    tags=["requests"],
    dependencies=[Depends(validate_company_scope)],
)


@requests_router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    payload: SubmitRequestPayload,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
) -> RequestResponse:
    """Submit a new leave request, or save it as a draft."""
    return await request_service.submit_request(session, auth, payload, ctx)


@requests_router.get("", response_model=RequestListResponse)
async def list_requests(
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    requester_id: uuid.UUID | None = Query(default=None),
    type_filter: LeaveType | None = Query(default=None, alias="type"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> RequestListResponse:
    """List leave requests with optional filters."""
    return await request_service.list_requests(
        session, auth.company_id, ctx, status_filter, requester_id, type_filter, offset, limit
    )


@requests_router.post("/historical", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def register_historical(
    payload: HistoricalRequestPayload,
    session: SessionDep,
    auth: DirectorDep,
    ctx: ContextDep,
) -> RequestResponse:
    """Record a past leave directly in a final state (director only)."""
    return await request_service.register_historical(session, auth, payload, ctx)


@requests_router.post("/complete-elapsed", response_model=CompleteElapsedResponse)
async def complete_elapsed(
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
) -> CompleteElapsedResponse:
    """Complete every approved request whose period has passed."""
    return await request_service.complete_elapsed_requests(session, ctx, company_id=auth.company_id)


@requests_router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
) -> RequestResponse:
    """Get a single leave request."""
    return await request_service.get_request(session, auth.company_id, request_id, ctx)


@requests_router.get("/{request_id}/approvals", response_model=ApprovalListResponse)
async def list_approvals(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ApprovalListResponse:
    """Decision history of a request."""
    return await request_service.list_approvals(session, auth.company_id, request_id)


@requests_router.post("/{request_id}/submit", response_model=RequestResponse)
async def submit_draft(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    payload: TransitionPayload | None = None,
) -> RequestResponse:
    """Send a draft for approval."""
    return await request_service.submit_draft(session, auth, request_id, payload, ctx)


@requests_router.post("/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Approve the request at its current stage."""
    return await request_service.approve_request(session, auth, request_id, payload, ctx)


@requests_router.post("/{request_id}/reject", response_model=RequestResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Reject the request at its current stage."""
    return await request_service.reject_request(session, auth, request_id, payload, ctx)


@requests_router.post("/{request_id}/request-info", response_model=RequestResponse)
async def request_info(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Ask the requester for more information."""
    return await request_service.request_info(session, auth, request_id, payload, ctx)


@requests_router.post("/{request_id}/resubmit", response_model=RequestResponse)
async def resubmit_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    payload: ResubmitPayload | None = None,
) -> RequestResponse:
    """Resubmit after an information request."""
    return await request_service.resubmit_request(session, auth, request_id, payload, ctx)


@requests_router.post("/{request_id}/cancel", response_model=RequestResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    ctx: ContextDep,
    payload: TransitionPayload | None = None,
) -> RequestResponse:
    """Cancel a request."""
    return await request_service.cancel_request(session, auth, request_id, payload, ctx)
