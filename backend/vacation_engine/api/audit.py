# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query

from vacation_engine.api.deps import AuthDep, validate_company_scope
from vacation_engine.db import SessionDep
from vacation_engine.models.enums import AuditAction, AuditEntityType
from vacation_engine.schemas.audit import AuditLogListResponse
from vacation_engine.services import audit as audit_service

audit_router = APIRouter(
    prefix="/companies/{company_id}",
    tags=["audit"],
    dependencies=[Depends(validate_company_scope)],
)


@audit_router.get("/audit-log", response_model=AuditLogListResponse)
async def query_audit_log(
    session: SessionDep,
    auth: AuthDep,
    entity_type: AuditEntityType | None = Query(default=None),
    entity_id: uuid.UUID | None = Query(default=None),
    action: AuditAction | None = Query(default=None),
    actor_id: uuid.UUID | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditLogListResponse:
    """Query the audit trail with optional filters (directors and admins)."""
    return await audit_service.query_audit_log(
        session,
        auth,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        actor_id=actor_id,
        start_date=start_date,
        end_date=end_date,
        offset=offset,
        limit=limit,
    )
