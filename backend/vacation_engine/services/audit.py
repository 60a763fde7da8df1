"""Audit trail: JSON snapshots of mutated rows and the read side over them."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from vacation_engine.exceptions import ForbiddenError
from vacation_engine.models.audit import AuditLog
from vacation_engine.schemas.audit import AuditLogEntryResponse, AuditLogListResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from vacation_engine.models.enums import AuditAction, AuditEntityType
    from vacation_engine.schemas.auth import AuthContext

# Bookkeeping columns that change on every write and carry no business meaning.
_VOLATILE_FIELDS = frozenset({"updated_at"})


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Snapshot a row as a JSON-safe dict.

    UUIDs become strings, dates and datetimes ISO strings, enums their value.
    ``updated_at`` is left out; the audit row's own ``created_at`` records when.
    """
    data: dict[str, Any] = {}
    for key, value in model.model_dump().items():
        if key in _VOLATILE_FIELDS:
            continue
        if isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, (datetime, date)):
            data[key] = value.isoformat()
        elif isinstance(value, Enum):
            data[key] = value.value
        else:
            data[key] = value
    return data


async def write_audit_log(
    session: AsyncSession,
    *,
    company_id: uuid.UUID,
    actor_id: uuid.UUID,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Add an audit row to the caller's transaction. The caller commits."""
    entry = AuditLog(
        company_id=company_id,
        actor_id=actor_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry


async def query_audit_log(
    session: AsyncSession,
    auth: AuthContext,
    *,
    entity_type: AuditEntityType | None = None,
    entity_id: uuid.UUID | None = None,
    action: AuditAction | None = None,
    actor_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Newest-first audit entries of the caller's company. Directors and admins only.

    ``start_date``/``end_date`` are inclusive calendar days on ``created_at``.
    """
    if not (auth.is_director or auth.is_admin):
        msg = "Only directors or admins may read the audit log"
        raise ForbiddenError(msg)

    filters = [col(AuditLog.company_id) == auth.company_id]
    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type.value)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)
    if action is not None:
        filters.append(col(AuditLog.action) == action.value)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)
    if start_date is not None:
        filters.append(col(AuditLog.created_at) >= datetime.combine(start_date, time.min))
    if end_date is not None:
        filters.append(col(AuditLog.created_at) < datetime.combine(end_date + timedelta(days=1), time.min))

    total = (await session.execute(select(func.count()).select_from(AuditLog).where(*filters))).scalar_one()
    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at).desc()).offset(offset).limit(limit)
    )
    return AuditLogListResponse(
        items=[AuditLogEntryResponse.model_validate(entry, from_attributes=True) for entry in result.scalars().all()],
        total=total,
    )
