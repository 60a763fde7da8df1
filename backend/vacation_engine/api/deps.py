# ruff: noqa: B008, TC003
from __future__ import annotations

import logging
import uuid
from typing import Annotated

from fastapi import Depends, Header, Path

from vacation_engine.exceptions import ForbiddenError
from vacation_engine.models.enums import Role
from vacation_engine.schemas.auth import AuthContext
from vacation_engine.services.context import EngineContext, get_engine_context
from vacation_engine.services.people import get_person_directory

logger = logging.getLogger(__name__)


async def get_auth_context(
    x_company_id: uuid.UUID = Header(),
    x_user_id: uuid.UUID = Header(),
    x_role: Role = Header(default=Role.COLLABORATOR),
    x_is_admin: bool = Header(default=False),
) -> AuthContext:
    """Build the dev auth context from request headers.

    The role is taken from the person directory, not from ``X-Role``; callers
    unknown to the directory act as collaborators.
    """
    person = await get_person_directory().get_person(x_company_id, x_user_id)
    role = person.role if person is not None else Role.COLLABORATOR
    if role != x_role:
        logger.warning("X-Role %s ignored for user %s; directory role is %s", x_role, x_user_id, role)
    return AuthContext(company_id=x_company_id, user_id=x_user_id, role=role, is_admin=x_is_admin)


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]
ContextDep = Annotated[EngineContext, Depends(get_engine_context)]


async def require_director(
    auth: AuthDep,
) -> AuthContext:
    """Require the DIRECTOR role for the request."""
    if auth.role != Role.DIRECTOR:
        msg = "Director access required"
        raise ForbiddenError(msg)
    return auth


DirectorDep = Annotated[AuthContext, Depends(require_director)]


async def validate_company_scope(
    company_id: uuid.UUID = Path(),
    auth: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    """Ensure the path company_id matches the auth header company_id."""
    if company_id != auth.company_id:
        msg = "Company ID mismatch"
        raise ForbiddenError(msg)
    return auth
