# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from vacation_engine.models.enums import Role


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    company_id: uuid.UUID
    user_id: uuid.UUID
    role: Role = Role.COLLABORATOR
    is_admin: bool = False

    @property
    def is_director(self) -> bool:
        return self.role == Role.DIRECTOR
