"""Shared test data: a fixed date, a small organisation and auth headers."""

from __future__ import annotations

import uuid
from datetime import date

from vacation_engine.models.enums import ContractModel, Role
from vacation_engine.schemas.auth import AuthContext
from vacation_engine.services.people import PersonInfo

TODAY = date(2025, 6, 2)

COMPANY_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")
DIRECTOR_ID = uuid.UUID("00000000-0000-4000-8000-0000000000d1")
OTHER_DIRECTOR_ID = uuid.UUID("00000000-0000-4000-8000-0000000000d2")
MANAGER_ID = uuid.UUID("00000000-0000-4000-8000-0000000000a1")
EMPLOYEE_ID = uuid.UUID("00000000-0000-4000-8000-0000000000e1")
TEAMMATE_ID = uuid.UUID("00000000-0000-4000-8000-0000000000e2")
NEWCOMER_ID = uuid.UUID("00000000-0000-4000-8000-0000000000e3")
CONTRACTOR_ID = uuid.UUID("00000000-0000-4000-8000-0000000000e4")


def headers(user_id: uuid.UUID, role: Role = Role.COLLABORATOR, *, is_admin: bool = False) -> dict[str, str]:
    """Dev auth headers for a user of the test company."""
    result = {"X-Company-Id": str(COMPANY_ID), "X-User-Id": str(user_id), "X-Role": role.value}
    if is_admin:
        result["X-Is-Admin"] = "true"
    return result


def build_people() -> list[PersonInfo]:
    """A small organisation: two directors, one manager with three reports, one PJ contractor."""
    return [
        PersonInfo(
            id=DIRECTOR_ID,
            company_id=COMPANY_ID,
            name="Diana Director",
            email="diana@example.com",
            role=Role.DIRECTOR,
            team="board",
            contract_start_date=date(2015, 1, 5),
            birth_date=date(1975, 2, 10),
        ),
        PersonInfo(
            id=OTHER_DIRECTOR_ID,
            company_id=COMPANY_ID,
            name="Otto Director",
            email="otto@example.com",
            role=Role.DIRECTOR,
            team="board",
            contract_start_date=date(2016, 8, 1),
        ),
        PersonInfo(
            id=MANAGER_ID,
            company_id=COMPANY_ID,
            name="Marta Manager",
            email="marta@example.com",
            role=Role.MANAGER,
            manager_id=DIRECTOR_ID,
            team="platform",
            contract_start_date=date(2019, 4, 1),
            birth_date=date(1985, 11, 20),
        ),
        PersonInfo(
            id=EMPLOYEE_ID,
            company_id=COMPANY_ID,
            name="Eva Employee",
            email="eva@example.com",
            manager_id=MANAGER_ID,
            team="platform",
            contract_start_date=date(2023, 3, 10),
            contract_model=ContractModel.CLT,
            birth_date=date(1990, 6, 15),
        ),
        PersonInfo(
            id=TEAMMATE_ID,
            company_id=COMPANY_ID,
            name="Theo Teammate",
            email="theo@example.com",
            manager_id=MANAGER_ID,
            team="platform",
            contract_start_date=date(2022, 1, 10),
            contract_model=ContractModel.CLT_FIXED_ALLOWANCE,
            birth_date=date(1992, 9, 1),
        ),
        PersonInfo(
            id=NEWCOMER_ID,
            company_id=COMPANY_ID,
            name="Nina Newcomer",
            email="nina@example.com",
            manager_id=MANAGER_ID,
            team="platform",
        ),
        PersonInfo(
            id=CONTRACTOR_ID,
            company_id=COMPANY_ID,
            name="Paulo Contractor",
            email="paulo@example.com",
            manager_id=MANAGER_ID,
            team="data",
            contract_start_date=date(2020, 7, 1),
            contract_model=ContractModel.PJ,
            birth_date=date(1988, 1, 30),
        ),
    ]


def auth(user_id: uuid.UUID, role: Role = Role.COLLABORATOR, *, is_admin: bool = False) -> AuthContext:
    """Service-level auth context for a user of the test company."""
    return AuthContext(company_id=COMPANY_ID, user_id=user_id, role=role, is_admin=is_admin)
