# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from vacation_engine.models.enums import ContractModel, Role


class PersonInfo(BaseModel):
    """Person metadata owned by HR; the engine only reads it."""

    id: uuid.UUID
    company_id: uuid.UUID
    name: str
    email: str
    role: Role = Role.COLLABORATOR
    manager_id: uuid.UUID | None = None
    team: str | None = None  # sub-team label, used for advisory conflict checks
    contract_start_date: date | None = None
    contract_model: ContractModel = ContractModel.CLT
    birth_date: date | None = None
    active: bool = True

    @property
    def is_director(self) -> bool:
        return self.role == Role.DIRECTOR

    @property
    def is_management(self) -> bool:
        return self.role in (Role.MANAGER, Role.DIRECTOR)


@runtime_checkable
class PersonDirectory(Protocol):
    """Interface for the HR person directory."""

    async def get_person(self, company_id: uuid.UUID, person_id: uuid.UUID) -> PersonInfo | None:
        """Fetch a person. Returns None if not found."""
        ...

    async def list_people(self, company_id: uuid.UUID) -> list[PersonInfo]:
        """List all people for a company, active or not."""
        ...


class InMemoryPersonDirectory:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._people: dict[tuple[uuid.UUID, uuid.UUID], PersonInfo] = {}

    def seed(self, person: PersonInfo) -> None:
        """Seed a person for testing."""
        self._people[(person.company_id, person.id)] = person

    async def get_person(self, company_id: uuid.UUID, person_id: uuid.UUID) -> PersonInfo | None:
        """Fetch a person. Returns None if not found."""
        return self._people.get((company_id, person_id))

    async def list_people(self, company_id: uuid.UUID) -> list[PersonInfo]:
        """List all people for a company, active or not."""
        return [p for p in self._people.values() if p.company_id == company_id]


_person_directory: PersonDirectory = InMemoryPersonDirectory()


def get_person_directory() -> PersonDirectory:
    """Return the configured person directory."""
    return _person_directory


def set_person_directory(directory: PersonDirectory) -> None:
    """Override the directory (for testing or production wiring)."""
    global _person_directory
    _person_directory = directory


async def list_teammates(directory: PersonDirectory, person: PersonInfo) -> list[PersonInfo]:
    """Active people reporting to the same manager, excluding the person."""
    if person.manager_id is None:
        return []
    people = await directory.list_people(person.company_id)
    return [p for p in people if p.active and p.manager_id == person.manager_id and p.id != person.id]


async def list_direct_reports(directory: PersonDirectory, company_id: uuid.UUID, manager_id: uuid.UUID) -> list[PersonInfo]:
    """Active people whose manager is manager_id."""
    people = await directory.list_people(company_id)
    return [p for p in people if p.active and p.manager_id == manager_id]
