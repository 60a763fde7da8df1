# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from vacation_engine.models.enums import ContractModel

# ---------------------------------------------------------------------------
# Balance response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    """Vacation balance of a person for one year.

    For manual balances, accrued_days and used_days are the automatic values
    kept for reference; balance_days is the authoritative override.
    """

    person_id: uuid.UUID
    year: int
    accrued_days: int
    used_days: int
    balance_days: int
    contract_anniversary: date
    is_manual: bool
    manual_justification: str | None
    updated_by: uuid.UUID | None
    manual_updated_at: datetime | None
    accumulation_warning: bool = False
    persisted: bool = False
    version: int | None = None


class BalanceExportItem(BaseModel):
    """One row of the yearly export: the balance plus the person fields exporters need."""

    person_id: uuid.UUID
    name: str
    email: str
    contract_model: ContractModel
    contract_start_date: date | None
    year: int
    accrued_days: int | None
    used_days: int | None
    balance_days: int | None
    is_manual: bool
    accumulation_warning: bool
    missing_contract_date: bool


class BalanceExportResponse(BaseModel):
    items: list[BalanceExportItem]
    total: int


class VacationSummaryResponse(BaseModel):
    """Company-wide totals for a year, over people with a contract date."""

    year: int
    people_count: int
    missing_contract_date_count: int
    total_accrued_days: int
    total_used_days: int
    total_balance_days: int
    manual_count: int
    accumulation_warning_count: int


# ---------------------------------------------------------------------------
# Override payloads
# ---------------------------------------------------------------------------


class ManualBalancePayload(BaseModel):
    """Request body for a manual balance override."""

    balance_days: int
    justification: str = Field(max_length=2000)
