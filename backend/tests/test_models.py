from __future__ import annotations

import uuid
from datetime import date

from vacation_engine.models import (
    Approval,
    AuditLog,
    LeaveRequest,
    MedicalLeave,
    SpecialApproval,
    SQLModel,
    VacationBalance,
)
from vacation_engine.models.enums import MedicalLeaveStatus, RequestStatus

EXPECTED_TABLES = {
    "approval",
    "audit_log",
    "leave_request",
    "medical_leave",
    "special_approval",
    "vacation_balance",
}


def test_all_tables_registered() -> None:
    assert set(SQLModel.metadata.tables.keys()) == EXPECTED_TABLES


def test_leave_request_defaults() -> None:
    request = LeaveRequest(
        company_id=uuid.uuid4(),
        requester_id=uuid.uuid4(),
        type="VACATION",
        start_date=date(2025, 7, 1),
        end_date=date(2025, 7, 10),
    )
    assert request.status == RequestStatus.DRAFT
    assert request.version == 1
    assert request.conflict_flag is False
    assert request.conflict_refs is None
    assert request.is_historical is False
    assert request.completed_at is None
    assert request.id is not None


def test_leave_request_range_is_checked_in_the_database() -> None:
    constraints = {c.name for c in SQLModel.metadata.tables["leave_request"].constraints}
    assert "ck_leave_request_range" in constraints


def test_approval_instantiation() -> None:
    approval = Approval(
        request_id=uuid.uuid4(),
        approver_id=uuid.uuid4(),
        level="MANAGER",
        action="APPROVED",
    )
    assert approval.comment is None


def test_special_approval_requires_leave_reference() -> None:
    table = SQLModel.metadata.tables["special_approval"]
    foreign_tables = {fk.column.table.name for fk in table.foreign_keys}
    assert foreign_tables == {"leave_request", "medical_leave"}

    special = SpecialApproval(
        request_id=uuid.uuid4(),
        medical_leave_id=uuid.uuid4(),
        manager_id=uuid.uuid4(),
        justification="Coverage arranged",
    )
    assert special.justification == "Coverage arranged"


def test_medical_leave_defaults() -> None:
    leave = MedicalLeave(
        company_id=uuid.uuid4(),
        person_id=uuid.uuid4(),
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 30),
        created_by=uuid.uuid4(),
    )
    assert leave.status == MedicalLeaveStatus.ACTIVE
    assert leave.affects_team_capacity is True
    assert leave.ended_at is None


def test_vacation_balance_defaults() -> None:
    balance = VacationBalance(
        company_id=uuid.uuid4(),
        person_id=uuid.uuid4(),
        year=2025,
        contract_anniversary=date(2025, 3, 10),
    )
    assert balance.accrued_days == 0
    assert balance.used_days == 0
    assert balance.balance_days == 0
    assert balance.is_manual is False
    assert balance.manual_justification is None
    assert balance.version == 1


def test_vacation_balance_is_keyed_by_person_and_year() -> None:
    table = SQLModel.metadata.tables["vacation_balance"]
    assert [c.name for c in table.primary_key.columns] == ["company_id", "person_id", "year"]


def test_audit_log_instantiation() -> None:
    log = AuditLog(
        company_id=uuid.uuid4(),
        actor_id=uuid.uuid4(),
        entity_type="REQUEST",
        entity_id=uuid.uuid4(),
        action="CREATE",
    )
    assert log.before_json is None
    assert log.after_json is None
