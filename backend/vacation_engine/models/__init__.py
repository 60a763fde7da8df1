from sqlmodel import SQLModel

from vacation_engine.models.approval import Approval, SpecialApproval
from vacation_engine.models.audit import AuditLog
from vacation_engine.models.balance import VacationBalance
from vacation_engine.models.base import DateRangeMixin, TimestampMixin, UpdatedAtMixin, UUIDBase, VersionedMixin
from vacation_engine.models.enums import (
    ApprovalAction,
    ApprovalLevel,
    AuditAction,
    AuditEntityType,
    ContractModel,
    LeaveType,
    MedicalLeaveStatus,
    RequestAction,
    RequestStatus,
    Role,
)
from vacation_engine.models.medical_leave import MedicalLeave
from vacation_engine.models.request import LeaveRequest

__all__ = [
    "Approval",
    "ApprovalAction",
    "ApprovalLevel",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "ContractModel",
    "DateRangeMixin",
    "LeaveRequest",
    "LeaveType",
    "MedicalLeave",
    "MedicalLeaveStatus",
    "RequestAction",
    "RequestStatus",
    "Role",
    "SQLModel",
    "SpecialApproval",
    "TimestampMixin",
    "UUIDBase",
    "UpdatedAtMixin",
    "VacationBalance",
    "VersionedMixin",
]
