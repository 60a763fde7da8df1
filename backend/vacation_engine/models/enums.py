from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Organisational role driving the approval flow."""

    COLLABORATOR = "COLLABORATOR"
    MANAGER = "MANAGER"
    DIRECTOR = "DIRECTOR"


class ContractModel(enum.StrEnum):
    """Employment contract model. Allowance (abono) variants only affect cash-out eligibility."""

    CLT = "CLT"
    CLT_FIXED_ALLOWANCE = "CLT_FIXED_ALLOWANCE"
    CLT_FREE_ALLOWANCE = "CLT_FREE_ALLOWANCE"
    PJ = "PJ"


class LeaveType(enum.StrEnum):
    """Kind of leave being requested."""

    VACATION = "VACATION"
    DAY_OFF = "DAY_OFF"
    MEDICAL_LEAVE = "MEDICAL_LEAVE"


class RequestStatus(enum.StrEnum):
    """State machine for leave requests."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    AWAITING_MANAGER = "AWAITING_MANAGER"
    AWAITING_DIRECTOR = "AWAITING_DIRECTOR"
    APPROVED_FINAL = "APPROVED_FINAL"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    INFO_REQUESTED = "INFO_REQUESTED"


class RequestAction(enum.StrEnum):
    """Actions that drive request transitions."""

    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REQUEST_INFO = "REQUEST_INFO"
    RESUBMIT = "RESUBMIT"
    CANCEL = "CANCEL"
    ELAPSE = "ELAPSE"


class ApprovalLevel(enum.StrEnum):
    """Stage at which an approval decision was taken."""

    MANAGER = "MANAGER"
    DIRECTOR = "DIRECTOR"


class ApprovalAction(enum.StrEnum):
    """Decision recorded in an approval row."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    INFO_REQUESTED = "INFO_REQUESTED"


class MedicalLeaveStatus(enum.StrEnum):
    """Lifecycle of a medical leave."""

    ACTIVE = "ACTIVE"
    ENDED = "ENDED"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    REQUEST = "REQUEST"
    BALANCE = "BALANCE"
    MEDICAL_LEAVE = "MEDICAL_LEAVE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REQUEST_INFO = "REQUEST_INFO"
    RESUBMIT = "RESUBMIT"
    CANCEL = "CANCEL"
    COMPLETE = "COMPLETE"
    HISTORICAL_CREATE = "HISTORICAL_CREATE"
    MANUAL_OVERRIDE = "MANUAL_OVERRIDE"
    RESTORE_AUTOMATIC = "RESTORE_AUTOMATIC"
    RECOMPUTE = "RECOMPUTE"
    END = "END"
