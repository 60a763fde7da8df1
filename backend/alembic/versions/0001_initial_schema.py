"""Initial schema: leave requests, approvals, medical leaves, balances, audit log.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "leave_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("requester_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=50), server_default="DRAFT", nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("conflict_flag", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("conflict_refs", sa.String(), nullable=True),
        sa.Column("is_historical", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("original_created_at", sa.Date(), nullable=True),
        sa.Column("original_channel", sa.String(length=100), nullable=True),
        sa.Column("admin_observations", sa.String(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_range"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leave_request_company_id", "leave_request", ["company_id"])
    op.create_index("ix_leave_request_requester_id", "leave_request", ["requester_id"])
    op.create_index("ix_leave_request_status", "leave_request", ["status"])
    op.create_index("ix_leave_request_company_status", "leave_request", ["company_id", "status"])
    op.create_index("ix_leave_request_requester_range", "leave_request", ["requester_id", "start_date", "end_date"])

    op.create_table(
        "medical_leave",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("person_id", sa.Uuid(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=50), server_default="ACTIVE", nullable=False),
        sa.Column("affects_team_capacity", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("justification", sa.String(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("start_date <= end_date", name="ck_medical_leave_range"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_medical_leave_company_id", "medical_leave", ["company_id"])
    op.create_index("ix_medical_leave_person_id", "medical_leave", ["person_id"])
    op.create_index("ix_medical_leave_company_status", "medical_leave", ["company_id", "status"])

    op.create_table(
        "approval",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("request_id", sa.Uuid(), nullable=False),
        sa.Column("approver_id", sa.Uuid(), nullable=False),
        sa.Column("level", sa.String(length=50), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("comment", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["request_id"], ["leave_request.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_approval_request_id", "approval", ["request_id"])

    op.create_table(
        "special_approval",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("request_id", sa.Uuid(), nullable=False),
        sa.Column("medical_leave_id", sa.Uuid(), nullable=False),
        sa.Column("manager_id", sa.Uuid(), nullable=False),
        sa.Column("justification", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["request_id"], ["leave_request.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["medical_leave_id"], ["medical_leave.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_special_approval_request_id", "special_approval", ["request_id"])

    op.create_table(
        "vacation_balance",
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("person_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("accrued_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("used_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("balance_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("contract_anniversary", sa.Date(), nullable=False),
        sa.Column("is_manual", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("manual_justification", sa.String(), nullable=True),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
        sa.Column("manual_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.PrimaryKeyConstraint("company_id", "person_id", "year"),
    )
    op.create_index("ix_vacation_balance_person_id", "vacation_balance", ["person_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_company_created", "audit_log", ["company_id", "created_at"])
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("vacation_balance")
    op.drop_table("special_approval")
    op.drop_table("approval")
    op.drop_table("medical_leave")
    op.drop_table("leave_request")
