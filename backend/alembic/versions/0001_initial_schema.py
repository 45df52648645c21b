"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="ACTIVE", nullable=False),
        sa.Column("hours_budget", sa.Numeric(precision=10, scale=2), server_default="0", nullable=False),
        sa.UniqueConstraint("code", name="uq_projects_code"),
    )

    op.create_table(
        "project_members",
        sa.Column("project_id", sa.Uuid(), sa.ForeignKey("projects.id"), primary_key=True),
        sa.Column("user_id", sa.Uuid(), primary_key=True),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_project_members_user_id", "project_members", ["user_id"])

    op.create_table(
        "budget_adjustments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("project_id", sa.Uuid(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("adjusted_by", sa.Uuid(), nullable=False),
        sa.Column("adjustment_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("previous_budget", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("new_budget", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
    )
    op.create_index("ix_budget_adjustments_project_id", "budget_adjustments", ["project_id"])

    op.create_table(
        "time_entries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=True),
        sa.Column("entry_type", sa.String(length=20), server_default="REGULAR", nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("hours", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("added_by", sa.Uuid(), nullable=True),
        sa.Column("added_by_note", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_time_entries_user_id", "time_entries", ["user_id"])
    op.create_index("ix_time_entries_project_id", "time_entries", ["project_id"])
    op.create_index("ix_time_entries_date", "time_entries", ["date"])
    op.create_index("ix_time_entries_user_date", "time_entries", ["user_id", "date"])

    op.create_table(
        "clock_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("clock_in_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("clock_out_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("project_id", sa.Uuid(), nullable=True),
        sa.Column("auto_clock_out", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("time_entry_id", sa.Uuid(), nullable=True),
    )
    op.create_index("ix_clock_sessions_user_id", "clock_sessions", ["user_id"])
    op.create_index(
        "uq_clock_sessions_open_user",
        "clock_sessions",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("clock_out_at IS NULL"),
        sqlite_where=sa.text("clock_out_at IS NULL"),
    )

    op.create_table(
        "leave_requests",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("hours", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="PENDING", nullable=False),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_note", sa.String(), nullable=True),
        sa.Column("added_by", sa.Uuid(), nullable=True),
        sa.Column("time_entry_id", sa.Uuid(), nullable=True),
    )
    op.create_index("ix_leave_requests_user_id", "leave_requests", ["user_id"])
    op.create_index("ix_leave_requests_status", "leave_requests", ["status"])
    op.create_index("ix_leave_requests_user_status", "leave_requests", ["user_id", "status"])

    op.create_table(
        "paid_holidays",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("hours", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
    )
    op.create_index("ix_paid_holidays_date", "paid_holidays", ["date"])

    op.create_table(
        "paid_holiday_assignments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("paid_holiday_id", sa.Uuid(), sa.ForeignKey("paid_holidays.id"), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("hours", sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column("assigned_by", sa.Uuid(), nullable=False),
        sa.Column("assigned_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("paid_holiday_id", "user_id", name="uq_holiday_assignment_user"),
    )
    op.create_index(
        "ix_paid_holiday_assignments_paid_holiday_id", "paid_holiday_assignments", ["paid_holiday_id"]
    )
    op.create_index("ix_paid_holiday_assignments_user_id", "paid_holiday_assignments", ["user_id"])


def downgrade() -> None:
    op.drop_table("paid_holiday_assignments")
    op.drop_table("paid_holidays")
    op.drop_table("leave_requests")
    op.drop_table("clock_sessions")
    op.drop_table("time_entries")
    op.drop_table("budget_adjustments")
    op.drop_table("project_members")
    op.drop_table("projects")
