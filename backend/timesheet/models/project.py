# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from timesheet.models.base import TimestampMixin, UUIDBase, utc_now
from timesheet.models.enums import ProjectStatus


class Project(UUIDBase, TimestampMixin, table=True):
    """A billable project; hours_budget is the running total of its adjustments."""

    __tablename__ = "projects"
    __table_args__ = (sa.UniqueConstraint("code", name="uq_projects_code"),)

    name: str = Field(max_length=255)
    code: str = Field(max_length=50)
    description: str | None = None
    status: str = Field(default=ProjectStatus.ACTIVE, max_length=20, sa_column_kwargs={"server_default": "ACTIVE"})
    hours_budget: Decimal = Field(
        default=Decimal("0.00"), max_digits=10, decimal_places=2, sa_column_kwargs={"server_default": "0"}
    )


class ProjectMember(SQLModel, table=True):
    """Membership of a user in a project; gates regular time entry."""

    __tablename__ = "project_members"

    project_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("projects.id"), primary_key=True),
    )
    user_id: uuid.UUID = Field(primary_key=True, index=True)
    assigned_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )


class BudgetAdjustment(UUIDBase, TimestampMixin, table=True):
    """Immutable record of a change to a project's hour budget."""

    __tablename__ = "budget_adjustments"

    project_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("projects.id"), nullable=False, index=True),
    )
    adjusted_by: uuid.UUID
    adjustment_amount: Decimal = Field(max_digits=10, decimal_places=2)
    previous_budget: Decimal = Field(max_digits=10, decimal_places=2)
    new_budget: Decimal = Field(max_digits=10, decimal_places=2)
    reason: str
