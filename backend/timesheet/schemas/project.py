# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from timesheet.models.enums import ProjectStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateProjectPayload(BaseModel):
    """Request body for creating a project with an optional starting budget."""

    name: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None
    hours_budget: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)


class UpdateProjectPayload(BaseModel):
    """Partial update of project metadata. The budget changes only via adjustments."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = None
    status: ProjectStatus | None = None


class BudgetAdjustmentPayload(BaseModel):
    """Request body for an admin budget adjustment."""

    amount: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Signed amount: positive to add hours, negative to deduct",
    )
    reason: str | None = Field(default=None, max_length=1000)


class AssignMembersPayload(BaseModel):
    """Users to add to a project."""

    user_ids: list[uuid.UUID] = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ProjectResponse(BaseModel):
    """Response schema for a project."""

    id: uuid.UUID
    name: str
    code: str
    description: str | None
    status: ProjectStatus
    hours_budget: Decimal
    created_at: datetime


class ProjectUtilizationResponse(ProjectResponse):
    """A project with hours logged against its budget."""

    logged_hours: Decimal
    remaining_hours: Decimal
    percent_used: int


class ProjectListResponse(BaseModel):
    """List of projects."""

    items: list[ProjectResponse]
    total: int


class BudgetAdjustmentResponse(BaseModel):
    """A single immutable budget adjustment record."""

    id: uuid.UUID
    project_id: uuid.UUID
    adjusted_by: uuid.UUID
    adjustment_amount: Decimal
    previous_budget: Decimal
    new_budget: Decimal
    reason: str
    created_at: datetime


class BudgetHistoryResponse(BaseModel):
    """A project's budget adjustments, oldest first."""

    items: list[BudgetAdjustmentResponse]
    total: int


class ProjectMemberResponse(BaseModel):
    """A user assigned to a project."""

    user_id: uuid.UUID
    full_name: str | None
    email: str | None
    assigned_at: datetime


class ProjectMemberListResponse(BaseModel):
    """All members of a project."""

    items: list[ProjectMemberResponse]
    total: int
