# ruff: noqa: TC001, TC003
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import Self

from pydantic import BaseModel, Field, model_validator

from timesheet.models.enums import EmploymentType


class CreateHolidayPayload(BaseModel):
    """Request body for declaring a paid holiday."""

    name: str = Field(min_length=1, max_length=255)
    date: datetime.date
    hours: Decimal = Field(default=Decimal("8"), gt=0, max_digits=5, decimal_places=2)
    description: str | None = None


class UpdateHolidayPayload(BaseModel):
    """Partial update of a holiday. Existing assignments keep their hours."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    date: datetime.date | None = None
    hours: Decimal | None = Field(default=None, gt=0, max_digits=5, decimal_places=2)
    description: str | None = None


class AssignHolidayPayload(BaseModel):
    """Targets for a fan-out assignment: explicit users or every active member."""

    user_ids: list[uuid.UUID] = Field(default_factory=list)
    all_active: bool = False

    @model_validator(mode="after")
    def _validate_targets(self) -> Self:
        if not self.all_active and not self.user_ids:
            msg = "user_ids must be provided unless all_active is set"
            raise ValueError(msg)
        return self


class HolidayResponse(BaseModel):
    """Response schema for a paid holiday."""

    id: uuid.UUID
    name: str
    date: datetime.date
    hours: Decimal
    description: str | None
    created_by: uuid.UUID
    created_at: datetime.datetime
    assigned_hours: Decimal | None = None  # set on a member's own listing


class HolidayListResponse(BaseModel):
    """List of paid holidays."""

    items: list[HolidayResponse]
    total: int


class AssignHolidayResponse(BaseModel):
    """Outcome of a fan-out assignment."""

    holiday_id: uuid.UUID
    assigned_count: int


class HolidayAssignmentResponse(BaseModel):
    """A single user's grant for a holiday."""

    user_id: uuid.UUID
    full_name: str | None
    email: str | None
    employment_type: EmploymentType | None
    hours: Decimal
    assigned_by: uuid.UUID
    assigned_at: datetime.datetime


class HolidayAssignmentListResponse(BaseModel):
    """All assignments for a holiday."""

    items: list[HolidayAssignmentResponse]
    total: int
