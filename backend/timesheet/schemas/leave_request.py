# ruff: noqa: TC001, TC003
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from timesheet.models.enums import LeaveStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitLeavePayload(BaseModel):
    """Request body for a member asking for a day of leave."""

    date: datetime.date
    hours: Decimal = Field(default=Decimal("8"), gt=0, max_digits=5, decimal_places=2)
    reason: str | None = None


class AdminGrantLeavePayload(SubmitLeavePayload):
    """Request body for an admin granting leave directly to a user."""

    user_id: uuid.UUID


class RejectLeavePayload(BaseModel):
    """Request body for rejecting a request; the note is mandatory."""

    note: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    user_id: uuid.UUID
    date: datetime.date
    hours: Decimal
    reason: str | None
    status: LeaveStatus
    reviewed_by: uuid.UUID | None
    reviewed_at: datetime.datetime | None
    review_note: str | None
    added_by: uuid.UUID | None
    time_entry_id: uuid.UUID | None
    created_at: datetime.datetime


class LeaveRequestListResponse(BaseModel):
    """List of leave requests."""

    items: list[LeaveRequestResponse]
    total: int
