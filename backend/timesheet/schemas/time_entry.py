# ruff: noqa: TC001, TC003
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

from pydantic import BaseModel, Field

from timesheet.models.enums import EntryType

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateTimeEntryPayload(BaseModel):
    """Request body for a member logging their own time."""

    project_id: uuid.UUID | None = None
    entry_type: EntryType = EntryType.REGULAR
    date: datetime.date
    hours: Decimal = Field(gt=0, max_digits=5, decimal_places=2)
    description: str | None = None


class UpdateTimeEntryPayload(BaseModel):
    """Partial update of an entry; omitted fields are left unchanged."""

    project_id: uuid.UUID | None = None
    hours: Decimal | None = Field(default=None, gt=0, max_digits=5, decimal_places=2)
    description: str | None = None


class AdminCreateTimeEntryPayload(CreateTimeEntryPayload):
    """Request body for an admin logging time on a member's behalf."""

    user_id: uuid.UUID
    note: str | None = Field(default=None, max_length=500)


class AdminUpdateTimeEntryPayload(UpdateTimeEntryPayload):
    """Admin edit of any entry, with an optional note explaining it."""

    note: str | None = Field(default=None, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AllowedDateRange(BaseModel):
    """Inclusive range of dates a member may currently edit."""

    min_date: datetime.date
    max_date: datetime.date


class TimeEntryResponse(BaseModel):
    """Response schema for a single time entry."""

    id: uuid.UUID
    user_id: uuid.UUID
    project_id: uuid.UUID | None
    entry_type: EntryType
    date: datetime.date
    hours: Decimal
    description: str | None
    added_by: uuid.UUID | None
    added_by_note: str | None
    created_at: datetime.datetime
    editable: bool | None = None


class TimeEntryListResponse(BaseModel):
    """List of time entries, with the caller's editable window when relevant."""

    items: list[TimeEntryResponse]
    total: int
    allowed_date_range: AllowedDateRange | None = None
