# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from timesheet.models.base import TimestampMixin, UUIDBase
from timesheet.models.enums import LeaveStatus


class LeaveRequest(UUIDBase, TimestampMixin, table=True):
    """A member's request for a day of approved paid absence."""

    __tablename__ = "leave_requests"
    __table_args__ = (sa.Index("ix_leave_requests_user_status", "user_id", "status"),)

    user_id: uuid.UUID = Field(index=True)
    date: datetime.date
    hours: Decimal = Field(default=Decimal("8.00"), max_digits=5, decimal_places=2)
    reason: str | None = None
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    reviewed_by: uuid.UUID | None = None
    reviewed_at: datetime.datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    review_note: str | None = None
    added_by: uuid.UUID | None = None
    time_entry_id: uuid.UUID | None = None
