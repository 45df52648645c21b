# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from timesheet.models.base import TimestampMixin, UUIDBase, utc_now


class PaidHoliday(UUIDBase, TimestampMixin, table=True):
    """An organization-declared paid holiday with its base hours."""

    __tablename__ = "paid_holidays"

    name: str = Field(max_length=255)
    date: datetime.date = Field(index=True)
    hours: Decimal = Field(default=Decimal("8.00"), max_digits=5, decimal_places=2)
    description: str | None = None
    created_by: uuid.UUID


class PaidHolidayAssignment(UUIDBase, table=True):
    """Per-user grant of a paid holiday, scaled at assignment time."""

    __tablename__ = "paid_holiday_assignments"
    __table_args__ = (
        sa.UniqueConstraint("paid_holiday_id", "user_id", name="uq_holiday_assignment_user"),
    )

    paid_holiday_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("paid_holidays.id"), nullable=False, index=True),
    )
    user_id: uuid.UUID = Field(index=True)
    hours: Decimal = Field(max_digits=5, decimal_places=2)
    assigned_by: uuid.UUID
    assigned_at: datetime.datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
