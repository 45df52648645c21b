# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal

import sqlalchemy as sa
from sqlmodel import Field

from timesheet.models.base import TimestampMixin, UUIDBase
from timesheet.models.enums import EntryType


class TimeEntry(UUIDBase, TimestampMixin, table=True):
    """A block of hours recorded against a calendar date; the unit of the ledger."""

    __tablename__ = "time_entries"
    __table_args__ = (sa.Index("ix_time_entries_user_date", "user_id", "date"),)

    user_id: uuid.UUID = Field(index=True)
    project_id: uuid.UUID | None = Field(default=None, index=True)
    entry_type: str = Field(
        default=EntryType.REGULAR, max_length=20, sa_column_kwargs={"server_default": "REGULAR"}
    )
    date: datetime.date = Field(index=True)
    hours: Decimal = Field(max_digits=5, decimal_places=2)
    description: str | None = None
    added_by: uuid.UUID | None = None
    added_by_note: str | None = Field(default=None, max_length=500)
