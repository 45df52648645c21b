# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from timesheet.models.base import TimestampMixin, UUIDBase

_OPEN_SESSION = sa.text("clock_out_at IS NULL")


class ClockSession(UUIDBase, TimestampMixin, table=True):
    """A live-tracked work interval; open while clock_out_at is null."""

    __tablename__ = "clock_sessions"
    __table_args__ = (
        # At most one open session per user.
        sa.Index(
            "uq_clock_sessions_open_user",
            "user_id",
            unique=True,
            postgresql_where=_OPEN_SESSION,
            sqlite_where=_OPEN_SESSION,
        ),
    )

    user_id: uuid.UUID = Field(index=True)
    clock_in_at: datetime = Field(sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    clock_out_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    description: str | None = None
    project_id: uuid.UUID | None = None
    auto_clock_out: bool = Field(default=False, sa_column_kwargs={"server_default": sa.false()})
    time_entry_id: uuid.UUID | None = None
