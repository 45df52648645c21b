# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class ClockOutPayload(BaseModel):
    """Request body for ending the active clock session.

    Both fields are required to close a session; they are optional here so the
    service can report a domain validation error rather than a schema error.
    """

    project_id: uuid.UUID | None = None
    description: str | None = None


class ClockInResponse(BaseModel):
    """The newly opened clock session."""

    id: uuid.UUID
    clock_in_at: datetime


class ClockOutResponse(BaseModel):
    """Result of closing the active session."""

    session_id: uuid.UUID
    hours: Decimal
    time_entry_id: uuid.UUID


class ActiveSessionResponse(BaseModel):
    """The caller's open session and how long it has been running."""

    id: uuid.UUID
    clock_in_at: datetime
    elapsed_seconds: int


class AutoClosedSessionResponse(BaseModel):
    """Summary of a session closed because it reached the staleness cap."""

    id: uuid.UUID
    clock_in_at: datetime
    clock_out_at: datetime
    time_entry_id: uuid.UUID | None
    hours: Decimal


class ClockStatusResponse(BaseModel):
    """Clock status; at most one of session / auto_closed_session is set."""

    active: bool
    session: ActiveSessionResponse | None = None
    auto_closed_session: AutoClosedSessionResponse | None = None


class ClockSessionResponse(BaseModel):
    """A clock session as shown in history."""

    id: uuid.UUID
    clock_in_at: datetime
    clock_out_at: datetime | None
    description: str | None
    project_id: uuid.UUID | None
    auto_clock_out: bool
    time_entry_id: uuid.UUID | None


class ClockHistoryResponse(BaseModel):
    """Most recent clock sessions, newest first."""

    items: list[ClockSessionResponse]
    total: int
