# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import datetime
import uuid

from fastapi import APIRouter, Query, status

from timesheet.api.deps import AdminDep, AuthDep
from timesheet.db import SessionDep
from timesheet.schemas.time_entry import (
    AdminCreateTimeEntryPayload,
    AdminUpdateTimeEntryPayload,
    CreateTimeEntryPayload,
    TimeEntryListResponse,
    TimeEntryResponse,
    UpdateTimeEntryPayload,
)
from timesheet.services import time_entry as time_entry_service

time_entries_router = APIRouter(prefix="/time-entries", tags=["time-entries"])

admin_time_entries_router = APIRouter(prefix="/admin/time-entries", tags=["time-entries"])


@time_entries_router.get("", response_model=TimeEntryListResponse)
async def list_my_entries(
    session: SessionDep,
    auth: AuthDep,
    start_date: datetime.date | None = Query(default=None),
    end_date: datetime.date | None = Query(default=None),
    project_id: uuid.UUID | None = Query(default=None),
) -> TimeEntryListResponse:
    """List the caller's time entries with the current editable window."""
    return await time_entry_service.list_my_entries(session, auth, start_date, end_date, project_id)


@time_entries_router.post("", response_model=TimeEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: CreateTimeEntryPayload,
    session: SessionDep,
    auth: AuthDep,
) -> TimeEntryResponse:
    """Log time for the caller."""
    return await time_entry_service.create_entry(session, auth, payload)


@time_entries_router.get("/{entry_id}", response_model=TimeEntryResponse)
async def get_entry(
    entry_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> TimeEntryResponse:
    """Get a single time entry."""
    return await time_entry_service.get_entry(session, auth, entry_id)


@time_entries_router.patch("/{entry_id}", response_model=TimeEntryResponse)
async def update_entry(
    entry_id: uuid.UUID,
    payload: UpdateTimeEntryPayload,
    session: SessionDep,
    auth: AuthDep,
) -> TimeEntryResponse:
    """Edit one of the caller's entries inside the editable window."""
    return await time_entry_service.update_entry(session, auth, entry_id, payload)


@time_entries_router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Delete one of the caller's entries inside the editable window."""
    await time_entry_service.delete_entry(session, auth, entry_id)


@admin_time_entries_router.get("", response_model=TimeEntryListResponse)
async def admin_list_entries(
    session: SessionDep,
    auth: AdminDep,
    user_id: uuid.UUID | None = Query(default=None),
    start_date: datetime.date | None = Query(default=None),
    end_date: datetime.date | None = Query(default=None),
    project_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
) -> TimeEntryListResponse:
    """List entries across all users (admin only)."""
    return await time_entry_service.admin_list_entries(
        session, user_id, start_date, end_date, project_id, offset, limit
    )


@admin_time_entries_router.post("", response_model=TimeEntryResponse, status_code=status.HTTP_201_CREATED)
async def admin_create_entry(
    payload: AdminCreateTimeEntryPayload,
    session: SessionDep,
    auth: AdminDep,
) -> TimeEntryResponse:
    """Log time on a member's behalf for any date (admin only)."""
    return await time_entry_service.admin_create_entry(session, auth, payload)


@admin_time_entries_router.patch("/{entry_id}", response_model=TimeEntryResponse)
async def admin_update_entry(
    entry_id: uuid.UUID,
    payload: AdminUpdateTimeEntryPayload,
    session: SessionDep,
    auth: AdminDep,
) -> TimeEntryResponse:
    """Edit any entry regardless of date (admin only)."""
    return await time_entry_service.admin_update_entry(session, auth, entry_id, payload)


@admin_time_entries_router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def admin_delete_entry(
    entry_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete any entry regardless of date (admin only)."""
    await time_entry_service.admin_delete_entry(session, entry_id)
