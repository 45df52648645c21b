# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from timesheet.exceptions import NotFoundError, ValidationError
from timesheet.models.base import quantize_hours
from timesheet.models.enums import EntryType
from timesheet.models.time_entry import TimeEntry
from timesheet.schemas.time_entry import AllowedDateRange, TimeEntryListResponse, TimeEntryResponse
from timesheet.services.editability import allowed_range, is_editable
from timesheet.services.project import get_project_or_404, require_project_member

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.schemas.auth import AuthContext
    from timesheet.schemas.time_entry import (
        AdminCreateTimeEntryPayload,
        AdminUpdateTimeEntryPayload,
        CreateTimeEntryPayload,
        UpdateTimeEntryPayload,
    )

_LEAVE_TYPES = (EntryType.PAID_LEAVE, EntryType.APPROVED_LEAVE)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_time_entry_response(entry: TimeEntry, editable: bool | None = None) -> TimeEntryResponse:
    """Map a time entry model to its response schema."""
    return TimeEntryResponse(
        id=entry.id,
        user_id=entry.user_id,
        project_id=entry.project_id,
        entry_type=EntryType(entry.entry_type),
        date=entry.date,
        hours=quantize_hours(entry.hours),
        description=entry.description,
        added_by=entry.added_by,
        added_by_note=entry.added_by_note,
        created_at=entry.created_at,
        editable=editable,
    )


def _validate_direct_entry(entry_type: EntryType, project_id: uuid.UUID | None) -> None:
    """Enforce the rules shared by every direct-entry path."""
    if entry_type in _LEAVE_TYPES:
        raise ValidationError("Leave entries must be created through the leave request or holiday workflows")
    if entry_type == EntryType.REGULAR and project_id is None:
        raise ValidationError("Project is required for regular entries")


async def _get_entry_or_404(
    session: AsyncSession,
    entry_id: uuid.UUID,
    user_id: uuid.UUID | None = None,
) -> TimeEntry:
    """Fetch an entry, optionally scoped to its owner. Raises 404 if not found."""
    query = select(TimeEntry).where(col(TimeEntry.id) == entry_id)
    if user_id is not None:
        query = query.where(col(TimeEntry.user_id) == user_id)
    result = await session.execute(query)
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError("Entry not found")
    return entry


def _date_filters(
    start_date: datetime.date | None,
    end_date: datetime.date | None,
    project_id: uuid.UUID | None,
) -> list:
    filters = []
    if start_date is not None:
        filters.append(col(TimeEntry.date) >= start_date)
    if end_date is not None:
        filters.append(col(TimeEntry.date) <= end_date)
    if project_id is not None:
        filters.append(col(TimeEntry.project_id) == project_id)
    return filters


def add_ledger_entry(
    session: AsyncSession,
    *,
    user_id: uuid.UUID,
    entry_date: datetime.date,
    hours: Decimal,
    entry_type: EntryType = EntryType.REGULAR,
    project_id: uuid.UUID | None = None,
    description: str | None = None,
    added_by: uuid.UUID | None = None,
    added_by_note: str | None = None,
    entry_id: uuid.UUID | None = None,
) -> TimeEntry:
    """Stage a new time entry in the caller's transaction.

    This is the single write path into the ledger; clock sessions and leave
    approval use it directly, direct entry goes through the validated service
    functions below. The caller is responsible for commit.
    """
    entry = TimeEntry(
        user_id=user_id,
        project_id=project_id,
        entry_type=entry_type.value,
        date=entry_date,
        hours=quantize_hours(hours),
        description=description,
        added_by=added_by,
        added_by_note=added_by_note,
    )
    if entry_id is not None:
        entry.id = entry_id
    session.add(entry)
    return entry


# ---------------------------------------------------------------------------
# Member (self-service) API
# ---------------------------------------------------------------------------


async def list_my_entries(
    session: AsyncSession,
    auth: AuthContext,
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
    project_id: uuid.UUID | None = None,
    today: datetime.date | None = None,
) -> TimeEntryListResponse:
    """List the caller's entries, flagging which are still editable."""
    min_date, max_date = allowed_range(today)

    result = await session.execute(
        select(TimeEntry)
        .where(col(TimeEntry.user_id) == auth.user_id, *_date_filters(start_date, end_date, project_id))
        .order_by(col(TimeEntry.date), col(TimeEntry.created_at))
    )
    entries = list(result.scalars().all())

    return TimeEntryListResponse(
        items=[_build_time_entry_response(e, editable=min_date <= e.date <= max_date) for e in entries],
        total=len(entries),
        allowed_date_range=AllowedDateRange(min_date=min_date, max_date=max_date),
    )


async def get_entry(
    session: AsyncSession,
    auth: AuthContext,
    entry_id: uuid.UUID,
    today: datetime.date | None = None,
) -> TimeEntryResponse:
    """Get one entry. Members only see their own."""
    entry = await _get_entry_or_404(session, entry_id, None if auth.is_admin else auth.user_id)
    editable = is_editable(entry.date, today) if entry.user_id == auth.user_id else None
    return _build_time_entry_response(entry, editable=editable)


async def create_entry(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateTimeEntryPayload,
    today: datetime.date | None = None,
) -> TimeEntryResponse:
    """Log time for the caller on a date inside the editable window."""
    _validate_direct_entry(payload.entry_type, payload.project_id)

    if not is_editable(payload.date, today):
        raise ValidationError("Cannot log time for this date. Only today and the previous 2 days are allowed.")

    if payload.project_id is not None:
        await get_project_or_404(session, payload.project_id)
        await require_project_member(session, payload.project_id, auth.user_id)

    entry = add_ledger_entry(
        session,
        user_id=auth.user_id,
        entry_date=payload.date,
        hours=payload.hours,
        entry_type=payload.entry_type,
        project_id=payload.project_id,
        description=payload.description,
    )
    await session.commit()
    await session.refresh(entry)
    return _build_time_entry_response(entry, editable=True)


async def update_entry(
    session: AsyncSession,
    auth: AuthContext,
    entry_id: uuid.UUID,
    payload: UpdateTimeEntryPayload,
    today: datetime.date | None = None,
) -> TimeEntryResponse:
    """Edit one of the caller's entries while its date is still editable."""
    entry = await _get_entry_or_404(session, entry_id, auth.user_id)

    if not is_editable(entry.date, today):
        raise ValidationError("Cannot edit entries outside the allowed date range")

    if payload.project_id is not None and payload.project_id != entry.project_id:
        await get_project_or_404(session, payload.project_id)
        await require_project_member(session, payload.project_id, auth.user_id)
        entry.project_id = payload.project_id
    if payload.hours is not None:
        entry.hours = quantize_hours(payload.hours)
    if "description" in payload.model_fields_set:
        entry.description = payload.description

    await session.commit()
    await session.refresh(entry)
    return _build_time_entry_response(entry, editable=True)


async def delete_entry(
    session: AsyncSession,
    auth: AuthContext,
    entry_id: uuid.UUID,
    today: datetime.date | None = None,
) -> None:
    """Delete one of the caller's entries while its date is still editable."""
    entry = await _get_entry_or_404(session, entry_id, auth.user_id)

    if not is_editable(entry.date, today):
        raise ValidationError("Cannot delete entries outside the allowed date range")

    await session.delete(entry)
    await session.commit()


# ---------------------------------------------------------------------------
# Admin API (no editable window)
# ---------------------------------------------------------------------------


async def admin_list_entries(
    session: AsyncSession,
    user_id: uuid.UUID | None = None,
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
    project_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 100,
) -> TimeEntryListResponse:
    """List entries across all users with optional filters, ordered by date."""
    base_filters = _date_filters(start_date, end_date, project_id)
    if user_id is not None:
        base_filters.append(col(TimeEntry.user_id) == user_id)

    count_result = await session.execute(select(func.count()).select_from(TimeEntry).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(TimeEntry)
        .where(*base_filters)
        .order_by(col(TimeEntry.date), col(TimeEntry.created_at))
        .offset(offset)
        .limit(limit)
    )
    entries = list(result.scalars().all())

    return TimeEntryListResponse(items=[_build_time_entry_response(e) for e in entries], total=total)


async def admin_create_entry(
    session: AsyncSession,
    auth: AuthContext,
    payload: AdminCreateTimeEntryPayload,
) -> TimeEntryResponse:
    """Log time on a member's behalf for any date."""
    _validate_direct_entry(payload.entry_type, payload.project_id)

    if payload.project_id is not None:
        await get_project_or_404(session, payload.project_id)

    entry = add_ledger_entry(
        session,
        user_id=payload.user_id,
        entry_date=payload.date,
        hours=payload.hours,
        entry_type=payload.entry_type,
        project_id=payload.project_id,
        description=payload.description,
        added_by=auth.user_id,
        added_by_note=payload.note,
    )
    await session.commit()
    await session.refresh(entry)
    return _build_time_entry_response(entry)


async def admin_update_entry(
    session: AsyncSession,
    auth: AuthContext,
    entry_id: uuid.UUID,
    payload: AdminUpdateTimeEntryPayload,
) -> TimeEntryResponse:
    """Edit any entry regardless of its date."""
    entry = await _get_entry_or_404(session, entry_id)

    if payload.project_id is not None and payload.project_id != entry.project_id:
        await get_project_or_404(session, payload.project_id)
        entry.project_id = payload.project_id
    if payload.hours is not None:
        entry.hours = quantize_hours(payload.hours)
    if "description" in payload.model_fields_set:
        entry.description = payload.description
    if payload.note is not None:
        entry.added_by_note = payload.note
    entry.added_by = auth.user_id

    await session.commit()
    await session.refresh(entry)
    return _build_time_entry_response(entry)


async def admin_delete_entry(session: AsyncSession, entry_id: uuid.UUID) -> None:
    """Delete any entry regardless of its date."""
    entry = await _get_entry_or_404(session, entry_id)
    await session.delete(entry)
    await session.commit()
