# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from timesheet.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from timesheet.models.base import quantize_hours, utc_now
from timesheet.models.enums import EntryType, LeaveStatus
from timesheet.models.leave_request import LeaveRequest
from timesheet.schemas.leave_request import LeaveRequestListResponse, LeaveRequestResponse
from timesheet.services.time_entry import add_ledger_entry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.schemas.auth import AuthContext
    from timesheet.schemas.leave_request import (
        AdminGrantLeavePayload,
        RejectLeavePayload,
        SubmitLeavePayload,
    )

MIN_NOTICE_DAYS = 14
APPROVED_LEAVE_DESCRIPTION = "Approved leave"
ADMIN_LEAVE_DESCRIPTION = "Leave (added by admin)"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_leave_response(request: LeaveRequest) -> LeaveRequestResponse:
    """Map a leave request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        user_id=request.user_id,
        date=request.date,
        hours=quantize_hours(request.hours),
        reason=request.reason,
        status=LeaveStatus(request.status),
        reviewed_by=request.reviewed_by,
        reviewed_at=request.reviewed_at,
        review_note=request.review_note,
        added_by=request.added_by,
        time_entry_id=request.time_entry_id,
        created_at=request.created_at,
    )


def earliest_leave_date(today: datetime.date | None = None) -> datetime.date:
    """First date a member may request leave for when submitting on ``today``."""
    if today is None:
        today = datetime.date.today()
    return today + timedelta(days=MIN_NOTICE_DAYS)


async def _get_leave_request_or_404(
    session: AsyncSession,
    request_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> LeaveRequest:
    """Fetch a leave request by ID. Raises 404 if not found.

    With ``for_update`` the row is locked so two reviewers cannot both act on
    the same pending request.
    """
    query = select(LeaveRequest).where(col(LeaveRequest.id) == request_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    request = result.scalar_one_or_none()
    if request is None:
        raise NotFoundError("Request not found")
    return request


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitLeavePayload,
    today: datetime.date | None = None,
) -> LeaveRequestResponse:
    """Submit a PENDING leave request at least 14 days ahead."""
    if payload.date < earliest_leave_date(today):
        raise ValidationError(f"Leave must be requested at least {MIN_NOTICE_DAYS} days in advance")

    request = LeaveRequest(
        user_id=auth.user_id,
        date=payload.date,
        hours=quantize_hours(payload.hours),
        reason=payload.reason,
        status=LeaveStatus.PENDING.value,
    )
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return _build_leave_response(request)


async def grant_leave(
    session: AsyncSession,
    auth: AuthContext,
    payload: AdminGrantLeavePayload,
) -> LeaveRequestResponse:
    """Create an already-approved request and its leave entry in one commit.

    Bypasses both the notice period and the PENDING stage.
    """
    hours = quantize_hours(payload.hours)
    entry = add_ledger_entry(
        session,
        user_id=payload.user_id,
        entry_date=payload.date,
        hours=hours,
        entry_type=EntryType.APPROVED_LEAVE,
        description=payload.reason or ADMIN_LEAVE_DESCRIPTION,
        added_by=auth.user_id,
    )
    request = LeaveRequest(
        user_id=payload.user_id,
        date=payload.date,
        hours=hours,
        reason=payload.reason,
        status=LeaveStatus.APPROVED.value,
        reviewed_by=auth.user_id,
        reviewed_at=utc_now(),
        added_by=auth.user_id,
        time_entry_id=entry.id,
    )
    session.add(request)
    await session.commit()
    await session.refresh(request)
    return _build_leave_response(request)


async def approve_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Approve a PENDING request and record its APPROVED_LEAVE entry."""
    request = await _get_leave_request_or_404(session, request_id, for_update=True)

    if request.status != LeaveStatus.PENDING.value:
        raise ConflictError("Only pending requests can be approved")

    entry = add_ledger_entry(
        session,
        user_id=request.user_id,
        entry_date=request.date,
        hours=request.hours,
        entry_type=EntryType.APPROVED_LEAVE,
        description=request.reason or APPROVED_LEAVE_DESCRIPTION,
    )
    request.status = LeaveStatus.APPROVED.value
    request.reviewed_by = auth.user_id
    request.reviewed_at = utc_now()
    request.time_entry_id = entry.id

    await session.commit()
    await session.refresh(request)
    return _build_leave_response(request)


async def reject_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: RejectLeavePayload,
) -> LeaveRequestResponse:
    """Reject a PENDING request. A review note is mandatory."""
    note = (payload.note or "").strip()
    if not note:
        raise ValidationError("Rejection note is required")

    request = await _get_leave_request_or_404(session, request_id, for_update=True)

    if request.status != LeaveStatus.PENDING.value:
        raise ConflictError("Only pending requests can be rejected")

    request.status = LeaveStatus.REJECTED.value
    request.reviewed_by = auth.user_id
    request.reviewed_at = utc_now()
    request.review_note = note

    await session.commit()
    await session.refresh(request)
    return _build_leave_response(request)


async def cancel_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> None:
    """Delete a PENDING request. The requester or an admin can cancel."""
    request = await _get_leave_request_or_404(session, request_id, for_update=True)

    if request.user_id != auth.user_id and not auth.is_admin:
        raise ForbiddenError("Not authorized to cancel this request")

    if request.status != LeaveStatus.PENDING.value:
        raise ConflictError("Only pending requests can be cancelled")

    await session.delete(request)
    await session.commit()


async def get_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Get a single request. Members only see their own."""
    request = await _get_leave_request_or_404(session, request_id)
    if request.user_id != auth.user_id and not auth.is_admin:
        raise NotFoundError("Request not found")
    return _build_leave_response(request)


async def list_leave_requests(
    session: AsyncSession,
    auth: AuthContext,
    status_filter: LeaveStatus | None = None,
    user_id: uuid.UUID | None = None,
) -> LeaveRequestListResponse:
    """Members see their own requests; admins see all, optionally filtered."""
    filters = []
    if not auth.is_admin:
        filters.append(col(LeaveRequest.user_id) == auth.user_id)
    elif user_id is not None:
        filters.append(col(LeaveRequest.user_id) == user_id)
    if status_filter is not None:
        filters.append(col(LeaveRequest.status) == status_filter.value)

    result = await session.execute(select(LeaveRequest).where(*filters).order_by(col(LeaveRequest.created_at)))
    requests = list(result.scalars().all())
    return LeaveRequestListResponse(items=[_build_leave_response(r) for r in requests], total=len(requests))
