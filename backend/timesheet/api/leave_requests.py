# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from timesheet.api.deps import AdminDep, AuthDep
from timesheet.db import SessionDep
from timesheet.models.enums import LeaveStatus
from timesheet.schemas.leave_request import (
    AdminGrantLeavePayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    RejectLeavePayload,
    SubmitLeavePayload,
)
from timesheet.services import leave_request as leave_service

leave_requests_router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@leave_requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_leave_request(
    payload: SubmitLeavePayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Submit a leave request at least 14 days ahead."""
    return await leave_service.submit_leave_request(session, auth, payload)


@leave_requests_router.post("/admin", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def grant_leave(
    payload: AdminGrantLeavePayload,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveRequestResponse:
    """Record approved leave for any member and date (admin only)."""
    return await leave_service.grant_leave(session, auth, payload)


@leave_requests_router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests(
    session: SessionDep,
    auth: AuthDep,
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    user_id: uuid.UUID | None = Query(default=None),
) -> LeaveRequestListResponse:
    """List leave requests. Members only see their own."""
    return await leave_service.list_leave_requests(session, auth, status_filter, user_id)


@leave_requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Get a single leave request."""
    return await leave_service.get_leave_request(session, auth, request_id)


@leave_requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveRequestResponse:
    """Approve a pending leave request (admin only)."""
    return await leave_service.approve_leave_request(session, auth, request_id)


@leave_requests_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_leave_request(
    request_id: uuid.UUID,
    payload: RejectLeavePayload,
    session: SessionDep,
    auth: AdminDep,
) -> LeaveRequestResponse:
    """Reject a pending leave request with a note (admin only)."""
    return await leave_service.reject_leave_request(session, auth, request_id, payload)


@leave_requests_router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Cancel a pending leave request."""
    await leave_service.cancel_leave_request(session, auth, request_id)
