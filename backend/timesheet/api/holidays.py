# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from timesheet.api.deps import AdminDep, AuthDep
from timesheet.db import SessionDep
from timesheet.schemas.holiday import (
    AssignHolidayPayload,
    AssignHolidayResponse,
    CreateHolidayPayload,
    HolidayAssignmentListResponse,
    HolidayListResponse,
    HolidayResponse,
    UpdateHolidayPayload,
)
from timesheet.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])


@holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_holiday(
    payload: CreateHolidayPayload,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Declare a paid holiday (admin only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    auth: AuthDep,
) -> HolidayListResponse:
    """List holidays. Members see only those assigned to them."""
    return await holiday_service.list_holidays(session, auth)


@holidays_router.get(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def get_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    return await holiday_service.get_holiday(session, holiday_id)


@holidays_router.patch(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def update_holiday(
    holiday_id: uuid.UUID,
    payload: UpdateHolidayPayload,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Edit a holiday (admin only). Existing assignments are not rescaled."""
    return await holiday_service.update_holiday(session, holiday_id, payload)


@holidays_router.delete(
    "/{holiday_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a holiday and its assignments (admin only)."""
    await holiday_service.delete_holiday(session, holiday_id)


@holidays_router.post(
    "/{holiday_id}/assign",
    response_model=AssignHolidayResponse,
)
async def assign_holiday(
    holiday_id: uuid.UUID,
    payload: AssignHolidayPayload,
    session: SessionDep,
    auth: AdminDep,
) -> AssignHolidayResponse:
    """Grant a holiday to members, scaled by employment type (admin only)."""
    return await holiday_service.assign_holiday(session, auth, holiday_id, payload)


@holidays_router.delete(
    "/{holiday_id}/assign/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def unassign_holiday(
    holiday_id: uuid.UUID,
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Remove a member's holiday assignment (admin only)."""
    await holiday_service.unassign_holiday(session, holiday_id, user_id)


@holidays_router.get(
    "/{holiday_id}/assignments",
    response_model=HolidayAssignmentListResponse,
)
async def list_holiday_assignments(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayAssignmentListResponse:
    """List a holiday's assignments (admin only)."""
    return await holiday_service.list_holiday_assignments(session, holiday_id)
