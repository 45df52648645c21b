"""Paid holidays and their per-user assignments.

Assigned hours are scaled by employment type when the assignment is made and
never change afterwards, even if the holiday itself is edited.
"""

# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import col

from timesheet.exceptions import NotFoundError
from timesheet.models.base import quantize_hours, utc_now
from timesheet.models.enums import EmploymentType
from timesheet.models.holiday import PaidHoliday, PaidHolidayAssignment
from timesheet.schemas.holiday import (
    AssignHolidayResponse,
    HolidayAssignmentListResponse,
    HolidayAssignmentResponse,
    HolidayListResponse,
    HolidayResponse,
)
from timesheet.services.member import get_members_by_id, list_active_members

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.schemas.auth import AuthContext
    from timesheet.schemas.holiday import AssignHolidayPayload, CreateHolidayPayload, UpdateHolidayPayload
    from timesheet.services.member import MemberInfo

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def scaled_holiday_hours(base_hours: Decimal, employment_type: EmploymentType) -> Decimal | None:
    """Hours a member of the given employment type receives, or None if not eligible."""
    if employment_type == EmploymentType.CONTRACT:
        return None
    if employment_type == EmploymentType.PART_TIME:
        return quantize_hours(base_hours / 2)
    return quantize_hours(base_hours)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_holiday_response(holiday: PaidHoliday, assigned_hours: Decimal | None = None) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        name=holiday.name,
        date=holiday.date,
        hours=quantize_hours(holiday.hours),
        description=holiday.description,
        created_by=holiday.created_by,
        created_at=holiday.created_at,
        assigned_hours=quantize_hours(assigned_hours) if assigned_hours is not None else None,
    )


async def get_holiday_or_404(session: AsyncSession, holiday_id: uuid.UUID) -> PaidHoliday:
    """Fetch a holiday by ID. Raises 404 if not found."""
    result = await session.execute(select(PaidHoliday).where(col(PaidHoliday.id) == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise NotFoundError("Holiday not found")
    return holiday


def _insert_ignoring_duplicates(
    session: AsyncSession, values: dict[str, object]
) -> postgresql.Insert | sqlite.Insert:
    """Build an INSERT that silently skips an existing (holiday, user) pair."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(PaidHolidayAssignment).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(PaidHolidayAssignment).values(**values)
    else:
        msg = f"Unsupported database dialect: {dialect}"
        raise RuntimeError(msg)
    return stmt.on_conflict_do_nothing(index_elements=["paid_holiday_id", "user_id"])


async def _assigned_user_ids(session: AsyncSession, holiday_id: uuid.UUID) -> set[uuid.UUID]:
    result = await session.execute(
        select(col(PaidHolidayAssignment.user_id)).where(col(PaidHolidayAssignment.paid_holiday_id) == holiday_id)
    )
    return set(result.scalars().all())


async def _resolve_targets(payload: AssignHolidayPayload) -> list[MemberInfo]:
    if payload.all_active:
        return await list_active_members()
    members = await get_members_by_id(list(dict.fromkeys(payload.user_ids)))
    return list(members.values())


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayPayload,
) -> HolidayResponse:
    """Declare a paid holiday."""
    holiday = PaidHoliday(
        name=payload.name,
        date=payload.date,
        hours=quantize_hours(payload.hours),
        description=payload.description,
        created_by=auth.user_id,
    )
    session.add(holiday)
    await session.commit()
    await session.refresh(holiday)
    return _build_holiday_response(holiday)


async def list_holidays(session: AsyncSession, auth: AuthContext) -> HolidayListResponse:
    """Admins see every holiday; members see the ones assigned to them with their hours."""
    if auth.is_admin:
        result = await session.execute(select(PaidHoliday).order_by(col(PaidHoliday.date)))
        holidays = list(result.scalars().all())
        return HolidayListResponse(items=[_build_holiday_response(h) for h in holidays], total=len(holidays))

    result = await session.execute(
        select(PaidHoliday, col(PaidHolidayAssignment.hours))
        .join(PaidHolidayAssignment, col(PaidHolidayAssignment.paid_holiday_id) == col(PaidHoliday.id))
        .where(col(PaidHolidayAssignment.user_id) == auth.user_id)
        .order_by(col(PaidHoliday.date))
    )
    rows = list(result.all())
    return HolidayListResponse(
        items=[_build_holiday_response(holiday, assigned_hours=hours) for holiday, hours in rows],
        total=len(rows),
    )


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> HolidayResponse:
    holiday = await get_holiday_or_404(session, holiday_id)
    return _build_holiday_response(holiday)


async def update_holiday(
    session: AsyncSession,
    holiday_id: uuid.UUID,
    payload: UpdateHolidayPayload,
) -> HolidayResponse:
    """Edit a holiday. Existing assignments keep the hours they were granted."""
    holiday = await get_holiday_or_404(session, holiday_id)

    if payload.name is not None:
        holiday.name = payload.name
    if payload.date is not None:
        holiday.date = payload.date
    if payload.hours is not None:
        holiday.hours = quantize_hours(payload.hours)
    if "description" in payload.model_fields_set:
        holiday.description = payload.description

    await session.commit()
    await session.refresh(holiday)
    return _build_holiday_response(holiday)


async def delete_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> None:
    """Delete a holiday together with all of its assignments."""
    holiday = await get_holiday_or_404(session, holiday_id)

    await session.execute(
        delete(PaidHolidayAssignment).where(col(PaidHolidayAssignment.paid_holiday_id) == holiday_id)
    )
    await session.delete(holiday)
    await session.commit()


async def assign_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
    payload: AssignHolidayPayload,
) -> AssignHolidayResponse:
    """Grant a holiday to the targeted members, scaled by employment type.

    Contractors and users already holding the holiday are skipped. Concurrent
    assignments of the same pair collapse onto the unique constraint, so the
    returned count only includes rows this call actually created.
    """
    holiday = await get_holiday_or_404(session, holiday_id)
    base_hours = quantize_hours(holiday.hours)

    already_assigned = await _assigned_user_ids(session, holiday_id)

    assigned_count = 0
    assigned_at = utc_now()
    for member in await _resolve_targets(payload):
        if member.id in already_assigned:
            continue
        hours = scaled_holiday_hours(base_hours, member.employment_type)
        if hours is None:
            continue
        insert_result = await session.execute(
            _insert_ignoring_duplicates(
                session,
                {
                    "id": uuid.uuid4(),
                    "paid_holiday_id": holiday_id,
                    "user_id": member.id,
                    "hours": hours,
                    "assigned_by": auth.user_id,
                    "assigned_at": assigned_at,
                },
            )
        )
        assigned_count += max(insert_result.rowcount, 0)

    await session.commit()
    logger.info("Assigned holiday %s to %d members", holiday_id, assigned_count)
    return AssignHolidayResponse(holiday_id=holiday_id, assigned_count=assigned_count)


async def unassign_holiday(session: AsyncSession, holiday_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """Remove one member's assignment. Removing a missing assignment is a no-op."""
    await get_holiday_or_404(session, holiday_id)
    await session.execute(
        delete(PaidHolidayAssignment).where(
            col(PaidHolidayAssignment.paid_holiday_id) == holiday_id,
            col(PaidHolidayAssignment.user_id) == user_id,
        )
    )
    await session.commit()


async def list_holiday_assignments(session: AsyncSession, holiday_id: uuid.UUID) -> HolidayAssignmentListResponse:
    """List who holds a holiday, enriched from the member directory."""
    await get_holiday_or_404(session, holiday_id)
    result = await session.execute(
        select(PaidHolidayAssignment)
        .where(col(PaidHolidayAssignment.paid_holiday_id) == holiday_id)
        .order_by(col(PaidHolidayAssignment.assigned_at))
    )
    rows = list(result.scalars().all())
    directory = await get_members_by_id([r.user_id for r in rows])

    items = []
    for row in rows:
        info = directory.get(row.user_id)
        items.append(
            HolidayAssignmentResponse(
                user_id=row.user_id,
                full_name=info.full_name if info else None,
                email=info.email if info else None,
                employment_type=info.employment_type if info else None,
                hours=quantize_hours(row.hours),
                assigned_by=row.assigned_by,
                assigned_at=row.assigned_at,
            )
        )
    return HolidayAssignmentListResponse(items=items, total=len(items))
