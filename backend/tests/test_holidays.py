"""Tests for paid holidays: scaled fan-out assignment, idempotency, and cascade delete."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from timesheet.exceptions import NotFoundError
from timesheet.models.enums import EmploymentType, MemberStatus, Role
from timesheet.models.holiday import PaidHolidayAssignment
from timesheet.schemas.auth import AuthContext
from timesheet.schemas.holiday import AssignHolidayPayload, CreateHolidayPayload, UpdateHolidayPayload
from timesheet.services import holiday as holiday_service
from timesheet.services.holiday import scaled_holiday_hours
from timesheet.services.member import InMemoryMemberService, MemberInfo

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

ADMIN_ID = uuid.uuid4()
ADMIN_AUTH = AuthContext(user_id=ADMIN_ID, role=Role.ADMIN)
ADMIN_HEADERS = {"X-User-Id": str(ADMIN_ID), "X-Role": "ADMIN"}

FULL_TIME = MemberInfo(id=uuid.uuid4(), email="ft@example.com", full_name="Full Timer")
PART_TIME = MemberInfo(
    id=uuid.uuid4(), email="pt@example.com", full_name="Part Timer", employment_type=EmploymentType.PART_TIME
)
CONTRACTOR = MemberInfo(
    id=uuid.uuid4(), email="c@example.com", full_name="Contractor", employment_type=EmploymentType.CONTRACT
)
INACTIVE = MemberInfo(
    id=uuid.uuid4(), email="gone@example.com", full_name="Former Member", status=MemberStatus.INACTIVE
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _seed_members(member_directory: InMemoryMemberService) -> None:
    for member in (FULL_TIME, PART_TIME, CONTRACTOR, INACTIVE):
        member_directory.seed(member)


async def _create_holiday(session: AsyncSession, hours: str = "8") -> uuid.UUID:
    response = await holiday_service.create_holiday(
        session,
        ADMIN_AUTH,
        CreateHolidayPayload(name="Founders Day", date=date(2025, 3, 14), hours=Decimal(hours)),
    )
    return response.id


async def _assignment_count(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(PaidHolidayAssignment))
        return result.scalar_one()


# ---------------------------------------------------------------------------
# Scaling (pure)
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("employment_type", "expected"),
    [
        (EmploymentType.FULL_TIME, Decimal("8.00")),
        (EmploymentType.PART_TIME, Decimal("4.00")),
        (EmploymentType.CONTRACT, None),
    ],
)
def test_scaled_holiday_hours(employment_type: EmploymentType, expected: Decimal | None) -> None:
    assert scaled_holiday_hours(Decimal("8"), employment_type) == expected


def test_part_time_scaling_keeps_two_decimals() -> None:
    assert scaled_holiday_hours(Decimal("7.5"), EmploymentType.PART_TIME) == Decimal("3.75")


# ---------------------------------------------------------------------------
# Assignment
# ---------------------------------------------------------------------------


async def test_assign_all_active_scales_by_employment_type(db_session: AsyncSession) -> None:
    holiday_id = await _create_holiday(db_session)

    result = await holiday_service.assign_holiday(
        db_session, ADMIN_AUTH, holiday_id, AssignHolidayPayload(all_active=True)
    )
    assert result.assigned_count == 2

    assignments = await holiday_service.list_holiday_assignments(db_session, holiday_id)
    hours_by_user = {a.user_id: a.hours for a in assignments.items}
    assert hours_by_user == {FULL_TIME.id: Decimal("8.00"), PART_TIME.id: Decimal("4.00")}


async def test_reassignment_is_a_no_op(
    db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    holiday_id = await _create_holiday(db_session)
    payload = AssignHolidayPayload(user_ids=[FULL_TIME.id, PART_TIME.id])

    first = await holiday_service.assign_holiday(db_session, ADMIN_AUTH, holiday_id, payload)
    second = await holiday_service.assign_holiday(db_session, ADMIN_AUTH, holiday_id, payload)

    assert first.assigned_count == 2
    assert second.assigned_count == 0
    assert await _assignment_count(session_factory) == 2


async def test_concurrent_duplicate_insert_is_ignored(
    session_factory: async_sessionmaker[AsyncSession], monkeypatch: pytest.MonkeyPatch
) -> None:
    async with session_factory() as session:
        holiday_id = await _create_holiday(session)
        await holiday_service.assign_holiday(
            session, ADMIN_AUTH, holiday_id, AssignHolidayPayload(user_ids=[FULL_TIME.id])
        )

    # A concurrent writer inserted the row after this call's pre-check ran.
    async def _nobody_assigned(*_args: object) -> set[uuid.UUID]:
        return set()

    monkeypatch.setattr(holiday_service, "_assigned_user_ids", _nobody_assigned)

    async with session_factory() as session:
        result = await holiday_service.assign_holiday(
            session, ADMIN_AUTH, holiday_id, AssignHolidayPayload(user_ids=[FULL_TIME.id, PART_TIME.id])
        )

    assert result.assigned_count == 1
    assert await _assignment_count(session_factory) == 2


async def test_explicit_targets_skip_contractors_and_unknown_ids(db_session: AsyncSession) -> None:
    holiday_id = await _create_holiday(db_session)

    result = await holiday_service.assign_holiday(
        db_session,
        ADMIN_AUTH,
        holiday_id,
        AssignHolidayPayload(user_ids=[CONTRACTOR.id, uuid.uuid4(), PART_TIME.id]),
    )

    assert result.assigned_count == 1
    assignments = await holiday_service.list_holiday_assignments(db_session, holiday_id)
    assert [(a.user_id, a.hours) for a in assignments.items] == [(PART_TIME.id, Decimal("4.00"))]


async def test_editing_hours_does_not_rescale_assignments(db_session: AsyncSession) -> None:
    holiday_id = await _create_holiday(db_session)
    await holiday_service.assign_holiday(db_session, ADMIN_AUTH, holiday_id, AssignHolidayPayload(all_active=True))

    updated = await holiday_service.update_holiday(db_session, holiday_id, UpdateHolidayPayload(hours=Decimal("4")))
    assert updated.hours == Decimal("4.00")

    assignments = await holiday_service.list_holiday_assignments(db_session, holiday_id)
    assert {a.user_id: a.hours for a in assignments.items}[FULL_TIME.id] == Decimal("8.00")


async def test_unassign_is_idempotent(
    db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    holiday_id = await _create_holiday(db_session)
    await holiday_service.assign_holiday(db_session, ADMIN_AUTH, holiday_id, AssignHolidayPayload(all_active=True))

    await holiday_service.unassign_holiday(db_session, holiday_id, FULL_TIME.id)
    await holiday_service.unassign_holiday(db_session, holiday_id, FULL_TIME.id)

    assert await _assignment_count(session_factory) == 1


async def test_delete_cascades_to_assignments(
    db_session: AsyncSession, session_factory: async_sessionmaker[AsyncSession]
) -> None:
    holiday_id = await _create_holiday(db_session)
    await holiday_service.assign_holiday(db_session, ADMIN_AUTH, holiday_id, AssignHolidayPayload(all_active=True))

    await holiday_service.delete_holiday(db_session, holiday_id)

    assert await _assignment_count(session_factory) == 0
    with pytest.raises(NotFoundError):
        await holiday_service.delete_holiday(db_session, holiday_id)


async def test_members_list_only_their_holidays(db_session: AsyncSession) -> None:
    assigned = await _create_holiday(db_session)
    await _create_holiday(db_session)
    await holiday_service.assign_holiday(
        db_session, ADMIN_AUTH, assigned, AssignHolidayPayload(user_ids=[PART_TIME.id])
    )

    mine = await holiday_service.list_holidays(db_session, AuthContext(user_id=PART_TIME.id))
    assert mine.total == 1
    assert mine.items[0].id == assigned
    assert mine.items[0].assigned_hours == Decimal("4.00")

    everything = await holiday_service.list_holidays(db_session, ADMIN_AUTH)
    assert everything.total == 2
    assert everything.items[0].assigned_hours is None


# ---------------------------------------------------------------------------
# HTTP surface
# ---------------------------------------------------------------------------


async def test_holiday_endpoints(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        "/holidays", json={"name": "Founders Day", "date": "2025-03-14"}, headers=ADMIN_HEADERS
    )
    assert resp.status_code == 201
    holiday_id = resp.json()["id"]
    assert Decimal(resp.json()["hours"]) == Decimal("8")

    resp = await async_client.post(f"/holidays/{holiday_id}/assign", json={}, headers=ADMIN_HEADERS)
    assert resp.status_code == 422

    resp = await async_client.post(f"/holidays/{holiday_id}/assign", json={"all_active": True}, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"holiday_id": holiday_id, "assigned_count": 2}

    resp = await async_client.get("/holidays", headers={"X-User-Id": str(PART_TIME.id)})
    assert Decimal(resp.json()["items"][0]["assigned_hours"]) == Decimal("4")

    resp = await async_client.get("/holidays", headers={"X-User-Id": str(CONTRACTOR.id)})
    assert resp.json()["total"] == 0

    resp = await async_client.delete(f"/holidays/{holiday_id}/assign/{PART_TIME.id}", headers=ADMIN_HEADERS)
    assert resp.status_code == 204

    resp = await async_client.get(f"/holidays/{holiday_id}/assignments", headers=ADMIN_HEADERS)
    assert resp.json()["total"] == 1
    assert resp.json()["items"][0]["full_name"] == "Full Timer"

    resp = await async_client.post(
        f"/holidays/{holiday_id}/assign", json={"all_active": True}, headers={"X-User-Id": str(FULL_TIME.id)}
    )
    assert resp.status_code == 403

    resp = await async_client.delete(f"/holidays/{holiday_id}", headers=ADMIN_HEADERS)
    assert resp.status_code == 204
    resp = await async_client.get(f"/holidays/{holiday_id}", headers=ADMIN_HEADERS)
    assert resp.status_code == 404
