from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timesheet.models import (
    BudgetAdjustment,
    ClockSession,
    LeaveRequest,
    PaidHoliday,
    PaidHolidayAssignment,
    Project,
    ProjectMember,
    SQLModel,
    TimeEntry,
)
from timesheet.models.base import as_utc, quantize_hours
from timesheet.models.enums import EntryType, LeaveStatus, ProjectStatus

EXPECTED_TABLES = {
    "budget_adjustments",
    "clock_sessions",
    "leave_requests",
    "paid_holiday_assignments",
    "paid_holidays",
    "project_members",
    "projects",
    "time_entries",
}


def test_all_tables_registered() -> None:
    table_names = set(SQLModel.metadata.tables.keys())
    assert EXPECTED_TABLES.issubset(table_names)


def test_time_entry_defaults() -> None:
    entry = TimeEntry(user_id=uuid.uuid4(), date=date(2024, 6, 10), hours=Decimal("7.50"))
    assert entry.entry_type == EntryType.REGULAR
    assert entry.project_id is None
    assert entry.id is not None


def test_leave_request_defaults() -> None:
    request = LeaveRequest(user_id=uuid.uuid4(), date=date(2024, 7, 1))
    assert request.status == LeaveStatus.PENDING
    assert request.hours == Decimal("8.00")
    assert request.time_entry_id is None


def test_project_defaults() -> None:
    project = Project(name="Apollo", code="APL")
    assert project.status == ProjectStatus.ACTIVE
    assert project.hours_budget == Decimal("0.00")


def test_budget_adjustment_instantiation() -> None:
    adjustment = BudgetAdjustment(
        project_id=uuid.uuid4(),
        adjusted_by=uuid.uuid4(),
        adjustment_amount=Decimal("-20"),
        previous_budget=Decimal("100"),
        new_budget=Decimal("80"),
        reason="Scope cut",
    )
    assert adjustment.new_budget == adjustment.previous_budget + adjustment.adjustment_amount


def test_paid_holiday_default_hours() -> None:
    holiday = PaidHoliday(name="New Year", date=date(2025, 1, 1), created_by=uuid.uuid4())
    assert holiday.hours == Decimal("8.00")


def test_clock_session_starts_open() -> None:
    clock_session = ClockSession(user_id=uuid.uuid4(), clock_in_at=datetime(2024, 6, 10, 9, tzinfo=UTC))
    assert clock_session.clock_out_at is None
    assert clock_session.time_entry_id is None


def test_quantize_hours() -> None:
    assert quantize_hours(8) == Decimal("8.00")
    assert quantize_hours("1.5") == Decimal("1.50")
    assert str(quantize_hours(Decimal("0.25"))) == "0.25"


def test_as_utc_attaches_timezone_to_naive_values() -> None:
    naive = datetime(2024, 6, 10, 9, 0)
    assert as_utc(naive) == datetime(2024, 6, 10, 9, 0, tzinfo=UTC)
    assert as_utc(naive).tzinfo is UTC


async def test_second_open_clock_session_violates_unique_index(db_session: AsyncSession) -> None:
    user_id = uuid.uuid4()
    db_session.add(ClockSession(user_id=user_id, clock_in_at=datetime(2024, 6, 10, 9, tzinfo=UTC)))
    await db_session.commit()

    db_session.add(ClockSession(user_id=user_id, clock_in_at=datetime(2024, 6, 10, 10, tzinfo=UTC)))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


async def test_closed_sessions_do_not_block_a_new_open_one(db_session: AsyncSession) -> None:
    user_id = uuid.uuid4()
    db_session.add(
        ClockSession(
            user_id=user_id,
            clock_in_at=datetime(2024, 6, 10, 9, tzinfo=UTC),
            clock_out_at=datetime(2024, 6, 10, 12, tzinfo=UTC),
        )
    )
    db_session.add(
        ClockSession(
            user_id=user_id,
            clock_in_at=datetime(2024, 6, 11, 9, tzinfo=UTC),
            clock_out_at=datetime(2024, 6, 11, 12, tzinfo=UTC),
        )
    )
    db_session.add(ClockSession(user_id=user_id, clock_in_at=datetime(2024, 6, 12, 9, tzinfo=UTC)))
    await db_session.commit()


async def test_duplicate_holiday_assignment_violates_unique_constraint(db_session: AsyncSession) -> None:
    admin_id = uuid.uuid4()
    user_id = uuid.uuid4()
    holiday = PaidHoliday(name="New Year", date=date(2025, 1, 1), created_by=admin_id)
    db_session.add(holiday)
    await db_session.flush()

    db_session.add(
        PaidHolidayAssignment(paid_holiday_id=holiday.id, user_id=user_id, hours=Decimal("8"), assigned_by=admin_id)
    )
    await db_session.commit()

    db_session.add(
        PaidHolidayAssignment(paid_holiday_id=holiday.id, user_id=user_id, hours=Decimal("8"), assigned_by=admin_id)
    )
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


async def test_duplicate_project_membership_rejected(db_session: AsyncSession) -> None:
    project = Project(name="Apollo", code="APL")
    db_session.add(project)
    await db_session.flush()
    user_id = uuid.uuid4()

    db_session.add(ProjectMember(project_id=project.id, user_id=user_id))
    await db_session.commit()

    db_session.expunge_all()
    db_session.add(ProjectMember(project_id=project.id, user_id=user_id))
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()
