"""Tests for projects, membership, utilization, and the append-only budget ledger."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from timesheet.exceptions import ConflictError, NotFoundError, ValidationError
from timesheet.models.enums import Role
from timesheet.schemas.auth import AuthContext
from timesheet.schemas.project import AssignMembersPayload, BudgetAdjustmentPayload, CreateProjectPayload
from timesheet.services import project as project_service
from timesheet.services.member import InMemoryMemberService, MemberInfo
from timesheet.services.project import compute_utilization
from timesheet.services.time_entry import add_ledger_entry

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

ADMIN_ID = uuid.uuid4()
MEMBER_ID = uuid.uuid4()

ADMIN_AUTH = AuthContext(user_id=ADMIN_ID, role=Role.ADMIN)
MEMBER_AUTH = AuthContext(user_id=MEMBER_ID)

ADMIN_HEADERS = {"X-User-Id": str(ADMIN_ID), "X-Role": "ADMIN"}
MEMBER_HEADERS = {"X-User-Id": str(MEMBER_ID)}


async def _create(session: AsyncSession, code: str = "APL", hours_budget: str = "0") -> uuid.UUID:
    response = await project_service.create_project(
        session,
        ADMIN_AUTH,
        CreateProjectPayload(name=f"Project {code}", code=code, hours_budget=Decimal(hours_budget)),
    )
    return response.id


# ---------------------------------------------------------------------------
# Utilization (pure)
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("budget", "logged", "remaining", "percent"),
    [
        ("100", "25", "75.00", 25),
        ("80", "100", "-20.00", 125),
        ("3", "1", "2.00", 33),
        ("8", "1", "7.00", 13),
        ("0", "5", "-5.00", 0),
    ],
)
def test_compute_utilization(budget: str, logged: str, remaining: str, percent: int) -> None:
    assert compute_utilization(Decimal(budget), Decimal(logged)) == (Decimal(remaining), percent)


# ---------------------------------------------------------------------------
# Budget ledger
# ---------------------------------------------------------------------------


async def test_initial_budget_writes_first_adjustment(db_session: AsyncSession) -> None:
    project_id = await _create(db_session, hours_budget="100")

    history = await project_service.get_budget_history(db_session, project_id)

    assert history.total == 1
    first = history.items[0]
    assert first.previous_budget == Decimal("0.00")
    assert first.new_budget == Decimal("100.00")
    assert first.reason == project_service.INITIAL_ALLOCATION_REASON


async def test_zero_initial_budget_writes_no_adjustment(db_session: AsyncSession) -> None:
    project_id = await _create(db_session)
    history = await project_service.get_budget_history(db_session, project_id)
    assert history.total == 0


async def test_budget_ledger_sequence(db_session: AsyncSession) -> None:
    project_id = await _create(db_session, hours_budget="100")

    adjustment = await project_service.adjust_budget(
        db_session, ADMIN_AUTH, project_id, BudgetAdjustmentPayload(amount=Decimal("-20"), reason="Scope cut")
    )
    assert adjustment.previous_budget == Decimal("100.00")
    assert adjustment.new_budget == Decimal("80.00")

    project = await project_service.get_project(db_session, ADMIN_AUTH, project_id)
    assert project.hours_budget == Decimal("80.00")

    history = await project_service.get_budget_history(db_session, project_id)
    assert [(a.previous_budget, a.new_budget) for a in history.items] == [
        (Decimal("0.00"), Decimal("100.00")),
        (Decimal("100.00"), Decimal("80.00")),
    ]
    # The running total always equals the sum of the ledger.
    assert sum(a.adjustment_amount for a in history.items) == project.hours_budget


async def test_adjustment_requires_reason(db_session: AsyncSession) -> None:
    project_id = await _create(db_session)
    with pytest.raises(ValidationError):
        await project_service.adjust_budget(
            db_session, ADMIN_AUTH, project_id, BudgetAdjustmentPayload(amount=Decimal("5"), reason=" ")
        )


async def test_adjust_missing_project_not_found(db_session: AsyncSession) -> None:
    with pytest.raises(NotFoundError):
        await project_service.adjust_budget(
            db_session, ADMIN_AUTH, uuid.uuid4(), BudgetAdjustmentPayload(amount=Decimal("5"), reason="More")
        )


async def test_duplicate_code_conflicts(db_session: AsyncSession) -> None:
    await _create(db_session, code="DUP")
    with pytest.raises(ConflictError):
        await _create(db_session, code="DUP")


# ---------------------------------------------------------------------------
# Utilization and visibility
# ---------------------------------------------------------------------------


async def test_utilization_counts_logged_hours_in_range(db_session: AsyncSession) -> None:
    project_id = await _create(db_session, hours_budget="40")
    for day, hours in ((date(2024, 5, 31), "6"), (date(2024, 6, 3), "8"), (date(2024, 6, 4), "2")):
        add_ledger_entry(db_session, user_id=MEMBER_ID, entry_date=day, hours=Decimal(hours), project_id=project_id)
    await db_session.commit()

    everything = await project_service.get_project(db_session, ADMIN_AUTH, project_id)
    assert everything.logged_hours == Decimal("16.00")
    assert everything.remaining_hours == Decimal("24.00")
    assert everything.percent_used == 40

    june = await project_service.get_project(db_session, ADMIN_AUTH, project_id, start_date=date(2024, 6, 1))
    assert june.logged_hours == Decimal("10.00")
    assert june.percent_used == 25


async def test_members_see_only_their_projects(db_session: AsyncSession) -> None:
    mine = await _create(db_session, code="MINE")
    other = await _create(db_session, code="OTHER")
    await project_service.assign_members(db_session, mine, AssignMembersPayload(user_ids=[MEMBER_ID]))

    listing = await project_service.list_projects(db_session, MEMBER_AUTH)
    assert [p.id for p in listing.items] == [mine]
    assert (await project_service.list_projects(db_session, ADMIN_AUTH)).total == 2

    with pytest.raises(NotFoundError):
        await project_service.get_project(db_session, MEMBER_AUTH, other)


# ---------------------------------------------------------------------------
# HTTP surface
# ---------------------------------------------------------------------------


async def test_membership_endpoints(async_client: AsyncClient, member_directory: InMemoryMemberService) -> None:
    member_directory.seed(MemberInfo(id=MEMBER_ID, email="jane@example.com", full_name="Jane Doe"))

    resp = await async_client.post("/projects", json={"name": "Apollo", "code": "APL"}, headers=ADMIN_HEADERS)
    project_id = resp.json()["id"]
    members_url = f"/projects/{project_id}/members"

    for _ in range(2):
        resp = await async_client.post(members_url, json={"user_ids": [str(MEMBER_ID)]}, headers=ADMIN_HEADERS)
        assert resp.status_code == 200
        assert resp.json()["total"] == 1
    assert resp.json()["items"][0]["full_name"] == "Jane Doe"

    resp = await async_client.get("/projects", headers=MEMBER_HEADERS)
    assert resp.json()["total"] == 1

    for _ in range(2):
        resp = await async_client.delete(f"{members_url}/{MEMBER_ID}", headers=ADMIN_HEADERS)
        assert resp.status_code == 204

    resp = await async_client.get(members_url, headers=ADMIN_HEADERS)
    assert resp.json()["total"] == 0


async def test_budget_endpoints(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        "/projects", json={"name": "Apollo", "code": "APL", "hours_budget": "100"}, headers=ADMIN_HEADERS
    )
    assert resp.status_code == 201
    project_id = resp.json()["id"]

    resp = await async_client.post(
        f"/projects/{project_id}/budget-adjustments",
        json={"amount": "-20", "reason": "Scope cut"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 201
    assert Decimal(resp.json()["new_budget"]) == Decimal("80")

    resp = await async_client.post(
        f"/projects/{project_id}/budget-adjustments",
        json={"amount": "5", "reason": "More"},
        headers=MEMBER_HEADERS,
    )
    assert resp.status_code == 403

    resp = await async_client.get(f"/projects/{project_id}/budget-history", headers=ADMIN_HEADERS)
    assert resp.json()["total"] == 2

    resp = await async_client.patch(
        f"/projects/{project_id}", json={"status": "COMPLETED"}, headers=ADMIN_HEADERS
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "COMPLETED"
    assert Decimal(resp.json()["hours_budget"]) == Decimal("80")
