"""Projects, project membership, and the append-only budget ledger."""

# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from timesheet.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from timesheet.models.base import quantize_hours
from timesheet.models.enums import ProjectStatus
from timesheet.models.project import BudgetAdjustment, Project, ProjectMember
from timesheet.models.time_entry import TimeEntry
from timesheet.schemas.project import (
    BudgetAdjustmentResponse,
    BudgetHistoryResponse,
    ProjectListResponse,
    ProjectMemberListResponse,
    ProjectMemberResponse,
    ProjectResponse,
    ProjectUtilizationResponse,
)
from timesheet.services.member import get_members_by_id

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.schemas.auth import AuthContext
    from timesheet.schemas.project import (
        AssignMembersPayload,
        BudgetAdjustmentPayload,
        CreateProjectPayload,
        UpdateProjectPayload,
    )

INITIAL_ALLOCATION_REASON = "Initial budget allocation"


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def compute_utilization(hours_budget: Decimal, logged_hours: Decimal) -> tuple[Decimal, int]:
    """Return (remaining_hours, percent_used) for a budget and the hours logged against it."""
    remaining = quantize_hours(hours_budget - logged_hours)
    if hours_budget <= 0:
        return remaining, 0
    percent = (logged_hours / hours_budget * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return remaining, int(percent)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        code=project.code,
        description=project.description,
        status=ProjectStatus(project.status),
        hours_budget=quantize_hours(project.hours_budget),
        created_at=project.created_at,
    )


def _build_adjustment_response(adjustment: BudgetAdjustment) -> BudgetAdjustmentResponse:
    return BudgetAdjustmentResponse(
        id=adjustment.id,
        project_id=adjustment.project_id,
        adjusted_by=adjustment.adjusted_by,
        adjustment_amount=quantize_hours(adjustment.adjustment_amount),
        previous_budget=quantize_hours(adjustment.previous_budget),
        new_budget=quantize_hours(adjustment.new_budget),
        reason=adjustment.reason,
        created_at=adjustment.created_at,
    )


async def get_project_or_404(
    session: AsyncSession,
    project_id: uuid.UUID,
    *,
    for_update: bool = False,
) -> Project:
    """Fetch a project by ID. Raises 404 if not found.

    With ``for_update`` the row is locked (SELECT ... FOR UPDATE) so concurrent
    budget adjustments on the same project serialize.
    """
    query = select(Project).where(col(Project.id) == project_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await session.execute(query)
    project = result.scalar_one_or_none()
    if project is None:
        raise NotFoundError("Project not found")
    return project


async def is_project_member(session: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    result = await session.execute(
        select(ProjectMember).where(
            col(ProjectMember.project_id) == project_id,
            col(ProjectMember.user_id) == user_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def require_project_member(session: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """Raise 403 unless the user is assigned to the project."""
    if not await is_project_member(session, project_id, user_id):
        raise ForbiddenError("You are not assigned to this project")


async def get_logged_hours(
    session: AsyncSession,
    project_id: uuid.UUID,
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
) -> Decimal:
    """Sum the hours of every entry recorded against the project."""
    query = select(func.coalesce(func.sum(col(TimeEntry.hours)), 0)).where(col(TimeEntry.project_id) == project_id)
    if start_date is not None:
        query = query.where(col(TimeEntry.date) >= start_date)
    if end_date is not None:
        query = query.where(col(TimeEntry.date) <= end_date)
    result = await session.execute(query)
    return quantize_hours(Decimal(str(result.scalar_one())))


def _append_adjustment(
    session: AsyncSession,
    project: Project,
    *,
    amount: Decimal,
    reason: str,
    adjusted_by: uuid.UUID,
) -> BudgetAdjustment:
    """Append an adjustment and move the project's running total with it."""
    previous_budget = quantize_hours(project.hours_budget)
    new_budget = quantize_hours(previous_budget + amount)
    adjustment = BudgetAdjustment(
        project_id=project.id,
        adjusted_by=adjusted_by,
        adjustment_amount=quantize_hours(amount),
        previous_budget=previous_budget,
        new_budget=new_budget,
        reason=reason,
    )
    session.add(adjustment)
    project.hours_budget = new_budget
    return adjustment


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_project(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateProjectPayload,
) -> ProjectResponse:
    """Create a project; a non-zero starting budget is recorded as the first adjustment."""
    project = Project(
        name=payload.name,
        code=payload.code,
        description=payload.description,
        hours_budget=Decimal("0.00"),
    )
    session.add(project)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Project code already exists") from None

    if payload.hours_budget != 0:
        _append_adjustment(
            session,
            project,
            amount=payload.hours_budget,
            reason=INITIAL_ALLOCATION_REASON,
            adjusted_by=auth.user_id,
        )

    await session.commit()
    await session.refresh(project)
    return _build_project_response(project)


async def list_projects(session: AsyncSession, auth: AuthContext) -> ProjectListResponse:
    """Admins see every project; members see the projects they are assigned to."""
    query = select(Project).order_by(col(Project.name))
    if not auth.is_admin:
        query = query.join(ProjectMember, col(ProjectMember.project_id) == col(Project.id)).where(
            col(ProjectMember.user_id) == auth.user_id
        )
    result = await session.execute(query)
    projects = list(result.scalars().all())
    return ProjectListResponse(items=[_build_project_response(p) for p in projects], total=len(projects))


async def get_project(
    session: AsyncSession,
    auth: AuthContext,
    project_id: uuid.UUID,
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
) -> ProjectUtilizationResponse:
    """Get a project with its budget utilization over an optional date range.

    Members can only see projects they are assigned to.
    """
    if not auth.is_admin and not await is_project_member(session, project_id, auth.user_id):
        raise NotFoundError("Project not found")
    project = await get_project_or_404(session, project_id)
    logged_hours = await get_logged_hours(session, project_id, start_date, end_date)
    hours_budget = quantize_hours(project.hours_budget)
    remaining_hours, percent_used = compute_utilization(hours_budget, logged_hours)

    return ProjectUtilizationResponse(
        **_build_project_response(project).model_dump(),
        logged_hours=logged_hours,
        remaining_hours=remaining_hours,
        percent_used=percent_used,
    )


async def update_project(
    session: AsyncSession,
    project_id: uuid.UUID,
    payload: UpdateProjectPayload,
) -> ProjectResponse:
    """Update project metadata."""
    project = await get_project_or_404(session, project_id)

    if payload.name is not None:
        project.name = payload.name
    if payload.code is not None:
        project.code = payload.code
    if "description" in payload.model_fields_set:
        project.description = payload.description
    if payload.status is not None:
        project.status = payload.status.value

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Project code already exists") from None

    await session.commit()
    await session.refresh(project)
    return _build_project_response(project)


async def adjust_budget(
    session: AsyncSession,
    auth: AuthContext,
    project_id: uuid.UUID,
    payload: BudgetAdjustmentPayload,
) -> BudgetAdjustmentResponse:
    """Append a budget adjustment and update the project's running total.

    The project row is locked for the read-modify-write, so two concurrent
    adjustments never read the same previous budget.
    """
    reason = (payload.reason or "").strip()
    if not reason:
        raise ValidationError("A reason is required for budget adjustments")

    project = await get_project_or_404(session, project_id, for_update=True)
    adjustment = _append_adjustment(session, project, amount=payload.amount, reason=reason, adjusted_by=auth.user_id)

    await session.commit()
    await session.refresh(adjustment)
    return _build_adjustment_response(adjustment)


async def get_budget_history(session: AsyncSession, project_id: uuid.UUID) -> BudgetHistoryResponse:
    """List a project's budget adjustments, oldest first."""
    await get_project_or_404(session, project_id)
    result = await session.execute(
        select(BudgetAdjustment)
        .where(col(BudgetAdjustment.project_id) == project_id)
        .order_by(col(BudgetAdjustment.created_at))
    )
    adjustments = list(result.scalars().all())
    return BudgetHistoryResponse(items=[_build_adjustment_response(a) for a in adjustments], total=len(adjustments))


async def assign_members(
    session: AsyncSession,
    project_id: uuid.UUID,
    payload: AssignMembersPayload,
) -> ProjectMemberListResponse:
    """Add users to a project. Users already assigned are left as they are."""
    await get_project_or_404(session, project_id)

    result = await session.execute(
        select(col(ProjectMember.user_id)).where(col(ProjectMember.project_id) == project_id)
    )
    existing = set(result.scalars().all())

    for user_id in dict.fromkeys(payload.user_ids):
        if user_id not in existing:
            session.add(ProjectMember(project_id=project_id, user_id=user_id))

    await session.commit()
    return await list_project_members(session, project_id)


async def remove_member(session: AsyncSession, project_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """Remove a user from a project. Removing a non-member is a no-op."""
    await session.execute(
        delete(ProjectMember).where(
            col(ProjectMember.project_id) == project_id,
            col(ProjectMember.user_id) == user_id,
        )
    )
    await session.commit()


async def list_project_members(session: AsyncSession, project_id: uuid.UUID) -> ProjectMemberListResponse:
    """List a project's members, enriched from the member directory."""
    await get_project_or_404(session, project_id)
    result = await session.execute(
        select(ProjectMember)
        .where(col(ProjectMember.project_id) == project_id)
        .order_by(col(ProjectMember.assigned_at))
    )
    rows = list(result.scalars().all())
    directory = await get_members_by_id([r.user_id for r in rows])

    items = []
    for row in rows:
        info = directory.get(row.user_id)
        items.append(
            ProjectMemberResponse(
                user_id=row.user_id,
                full_name=info.full_name if info else None,
                email=info.email if info else None,
                assigned_at=row.assigned_at,
            )
        )
    return ProjectMemberListResponse(items=items, total=len(items))
