# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import datetime
import uuid

from fastapi import APIRouter, Query, status

from timesheet.api.deps import AdminDep, AuthDep
from timesheet.db import SessionDep
from timesheet.schemas.project import (
    AssignMembersPayload,
    BudgetAdjustmentPayload,
    BudgetAdjustmentResponse,
    BudgetHistoryResponse,
    CreateProjectPayload,
    ProjectListResponse,
    ProjectMemberListResponse,
    ProjectResponse,
    ProjectUtilizationResponse,
    UpdateProjectPayload,
)
from timesheet.services import project as project_service

projects_router = APIRouter(prefix="/projects", tags=["projects"])


@projects_router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: CreateProjectPayload,
    session: SessionDep,
    auth: AdminDep,
) -> ProjectResponse:
    """Create a project (admin only)."""
    return await project_service.create_project(session, auth, payload)


@projects_router.get("", response_model=ProjectListResponse)
async def list_projects(
    session: SessionDep,
    auth: AuthDep,
) -> ProjectListResponse:
    """List projects visible to the caller."""
    return await project_service.list_projects(session, auth)


@projects_router.get("/{project_id}", response_model=ProjectUtilizationResponse)
async def get_project(
    project_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    start_date: datetime.date | None = Query(default=None),
    end_date: datetime.date | None = Query(default=None),
) -> ProjectUtilizationResponse:
    """Get a project with its budget utilization."""
    return await project_service.get_project(session, auth, project_id, start_date, end_date)


@projects_router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: uuid.UUID,
    payload: UpdateProjectPayload,
    session: SessionDep,
    auth: AdminDep,
) -> ProjectResponse:
    """Update project metadata (admin only)."""
    return await project_service.update_project(session, project_id, payload)


@projects_router.post(
    "/{project_id}/budget-adjustments",
    response_model=BudgetAdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def adjust_budget(
    project_id: uuid.UUID,
    payload: BudgetAdjustmentPayload,
    session: SessionDep,
    auth: AdminDep,
) -> BudgetAdjustmentResponse:
    """Append a budget adjustment (admin only)."""
    return await project_service.adjust_budget(session, auth, project_id, payload)


@projects_router.get("/{project_id}/budget-history", response_model=BudgetHistoryResponse)
async def get_budget_history(
    project_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> BudgetHistoryResponse:
    """List a project's budget adjustments (admin only)."""
    return await project_service.get_budget_history(session, project_id)


@projects_router.get("/{project_id}/members", response_model=ProjectMemberListResponse)
async def list_project_members(
    project_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> ProjectMemberListResponse:
    """List a project's members (admin only)."""
    return await project_service.list_project_members(session, project_id)


@projects_router.post("/{project_id}/members", response_model=ProjectMemberListResponse)
async def assign_members(
    project_id: uuid.UUID,
    payload: AssignMembersPayload,
    session: SessionDep,
    auth: AdminDep,
) -> ProjectMemberListResponse:
    """Assign users to a project (admin only)."""
    return await project_service.assign_members(session, project_id, payload)


@projects_router.delete("/{project_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Remove a user from a project (admin only)."""
    await project_service.remove_member(session, project_id, user_id)
