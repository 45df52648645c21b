# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter, status

from timesheet.api.deps import AuthDep
from timesheet.db import SessionDep
from timesheet.schemas.clock import (
    ClockHistoryResponse,
    ClockInResponse,
    ClockOutPayload,
    ClockOutResponse,
    ClockStatusResponse,
)
from timesheet.services import clock as clock_service

clock_router = APIRouter(prefix="/clock", tags=["clock"])


@clock_router.post("/in", response_model=ClockInResponse, status_code=status.HTTP_201_CREATED)
async def clock_in(
    session: SessionDep,
    auth: AuthDep,
) -> ClockInResponse:
    """Start a clock session for the caller."""
    return await clock_service.clock_in(session, auth)


@clock_router.post("/out", response_model=ClockOutResponse)
async def clock_out(
    payload: ClockOutPayload,
    session: SessionDep,
    auth: AuthDep,
) -> ClockOutResponse:
    """Stop the caller's clock session and record the time."""
    return await clock_service.clock_out(session, auth, payload)


@clock_router.get("/status", response_model=ClockStatusResponse)
async def clock_status(
    session: SessionDep,
    auth: AuthDep,
) -> ClockStatusResponse:
    """Report whether the caller is clocked in."""
    return await clock_service.get_status(session, auth)


@clock_router.get("/history", response_model=ClockHistoryResponse)
async def clock_history(
    session: SessionDep,
    auth: AuthDep,
) -> ClockHistoryResponse:
    return await clock_service.get_history(session, auth)
