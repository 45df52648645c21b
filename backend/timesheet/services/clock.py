"""Clock sessions: live time tracking that turns into ledger entries on close.

Every way a session can end (explicit clock-out, lazy closure on a status
check, and the periodic sweep) goes through ``_close_session``, which claims
the row with a conditional UPDATE before writing the time entry. Whoever
claims the row first wins; everyone else sees zero affected rows and writes
nothing, so a session can never produce two entries.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from timesheet.exceptions import ConflictError, NotFoundError, ValidationError
from timesheet.models.base import as_utc, quantize_hours, utc_now
from timesheet.models.clock_session import ClockSession
from timesheet.models.enums import EntryType
from timesheet.schemas.clock import (
    ActiveSessionResponse,
    AutoClosedSessionResponse,
    ClockHistoryResponse,
    ClockInResponse,
    ClockOutResponse,
    ClockSessionResponse,
    ClockStatusResponse,
)
from timesheet.services.project import get_project_or_404
from timesheet.services.time_entry import add_ledger_entry

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from timesheet.models.time_entry import TimeEntry
    from timesheet.schemas.auth import AuthContext
    from timesheet.schemas.clock import ClockOutPayload

logger = logging.getLogger(__name__)

MAX_SESSION_HOURS = 8
STALE_AFTER = timedelta(hours=MAX_SESSION_HOURS)
MIN_SESSION_HOURS = Decimal("0.25")
AUTO_CLOCK_OUT_DESCRIPTION = "Auto clock-out - please update project and description"
HISTORY_LIMIT = 20


@dataclass
class SweepResult:
    """Summary of one stale-session sweep."""

    closed: int = 0
    skipped: int = 0
    errors: int = 0


# ---------------------------------------------------------------------------
# Pure computation helpers (no DB)
# ---------------------------------------------------------------------------


def round_clock_hours(elapsed: timedelta) -> Decimal:
    """Round elapsed time to the nearest quarter hour, clamped to [0.25, 8]."""
    hours = Decimal(str(elapsed.total_seconds())) / Decimal(3600)
    quarters = (hours * 4).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    rounded = quarters / 4
    rounded = min(rounded, Decimal(MAX_SESSION_HOURS))
    rounded = max(rounded, MIN_SESSION_HOURS)
    return quantize_hours(rounded)


def session_entry_date(clock_in_at: datetime) -> date:
    """Calendar date (server local) a session's hours are recorded on."""
    return as_utc(clock_in_at).astimezone().date()


def is_stale(clock_in_at: datetime, now: datetime) -> bool:
    return now - as_utc(clock_in_at) >= STALE_AFTER


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_session_response(clock_session: ClockSession) -> ClockSessionResponse:
    return ClockSessionResponse(
        id=clock_session.id,
        clock_in_at=clock_session.clock_in_at,
        clock_out_at=clock_session.clock_out_at,
        description=clock_session.description,
        project_id=clock_session.project_id,
        auto_clock_out=clock_session.auto_clock_out,
        time_entry_id=clock_session.time_entry_id,
    )


async def _get_open_session(session: AsyncSession, user_id: uuid.UUID) -> ClockSession | None:
    result = await session.execute(
        select(ClockSession)
        .where(
            col(ClockSession.user_id) == user_id,
            col(ClockSession.clock_out_at).is_(None),
        )
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def _close_session(
    session: AsyncSession,
    *,
    session_id: uuid.UUID,
    user_id: uuid.UUID,
    clock_in_at: datetime,
    clock_out_at: datetime,
    hours: Decimal,
    description: str,
    project_id: uuid.UUID | None = None,
    auto: bool = False,
) -> TimeEntry | None:
    """Close a session if it is still open and record its time entry.

    Returns the new entry, or None when the session had already been closed
    by someone else (nothing is written in that case).
    """
    entry_id = uuid.uuid4()
    result = await session.execute(
        update(ClockSession)
        .where(
            col(ClockSession.id) == session_id,
            col(ClockSession.clock_out_at).is_(None),
        )
        .values(
            clock_out_at=clock_out_at,
            description=description,
            project_id=project_id,
            auto_clock_out=auto,
            time_entry_id=entry_id,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        await session.rollback()
        return None

    entry = add_ledger_entry(
        session,
        entry_id=entry_id,
        user_id=user_id,
        entry_date=session_entry_date(clock_in_at),
        hours=hours,
        entry_type=EntryType.REGULAR,
        project_id=project_id,
        description=description,
    )
    await session.commit()
    return entry


async def close_stale_session(
    session: AsyncSession,
    *,
    session_id: uuid.UUID,
    user_id: uuid.UUID,
    clock_in_at: datetime,
) -> TimeEntry | None:
    """Force-close a session that reached the staleness cap.

    The session is credited exactly the cap and ends at clock_in_at + cap.
    Shared by the lazy status check and the periodic sweep.
    """
    clock_in_at = as_utc(clock_in_at)
    return await _close_session(
        session,
        session_id=session_id,
        user_id=user_id,
        clock_in_at=clock_in_at,
        clock_out_at=clock_in_at + STALE_AFTER,
        hours=Decimal(MAX_SESSION_HOURS),
        description=AUTO_CLOCK_OUT_DESCRIPTION,
        auto=True,
    )


async def _get_auto_closed_summary(
    session: AsyncSession,
    session_id: uuid.UUID,
) -> AutoClosedSessionResponse | None:
    """Describe a session closed by the sweep, for a caller who lost the race to close it."""
    result = await session.execute(
        select(ClockSession).where(col(ClockSession.id) == session_id).execution_options(populate_existing=True)
    )
    clock_session = result.scalar_one_or_none()
    if clock_session is None or not clock_session.auto_clock_out or clock_session.clock_out_at is None:
        return None
    return AutoClosedSessionResponse(
        id=clock_session.id,
        clock_in_at=clock_session.clock_in_at,
        clock_out_at=clock_session.clock_out_at,
        time_entry_id=clock_session.time_entry_id,
        hours=quantize_hours(MAX_SESSION_HOURS),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def clock_in(
    session: AsyncSession,
    auth: AuthContext,
    now: datetime | None = None,
) -> ClockInResponse:
    """Open a new clock session for the caller.

    A second open session is refused by the pre-check and, for concurrent
    attempts that both pass it, by the partial unique index on open sessions.
    """
    if await _get_open_session(session, auth.user_id) is not None:
        raise ConflictError("Already clocked in")

    clock_in_at = now or utc_now()
    session_id = uuid.uuid4()
    session.add(ClockSession(id=session_id, user_id=auth.user_id, clock_in_at=clock_in_at))

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("Already clocked in") from None

    await session.commit()
    return ClockInResponse(id=session_id, clock_in_at=clock_in_at)


async def get_status(
    session: AsyncSession,
    auth: AuthContext,
    now: datetime | None = None,
) -> ClockStatusResponse:
    """Report the caller's open session, closing it first if it has gone stale."""
    if now is None:
        now = utc_now()

    open_session = await _get_open_session(session, auth.user_id)
    if open_session is None:
        return ClockStatusResponse(active=False)

    session_id = open_session.id
    clock_in_at = as_utc(open_session.clock_in_at)

    if is_stale(clock_in_at, now):
        entry = await close_stale_session(
            session, session_id=session_id, user_id=auth.user_id, clock_in_at=clock_in_at
        )
        if entry is None:
            return ClockStatusResponse(
                active=False,
                auto_closed_session=await _get_auto_closed_summary(session, session_id),
            )
        logger.info("Lazily auto-closed stale clock session %s for user %s", session_id, auth.user_id)
        return ClockStatusResponse(
            active=False,
            auto_closed_session=AutoClosedSessionResponse(
                id=session_id,
                clock_in_at=clock_in_at,
                clock_out_at=clock_in_at + STALE_AFTER,
                time_entry_id=entry.id,
                hours=quantize_hours(MAX_SESSION_HOURS),
            ),
        )

    return ClockStatusResponse(
        active=True,
        session=ActiveSessionResponse(
            id=session_id,
            clock_in_at=clock_in_at,
            elapsed_seconds=int((now - clock_in_at).total_seconds()),
        ),
    )


async def clock_out(
    session: AsyncSession,
    auth: AuthContext,
    payload: ClockOutPayload,
    now: datetime | None = None,
) -> ClockOutResponse:
    """Close the caller's open session and record it as a regular entry."""
    description = (payload.description or "").strip()
    if payload.project_id is None or not description:
        raise ValidationError("Description and project are required")

    open_session = await _get_open_session(session, auth.user_id)
    if open_session is None:
        raise NotFoundError("No active clock session")

    session_id = open_session.id
    clock_in_at = as_utc(open_session.clock_in_at)
    await get_project_or_404(session, payload.project_id)

    clock_out_at = now or utc_now()
    hours = round_clock_hours(clock_out_at - clock_in_at)

    entry = await _close_session(
        session,
        session_id=session_id,
        user_id=auth.user_id,
        clock_in_at=clock_in_at,
        clock_out_at=clock_out_at,
        hours=hours,
        description=description,
        project_id=payload.project_id,
    )
    if entry is None:
        raise NotFoundError("No active clock session")

    return ClockOutResponse(session_id=session_id, hours=hours, time_entry_id=entry.id)


async def get_history(session: AsyncSession, auth: AuthContext) -> ClockHistoryResponse:
    """The caller's most recent sessions, newest first."""
    result = await session.execute(
        select(ClockSession)
        .where(col(ClockSession.user_id) == auth.user_id)
        .order_by(col(ClockSession.clock_in_at).desc())
        .limit(HISTORY_LIMIT)
        .execution_options(populate_existing=True)
    )
    sessions = list(result.scalars().all())
    return ClockHistoryResponse(items=[_build_session_response(s) for s in sessions], total=len(sessions))


async def auto_close_stale_sessions(
    session: AsyncSession,
    now: datetime | None = None,
) -> SweepResult:
    """Close every open session older than the staleness cap.

    Each session is closed in its own transaction; a failure on one is logged
    and the sweep moves on to the next. Safe to run concurrently with itself
    and with lazy closure.
    """
    if now is None:
        now = utc_now()

    result = await session.execute(
        select(col(ClockSession.id), col(ClockSession.user_id), col(ClockSession.clock_in_at))
        .where(
            col(ClockSession.clock_out_at).is_(None),
            col(ClockSession.clock_in_at) < now - STALE_AFTER,
        )
        .order_by(col(ClockSession.clock_in_at))
    )
    candidates = list(result.all())
    # Release the read transaction before claiming rows one by one.
    await session.commit()

    sweep = SweepResult()
    for session_id, user_id, clock_in_at in candidates:
        try:
            entry = await close_stale_session(
                session, session_id=session_id, user_id=user_id, clock_in_at=clock_in_at
            )
        except Exception:
            logger.exception("Auto clock-out failed for session %s", session_id)
            await session.rollback()
            sweep.errors += 1
            continue
        if entry is None:
            sweep.skipped += 1
        else:
            sweep.closed += 1

    if sweep.closed > 0:
        logger.info("Auto clock-out: closed %d stale sessions", sweep.closed)
    return sweep
