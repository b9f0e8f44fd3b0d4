"""Punch clock and time entries.

Per employee the clock is either OPEN (one entry without clock_out) or
CLOSED. Durations are stored in whole minutes when an entry is closed.
"""

import logging
import math
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.exceptions import ConflictError, NotFoundError
from finishing_touch.models.time_entry import TimeEntry
from finishing_touch.schemas.time_entry import PunchAction, TimeEntryCreate, TimeEntryUpdate
from finishing_touch.services.employee_service import get_employee
from finishing_touch.utils.dates import ensure_utc, utcnow

logger = logging.getLogger(__name__)


def compute_duration_minutes(clock_in: datetime, clock_out: datetime) -> int:
    """Whole minutes between the two stamps, rounded half up, never negative."""
    seconds = (ensure_utc(clock_out) - ensure_utc(clock_in)).total_seconds()
    return max(0, math.floor(seconds / 60 + 0.5))


async def get_time_entry(db: AsyncSession, entry_id: str) -> TimeEntry:
    result = await db.execute(
        select(TimeEntry)
        .where(TimeEntry.id == entry_id)
        .execution_options(populate_existing=True)
    )
    entry = result.scalar_one_or_none()

    if not entry:
        raise NotFoundError("Time entry", entry_id)

    return entry


async def find_open_entry(db: AsyncSession, employee_id: str) -> Optional[TimeEntry]:
    """Most recent entry without a clock_out for the employee."""
    result = await db.execute(
        select(TimeEntry)
        .where(TimeEntry.employee_id == employee_id, TimeEntry.clock_out.is_(None))
        .order_by(TimeEntry.clock_in.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _commit_entry(db: AsyncSession) -> None:
    # The partial unique index rejects a second open entry from a racing request
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("Employee is already clocked in") from exc


async def punch_clock(db: AsyncSession, employee_id: str, action: PunchAction) -> TimeEntry:
    """
    Clock an employee in or out.

    Raises:
        NotFoundError: unknown employee
        ConflictError: IN while already clocked in, OUT with no open entry
    """
    await get_employee(db, employee_id)
    open_entry = await find_open_entry(db, employee_id)

    if action == "IN":
        if open_entry:
            raise ConflictError("Employee is already clocked in")

        entry = TimeEntry(employee_id=employee_id, clock_in=utcnow())
        db.add(entry)
        await _commit_entry(db)
        logger.info("Employee %s clocked in", employee_id)
        return await get_time_entry(db, entry.id)

    if not open_entry:
        raise ConflictError("No open clock-in entry found")

    now = utcnow()
    open_entry.clock_out = now
    open_entry.duration_minutes = compute_duration_minutes(open_entry.clock_in, now)
    await db.commit()

    logger.info("Employee %s clocked out after %s minutes", employee_id, open_entry.duration_minutes)
    return await get_time_entry(db, open_entry.id)


async def create_time_entry(db: AsyncSession, data: TimeEntryCreate) -> TimeEntry:
    """Manual entry; clock_in defaults to now and duration is set when clock_out is given."""
    await get_employee(db, data.employee_id)

    clock_in = ensure_utc(data.clock_in) or utcnow()
    clock_out = ensure_utc(data.clock_out)

    if clock_out is None and await find_open_entry(db, data.employee_id):
        raise ConflictError("Employee is already clocked in")

    entry = TimeEntry(
        employee_id=data.employee_id,
        clock_in=clock_in,
        clock_out=clock_out,
        duration_minutes=compute_duration_minutes(clock_in, clock_out) if clock_out else None,
    )
    db.add(entry)
    await _commit_entry(db)

    return await get_time_entry(db, entry.id)


async def update_time_entry(db: AsyncSession, entry_id: str, data: TimeEntryUpdate) -> TimeEntry:
    """Set clock_out (default now) and recompute the duration from the stored clock_in."""
    entry = await get_time_entry(db, entry_id)

    clock_out = ensure_utc(data.clock_out) or utcnow()
    entry.clock_out = clock_out
    entry.duration_minutes = compute_duration_minutes(entry.clock_in, clock_out)
    await db.commit()

    return await get_time_entry(db, entry_id)


async def list_time_entries(
    db: AsyncSession,
    employee_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    open_only: bool = False,
) -> List[TimeEntry]:
    query = select(TimeEntry)

    if employee_id:
        query = query.where(TimeEntry.employee_id == employee_id)
    if date_from:
        query = query.where(TimeEntry.clock_in >= ensure_utc(date_from))
    if date_to:
        query = query.where(TimeEntry.clock_in <= ensure_utc(date_to))
    if open_only:
        query = query.where(TimeEntry.clock_out.is_(None))

    result = await db.execute(query.order_by(TimeEntry.clock_in.desc()))
    return list(result.scalars().all())


async def list_clocked_in(db: AsyncSession) -> List[TimeEntry]:
    """Open entries, i.e. who is on the clock right now."""
    return await list_time_entries(db, open_only=True)
