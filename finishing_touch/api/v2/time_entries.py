from fastapi import APIRouter, status
from typing import Optional
from datetime import datetime

from finishing_touch.api.deps import DbSession, CurrentUser, ManagerUser
from finishing_touch.models.time_entry import TimeEntry
from finishing_touch.schemas.time_entry import (
    PunchRequest,
    TimeEntryCreate,
    TimeEntryUpdate,
    TimeEntryResponse,
)
from finishing_touch.services import time_entry_service

router = APIRouter()


def time_entry_to_response(entry: TimeEntry) -> dict:
    return {
        "id": entry.id,
        "employee_id": entry.employee_id,
        "employee_name": entry.employee.name if entry.employee else None,
        "clock_in": entry.clock_in,
        "clock_out": entry.clock_out,
        "duration_minutes": entry.duration_minutes,
    }


@router.post("/punch", response_model=TimeEntryResponse)
async def punch(
    punch_data: PunchRequest,
    db: DbSession,
    current_user: CurrentUser,
):
    """Clock an employee IN or OUT."""
    entry = await time_entry_service.punch_clock(db, punch_data.employee_id, punch_data.action)
    return time_entry_to_response(entry)


@router.get("/clocked-in", response_model=list[TimeEntryResponse])
async def list_clocked_in(
    db: DbSession,
    current_user: CurrentUser,
):
    """Employees currently on the clock."""
    entries = await time_entry_service.list_clocked_in(db)
    return [time_entry_to_response(e) for e in entries]


@router.get("/", response_model=list[TimeEntryResponse])
async def list_time_entries(
    db: DbSession,
    current_user: CurrentUser,
    employee_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    open_only: bool = False,
):
    entries = await time_entry_service.list_time_entries(
        db, employee_id=employee_id, date_from=date_from, date_to=date_to, open_only=open_only
    )
    return [time_entry_to_response(e) for e in entries]


@router.post("/", response_model=TimeEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_time_entry(
    entry_data: TimeEntryCreate,
    db: DbSession,
    current_user: ManagerUser,
):
    entry = await time_entry_service.create_time_entry(db, entry_data)
    return time_entry_to_response(entry)


@router.patch("/{entry_id}", response_model=TimeEntryResponse)
async def update_time_entry(
    entry_id: str,
    entry_data: TimeEntryUpdate,
    db: DbSession,
    current_user: ManagerUser,
):
    """Set clock_out and recompute the duration."""
    entry = await time_entry_service.update_time_entry(db, entry_id, entry_data)
    return time_entry_to_response(entry)
