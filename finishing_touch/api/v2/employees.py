from fastapi import APIRouter, status
from typing import Optional
from datetime import datetime

from finishing_touch.api.deps import DbSession, CurrentUser, ManagerUser, AdminUser
from finishing_touch.schemas.employee import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
    TimesheetResponse,
)
from finishing_touch.services import employee_service
from finishing_touch.api.v2.time_entries import time_entry_to_response

router = APIRouter()


@router.get("/", response_model=list[EmployeeResponse])
async def list_employees(
    db: DbSession,
    current_user: CurrentUser,
):
    return await employee_service.list_employees(db)


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    db: DbSession,
    current_user: CurrentUser,
):
    return await employee_service.get_employee(db, employee_id)


@router.post("/", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_data: EmployeeCreate,
    db: DbSession,
    current_user: ManagerUser,
):
    return await employee_service.create_employee(db, employee_data)


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    employee_data: EmployeeUpdate,
    db: DbSession,
    current_user: ManagerUser,
):
    return await employee_service.update_employee(db, employee_id, employee_data)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: str,
    db: DbSession,
    current_user: AdminUser,
):
    """Delete an employee along with their time entries and job assignments."""
    await employee_service.delete_employee(db, employee_id)


@router.get("/{employee_id}/timesheets", response_model=TimesheetResponse)
async def get_timesheet(
    employee_id: str,
    db: DbSession,
    current_user: ManagerUser,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
):
    timesheet = await employee_service.get_timesheet(
        db, employee_id, date_from=date_from, date_to=date_to
    )
    return {
        **timesheet,
        "entries": [time_entry_to_response(e) for e in timesheet["entries"]],
    }
