"""Employee CRUD and timesheets."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.exceptions import ConflictError, NotFoundError
from finishing_touch.models.employee import Employee
from finishing_touch.models.job import JobAssignment
from finishing_touch.models.time_entry import TimeEntry
from finishing_touch.schemas.employee import EmployeeCreate, EmployeeUpdate
from finishing_touch.utils.dates import ensure_utc

logger = logging.getLogger(__name__)


async def get_employee(db: AsyncSession, employee_id: str) -> Employee:
    result = await db.execute(
        select(Employee)
        .where(Employee.id == employee_id)
        .execution_options(populate_existing=True)
    )
    employee = result.scalar_one_or_none()

    if not employee:
        raise NotFoundError("Employee", employee_id)

    return employee


async def ensure_employees_exist(db: AsyncSession, employee_ids: Iterable[str]) -> List[str]:
    """De-duplicate ids (order preserved) and fail on the first unknown one."""
    unique_ids = list(dict.fromkeys(employee_ids))
    if not unique_ids:
        return []

    result = await db.execute(select(Employee.id).where(Employee.id.in_(unique_ids)))
    found = set(result.scalars().all())
    for employee_id in unique_ids:
        if employee_id not in found:
            raise NotFoundError("Employee", employee_id)

    return unique_ids


async def _commit_employee(db: AsyncSession) -> None:
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("That login is already linked to another employee") from exc


async def create_employee(db: AsyncSession, data: EmployeeCreate) -> Employee:
    employee = Employee(
        name=data.name,
        phone=data.phone,
        role=data.role.value,
        user_id=data.user_id,
    )
    db.add(employee)
    await _commit_employee(db)

    logger.info("Created employee %s (%s)", employee.id, employee.role)
    return await get_employee(db, employee.id)


async def list_employees(db: AsyncSession) -> List[Employee]:
    result = await db.execute(select(Employee).order_by(Employee.created_at.desc(), Employee.name))
    return list(result.scalars().all())


async def update_employee(db: AsyncSession, employee_id: str, data: EmployeeUpdate) -> Employee:
    employee = await get_employee(db, employee_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("role") is not None:
        update_data["role"] = update_data["role"].value
    for field, value in update_data.items():
        setattr(employee, field, value)

    await _commit_employee(db)
    return await get_employee(db, employee_id)


async def delete_employee(db: AsyncSession, employee_id: str) -> None:
    """Delete an employee together with their time entries and job assignments."""
    employee = await get_employee(db, employee_id)

    await db.execute(delete(TimeEntry).where(TimeEntry.employee_id == employee_id))
    await db.execute(delete(JobAssignment).where(JobAssignment.employee_id == employee_id))
    await db.delete(employee)
    await db.commit()

    logger.info("Deleted employee %s", employee_id)


async def get_timesheet(
    db: AsyncSession,
    employee_id: str,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> dict:
    """Entries newest first plus total minutes of the closed ones."""
    await get_employee(db, employee_id)

    query = select(TimeEntry).where(TimeEntry.employee_id == employee_id)
    if date_from:
        query = query.where(TimeEntry.clock_in >= ensure_utc(date_from))
    if date_to:
        query = query.where(TimeEntry.clock_in <= ensure_utc(date_to))

    result = await db.execute(query.order_by(TimeEntry.clock_in.desc()))
    entries = list(result.scalars().all())

    return {
        "employee_id": employee_id,
        "entries": entries,
        "total_minutes": sum(entry.duration_minutes or 0 for entry in entries),
    }
