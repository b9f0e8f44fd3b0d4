"""Job scheduling and employee assignment."""

import logging
from datetime import datetime, time, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from finishing_touch.exceptions import ConflictError, NotFoundError
from finishing_touch.models.estimate import Estimate, EstimateStatus
from finishing_touch.models.job import Job, JobAssignment
from finishing_touch.schemas.job import JobCreate, JobUpdate
from finishing_touch.services.employee_service import ensure_employees_exist
from finishing_touch.utils.dates import ensure_utc

logger = logging.getLogger(__name__)

JOB_DAY_START = time(9, 0)
JOB_DAY_END = time(17, 0)

SCHEDULABLE_ESTIMATE_STATUSES = {
    EstimateStatus.ACCEPTED.value,
    EstimateStatus.INVOICED.value,
}


async def get_job(db: AsyncSession, job_id: str) -> Job:
    """Load a job with its assignments, or raise NotFoundError."""
    result = await db.execute(
        select(Job)
        .where(Job.id == job_id)
        .execution_options(populate_existing=True)
    )
    job = result.scalar_one_or_none()

    if not job:
        raise NotFoundError("Job", job_id)

    return job


async def _get_estimate(db: AsyncSession, estimate_id: str) -> Estimate:
    result = await db.execute(select(Estimate).where(Estimate.id == estimate_id))
    estimate = result.scalar_one_or_none()
    if not estimate:
        raise NotFoundError("Estimate", estimate_id)
    return estimate


async def create_job(db: AsyncSession, data: JobCreate) -> Job:
    employee_ids = await ensure_employees_exist(db, data.employee_ids)
    if data.estimate_id:
        await _get_estimate(db, data.estimate_id)

    job = Job(
        title=data.title,
        address=data.address,
        start_datetime=ensure_utc(data.start_datetime),
        end_datetime=ensure_utc(data.end_datetime),
        estimate_id=data.estimate_id,
        assignments=[JobAssignment(employee_id=employee_id) for employee_id in employee_ids],
    )
    db.add(job)
    await db.commit()

    logger.info("Scheduled job %s with %d employees", job.id, len(employee_ids))
    return await get_job(db, job.id)


async def list_jobs(
    db: AsyncSession,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> List[Job]:
    """Jobs starting inside the window, earliest first."""
    query = select(Job)
    if date_from:
        query = query.where(Job.start_datetime >= ensure_utc(date_from))
    if date_to:
        query = query.where(Job.start_datetime <= ensure_utc(date_to))

    result = await db.execute(query.order_by(Job.start_datetime.asc()))
    return list(result.scalars().all())


async def update_job(db: AsyncSession, job_id: str, data: JobUpdate) -> Job:
    """
    Update job fields and, when employee_ids is given, replace the whole
    assignment set. Both changes land in one commit.
    """
    job = await get_job(db, job_id)

    update_data = data.model_dump(exclude_unset=True)
    employee_ids = update_data.pop("employee_ids", None)

    # Validate references before touching the job so a 404 leaves nothing dirty
    if update_data.get("estimate_id"):
        await _get_estimate(db, update_data["estimate_id"])
    if employee_ids is not None:
        employee_ids = await ensure_employees_exist(db, employee_ids)

    for field in ("start_datetime", "end_datetime"):
        if field in update_data:
            update_data[field] = ensure_utc(update_data[field])

    for field, value in update_data.items():
        if value is None and field in ("title", "address", "start_datetime", "end_datetime"):
            continue
        setattr(job, field, value)

    if employee_ids is not None:
        # Keep rows for employees that stay so the (job, employee) unique key never collides
        current = {assignment.employee_id: assignment for assignment in job.assignments}
        job.assignments = [
            current.get(employee_id) or JobAssignment(employee_id=employee_id)
            for employee_id in employee_ids
        ]

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    return await get_job(db, job_id)


async def add_assignments(db: AsyncSession, job_id: str, employee_ids: List[str]) -> Job:
    """Assign more employees; ones already on the job are skipped."""
    job = await get_job(db, job_id)
    employee_ids = await ensure_employees_exist(db, employee_ids)

    assigned = {assignment.employee_id for assignment in job.assignments}
    for employee_id in employee_ids:
        if employee_id not in assigned:
            job.assignments.append(JobAssignment(employee_id=employee_id))

    await db.commit()
    return await get_job(db, job_id)


async def remove_assignment(db: AsyncSession, job_id: str, assignment_id: str) -> Job:
    job = await get_job(db, job_id)

    assignment = next((a for a in job.assignments if a.id == assignment_id), None)
    if assignment is None:
        raise NotFoundError("Job assignment", assignment_id)

    job.assignments.remove(assignment)
    await db.commit()
    return await get_job(db, job_id)


async def delete_job(db: AsyncSession, job_id: str) -> None:
    job = await get_job(db, job_id)
    await db.delete(job)
    await db.commit()


async def create_job_from_estimate(
    db: AsyncSession,
    estimate_id: str,
    employee_ids: Optional[List[str]] = None,
) -> Job:
    """
    Schedule a 09:00-17:00 job on the estimate's moving date.

    Raises:
        NotFoundError: unknown estimate or employee
        ConflictError: estimate is not ACCEPTED or INVOICED
    """
    estimate = await _get_estimate(db, estimate_id)

    if estimate.status not in SCHEDULABLE_ESTIMATE_STATUSES:
        raise ConflictError("Only accepted estimates can be converted to jobs")

    employee_ids = await ensure_employees_exist(db, employee_ids or [])

    job = Job(
        title=f"Turnover Painting - {estimate.customer_name}",
        address=estimate.customer_job_address,
        start_datetime=datetime.combine(estimate.moving_date, JOB_DAY_START, tzinfo=timezone.utc),
        end_datetime=datetime.combine(estimate.moving_date, JOB_DAY_END, tzinfo=timezone.utc),
        estimate_id=estimate.id,
        assignments=[JobAssignment(employee_id=employee_id) for employee_id in employee_ids],
    )
    db.add(job)
    await db.commit()

    logger.info("Scheduled job %s from estimate %s", job.id, estimate.number)
    return await get_job(db, job.id)
