from fastapi import APIRouter, status
from typing import Optional
from datetime import datetime

from finishing_touch.api.deps import DbSession, CurrentUser, ManagerUser
from finishing_touch.models.job import Job
from finishing_touch.schemas.job import (
    JobCreate,
    JobUpdate,
    AssignmentRequest,
    JobFromEstimateRequest,
    JobResponse,
    JobListResponse,
)
from finishing_touch.services import job_service

router = APIRouter()


def job_to_response(job: Job) -> dict:
    """Convert Job model to response dict with assigned employee names."""
    return {
        "id": job.id,
        "title": job.title,
        "address": job.address,
        "start_datetime": job.start_datetime,
        "end_datetime": job.end_datetime,
        "estimate_id": job.estimate_id,
        "assignments": [
            {
                "id": a.id,
                "employee_id": a.employee_id,
                "employee_name": a.employee.name if a.employee else None,
            }
            for a in job.assignments
        ],
        "created_at": job.created_at,
    }


@router.post(
    "/from-estimate/{estimate_id}",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_job_from_estimate(
    estimate_id: str,
    db: DbSession,
    current_user: ManagerUser,
    request: Optional[JobFromEstimateRequest] = None,
):
    """Schedule an accepted estimate on its moving date."""
    employee_ids = request.employee_ids if request else []
    job = await job_service.create_job_from_estimate(db, estimate_id, employee_ids)
    return job_to_response(job)


@router.get("/", response_model=JobListResponse)
async def list_jobs(
    db: DbSession,
    current_user: CurrentUser,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
):
    """Jobs for the calendar, earliest first."""
    jobs = await job_service.list_jobs(db, date_from=date_from, date_to=date_to)
    return {
        "items": [job_to_response(j) for j in jobs],
        "total": len(jobs),
    }


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str,
    db: DbSession,
    current_user: CurrentUser,
):
    job = await job_service.get_job(db, job_id)
    return job_to_response(job)


@router.post("/", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreate,
    db: DbSession,
    current_user: ManagerUser,
):
    job = await job_service.create_job(db, job_data)
    return job_to_response(job)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: str,
    job_data: JobUpdate,
    db: DbSession,
    current_user: ManagerUser,
):
    job = await job_service.update_job(db, job_id, job_data)
    return job_to_response(job)


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: str,
    db: DbSession,
    current_user: ManagerUser,
):
    await job_service.delete_job(db, job_id)


@router.post("/{job_id}/assignments", response_model=JobResponse)
async def add_assignments(
    job_id: str,
    request: AssignmentRequest,
    db: DbSession,
    current_user: ManagerUser,
):
    job = await job_service.add_assignments(db, job_id, request.employee_ids)
    return job_to_response(job)


@router.delete("/{job_id}/assignments/{assignment_id}", response_model=JobResponse)
async def remove_assignment(
    job_id: str,
    assignment_id: str,
    db: DbSession,
    current_user: ManagerUser,
):
    job = await job_service.remove_assignment(db, job_id, assignment_id)
    return job_to_response(job)
