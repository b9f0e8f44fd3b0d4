from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List


class JobCreate(BaseModel):
    """Schema for creating a job."""
    title: str = Field(..., min_length=2, max_length=255)
    address: str = Field(..., min_length=3, max_length=500)
    start_datetime: datetime
    end_datetime: datetime
    estimate_id: Optional[str] = None
    employee_ids: List[str] = Field(default_factory=list)


class JobUpdate(BaseModel):
    """Schema for updating a job. employee_ids replaces the whole assignment set."""
    title: Optional[str] = Field(None, min_length=2, max_length=255)
    address: Optional[str] = Field(None, min_length=3, max_length=500)
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    estimate_id: Optional[str] = None
    employee_ids: Optional[List[str]] = None


class AssignmentRequest(BaseModel):
    employee_ids: List[str] = Field(..., min_length=1)


class JobFromEstimateRequest(BaseModel):
    employee_ids: List[str] = Field(default_factory=list)


class AssignmentResponse(BaseModel):
    id: str
    employee_id: str
    employee_name: Optional[str] = None


class JobResponse(BaseModel):
    id: str
    title: str
    address: str
    start_datetime: datetime
    end_datetime: datetime
    estimate_id: Optional[str] = None
    assignments: List[AssignmentResponse]
    created_at: Optional[datetime] = None


class JobListResponse(BaseModel):
    items: list[JobResponse]
    total: int
