from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from finishing_touch.models.employee import EmployeeRole
from finishing_touch.schemas.time_entry import TimeEntryResponse


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""
    name: str = Field(..., min_length=2, max_length=200)
    phone: str = Field(..., min_length=6, max_length=50)
    role: EmployeeRole
    user_id: Optional[str] = None


class EmployeeUpdate(BaseModel):
    """Schema for updating an employee (all fields optional)."""
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    phone: Optional[str] = Field(None, min_length=6, max_length=50)
    role: Optional[EmployeeRole] = None
    user_id: Optional[str] = None


class EmployeeResponse(BaseModel):
    id: str
    name: str
    phone: str
    role: EmployeeRole
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TimesheetResponse(BaseModel):
    """Time entries of one employee plus the sum of closed durations."""
    employee_id: str
    entries: list[TimeEntryResponse]
    total_minutes: int
