from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Literal


PunchAction = Literal["IN", "OUT"]


class PunchRequest(BaseModel):
    employee_id: str
    action: PunchAction
    # Sent by the mobile client; location is not recorded
    geolocation_enabled: bool = False


class TimeEntryCreate(BaseModel):
    """Manual time entry. clock_in defaults to now."""
    employee_id: str
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None


class TimeEntryUpdate(BaseModel):
    """Close or correct an entry. clock_out defaults to now."""
    clock_out: Optional[datetime] = None


class TimeEntryResponse(BaseModel):
    id: str
    employee_id: str
    employee_name: Optional[str] = None
    clock_in: datetime
    clock_out: Optional[datetime] = None
    duration_minutes: Optional[int] = None
