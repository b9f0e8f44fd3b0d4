from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime
from typing import Optional

from finishing_touch.models.lead import LeadSource


class LeadCreate(BaseModel):
    """Website contact / estimate request form submission."""
    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=6, max_length=50)
    message: str = Field(..., min_length=3)
    source: LeadSource = LeadSource.CONTACT
    job_address: Optional[str] = None
    moving_date: Optional[date] = None


class LeadResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    message: str
    source: LeadSource
    job_address: Optional[str] = None
    moving_date: Optional[date] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
