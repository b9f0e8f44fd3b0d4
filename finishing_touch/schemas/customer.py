from pydantic import BaseModel, EmailStr, Field


class CustomerSnapshot(BaseModel):
    """Customer details copied onto estimates and invoices."""
    name: str = Field(..., min_length=2, max_length=200)
    job_address: str = Field(..., min_length=3, max_length=500)
    phone: str = Field(..., min_length=6, max_length=50)
    email: EmailStr
