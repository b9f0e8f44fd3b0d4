from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List

from finishing_touch.models.estimate import EstimateStatus
from finishing_touch.schemas.customer import CustomerSnapshot
from finishing_touch.schemas.line_item import LineItemResponse
from finishing_touch.schemas.pricing import RoomsInput


class EstimateCreate(BaseModel):
    """Schema for creating an estimate. Prices are computed server side."""
    customer: CustomerSnapshot
    moving_date: date
    rooms: RoomsInput = Field(default_factory=RoomsInput)
    notes: Optional[str] = None


class EstimateUpdate(BaseModel):
    """Schema for updating an estimate. Only status and notes are editable."""
    status: Optional[EstimateStatus] = None
    notes: Optional[str] = None


class EstimateStatusUpdate(BaseModel):
    status: EstimateStatus


class EstimateNotesUpdate(BaseModel):
    notes: Optional[str] = None


class EstimateResponse(BaseModel):
    """Schema for estimate response."""
    id: str
    number: str
    status: EstimateStatus
    moving_date: date
    customer_id: str
    customer: CustomerSnapshot
    currency_symbol: str
    subtotal: float
    tax: float
    total: float
    formatted_total: str
    notes: Optional[str] = None
    line_items: List[LineItemResponse]
    invoice_id: Optional[str] = None
    invoice_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EstimateListResponse(BaseModel):
    """Estimate list response."""
    items: list[EstimateResponse]
    total: int


class EstimateSendResponse(BaseModel):
    ok: bool
    message: str
