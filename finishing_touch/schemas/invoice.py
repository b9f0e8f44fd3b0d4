from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from finishing_touch.models.invoice import InvoiceStatus
from finishing_touch.schemas.customer import CustomerSnapshot
from finishing_touch.schemas.line_item import LineItemInput, LineItemResponse


class InvoiceCreate(BaseModel):
    """Schema for creating an invoice directly.

    Totals are passed in already computed and are stored as-is.
    """
    derived_from_estimate_id: Optional[str] = None
    customer: CustomerSnapshot
    line_items: List[LineItemInput]
    subtotal: float = Field(..., ge=0, allow_inf_nan=False)
    tax: float = Field(0, ge=0, allow_inf_nan=False)
    total: float = Field(..., ge=0, allow_inf_nan=False)
    currency_symbol: Optional[str] = Field(None, min_length=1, max_length=8)


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceResponse(BaseModel):
    """Schema for invoice response."""
    id: str
    number: str
    status: InvoiceStatus
    derived_from_estimate_id: Optional[str] = None
    customer: CustomerSnapshot
    currency_symbol: str
    subtotal: float
    tax: float
    total: float
    formatted_total: str
    line_items: List[LineItemResponse]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InvoiceListResponse(BaseModel):
    """Invoice list response."""
    items: list[InvoiceResponse]
    total: int
