from pydantic import BaseModel, Field
from typing import Optional, Any


class LineItemInput(BaseModel):
    """Already-priced line item supplied by the caller."""
    description: str = Field(..., min_length=1, max_length=255)
    qty: int = Field(..., ge=0, le=2**31 - 1)
    unit_price: float = Field(..., ge=0, allow_inf_nan=False)
    total_price: float = Field(..., ge=0, allow_inf_nan=False)
    metadata: Optional[dict[str, Any]] = None


class LineItemResponse(BaseModel):
    """Stored line item of an estimate or invoice."""
    id: str
    description: str
    qty: int
    unit_price: float
    total_price: float
    metadata: Optional[dict[str, Any]] = None
