from pydantic import BaseModel, Field
from typing import Optional, List, Literal, Any


LineItemKey = Literal[
    "kitchen",
    "diningRoom",
    "livingRoom",
    "bedrooms",
    "bathrooms",
    "masterBathrooms",
]


class BedroomInput(BaseModel):
    """One bedroom; the pricing engine clamps beds into [1, 6]."""
    beds: Optional[float] = 1


class RoomsInput(BaseModel):
    """Room configuration used to price an estimate.

    Quantities are deliberately loose (any number): the pricing engine
    normalizes negative, fractional and non-finite values instead of
    rejecting the whole estimate.
    """
    kitchen_qty: float = 0
    dining_room_qty: float = 0
    living_room_qty: float = 0
    bathrooms_qty: float = 0
    master_bathrooms_qty: float = 0
    bedrooms: List[BedroomInput] = Field(default_factory=list)


class PricingLineItem(BaseModel):
    """Priced row produced by the pricing engine."""
    key: LineItemKey
    description: str
    qty: int
    unit_price: float
    total_price: float
    metadata: Optional[dict[str, Any]] = None


class PricingSummary(BaseModel):
    """Result of pricing a room configuration."""
    line_items: List[PricingLineItem]
    subtotal: float
    tax: float
    total: float
    bedrooms_total: float
    bedroom_count: int


class PricingPreviewRequest(BaseModel):
    """Schema for pricing a room configuration without saving it."""
    rooms: RoomsInput = Field(default_factory=RoomsInput)
    tax: float = Field(0, allow_inf_nan=False)
