"""Estimate pricing engine.

Turns a room configuration into the priced line items of an estimate.
Everything here is pure: no database access, no settings lookups, and no
exceptions for bad numbers. Invalid quantities degrade to zero, absurdly large
ones are capped at MAX_ROOM_QTY, and invalid bed counts become one bed, so a
sloppy form submission still produces an estimate.

Rates live in an immutable RateCard passed to the functions, so alternate
price lists can be used (and tested) without touching module state.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, List

from finishing_touch.schemas.pricing import PricingLineItem, PricingSummary, RoomsInput

MIN_BEDS_PER_BEDROOM = 1
MAX_BEDS_PER_BEDROOM = 6
FLAT_RATE_MAX_BEDS = 2
# Rooms of one kind on a single job; keeps totals finite and qty within an INTEGER column
MAX_ROOM_QTY = 100


@dataclass(frozen=True)
class RateCard:
    """Unit prices for each room category plus the bedroom pricing rule."""

    kitchen: int = 1000
    dining_room: int = 2000
    living_room: int = 2000
    bathroom: int = 500
    master_bathroom: int = 750
    bedroom_base: int = 1000
    bedroom_increment: int = 500


DEFAULT_RATE_CARD = RateCard()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_non_negative(value: Any) -> int:
    """Non-finite or non-numeric -> 0, otherwise floor clamped into [0, MAX_ROOM_QTY]."""
    if not _is_number(value) or not math.isfinite(value):
        return 0
    return min(MAX_ROOM_QTY, max(0, math.floor(value)))


def normalize_beds(beds: Any) -> int:
    """Clamp a bed count into [1, 6]; missing, zero and NaN mean one bed."""
    if not _is_number(beds) or not beds or math.isnan(beds):
        return MIN_BEDS_PER_BEDROOM
    if math.isinf(beds):
        return MAX_BEDS_PER_BEDROOM if beds > 0 else MIN_BEDS_PER_BEDROOM
    return min(MAX_BEDS_PER_BEDROOM, max(MIN_BEDS_PER_BEDROOM, math.floor(beds)))


def calculate_bedroom_price(beds: int, rate_card: RateCard = DEFAULT_RATE_CARD) -> int:
    """Flat base price up to two beds, plus a fixed increment per extra bed."""
    if beds <= FLAT_RATE_MAX_BEDS:
        return rate_card.bedroom_base
    return rate_card.bedroom_base + (beds - FLAT_RATE_MAX_BEDS) * rate_card.bedroom_increment


def _bedrooms_description(beds: Iterable[int]) -> str:
    summary = ",".join(str(count) for count in beds)
    return f"Bedrooms (beds: {summary or 'none'})"


def _unit_line(key: str, description: str, qty: int, unit_price: int) -> PricingLineItem:
    return PricingLineItem(
        key=key,
        description=description,
        qty=qty,
        unit_price=unit_price,
        total_price=qty * unit_price,
    )


def calculate_estimate_pricing(
    rooms: RoomsInput,
    tax: float = 0,
    rate_card: RateCard = DEFAULT_RATE_CARD,
) -> PricingSummary:
    """
    Price a room configuration.

    Args:
        rooms: Room quantities and per-bedroom bed counts
        tax: Tax amount supplied by the caller; never computed here
        rate_card: Prices to apply

    Returns:
        PricingSummary with six line items in a fixed order. The bedrooms
        line is an aggregate (unit price 0) because its price is not linear
        in the number of bedrooms.
    """
    kitchen_qty = normalize_non_negative(rooms.kitchen_qty)
    dining_room_qty = normalize_non_negative(rooms.dining_room_qty)
    living_room_qty = normalize_non_negative(rooms.living_room_qty)
    bathrooms_qty = normalize_non_negative(rooms.bathrooms_qty)
    master_bathrooms_qty = normalize_non_negative(rooms.master_bathrooms_qty)

    beds: List[int] = [normalize_beds(bedroom.beds) for bedroom in rooms.bedrooms or []]
    bedrooms_total = sum(calculate_bedroom_price(count, rate_card) for count in beds)
    bedroom_count = len(beds)

    line_items = [
        _unit_line("kitchen", "Kitchen", kitchen_qty, rate_card.kitchen),
        _unit_line("diningRoom", "Dining Room", dining_room_qty, rate_card.dining_room),
        _unit_line("livingRoom", "Living Room", living_room_qty, rate_card.living_room),
        PricingLineItem(
            key="bedrooms",
            description=_bedrooms_description(beds),
            qty=bedroom_count,
            unit_price=0,
            total_price=bedrooms_total,
            metadata={"beds": beds},
        ),
        _unit_line("bathrooms", "Bathrooms", bathrooms_qty, rate_card.bathroom),
        _unit_line("masterBathrooms", "Master Bathrooms", master_bathrooms_qty, rate_card.master_bathroom),
    ]

    subtotal = sum(item.total_price for item in line_items)

    return PricingSummary(
        line_items=line_items,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        bedrooms_total=bedrooms_total,
        bedroom_count=bedroom_count,
    )
