"""
Tests for the estimate pricing engine.
"""

import math

import pytest

from finishing_touch.schemas.pricing import RoomsInput
from finishing_touch.services.pricing import (
    DEFAULT_RATE_CARD,
    MAX_ROOM_QTY,
    RateCard,
    calculate_bedroom_price,
    calculate_estimate_pricing,
    normalize_beds,
    normalize_non_negative,
)


def _rooms(**kwargs) -> RoomsInput:
    return RoomsInput(**kwargs)


def _line(summary, key):
    return next(item for item in summary.line_items if item.key == key)


class TestNormalization:
    """Invalid numbers degrade instead of raising."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, 3),
            (2.9, 2),
            (0, 0),
            (-5, 0),
            (float("nan"), 0),
            (float("inf"), 0),
            (None, 0),
            (250, MAX_ROOM_QTY),
            (1e308, MAX_ROOM_QTY),
            ("2", 0),
            (True, 0),
        ],
    )
    def test_normalize_non_negative(self, value, expected):
        assert normalize_non_negative(value) == expected

    @pytest.mark.parametrize(
        "beds,expected",
        [
            (1, 1),
            (4, 4),
            (9, 6),
            (0, 1),
            (-3, 1),
            (2.7, 2),
            (None, 1),
            (float("nan"), 1),
            (float("inf"), 6),
        ],
    )
    def test_normalize_beds(self, beds, expected):
        assert normalize_beds(beds) == expected


class TestBedroomPrice:
    def test_flat_up_to_two_beds(self):
        assert calculate_bedroom_price(1) == calculate_bedroom_price(2) == 1000

    def test_increment_per_bed_above_two(self):
        assert calculate_bedroom_price(3) == 1500
        assert calculate_bedroom_price(4) == 2000
        assert calculate_bedroom_price(6) - calculate_bedroom_price(4) == 2 * DEFAULT_RATE_CARD.bedroom_increment

    def test_custom_rate_card(self):
        card = RateCard(bedroom_base=100, bedroom_increment=500)
        assert calculate_bedroom_price(2, card) == 100
        assert calculate_bedroom_price(5, card) == 1600


class TestEstimatePricing:
    def test_full_scenario(self):
        summary = calculate_estimate_pricing(
            _rooms(
                kitchen_qty=1,
                dining_room_qty=1,
                living_room_qty=1,
                bathrooms_qty=2,
                master_bathrooms_qty=1,
                bedrooms=[{"beds": 1}, {"beds": 4}],
            )
        )

        assert summary.bedrooms_total == 3000
        assert summary.bedroom_count == 2
        assert summary.subtotal == 9750
        assert summary.tax == 0
        assert summary.total == 9750
        assert _line(summary, "bedrooms").description == "Bedrooms (beds: 1,4)"

    def test_line_items_fixed_order(self):
        summary = calculate_estimate_pricing(_rooms())
        assert [item.key for item in summary.line_items] == [
            "kitchen",
            "diningRoom",
            "livingRoom",
            "bedrooms",
            "bathrooms",
            "masterBathrooms",
        ]

    def test_empty_rooms_price_to_zero(self):
        summary = calculate_estimate_pricing(_rooms())
        assert summary.subtotal == 0
        assert summary.total == 0
        assert _line(summary, "bedrooms").description == "Bedrooms (beds: none)"

    def test_negative_and_oversized_inputs_are_normalized(self):
        summary = calculate_estimate_pricing(
            _rooms(kitchen_qty=-5, bedrooms=[{"beds": 9}])
        )

        kitchen = _line(summary, "kitchen")
        assert kitchen.qty == 0
        assert kitchen.total_price == 0

        bedrooms = _line(summary, "bedrooms")
        assert bedrooms.metadata == {"beds": [6]}
        assert bedrooms.total_price == calculate_bedroom_price(6)

    def test_unit_lines_are_qty_times_price(self):
        summary = calculate_estimate_pricing(_rooms(bathrooms_qty=3, master_bathrooms_qty=2))

        bathrooms = _line(summary, "bathrooms")
        assert bathrooms.unit_price == 500
        assert bathrooms.total_price == 1500
        assert _line(summary, "masterBathrooms").total_price == 1500

    def test_bedrooms_line_is_aggregate(self):
        summary = calculate_estimate_pricing(_rooms(bedrooms=[{"beds": 2}, {"beds": 3}, {}]))

        bedrooms = _line(summary, "bedrooms")
        assert bedrooms.qty == 3
        assert bedrooms.unit_price == 0
        assert bedrooms.total_price == 1000 + 1500 + 1000
        assert bedrooms.metadata == {"beds": [2, 3, 1]}

    def test_tax_is_added_not_computed(self):
        summary = calculate_estimate_pricing(_rooms(kitchen_qty=1), tax=170)
        assert summary.subtotal == 1000
        assert summary.total == 1170

    def test_totals_invariant(self):
        summary = calculate_estimate_pricing(
            _rooms(kitchen_qty=2, living_room_qty=1, bedrooms=[{"beds": 5}]), tax=12.5
        )
        assert summary.subtotal == sum(item.total_price for item in summary.line_items)
        assert math.isclose(summary.total, summary.subtotal + summary.tax)

    def test_alternate_rate_card(self):
        card = RateCard(kitchen=1200)
        summary = calculate_estimate_pricing(_rooms(kitchen_qty=1), rate_card=card)
        assert summary.total == 1200
        assert DEFAULT_RATE_CARD.kitchen == 1000


class TestLargeQuantities:
    def test_huge_quantity_is_capped_not_raised(self):
        summary = calculate_estimate_pricing(_rooms(dining_room_qty=1e308))

        dining = _line(summary, "diningRoom")
        assert dining.qty == MAX_ROOM_QTY
        assert dining.total_price == MAX_ROOM_QTY * DEFAULT_RATE_CARD.dining_room
        assert math.isfinite(summary.total)

    def test_cap_applies_per_room_kind(self):
        summary = calculate_estimate_pricing(_rooms(kitchen_qty=MAX_ROOM_QTY, bathrooms_qty=MAX_ROOM_QTY + 1))

        assert _line(summary, "kitchen").qty == MAX_ROOM_QTY
        assert _line(summary, "bathrooms").qty == MAX_ROOM_QTY
