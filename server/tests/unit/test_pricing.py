"""Unit tests for pricing rules."""

import pytest

from models.quote import QuoteItem, Unit
from models.trade import TradeType
from services.pricing import (
    DEFAULT_HOURLY_RATE,
    GREEN_WASTE_FEE,
    apply_default_pricing,
    calculate_gst,
    calculate_subtotal,
    calculate_total,
    calculate_totals,
    format_currency,
    has_green_waste,
    round_half_up,
)
from services.trade_knowledge import get_trade_default_rate


def item(qty, unit_price, unit=Unit.HOUR, label="Work"):
    return QuoteItem(label=label, qty=qty, unit=unit, unit_price=unit_price)


class TestGreenWaste:
    """Tests for has_green_waste."""

    @pytest.mark.parametrize("description", [
        "trim hedges",
        "mow lawn",
        "Mow lawn",
        "remove tree waste",
        "garden cleanup",
        "green waste removal",
        "GARDEN makeover",
    ])
    def test_detected(self, description):
        assert has_green_waste(description) is True

    @pytest.mark.parametrize("description", [
        "paint house",
        "fix electrical",
        "",
    ])
    def test_not_detected(self, description):
        assert has_green_waste(description) is False


class TestSubtotal:
    """Tests for calculate_subtotal."""

    def test_without_green_waste(self):
        items = [item(2, 90, label="Painting"), item(1, 50, Unit.ITEM, "Materials")]
        assert calculate_subtotal(items, "paint house") == 230

    def test_adds_green_waste_fee(self):
        items = [item(2, 90, label="Hedge trimming")]
        assert calculate_subtotal(items, "trim hedges") == 180 + GREEN_WASTE_FEE

    def test_rounds_to_whole_dollars(self):
        assert calculate_subtotal([item(1, 90.7)], "service") == 91

    def test_rounds_half_up(self):
        assert calculate_subtotal([item(0.5, 91)], "service") == 46

    def test_order_invariant(self):
        items = [item(1.5, 85), item(3, 120, Unit.SQUARE_METRE), item(1, 33, Unit.ITEM)]
        forward = calculate_subtotal(items, "lawn")
        backward = calculate_subtotal(list(reversed(items)), "lawn")
        assert forward == backward
        assert isinstance(forward, int)

    def test_empty_items(self):
        assert calculate_subtotal([], "mow lawn") == GREEN_WASTE_FEE


class TestGstAndTotal:
    """Tests for calculate_gst and calculate_total."""

    @pytest.mark.parametrize("subtotal,expected", [
        (100, 10),
        (230, 23),
        (205, 21),
        (25, 3),
        (0, 0),
    ])
    def test_gst(self, subtotal, expected):
        assert calculate_gst(subtotal) == expected

    def test_total(self):
        assert calculate_total(100, 10) == 110
        assert calculate_total(230, 23) == 253

    @pytest.mark.parametrize("subtotal", [0, 1, 5, 15, 25, 205, 999, 12345])
    def test_total_is_subtotal_plus_rounded_gst(self, subtotal):
        expected_gst = int(subtotal * 0.1 + 0.5)
        assert calculate_total(subtotal, calculate_gst(subtotal)) == subtotal + expected_gst

    def test_calculate_totals(self):
        totals = calculate_totals([item(2, 90), item(1.5, 90), item(1, 25, Unit.ITEM)], "trim hedges")
        assert totals.subtotal == 365
        assert totals.gst == 37
        assert totals.total == 402


class TestRounding:
    """round_half_up never uses banker's rounding."""

    @pytest.mark.parametrize("value,expected", [
        (0.5, 1),
        (1.5, 2),
        (2.5, 3),
        (20.5, 21),
        (134.4, 134),
        (0.49, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_large_integers_exact(self):
        value = 2 ** 60 + 1
        assert round_half_up(value) == value


class TestFormatCurrency:
    """Tests for format_currency."""

    @pytest.mark.parametrize("amount,expected", [
        (100, "$100"),
        (1234, "$1,234"),
        (0, "$0"),
        (1234567, "$1,234,567"),
        (1234.5, "$1,235"),
        (-1500, "$-1,500"),
    ])
    def test_format(self, amount, expected):
        assert format_currency(amount) == expected


class TestApplyDefaultPricing:
    """Tests for apply_default_pricing."""

    def test_flat_default_without_trade(self):
        result = apply_default_pricing([item(1, 0)])
        assert result[0].unit_price == DEFAULT_HOURLY_RATE == 90

    def test_location_ignored_without_trade(self):
        result = apply_default_pricing([item(1, 0)], None, "Sydney")
        assert result[0].unit_price == 90

    def test_preserves_existing_prices(self):
        result = apply_default_pricing([item(1, 100)])
        assert result[0].unit_price == 100

    def test_trade_specific_rate(self):
        result = apply_default_pricing([item(1, 0)], TradeType.ELECTRICAL)
        assert result[0].unit_price == 130

    def test_major_city_premium(self):
        result = apply_default_pricing([item(1, 0)], TradeType.PLUMBING, "Sydney")
        assert result[0].unit_price == 134

    def test_major_city_case_insensitive_substring(self):
        result = apply_default_pricing([item(1, 0)], TradeType.ELECTRICAL, "North PERTH WA")
        assert result[0].unit_price == 146

    def test_regional_discount(self):
        result = apply_default_pricing([item(1, 0)], TradeType.PLUMBING, "Dubbo NSW")
        assert result[0].unit_price == 114

    def test_zero_priced_non_hourly_items_get_hourly_rate(self):
        items = [item(10, 0, Unit.SQUARE_METRE), item(1, 0, Unit.ITEM)]
        result = apply_default_pricing(items, TradeType.PAINTING)
        assert [i.unit_price for i in result] == [80, 80]

    def test_does_not_mutate_input(self):
        items = [item(1, 0), item(2, 45)]
        result = apply_default_pricing(items, TradeType.HANDYMAN)
        assert items[0].unit_price == 0
        assert result[0].unit_price == 90
        assert result[1] is items[1]

    def test_other_fields_unchanged(self):
        original = item(2.5, 0, Unit.ITEM, "Skip bin")
        (result,) = apply_default_pricing([original], TradeType.GARDENING)
        assert (result.label, result.qty, result.unit) == ("Skip bin", 2.5, "item")


class TestTradeDefaultRate:
    """Tests for get_trade_default_rate."""

    def test_no_location(self):
        assert get_trade_default_rate(TradeType.ROOFING) == 140

    def test_empty_location_is_unadjusted(self):
        assert get_trade_default_rate(TradeType.ROOFING, "") == 140

    @pytest.mark.parametrize("city", ["sydney", "Melbourne", "BRISBANE", "Perth", "Adelaide SA"])
    def test_major_cities(self, city):
        assert get_trade_default_rate(TradeType.GARDENING, city) == 95

    def test_regional(self):
        assert get_trade_default_rate(TradeType.GARDENING, "Ballarat") == 81
