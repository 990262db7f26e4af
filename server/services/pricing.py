"""Pricing rules for TradieQuote.

Whole-dollar subtotal, GST and total calculation, the green waste
surcharge, and default rates for items the generator left unpriced.
"""

from typing import Iterable, List, Optional

from models.quote import QuoteItem, QuoteTotals
from models.trade import TradeType
from services.trade_knowledge import get_trade_default_rate
from utils.money import format_currency, round_half_up

DEFAULT_HOURLY_RATE = 90
GREEN_WASTE_FEE = 25
GST_RATE = 0.1
GREEN_WASTE_KEYWORDS = ("lawn", "hedge", "tree", "garden", "waste", "green waste")

__all__ = [
    "DEFAULT_HOURLY_RATE",
    "GREEN_WASTE_FEE",
    "GST_RATE",
    "GREEN_WASTE_KEYWORDS",
    "has_green_waste",
    "calculate_subtotal",
    "calculate_gst",
    "calculate_total",
    "calculate_totals",
    "apply_default_pricing",
    "format_currency",
    "round_half_up",
]


def has_green_waste(job_description: str) -> bool:
    """Check if job description mentions green waste."""
    lower = (job_description or "").lower()
    return any(keyword in lower for keyword in GREEN_WASTE_KEYWORDS)


def calculate_subtotal(items: Iterable[QuoteItem], job_description: str) -> int:
    """Calculate subtotal from items, adding green waste fee if applicable.

    Rounded to whole dollars after the fee is added.
    """
    items_total = sum(item.line_total for item in items)
    green_waste_fee = GREEN_WASTE_FEE if has_green_waste(job_description) else 0
    return round_half_up(items_total + green_waste_fee)


def calculate_gst(subtotal: int) -> int:
    """Calculate GST (10% of subtotal, rounded)."""
    return round_half_up(subtotal * GST_RATE)


def calculate_total(subtotal: int, gst: int) -> int:
    """Calculate total (subtotal + GST)."""
    return subtotal + gst


def calculate_totals(items: Iterable[QuoteItem], job_description: str) -> QuoteTotals:
    """Subtotal, GST and total for a list of items."""
    subtotal = calculate_subtotal(items, job_description)
    gst = calculate_gst(subtotal)
    return QuoteTotals(subtotal=subtotal, gst=gst, total=calculate_total(subtotal, gst))


def apply_default_pricing(
    items: Iterable[QuoteItem],
    trade_type: Optional[TradeType] = None,
    location: Optional[str] = None
) -> List[QuoteItem]:
    """Fill in a default rate for items priced at zero.

    Without a trade the flat DEFAULT_HOURLY_RATE is used; with one, the
    trade's location-adjusted default rate. The rate is applied whatever the
    item's unit, so a zero-priced m2 or item line also receives the hourly
    rate.

    Args:
        items: Validated line items.
        trade_type: Detected trade, if any.
        location: Customer location used for the city/regional adjustment.

    Returns:
        New list of items; priced items are returned unchanged.
    """
    default_rate = (
        get_trade_default_rate(trade_type, location)
        if trade_type
        else DEFAULT_HOURLY_RATE
    )

    return [
        item if item.unit_price else item.model_copy(update={"unit_price": default_rate})
        for item in items
    ]
