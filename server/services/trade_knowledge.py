"""Trade pricing reference data for TradieQuote.

Australian hourly-rate bands, typical materials and preferred units per
trade, plus the location-adjusted default rate used to fill missing prices.
"""

from typing import Dict, Optional

from models.quote import Unit
from models.trade import TradePricing, TradeType
from utils.money import format_currency, round_half_up

MAJOR_CITIES = ("sydney", "melbourne", "brisbane", "perth", "adelaide")
MAJOR_CITY_MULTIPLIER = 1.12
REGIONAL_MULTIPLIER = 0.95


TRADE_KNOWLEDGE: Dict[TradeType, TradePricing] = {
    TradeType.GARDENING: TradePricing(
        min_hourly_rate=70,
        max_hourly_rate=100,
        default_hourly_rate=85,
        typical_materials=["mulch", "plants", "fertilizer", "soil", "turf", "paving materials"],
        common_units=[Unit.HOUR, Unit.SQUARE_METRE, Unit.ITEM],
    ),
    TradeType.PLUMBING: TradePricing(
        min_hourly_rate=90,
        max_hourly_rate=150,
        default_hourly_rate=120,
        typical_materials=["pipes", "fittings", "taps", "toilets", "water heaters", "valves"],
        common_units=[Unit.HOUR, Unit.ITEM],
    ),
    TradeType.ELECTRICAL: TradePricing(
        min_hourly_rate=95,
        max_hourly_rate=160,
        default_hourly_rate=130,
        typical_materials=["cable", "switches", "power points", "light fixtures", "circuit breakers"],
        common_units=[Unit.HOUR, Unit.ITEM],
    ),
    TradeType.PAINTING: TradePricing(
        min_hourly_rate=60,
        max_hourly_rate=100,
        default_hourly_rate=80,
        typical_materials=["paint", "primer", "brushes", "rollers", "drop sheets", "tape"],
        common_units=[Unit.HOUR, Unit.SQUARE_METRE],
    ),
    TradeType.HANDYMAN: TradePricing(
        min_hourly_rate=70,
        max_hourly_rate=110,
        default_hourly_rate=90,
        typical_materials=["screws", "nails", "brackets", "hardware", "tools"],
        common_units=[Unit.HOUR, Unit.ITEM],
    ),
    TradeType.ROOFING: TradePricing(
        min_hourly_rate=100,
        max_hourly_rate=180,
        default_hourly_rate=140,
        typical_materials=["tiles", "metal sheeting", "guttering", "insulation", "flashing"],
        common_units=[Unit.HOUR, Unit.SQUARE_METRE],
    ),
    TradeType.CARPENTRY: TradePricing(
        min_hourly_rate=85,
        max_hourly_rate=140,
        default_hourly_rate=110,
        typical_materials=["timber", "plywood", "hardware", "screws", "nails", "glue"],
        common_units=[Unit.HOUR, Unit.SQUARE_METRE, Unit.ITEM],
    ),
    TradeType.CONCRETE: TradePricing(
        min_hourly_rate=80,
        max_hourly_rate=120,
        default_hourly_rate=100,
        typical_materials=["concrete", "rebar", "formwork", "sealant", "aggregate"],
        common_units=[Unit.HOUR, Unit.SQUARE_METRE],
    ),
    TradeType.OTHER: TradePricing(
        min_hourly_rate=70,
        max_hourly_rate=110,
        default_hourly_rate=90,
        typical_materials=["materials", "supplies"],
        common_units=[Unit.HOUR, Unit.SQUARE_METRE, Unit.ITEM],
    ),
}

# {rates} is replaced with the formatted rate band, e.g. "$70-$100/hr"
TRADE_GUIDANCE: Dict[TradeType, str] = {
    TradeType.GARDENING: (
        "Gardening/Landscaping: Focus on outdoor work, plants, lawns, and landscaping. "
        "Typical rates {rates}. Common tasks: mowing, hedge trimming, planting, mulching, paving."
    ),
    TradeType.PLUMBING: (
        "Plumbing: Specialized trade requiring licenses. Typical rates {rates}. "
        "Common tasks: repairs, installations, blocked drains, hot water systems. "
        "Materials often significant cost."
    ),
    TradeType.ELECTRICAL: (
        "Electrical: Licensed trade, safety critical. Typical rates {rates}. "
        "Common tasks: wiring, power points, lighting, safety switches. "
        "Must comply with Australian standards."
    ),
    TradeType.PAINTING: (
        "Painting: Interior/exterior painting and preparation. Typical rates {rates}. "
        "Common tasks: walls, ceilings, trim, doors. "
        "Preparation work (sanding, filling) is significant."
    ),
    TradeType.HANDYMAN: (
        "Handyman: General repairs and installations. Typical rates {rates}. "
        "Common tasks: mounting, assembly, minor repairs, odd jobs."
    ),
    TradeType.ROOFING: (
        "Roofing: Specialized and potentially dangerous work. Typical rates {rates}. "
        "Common tasks: repairs, replacements, guttering, skylights."
    ),
    TradeType.CARPENTRY: (
        "Carpentry: Woodwork and construction. Typical rates {rates}. "
        "Common tasks: framing, decks, cabinets, doors, windows."
    ),
    TradeType.CONCRETE: (
        "Concrete: Driveways, paths, slabs. Typical rates {rates}. "
        "Common tasks: pouring, finishing, exposed aggregate, rendering."
    ),
    TradeType.OTHER: "General trade work. Typical rates {rates}.",
}


def get_trade_pricing(trade_type: TradeType) -> TradePricing:
    """Get pricing information for a specific trade."""
    return TRADE_KNOWLEDGE[TradeType(trade_type)]


def is_major_city(location: Optional[str]) -> bool:
    """True if the location names one of the major capital cities."""
    if not location:
        return False
    lower_location = location.lower()
    return any(city in lower_location for city in MAJOR_CITIES)


def get_trade_default_rate(trade_type: TradeType, location: Optional[str] = None) -> int:
    """Get default hourly rate for a trade, adjusted for location.

    Major cities attract a 12% premium; any other named location is treated
    as regional and discounted 5%. No location means no adjustment.

    Args:
        trade_type: Detected trade.
        location: Free-text location (suburb, city, postcode...).

    Returns:
        Whole-dollar hourly rate.
    """
    rate = get_trade_pricing(trade_type).default_hourly_rate

    if location:
        if is_major_city(location):
            rate = round_half_up(rate * MAJOR_CITY_MULTIPLIER)
        else:
            rate = round_half_up(rate * REGIONAL_MULTIPLIER)

    return rate


def format_rate_band(pricing: TradePricing) -> str:
    """Format a trade's rate band, e.g. "$90-$150/hr"."""
    return f"{format_currency(pricing.min_hourly_rate)}-{format_currency(pricing.max_hourly_rate)}/hr"


def get_trade_guidance(trade_type: TradeType) -> str:
    """Get trade-specific guidance text for the generation prompt."""
    trade_type = TradeType(trade_type)
    template = TRADE_GUIDANCE.get(trade_type, TRADE_GUIDANCE[TradeType.OTHER])
    return template.format(rates=format_rate_band(get_trade_pricing(trade_type)))
