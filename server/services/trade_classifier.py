"""Keyword trade classifier for TradieQuote.

Infers a trade category from a free-text job description using weighted
keyword matching. Pure and deterministic: no I/O, no randomness.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from models.trade import TradeType

# Below this score the description is too vague to call
MIN_TRADE_SCORE = 5
OTHER_CONFIDENCE = 0.3
MAX_CONFIDENCE = 0.95


@dataclass(frozen=True)
class TradeKeywords:
    """Keywords associated with a trade and its weight (higher = more specific)."""
    trade: TradeType
    keywords: Tuple[str, ...]
    priority: int


TRADE_KEYWORDS: Tuple[TradeKeywords, ...] = (
    TradeKeywords(
        trade=TradeType.PLUMBING,
        keywords=(
            "plumb", "pipe", "tap", "faucet", "toilet", "bathroom", "kitchen sink",
            "drain", "blocked", "leak", "water", "hot water", "shower", "basin",
            "sewer", "waterproof", "downpipe", "water heater", "gas",
            "bathroom renovation", "bathroom install", "toilet install", "tap install",
        ),
        priority=10,
    ),
    TradeKeywords(
        trade=TradeType.ELECTRICAL,
        keywords=(
            "electrical", "electric", "wiring", "wire", "rewire", "power point", "socket", "outlet",
            "light", "lighting", "switch", "circuit", "fuse", "breaker", "panel",
            "ceiling fan", "exhaust fan", "downlight", "led", "safety switch",
            "smoke alarm", "security light", "solar", "solar panel",
        ),
        priority=10,
    ),
    TradeKeywords(
        trade=TradeType.GARDENING,
        keywords=(
            "garden", "lawn", "mow", "mowing", "hedge", "trim", "trimming",
            "tree", "prune", "pruning", "landscaping", "mulch", "mulching",
            "weeding", "weed", "plant", "planting", "turf", "sod", "irrigation",
            "sprinkler", "paving", "retaining wall", "fence", "fencing",
        ),
        priority=8,
    ),
    TradeKeywords(
        trade=TradeType.PAINTING,
        keywords=(
            "paint", "painting", "brush", "roller", "primer", "undercoat",
            "exterior paint", "interior paint", "wall", "ceiling", "trim",
            "door", "window", "render", "rendering", "spray paint",
        ),
        priority=9,
    ),
    TradeKeywords(
        trade=TradeType.ROOFING,
        keywords=(
            "roof", "roofing", "tile", "gutter", "downpipe", "eaves", "fascia",
            "valley", "ridge", "skylight", "roof repair", "roof replacement",
            "metal roof", "tile roof", "colorbond", "roof leak",
        ),
        priority=10,
    ),
    TradeKeywords(
        trade=TradeType.CARPENTRY,
        keywords=(
            "carpenter", "carpentry", "cabinet", "cupboard", "shelf", "shelving",
            "deck", "decking", "verandah", "veranda", "pergola", "wall frame",
            "framing", "stud", "joist", "beam", "door install", "window install",
            "skirting", "architrave", "moulding", "molding", "frame wall", "frame new",
        ),
        priority=10,
    ),
    TradeKeywords(
        trade=TradeType.CONCRETE,
        keywords=(
            "concrete", "cement", "slab", "driveway", "pathway", "path", "patio",
            "footpath", "foundation", "footing", "render", "rendering", "stencil",
            "exposed aggregate", "polished concrete",
        ),
        priority=9,
    ),
    TradeKeywords(
        trade=TradeType.HANDYMAN,
        keywords=(
            "handyman", "general", "repair", "fix", "install", "assembly",
            "mount", "hang", "shelf", "picture", "tv mount", "blinds", "curtain",
            "door handle", "lock", "hinge", "maintenance", "odd jobs",
        ),
        priority=5,
    ),
)

_KEYWORDS_BY_TRADE: Dict[TradeType, TradeKeywords] = {entry.trade: entry for entry in TRADE_KEYWORDS}


def count_keyword_matches(description: str, keywords: Tuple[str, ...]) -> int:
    """Count keywords that occur as case-insensitive substrings."""
    lower = description.lower()
    return sum(1 for keyword in keywords if keyword in lower)


def score_trades(description: str) -> Dict[TradeType, int]:
    """Score every trade against a description.

    score = matches * priority, plus matches * 2 when more than one keyword
    corroborates the trade.

    Returns:
        Mapping of every TradeType (in declaration order) to its score.
    """
    scores: Dict[TradeType, int] = {trade: 0 for trade in TradeType}

    for entry in TRADE_KEYWORDS:
        match_count = count_keyword_matches(description, entry.keywords)
        if match_count > 0:
            bonus = match_count * 2 if match_count > 1 else 0
            scores[entry.trade] += match_count * entry.priority + bonus

    return scores


def detect_trade_type(description: str) -> TradeType:
    """Detect trade type from a job description.

    The highest score wins. Ties go to the trade declared first in
    TradeType. A best score under MIN_TRADE_SCORE gives TradeType.OTHER.
    """
    scores = score_trades(description or "")

    max_score = 0
    detected = TradeType.OTHER
    for trade in TradeType:
        if scores[trade] > max_score:
            max_score = scores[trade]
            detected = trade

    if max_score < MIN_TRADE_SCORE:
        return TradeType.OTHER

    return detected


def get_trade_detection_confidence(description: str, trade_type: TradeType) -> float:
    """Confidence (0-1) that a description belongs to the given trade."""
    trade_type = TradeType(trade_type)
    if trade_type is TradeType.OTHER:
        return OTHER_CONFIDENCE

    entry = _KEYWORDS_BY_TRADE.get(trade_type)
    if entry is None:
        return 0.5

    match_count = count_keyword_matches(description or "", entry.keywords)
    return min(MAX_CONFIDENCE, round(0.5 + match_count * 0.1, 2))


def classify(description: str) -> Tuple[TradeType, float]:
    """Detect the trade and its confidence in one call."""
    trade = detect_trade_type(description)
    return trade, get_trade_detection_confidence(description, trade)
