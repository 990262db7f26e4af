"""Utility modules for the TradieQuote server."""

from utils.logging_config import configure_logging
from utils.money import format_currency, round_half_up
from utils.quote_logger import (
    log_generation_start,
    log_trade_detected,
    log_llm_response,
    log_fallback_used,
    log_quote_generated,
    log_quote_saved,
)

__all__ = [
    "configure_logging",
    "format_currency",
    "round_half_up",
    "log_generation_start",
    "log_trade_detected",
    "log_llm_response",
    "log_fallback_used",
    "log_quote_generated",
    "log_quote_saved",
]
