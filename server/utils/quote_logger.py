"""Quote pipeline logging helpers.

Structured log events for each step of quote generation and saving, so a
single request can be followed through the logs.
"""

from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger()

PREVIEW_LENGTH = 300


def _truncate(value: str, max_length: int = PREVIEW_LENGTH) -> str:
    """Truncate long strings for display purposes."""
    if len(value) <= max_length:
        return value
    return value[:max_length] + f"... [truncated {len(value) - max_length} chars]"


def log_generation_start(job_description: str, has_credential: bool, context: Dict[str, Any]) -> None:
    """Log the start of a generation request."""
    logger.info(
        "quote_generation_started",
        description_length=len(job_description),
        has_credential=has_credential,
        context_fields=sorted(k for k, v in context.items() if v),
    )


def log_trade_detected(trade: str, confidence: float, default_rate: int) -> None:
    """Log the detected trade and the default rate it implies."""
    logger.info(
        "trade_detected",
        trade=trade,
        confidence=confidence,
        default_rate=default_rate,
    )


def log_llm_response(raw: str, tokens_used: int) -> None:
    """Log a preview of the raw generator response."""
    logger.debug(
        "llm_raw_response",
        preview=_truncate(raw),
        tokens_used=tokens_used,
    )


def log_fallback_used(reason: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
    """Log that the demo quote was served instead of a generated one."""
    logger.warning(
        "quote_fallback_used",
        reason=reason,
        error_code=error_code,
        details={k: _truncate(v) if isinstance(v, str) else v for k, v in (details or {}).items()},
    )


def log_quote_generated(trade: str, item_count: int, defaults_applied: int) -> None:
    """Log a successfully generated quote."""
    logger.info(
        "quote_generated",
        trade=trade,
        item_count=item_count,
        defaults_applied=defaults_applied,
    )


def log_quote_saved(slug: str, item_count: int, total_display: str) -> None:
    """Log a saved quote."""
    logger.info(
        "quote_saved",
        slug=slug,
        item_count=item_count,
        total=total_display,
    )
