"""Quote generation for TradieQuote.

Turns a job description into priced line items:

1. No API key configured -> demo quote.
2. Detect the trade, build the prompt, make one LLM call in JSON mode.
3. Any failure (call error, timeout, empty or unparseable response,
   rejected items) -> demo quote.
4. Otherwise fill zero prices with trade/location default rates.

generate() never raises; every failure is logged and degrades to the demo
quote.
"""

from typing import Optional

import structlog

from config.errors import ErrorCode, QuoteError
from config.settings import settings
from models.quote import GeneratedQuote, QuoteContext, QuoteItem, Unit
from models.trade import TradeType
from services.llm_service import LLMService
from services.pricing import apply_default_pricing
from services.trade_classifier import classify
from services.trade_knowledge import (
    format_rate_band,
    get_trade_default_rate,
    get_trade_guidance,
    get_trade_pricing,
)
from utils.quote_logger import (
    log_fallback_used,
    log_generation_start,
    log_llm_response,
    log_quote_generated,
    log_trade_detected,
)
from validators.quote_validator import validate_quote_response

logger = structlog.get_logger()

DEMO_NOTES = "Includes disposal of all green waste. Weather permitting."


def demo_quote() -> GeneratedQuote:
    """The fixed fallback quote. A new object is returned on every call."""
    return GeneratedQuote(
        items=[
            QuoteItem(label="Hedge trimming", qty=2, unit=Unit.HOUR, unit_price=90),
            QuoteItem(label="Lawn mowing", qty=1.5, unit=Unit.HOUR, unit_price=90),
            QuoteItem(label="Green waste removal", qty=1, unit=Unit.ITEM, unit_price=25),
        ],
        notes=DEMO_NOTES,
        is_fallback=True,
    )


SYSTEM_PROMPT = (
    "You are a quote generator for Australian tradies. Always return valid JSON only. "
    "Never include markdown code blocks, just pure JSON."
)

QUOTE_PROMPT = """You are a professional quote generator for Australian tradies (tradespeople). You understand Australian market rates, regional pricing variations, and Australian business practices.

IMPORTANT: All prices must be in Australian Dollars (AUD). Use realistic Australian market rates:
- Premium/emergency work: 20-50% surcharge
- Major cities (Sydney, Melbourne, Brisbane): Higher rates (typically 10-15% premium)
- Regional areas: Slightly lower rates (typically 5% reduction)
- Commercial/Industrial: Higher rates than residential (typically 20-30% premium)
- Materials: Price realistically for Australian market
{trade_guidance}

Given the job details, generate a quote with 3-6 line items. Each item should have:
- A clear, customer-friendly label (plain English, professional)
- A reasonable quantity based on the job description
- A unit: "hr" (hours), "m2" (square meters), or "item"
- A unit price in whole Australian dollars (no cents)

Adjust pricing based on:
- Location (major cities vs regional)
- Property type (commercial/industrial = higher rates)
- Urgency (ASAP/emergency = premium pricing)
- Trade type (use the trade-specific guidance above)

Job Description: "{job_description}"{context}

Return ONLY valid JSON in this exact format:
{{
  "items": [
    {{ "label": "Item name", "qty": 2, "unit": "hr", "unitPrice": 90 }},
    ...
  ],
  "notes": "Optional notes here (e.g., 'Weather permitting', 'Includes materials', 'GST included')"
}}

Make reasonable assumptions for missing details. Keep labels simple and professional. Consider Australian standards and practices."""


def build_context_section(context: QuoteContext, trade: TradeType) -> str:
    """Render the "Additional Context" block of the prompt.

    The customer's name is not sent to the model.
    """
    parts = []
    if context.location:
        parts.append(f"Location: {context.location}")
    if context.property_type:
        parts.append(f"Property Type: {context.property_type.label}")
    if context.urgency:
        parts.append(f"Urgency: {context.urgency.label}")
    if trade is not TradeType.OTHER:
        parts.append(f"Detected Trade Type: {trade.display_name}")

    if not parts:
        return ""
    return "\n\nAdditional Context:\n" + "\n".join(parts)


def build_trade_guidance(trade: TradeType) -> str:
    """Render the trade-specific pricing guidance, empty for TradeType.OTHER."""
    if trade is TradeType.OTHER:
        return ""

    pricing = get_trade_pricing(trade)
    units = ", ".join(Unit(unit).value for unit in pricing.common_units)
    return (
        "\nTRADE-SPECIFIC GUIDANCE:\n"
        f"{get_trade_guidance(trade)}\n"
        f"Typical hourly rate range: {format_rate_band(pricing)}\n"
        f"Default rate: ${pricing.default_hourly_rate}/hr\n"
        f"Common materials: {', '.join(pricing.typical_materials)}\n"
        f"Preferred units: {units}\n"
    )


def build_quote_prompt(job_description: str, context: QuoteContext, trade: TradeType) -> str:
    """Build the user prompt for a job."""
    return QUOTE_PROMPT.format(
        trade_guidance=build_trade_guidance(trade),
        job_description=job_description,
        context=build_context_section(context, trade),
    )


class QuoteGenerator:
    """Generates quote line items for a job description.

    The LLM service is created lazily so that a generator without an API
    key never builds a client.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        llm_service: Optional[LLMService] = None
    ):
        """Initialize QuoteGenerator.

        Args:
            api_key: OpenAI API key. None or blank means demo mode.
            llm_service: Optional pre-built LLM service (used in tests).
        """
        self.api_key = api_key
        self._llm = llm_service

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def llm(self) -> LLMService:
        if self._llm is None:
            self._llm = LLMService(api_key=self.api_key)
        return self._llm

    async def generate(
        self,
        job_description: str,
        context: Optional[QuoteContext] = None
    ) -> GeneratedQuote:
        """Generate a quote, falling back to the demo quote on any failure.

        Args:
            job_description: Trimmed, non-empty description of the job.
            context: Optional customer context.

        Returns:
            GeneratedQuote with items and optional notes.
        """
        context = context or QuoteContext()
        log_generation_start(job_description, self.has_credential, context.model_dump())

        if not self.has_credential:
            log_fallback_used("no_api_key")
            return demo_quote()

        try:
            trade, confidence = classify(job_description)
            log_trade_detected(trade.value, confidence, get_trade_default_rate(trade))

            prompt = build_quote_prompt(job_description, context, trade)
            result = await self.llm.generate_json(SYSTEM_PROMPT, prompt)
            log_llm_response(result["raw"], result["tokens_used"])

            candidate = result["content"]
            validation = validate_quote_response(candidate)
            if not validation.is_valid:
                log_fallback_used(
                    "invalid_quote_response",
                    ErrorCode.INVALID_QUOTE_RESPONSE,
                    validation.issue.to_dict()
                )
                return demo_quote()

            items = apply_default_pricing(validation.items, trade, context.location)
            defaults_applied = sum(
                1 for before, after in zip(validation.items, items) if before is not after
            )

            notes = candidate.get("notes")
            if notes is not None and not isinstance(notes, str):
                logger.warning("quote_notes_dropped", notes_type=type(notes).__name__)
                notes = None

            log_quote_generated(trade.value, len(items), defaults_applied)
            return GeneratedQuote(items=items, notes=notes)

        except QuoteError as e:
            log_fallback_used("generation_failed", e.code, e.details)
            return demo_quote()
        except Exception as e:
            logger.exception("quote_generation_exception", error=str(e))
            log_fallback_used("unexpected_error", ErrorCode.INTERNAL_ERROR, {"error": str(e)})
            return demo_quote()


async def generate_quote(
    job_description: str,
    api_key: Optional[str] = None,
    context: Optional[QuoteContext] = None,
    llm_service: Optional[LLMService] = None
) -> GeneratedQuote:
    """Generate a quote for a job description.

    Args:
        job_description: Trimmed, non-empty description of the job.
        api_key: OpenAI API key; without one the demo quote is returned.
        context: Optional customer context.
        llm_service: Optional pre-built LLM service.
    """
    generator = QuoteGenerator(api_key=api_key, llm_service=llm_service)
    return await generator.generate(job_description, context)


def default_generator() -> QuoteGenerator:
    """Generator configured from settings."""
    return QuoteGenerator(api_key=settings.openai_api_key)
