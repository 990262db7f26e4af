"""TradieQuote - quote generation service for tradespeople.

This package contains the Python HTTP service behind the TradieQuote client.

Architecture:
- Trade classifier: keyword scoring of the job description
- Pricing rules: GST, green waste fee, trade/location default rates
- Quote validator: schema checks on untrusted generator output
- Quote generator: LLM call with a demo-quote fallback
- Quote store: in-memory share links
"""

__version__ = "1.0.0"
