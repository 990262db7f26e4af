"""TradieQuote configuration.

This package contains:
- settings: Environment variables and configuration
- secrets: Secret access (OpenAI API key)
- errors: Custom exceptions and error codes
"""

from config.settings import settings
from config.errors import QuoteError
from config.secrets import get_secret, get_openai_api_key

__all__ = [
    "settings",
    "QuoteError",
    "get_secret",
    "get_openai_api_key",
]
