"""Unified secret access for TradieQuote.

Secrets are read from the process environment. ``config.settings`` loads a
``.env`` file on import, so local development can keep keys there.

Usage:
    from config.secrets import get_openai_api_key, get_secret

    api_key = get_openai_api_key()
"""

import os
from functools import lru_cache
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


def get_secret(secret_id: str) -> Optional[str]:
    """
    Get a secret from the environment.

    Args:
        secret_id: The name of the secret (e.g., 'OPENAI_API_KEY')

    Returns:
        The secret value, or None if not set or blank
    """
    value = os.environ.get(secret_id)
    if value and value.strip():
        logger.debug("secret_loaded", secret_id=secret_id)
        return value.strip()

    logger.info("secret_not_configured", secret_id=secret_id)
    return None


# Cached so the environment is read once per process
@lru_cache(maxsize=1)
def get_openai_api_key() -> Optional[str]:
    """Get OpenAI API key from secrets."""
    return get_secret('OPENAI_API_KEY')


def clear_secret_cache() -> None:
    """Clear cached secrets. Useful for testing or when secrets are rotated.

    Also drops the copy held by the settings singleton, so the next
    settings.openai_api_key read sees the current environment.
    """
    from config.settings import settings

    get_openai_api_key.cache_clear()
    settings._openai_api_key = None
