"""TradieQuote configuration settings.

Loads configuration from environment variables with sensible defaults.
Secrets are loaded through config.secrets.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file for local configuration (API key, port, feature flags)
load_dotenv()

SERVER_ROOT = Path(__file__).resolve().parent.parent


def _get_default_client_dist() -> str:
    """Default location of the built client bundle (sibling of server/)."""
    return str(SERVER_ROOT.parent / "client" / "dist")


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Note: OPENAI_API_KEY should be accessed via the openai_api_key property,
    which delegates to the secrets module.
    """

    # LLM Configuration (non-secrets)
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"))
    llm_temperature: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7")))
    llm_max_tokens: int = field(default_factory=lambda: int(os.getenv("LLM_MAX_TOKENS", "800")))
    llm_timeout_seconds: float = field(default_factory=lambda: float(os.getenv("LLM_TIMEOUT_SECONDS", "20")))
    llm_base_url: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_BASE_URL") or None)

    # HTTP Server
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3001")))
    environment: str = field(default_factory=lambda: os.getenv("APP_ENV", "development"))
    client_dist_dir: str = field(default_factory=lambda: os.getenv("CLIENT_DIST_DIR", _get_default_client_dist()))

    # Share links
    slug_length: int = field(default_factory=lambda: int(os.getenv("SLUG_LENGTH", "8")))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Internal: cached secret value (use openai_api_key property instead)
    _openai_api_key: Optional[str] = field(default=None, repr=False)

    @property
    def openai_api_key(self) -> Optional[str]:
        """Get OpenAI API key from the secrets module.

        Returns None when no key is configured, in which case quote
        generation serves the demo quote.
        """
        if self._openai_api_key is None:
            from config.secrets import get_openai_api_key
            self._openai_api_key = get_openai_api_key()
        return self._openai_api_key

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() == "production"

    def validate(self) -> None:
        """Validate settings values.

        Raises:
            ValueError: If a setting is out of range.
        """
        if self.llm_timeout_seconds <= 0:
            raise ValueError("LLM_TIMEOUT_SECONDS must be positive")
        if self.slug_length < 4:
            raise ValueError("SLUG_LENGTH must be at least 4")


# Singleton settings instance
settings = Settings()
