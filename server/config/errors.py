"""TradieQuote error handling.

Custom exceptions and error codes for the quote service.
"""

from typing import Optional, Dict, Any


# Error Codes
class ErrorCode:
    """Error code constants."""

    # Validation Errors (1xxx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"

    # Generation Errors (2xxx)
    LLM_ERROR = "LLM_ERROR"
    LLM_RATE_LIMIT = "LLM_RATE_LIMIT"
    LLM_CONTEXT_TOO_LONG = "LLM_CONTEXT_TOO_LONG"
    LLM_TIMEOUT = "LLM_TIMEOUT"
    LLM_EMPTY_RESPONSE = "LLM_EMPTY_RESPONSE"
    LLM_INVALID_JSON = "LLM_INVALID_JSON"
    INVALID_QUOTE_RESPONSE = "INVALID_QUOTE_RESPONSE"

    # Storage Errors (3xxx)
    STORAGE_ERROR = "STORAGE_ERROR"
    QUOTE_NOT_FOUND = "QUOTE_NOT_FOUND"
    SLUG_TAKEN = "SLUG_TAKEN"
    SLUG_EXHAUSTED = "SLUG_EXHAUSTED"

    # Internal Errors (9xxx)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class QuoteError(Exception):
    """Base exception for TradieQuote errors.

    Provides structured error information for logs and API responses.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Initialize QuoteError.

        Args:
            code: Error code from ErrorCode constants
            message: Human-readable error message
            details: Additional error context
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary with code, message, and details.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }

    def __repr__(self) -> str:
        return f"QuoteError(code={self.code!r}, message={self.message!r})"


class ValidationError(QuoteError):
    """Request validation error, surfaced to the caller as a 400."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={**(details or {}), "field": field} if field else details
        )
        self.field = field


class GenerationError(QuoteError):
    """Upstream generation failure. Always recovered with the fallback quote."""


class StorageError(QuoteError):
    """Storage collaborator failure."""

    def __init__(
        self,
        code: str,
        message: str,
        slug: Optional[str] = None,
        details: Optional[Dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            details={**(details or {}), "slug": slug} if slug else details
        )
        self.slug = slug
