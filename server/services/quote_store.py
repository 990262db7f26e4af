"""Quote storage for TradieQuote.

QuoteStore is the storage interface the HTTP layer depends on;
InMemoryQuoteStore keeps quotes in a process-local map for the life of the
server. A database-backed store only needs to implement the same three
methods.
"""

import secrets
import string
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

import structlog

from config.errors import ErrorCode, StorageError
from config.settings import settings
from models.quote import Quote

logger = structlog.get_logger()

SLUG_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
MAX_SLUG_ATTEMPTS = 10


class QuoteStore(ABC):
    """Storage collaborator for saved quotes."""

    @abstractmethod
    def save(self, quote: Quote) -> None:
        """Persist a quote under its slug."""

    @abstractmethod
    def get(self, slug: str) -> Optional[Quote]:
        """Fetch a quote by slug, or None if unknown."""

    @abstractmethod
    def generate_slug(self) -> str:
        """Return a slug not currently in use."""

    def create(self, build_quote: Callable[[str], Quote]) -> Quote:
        """Build a quote around a fresh slug and save it.

        A slug taken between generate_slug() and save() is retried with a
        new one.

        Args:
            build_quote: Called with the slug, returns the quote to store.

        Returns:
            The stored quote.
        """
        for _ in range(MAX_SLUG_ATTEMPTS):
            quote = build_quote(self.generate_slug())
            try:
                self.save(quote)
                return quote
            except StorageError as e:
                if e.code != ErrorCode.SLUG_TAKEN:
                    raise
                logger.warning("slug_taken_on_save", slug=quote.slug)

        raise StorageError(
            code=ErrorCode.SLUG_EXHAUSTED,
            message=f"No free slug after {MAX_SLUG_ATTEMPTS} attempts"
        )


def random_slug(length: int) -> str:
    """Random alphanumeric slug."""
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(length))


class InMemoryQuoteStore(QuoteStore):
    """Process-local quote store. Quotes are lost on restart.

    All access to the map goes through a lock, and save() refuses to
    overwrite an existing slug, so concurrent saves cannot clobber each
    other.
    """

    def __init__(self, slug_length: Optional[int] = None):
        self.slug_length = slug_length or settings.slug_length
        self._quotes: Dict[str, Quote] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._quotes)

    def __contains__(self, slug: str) -> bool:
        with self._lock:
            return slug in self._quotes

    def generate_slug(self) -> str:
        """Generate an unused slug, retrying on collision.

        Raises:
            StorageError: If no free slug is found in MAX_SLUG_ATTEMPTS tries.
        """
        for attempt in range(MAX_SLUG_ATTEMPTS):
            slug = random_slug(self.slug_length)
            if slug not in self:
                return slug
            logger.warning("slug_collision", slug=slug, attempt=attempt + 1)

        raise StorageError(
            code=ErrorCode.SLUG_EXHAUSTED,
            message=f"No free slug after {MAX_SLUG_ATTEMPTS} attempts"
        )

    def save(self, quote: Quote) -> None:
        """Store a quote.

        Raises:
            StorageError: If the slug is already taken.
        """
        with self._lock:
            if quote.slug in self._quotes:
                raise StorageError(
                    code=ErrorCode.SLUG_TAKEN,
                    message=f"Slug already in use: {quote.slug}",
                    slug=quote.slug
                )
            self._quotes[quote.slug] = quote

        logger.debug("quote_stored", slug=quote.slug, quote_id=quote.id)

    def get(self, slug: str) -> Optional[Quote]:
        with self._lock:
            return self._quotes.get(slug)
