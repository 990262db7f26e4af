"""Unit tests for quote storage."""

import re
import threading
import time
from uuid import uuid4

import pytest
from unittest.mock import patch

from config.errors import ErrorCode, StorageError
from models.quote import Quote, QuoteItem, Unit
from services.quote_store import InMemoryQuoteStore, MAX_SLUG_ATTEMPTS, random_slug


def make_quote(slug: str, **overrides) -> Quote:
    data = dict(
        id=str(uuid4()),
        created_at=int(time.time() * 1000),
        job_description="Fix leaking tap",
        items=[QuoteItem(label="Labour", qty=1, unit=Unit.HOUR, unit_price=120)],
        subtotal=120,
        gst=12,
        total=132,
        slug=slug,
    )
    data.update(overrides)
    return Quote(**data)


class TestRandomSlug:
    """Tests for slug generation."""

    def test_length_and_alphabet(self):
        for _ in range(50):
            assert re.fullmatch(r"[a-zA-Z0-9]{8}", random_slug(8))

    def test_custom_length(self):
        assert len(random_slug(12)) == 12


class TestInMemoryQuoteStore:
    """Tests for InMemoryQuoteStore."""

    def test_save_and_get(self, quote_store):
        quote = make_quote("abcd1234")
        quote_store.save(quote)

        assert quote_store.get("abcd1234") == quote
        assert "abcd1234" in quote_store
        assert len(quote_store) == 1

    def test_get_unknown(self, quote_store):
        assert quote_store.get("missing1") is None

    def test_slugs_are_case_sensitive(self, quote_store):
        quote_store.save(make_quote("AbCd1234"))
        assert quote_store.get("abcd1234") is None

    def test_duplicate_slug_rejected(self, quote_store):
        original = make_quote("abcd1234")
        quote_store.save(original)

        with pytest.raises(StorageError) as exc_info:
            quote_store.save(make_quote("abcd1234", total=999))

        assert exc_info.value.code == ErrorCode.SLUG_TAKEN
        assert quote_store.get("abcd1234") == original

    def test_generate_slug_format(self, quote_store):
        assert re.fullmatch(r"[a-zA-Z0-9]{8}", quote_store.generate_slug())

    def test_slug_length_from_settings(self):
        from config.settings import settings

        store = InMemoryQuoteStore()
        assert len(store.generate_slug()) == settings.slug_length

    def test_generate_slug_retries_collision(self, quote_store):
        quote_store.save(make_quote("taken123"))

        with patch("services.quote_store.random_slug", side_effect=["taken123", "free4567"]):
            assert quote_store.generate_slug() == "free4567"

    def test_generate_slug_exhausted(self, quote_store):
        quote_store.save(make_quote("taken123"))

        with patch("services.quote_store.random_slug", return_value="taken123"):
            with pytest.raises(StorageError) as exc_info:
                quote_store.generate_slug()

        assert exc_info.value.code == ErrorCode.SLUG_EXHAUSTED

    def test_create(self, quote_store):
        quote = quote_store.create(make_quote)

        assert quote_store.get(quote.slug) == quote

    def test_create_retries_when_slug_taken_before_save(self, quote_store):
        """A slug taken between generate_slug and save gets replaced."""
        slugs = iter(["raced123", "fresh456"])

        def build(slug):
            if slug == "raced123":
                quote_store.save(make_quote("raced123"))
            return make_quote(slug)

        with patch.object(quote_store, "generate_slug", side_effect=lambda: next(slugs)):
            quote = quote_store.create(build)

        assert quote.slug == "fresh456"
        assert len(quote_store) == 2

    def test_create_gives_up(self, quote_store):
        quote_store.save(make_quote("taken123"))

        with patch.object(quote_store, "generate_slug", return_value="taken123"):
            with pytest.raises(StorageError) as exc_info:
                quote_store.create(make_quote)

        assert exc_info.value.code == ErrorCode.SLUG_EXHAUSTED

    def test_concurrent_creates(self, quote_store):
        results = []

        def worker():
            for _ in range(25):
                results.append(quote_store.create(make_quote).slug)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 200
        assert len(set(results)) == 200
        assert len(quote_store) == 200

    def test_max_attempts_constant(self):
        assert MAX_SLUG_ATTEMPTS == 10
