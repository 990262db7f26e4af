"""Pytest configuration and shared fixtures for TradieQuote tests."""

import json
import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from typing import Any, Dict, List


# ============================================================================
# Ensure local imports work (config/, models/, services/, validators/)
# ============================================================================
#
# The codebase uses absolute imports like `from services...` rooted at
# server/, which may not be on sys.path under every pytest import mode.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


# ============================================================================
# LLM Mocks
# ============================================================================

def make_llm_message(content: Any, total_tokens: int = 120) -> MagicMock:
    """Build a fake ChatOpenAI response message.

    Dicts are serialized to JSON; strings are used verbatim.
    """
    if not isinstance(content, str):
        content = json.dumps(content)
    return MagicMock(
        content=content,
        response_metadata={"token_usage": {"total_tokens": total_tokens}}
    )


@pytest.fixture
def llm_message():
    """Factory for fake ChatOpenAI responses."""
    return make_llm_message


@pytest.fixture
def mock_chat_openai():
    """Mock ChatOpenAI client."""
    mock = AsyncMock()
    mock.ainvoke.return_value = make_llm_message('{"items": []}', total_tokens=100)
    return mock


@pytest.fixture
def mock_llm_service(mock_chat_openai):
    """LLMService wired to the mocked ChatOpenAI client."""
    from services.llm_service import LLMService

    with patch('services.llm_service.ChatOpenAI', return_value=mock_chat_openai):
        service = LLMService(api_key="test-api-key", timeout_seconds=5)
        service._client = mock_chat_openai
        return service


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_items() -> List[Dict[str, Any]]:
    """A valid generator item list (wire format)."""
    return [
        {"label": "Clear blocked drain", "qty": 1.5, "unit": "hr", "unitPrice": 120},
        {"label": "Replace kitchen tap", "qty": 1, "unit": "item", "unitPrice": 180},
        {"label": "Call-out labour", "qty": 1, "unit": "hr", "unitPrice": 0},
    ]


@pytest.fixture
def sample_llm_payload(sample_items) -> Dict[str, Any]:
    """A valid generator response."""
    return {"items": sample_items, "notes": "Parts warranted for 12 months."}


@pytest.fixture
def sample_save_request(sample_items) -> Dict[str, Any]:
    """A valid /api/save request body."""
    return {
        "jobDescription": "Fix blocked drain and install tap",
        "customerName": "Jordan Lee",
        "location": "Newtown, Sydney",
        "propertyType": "residential-house",
        "urgency": "this-week",
        "items": [dict(item, unitPrice=item["unitPrice"] or 95) for item in sample_items],
        "notes": "Access via side gate.",
    }


# ============================================================================
# App Fixtures
# ============================================================================

@pytest.fixture
def quote_store():
    """Fresh in-memory store."""
    from services.quote_store import InMemoryQuoteStore

    return InMemoryQuoteStore(slug_length=8)


@pytest.fixture
def demo_generator():
    """Generator without an API key (always serves the demo quote)."""
    from services.quote_generator import QuoteGenerator

    return QuoteGenerator(api_key=None)


@pytest.fixture
def app(quote_store, demo_generator):
    """Flask app with injected collaborators."""
    from main import create_app

    app = create_app(
        quote_store=quote_store,
        quote_generator=demo_generator,
        serve_client=False
    )
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
