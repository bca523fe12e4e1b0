# conftest.py
# Ensure the repository root is on sys.path so pytest can import both
# top-level roots (apps.services.change_ai and libs) consistently, and
# provide a fake LLM gateway so no test touches the network.

import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest

# conftest is at: apps/tests/conftest.py
# Walk up two levels to reach the repository root.
ROOT = Path(__file__).resolve().parents[2]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from libs.core.config import get_settings  # noqa: E402


class FakeLLMGateway:
    """
    Stand-in for OpenRouterClient.extract_text.

    Returns ``reply`` (or raises ``error``) and records every message list
    it was called with.
    """

    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[List[Any]] = []

    async def extract_text(self, messages, model=None) -> str:
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def last_user_prompt(self) -> str:
        return self.calls[-1][-1].content


@pytest.fixture
def fake_llm():
    """A fake gateway with no reply configured; set .reply or .error in the test."""
    return FakeLLMGateway()


@pytest.fixture
def clean_settings(monkeypatch):
    """Clear cached settings and the OpenRouter env vars around a test."""
    for var in (
        "OPENROUTER_API_KEY",
        "OPENROUTER_MODEL",
        "OPENROUTER_BASE_URL",
        "NODE_ENV",
        "ENVIRONMENT",
        "PORT",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def product_page():
    """A product page with a JSON-LD Product block."""
    return """
<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@type": "Product", "name": "Trail Runner 3",
 "offers": {"@type": "Offer", "price": "89.99", "priceCurrency": "EUR",
            "availability": "https://schema.org/InStock"}}
</script>
</head><body><h1>Trail Runner 3</h1><span class="price">&euro;89.99</span></body></html>
"""


@pytest.fixture
def plain_page():
    """A product page with no structured data."""
    return """
<html><head><style>.price { color: red; }</style></head>
<body>
<!-- promo banner -->
<div id="product"><h1>Desk Lamp</h1><span class="price">$24.50</span></div>
<script>window.dataLayer = [];</script>
</body></html>
"""
