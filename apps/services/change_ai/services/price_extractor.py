"""
Price Extraction Service

Pulls the main product price out of a page in two stages:

1. Structured data: the first JSON-LD Product node with a price wins,
   reported at a fixed confidence of 0.95. No model call is made.
2. LLM fallback: the page is reduced to text (30k chars) and the model is
   asked for a strict JSON verdict.

Any failure produces PriceExtractionResult.empty() (all fields null,
confidence 0) instead of raising.
"""

import logging
from typing import Any, Iterable, List, Optional

from libs.core.models import ChatMessage, PriceExtractionResult
from libs.llm.client import OpenRouterClient
from libs.llm.json_payload import (
    clamp_confidence,
    extract_json_payload,
    optional_bool,
    optional_str,
)
from apps.services.change_ai.utils.html_parser import (
    extract_json_ld,
    extract_text_content,
    iter_json_ld_nodes,
)

logger = logging.getLogger(__name__)

STRUCTURED_DATA_CONFIDENCE = 0.95
DEFAULT_CURRENCY = "USD"
LLM_TEXT_LIMIT = 30000

PRODUCT_TYPES = {
    "Product",
    "http://schema.org/Product",
    "https://schema.org/Product",
    "schema:Product",
}
IN_STOCK_MARKERS = ("InStock", "In Stock")

SYSTEM_PROMPT = """You are an expert at extracting product information from HTML pages.
Extract the main product price, currency, product name, and availability status.
Return ONLY valid JSON in this exact format:
{
  "price": "29.99" or null,
  "currency": "USD" or null,
  "productName": "Product Name" or null,
  "available": true/false or null,
  "confidence": 0.0-1.0
}

Rules:
- Extract the MAIN product price (not related products, not shipping costs)
- If multiple prices exist, use the current/active price
- Currency should be a 3-letter code (USD, EUR, GBP, etc.)
- available should be true if product is in stock, false if out of stock, null if unknown
- confidence should reflect how certain you are (0.0-1.0)
- Return null for any field you cannot determine"""


def _is_product(node: dict) -> bool:
    declared = node.get("@type")
    types: Iterable[Any] = declared if isinstance(declared, list) else [declared]
    return any(isinstance(t, str) and t in PRODUCT_TYPES for t in types)


def _first_offer(node: dict) -> dict:
    offers = node.get("offers")
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    return offers if isinstance(offers, dict) else {}


def _first_present(*values: Any) -> Any:
    for value in values:
        if optional_str(value) is not None:
            return value
    return None


class PriceExtractor:
    """Extracts a product price from HTML, structured data first."""

    def __init__(self, llm: OpenRouterClient):
        self.llm = llm

    async def extract_price(
        self,
        html: str,
        url: Optional[str] = None,
        previous_price: Optional[str] = None,
    ) -> PriceExtractionResult:
        try:
            structured = self.extract_from_json_ld(extract_json_ld(html))
            if structured is not None:
                logger.debug("Found price in structured data")
                return structured

            logger.debug("Using AI to extract price from HTML")
            return await self.extract_with_llm(html, url, previous_price)
        except Exception as e:
            logger.error(f"Error extracting price: {e!r}")
            return PriceExtractionResult.empty()

    def extract_from_json_ld(self, blocks: List[Any]) -> Optional[PriceExtractionResult]:
        """Return the first Product node carrying a price, or None."""
        for node in iter_json_ld_nodes(blocks):
            if not _is_product(node):
                continue

            offer = _first_offer(node)
            price = _first_present(offer.get("price"), offer.get("lowPrice"), node.get("price"))
            if price is None:
                continue

            currency = _first_present(offer.get("priceCurrency"), node.get("priceCurrency"))
            availability = _first_present(offer.get("availability"), node.get("availability"))
            available = None
            if availability is not None:
                available = any(marker in str(availability) for marker in IN_STOCK_MARKERS)

            return PriceExtractionResult(
                price=str(price).strip(),
                currency=str(currency).strip() if currency is not None else DEFAULT_CURRENCY,
                product_name=optional_str(node.get("name")),
                available=available,
                confidence=STRUCTURED_DATA_CONFIDENCE,
                raw_data=node,
            )
        return None

    async def extract_with_llm(
        self,
        html: str,
        url: Optional[str] = None,
        previous_price: Optional[str] = None,
    ) -> PriceExtractionResult:
        text_content = extract_text_content(html, LLM_TEXT_LIMIT)

        source = f" (URL: {url})" if url else ""
        previous = f"Previous price was: {previous_price}" if previous_price else ""
        user_prompt = (
            f"Extract product information from this HTML page{source}:\n"
            f"{previous}\n\n"
            f"HTML content:\n{text_content}\n\n"
            "Return the JSON response now:"
        )

        try:
            reply = await self.llm.extract_text([
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=user_prompt),
            ])
        except Exception as e:
            logger.error(f"Error calling AI for price extraction: {e!r}")
            return PriceExtractionResult.empty()

        payload = extract_json_payload(reply)
        if not payload.ok:
            logger.error(f"Error parsing AI response: {payload.error}")
            return PriceExtractionResult.empty()

        data = payload.data
        return PriceExtractionResult(
            price=optional_str(data.get("price")),
            currency=optional_str(data.get("currency")),
            product_name=optional_str(data.get("productName")),
            available=optional_bool(data.get("available")),
            confidence=clamp_confidence(data.get("confidence")),
        )
