"""
Product Matching Service

Decides whether two listings are the same product. Exact URL, SKU and
name checks run first; only a match above 0.9 confidence short-circuits
the model. Failures fail closed (no match, confidence 0).
"""

import logging

from libs.core.models import ChatMessage, ProductInfo, ProductMatchResult
from libs.llm.client import OpenRouterClient
from libs.llm.json_payload import clamp_confidence, clamp_score, extract_json_payload

logger = logging.getLogger(__name__)

SHORT_CIRCUIT_CONFIDENCE = 0.9

# Labelled fields in prompt order
PRODUCT_FIELDS = (
    ("Name", "name"),
    ("URL", "url"),
    ("Price", "price"),
    ("SKU", "sku"),
    ("Description", "description"),
    ("Image", "image_url"),
)

SYSTEM_PROMPT = """You are an expert at matching products across different websites and URLs.
Determine if two product descriptions refer to the SAME product, even if:
- URLs are different
- Product IDs/SKUs are different
- Descriptions are slightly different
- One is a variant of the other (different size/color)

Return ONLY valid JSON in this exact format:
{
  "isMatch": true/false,
  "confidence": 0.0-1.0,
  "reason": "Brief explanation",
  "similarityScore": 0.0-1.0
}

Rules:
- isMatch: true if these are the SAME product (or variants of the same product)
- isMatch: false if these are DIFFERENT products
- confidence: How certain you are (0.0-1.0)
- similarityScore: How similar the products are (0.0-1.0)
- reason: Brief explanation of your decision

Consider:
- Product name similarity (accounting for minor variations)
- Price similarity (same price suggests same product)
- Description similarity
- Image similarity (if provided)
- SKU/ID patterns (even if different, might be related)"""


def format_product_info(product: ProductInfo) -> str:
    """Render the fields that are present as "Label: value" lines."""
    lines = [
        f"{label}: {getattr(product, attr)}"
        for label, attr in PRODUCT_FIELDS
        if getattr(product, attr)
    ]
    return "\n".join(lines) or "No information provided"


class ProductMatcher:
    """Matches listings across URL/ID changes, exact fields first."""

    def __init__(self, llm: OpenRouterClient):
        self.llm = llm

    async def match_products(self, product1: ProductInfo, product2: ProductInfo) -> ProductMatchResult:
        try:
            quick = self.quick_match(product1, product2)
            if quick.is_match and quick.confidence > SHORT_CIRCUIT_CONFIDENCE:
                logger.debug(f"Heuristic match: {quick.reason}")
                return quick

            return await self.match_with_llm(product1, product2)
        except Exception as e:
            logger.error(f"Error matching products: {e!r}")
            return ProductMatchResult(is_match=False, confidence=0.0, reason="Error during matching")

    def quick_match(self, product1: ProductInfo, product2: ProductInfo) -> ProductMatchResult:
        if product1.url and product2.url and product1.url == product2.url:
            return ProductMatchResult(is_match=True, confidence=1.0, reason="Exact URL match")

        if product1.sku and product2.sku and product1.sku == product2.sku:
            return ProductMatchResult(is_match=True, confidence=0.95, reason="Exact SKU match")

        if product1.name and product2.name:
            if product1.name.strip().lower() == product2.name.strip().lower():
                return ProductMatchResult(is_match=True, confidence=0.9, reason="Exact name match")

        return ProductMatchResult(is_match=False, confidence=0.5, reason="Requires AI matching")

    async def match_with_llm(self, product1: ProductInfo, product2: ProductInfo) -> ProductMatchResult:
        user_prompt = (
            "Are these two products the SAME product?\n\n"
            f"Product 1:\n{format_product_info(product1)}\n\n"
            f"Product 2:\n{format_product_info(product2)}\n\n"
            "Determine if these refer to the same product (or variants). Return the JSON response now:"
        )

        failed = ProductMatchResult(is_match=False, confidence=0.0, reason="AI matching failed")

        try:
            reply = await self.llm.extract_text([
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=user_prompt),
            ])
        except Exception as e:
            logger.error(f"Error calling AI for product matching: {e!r}")
            return failed

        payload = extract_json_payload(reply)
        if not payload.ok:
            logger.error(f"Error parsing AI match response: {payload.error}")
            return failed

        data = payload.data
        is_match = data.get("isMatch")
        reason = data.get("reason")
        return ProductMatchResult(
            is_match=is_match if isinstance(is_match, bool) else False,
            confidence=clamp_confidence(data.get("confidence")),
            reason=reason if isinstance(reason, str) and reason else "Matched by AI",
            similarity_score=clamp_score(data.get("similarityScore")),
        )
