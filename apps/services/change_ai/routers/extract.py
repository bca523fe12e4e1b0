"""
Price Extraction Router

Endpoints:
    POST /extract-price - Extract price, currency, name and stock status from HTML
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from apps.services.change_ai.dependencies import get_price_extractor
from apps.services.change_ai.schemas import ExtractPriceRequest
from apps.services.change_ai.services import PriceExtractor
from apps.services.change_ai.utils import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["extract"])


@router.post("/extract-price")
async def extract_price(
    body: Optional[ExtractPriceRequest] = None,
    extractor: PriceExtractor = Depends(get_price_extractor),
) -> Dict[str, Any]:
    """
    Extract the main product price from a page.

    Extraction failures are not request failures: the response is still 200
    with a null price and zero confidence.
    """
    if body is None:
        body = ExtractPriceRequest()
    require_fields(html=body.html)

    logger.info(f"Extracting price from {body.url or 'unknown URL'}")
    result = await extractor.extract_price(body.html, body.url, body.previous_price)
    return result.to_dict()
