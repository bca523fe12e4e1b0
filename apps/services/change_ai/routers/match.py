"""
Product Matching Router

Endpoints:
    POST /match-product - Decide whether two listings are the same product
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from apps.services.change_ai.dependencies import get_product_matcher
from apps.services.change_ai.schemas import MatchProductRequest
from apps.services.change_ai.services import ProductMatcher
from apps.services.change_ai.utils import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["match"])


@router.post("/match-product")
async def match_product(
    body: Optional[MatchProductRequest] = None,
    matcher: ProductMatcher = Depends(get_product_matcher),
) -> Dict[str, Any]:
    if body is None:
        body = MatchProductRequest()
    require_fields(product1=body.product1, product2=body.product2)

    logger.info("Matching products")
    result = await matcher.match_products(body.product1, body.product2)
    return result.to_dict()
