"""
Webhook Router

Endpoints for changedetection.io notifications.

Endpoints:
    POST /webhook/changedetection - Extract prices from both snapshots and validate the delta
    POST /webhook/price-check     - Extract a price and flag whether to notify
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from libs.core.models import PriceExtractionResult
from apps.services.change_ai.dependencies import get_change_validator, get_price_extractor
from apps.services.change_ai.schemas import ChangeDetectionWebhook, PriceCheckRequest
from apps.services.change_ai.services import ChangeValidator, PriceExtractor
from apps.services.change_ai.utils import require_fields, utc_timestamp

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["webhook"])


async def _extract_snapshot(
    extractor: PriceExtractor,
    html: Optional[str],
    url: Optional[str],
) -> Optional[PriceExtractionResult]:
    if not html:
        return None
    return await extractor.extract_price(html, url)


@router.post("/changedetection")
async def changedetection_webhook(
    payload: Optional[ChangeDetectionWebhook] = None,
    extractor: PriceExtractor = Depends(get_price_extractor),
    validator: ChangeValidator = Depends(get_change_validator),
) -> Dict[str, Any]:
    """
    Enrich a changedetection.io notification.

    Both snapshots are priced concurrently; the price delta is validated
    only when both sides produced a price.
    """
    if payload is None:
        payload = ChangeDetectionWebhook()
    logger.info(f"Received webhook for: {payload.watch_url or 'unknown'}")

    current, previous = await asyncio.gather(
        _extract_snapshot(extractor, payload.current_snapshot, payload.watch_url),
        _extract_snapshot(extractor, payload.previous_snapshot, payload.watch_url),
    )

    current_price = current.price if current else None
    previous_price = previous.price if previous else None

    validation = None
    if current_price and previous_price:
        validation = await validator.validate_change(previous_price, current_price, "price")

    response = {
        "watch_url": payload.watch_url,
        "watch_title": payload.watch_title,
        "current_price": current.to_dict() if current else None,
        "previous_price": previous.to_dict() if previous else None,
        "price_changed": current_price != previous_price,
        "validation": validation.to_dict() if validation else None,
        "is_valid_change": validation.is_valid if validation else True,
        "timestamp": utc_timestamp(),
    }

    logger.info("Webhook processed: " + json.dumps({
        "url": payload.watch_url,
        "currentPrice": current_price,
        "previousPrice": previous_price,
        "isValid": validation.is_valid if validation else None,
    }))

    return response


@router.post("/price-check")
async def price_check(
    body: Optional[PriceCheckRequest] = None,
    extractor: PriceExtractor = Depends(get_price_extractor),
) -> Dict[str, Any]:
    """
    Extract a price and report whether a notification should go out.

    should_notify is true whenever a price was found. threshold_percent is
    accepted but not used.
    """
    if body is None:
        body = PriceCheckRequest()
    require_fields(html=body.html)

    result = await extractor.extract_price(body.html, body.url)
    return {
        **result.to_dict(),
        "should_notify": result.price is not None,
        "timestamp": utc_timestamp(),
    }
