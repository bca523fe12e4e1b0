"""
Service Dependencies Module

One instance per process of the LLM client and of each service, created on
first use. Routes receive them through FastAPI's Depends(), so tests swap
them with app.dependency_overrides.
"""

import logging
from typing import Optional

from libs.core.config import get_settings
from libs.llm.client import OpenRouterClient
from apps.services.change_ai.services import (
    ChangeValidator,
    PriceExtractor,
    ProductMatcher,
    SelectorRepairService,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Private Singleton Storage
# =============================================================================

_llm_client: Optional[OpenRouterClient] = None
_price_extractor: Optional[PriceExtractor] = None
_change_validator: Optional[ChangeValidator] = None
_product_matcher: Optional[ProductMatcher] = None
_selector_repair: Optional[SelectorRepairService] = None


def get_llm_client() -> OpenRouterClient:
    """Get the OpenRouter client singleton."""
    global _llm_client
    if _llm_client is None:
        settings = get_settings()
        settings.require_api_key()
        _llm_client = OpenRouterClient.from_settings(settings)
        logger.info(f"[Dependencies] OpenRouter client initialized (model={settings.openrouter_model})")
    return _llm_client


def get_price_extractor() -> PriceExtractor:
    global _price_extractor
    if _price_extractor is None:
        _price_extractor = PriceExtractor(get_llm_client())
    return _price_extractor


def get_change_validator() -> ChangeValidator:
    global _change_validator
    if _change_validator is None:
        _change_validator = ChangeValidator(get_llm_client())
    return _change_validator


def get_product_matcher() -> ProductMatcher:
    global _product_matcher
    if _product_matcher is None:
        _product_matcher = ProductMatcher(get_llm_client())
    return _product_matcher


def get_selector_repair() -> SelectorRepairService:
    global _selector_repair
    if _selector_repair is None:
        _selector_repair = SelectorRepairService(get_llm_client())
    return _selector_repair


# =============================================================================
# Lifecycle
# =============================================================================


def initialize_all() -> None:
    """Create every singleton up front. Raises ConfigurationError without an API key."""
    get_llm_client()
    get_price_extractor()
    get_change_validator()
    get_product_matcher()
    get_selector_repair()
    logger.info("[Dependencies] All services initialized")


async def shutdown_all() -> None:
    """Close the HTTP client and drop every singleton."""
    global _llm_client, _price_extractor, _change_validator, _product_matcher, _selector_repair
    if _llm_client is not None:
        await _llm_client.close()
    _llm_client = None
    _price_extractor = None
    _change_validator = None
    _product_matcher = None
    _selector_repair = None
