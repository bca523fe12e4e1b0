"""
Service Modules

Price extraction, change validation, product matching and selector repair.
Each service takes the LLM client in its constructor and holds no other state.
"""

from apps.services.change_ai.services.price_extractor import PriceExtractor
from apps.services.change_ai.services.change_validator import ChangeValidator, extract_number
from apps.services.change_ai.services.product_matcher import ProductMatcher, format_product_info
from apps.services.change_ai.services.selector_repair import SelectorRepairService, check_selector

__all__ = [
    "PriceExtractor",
    "ChangeValidator",
    "extract_number",
    "ProductMatcher",
    "format_product_info",
    "SelectorRepairService",
    "check_selector",
]
