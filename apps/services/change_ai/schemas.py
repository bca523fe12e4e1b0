"""
Request bodies for the HTTP surface.

Every field is optional at the schema level; required fields are checked
in the route with require_fields() so a missing field is a 400 naming it,
not a 422.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from libs.core.models import ProductInfo


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class ExtractPriceRequest(RequestModel):
    html: Optional[str] = None
    url: Optional[str] = None
    previous_price: Optional[str] = Field(default=None, alias="previousPrice")


class ValidateChangeRequest(RequestModel):
    old_value: Optional[str] = Field(default=None, alias="oldValue")
    new_value: Optional[str] = Field(default=None, alias="newValue")
    context: str = "price"


class RepairSelectorRequest(RequestModel):
    html: Optional[str] = None
    target_description: Optional[str] = Field(default=None, alias="targetDescription")
    old_selector: Optional[str] = Field(default=None, alias="oldSelector")
    selector_type: Literal["css", "xpath"] = Field(default="css", alias="selectorType")


class MatchProductRequest(RequestModel):
    product1: Optional[ProductInfo] = None
    product2: Optional[ProductInfo] = None


class ChangeDetectionWebhook(RequestModel):
    """Notification payload posted by changedetection.io."""

    watch_url: Optional[str] = None
    watch_uuid: Optional[str] = None
    watch_title: Optional[str] = None
    current_snapshot: Optional[str] = None
    previous_snapshot: Optional[str] = None
    diff: Optional[str] = None
    diff_full: Optional[str] = None
    triggered_text: Optional[str] = None


class PriceCheckRequest(RequestModel):
    html: Optional[str] = None
    url: Optional[str] = None
    # Accepted for compatibility; not consulted when deciding should_notify
    threshold_percent: float = 5
