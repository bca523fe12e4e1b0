"""Pydantic models for the changedetection AI wrapper.

Every model here is a per-request value object: built by a service, returned
to the route, serialized, and dropped. Wire names are camelCase; Python
attributes are snake_case.
"""

from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for models that travel over HTTP with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    # Keys left out of the payload when their value is None
    omit_when_none: ClassVar[tuple[str, ...]] = ()

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(by_alias=True)
        for key in self.omit_when_none:
            if data.get(key) is None:
                data.pop(key, None)
        return data


# =============================================================================
# LLM Gateway
# =============================================================================

class ChatMessage(BaseModel):
    """One role-tagged message sent to the completion endpoint."""

    role: Literal["system", "user", "assistant"]
    content: str


# =============================================================================
# Price Extraction
# =============================================================================

class PriceExtractionResult(WireModel):
    """Price, currency, name and stock status pulled from a product page."""

    omit_when_none: ClassVar[tuple[str, ...]] = ("rawData",)

    price: Optional[str] = None
    currency: Optional[str] = None
    product_name: Optional[str] = Field(default=None, alias="productName")
    available: Optional[bool] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    raw_data: Optional[Any] = Field(default=None, alias="rawData")

    @classmethod
    def empty(cls) -> "PriceExtractionResult":
        """The zero-confidence result returned on any failure."""
        return cls()


# =============================================================================
# Change Validation
# =============================================================================

class ValidationResult(WireModel):
    is_valid: bool = Field(alias="isValid")
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)


# =============================================================================
# Product Matching
# =============================================================================

class ProductInfo(BaseModel):
    """Identifying fields for one listing. Nothing is validated beyond type."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)

    name: Optional[str] = None
    url: Optional[str] = None
    price: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    description: Optional[str] = None
    sku: Optional[str] = None


class ProductMatchResult(WireModel):
    omit_when_none: ClassVar[tuple[str, ...]] = ("similarityScore",)

    is_match: bool = Field(alias="isMatch")
    confidence: float = Field(ge=0.0, le=1.0)
    reason: str
    similarity_score: Optional[float] = Field(default=None, ge=0.0, le=1.0, alias="similarityScore")


# =============================================================================
# Selector Repair
# =============================================================================

SelectorType = Literal["css", "xpath"]


class SelectorRepairResult(WireModel):
    """A replacement selector, checked against the page it was generated for."""

    selector: Optional[str] = None
    selector_type: SelectorType = Field(default="css", alias="selectorType")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    reason: str = ""
    is_valid: bool = Field(default=False, alias="isValid")
    match_count: Optional[int] = Field(default=None, alias="matchCount")
