from libs.core.models import (
    PriceExtractionResult,
    ProductInfo,
    ProductMatchResult,
    SelectorRepairResult,
    ValidationResult,
)


def test_empty_price_result_omits_raw_data():
    assert PriceExtractionResult.empty().to_dict() == {
        "price": None,
        "currency": None,
        "productName": None,
        "available": None,
        "confidence": 0.0,
    }


def test_raw_data_is_kept_when_present():
    result = PriceExtractionResult(price="1", raw_data={"@type": "Product"})
    assert result.to_dict()["rawData"] == {"@type": "Product"}


def test_validation_result_wire_names():
    data = ValidationResult(is_valid=False, reason="Price dropped to zero", confidence=0.9).to_dict()
    assert data == {"isValid": False, "reason": "Price dropped to zero", "confidence": 0.9}


def test_similarity_score_only_when_set():
    assert "similarityScore" not in ProductMatchResult(is_match=True, confidence=1.0, reason="x").to_dict()
    scored = ProductMatchResult(is_match=True, confidence=1.0, reason="x", similarity_score=0.4)
    assert scored.to_dict()["similarityScore"] == 0.4


def test_product_info_accepts_wire_names_and_numbers():
    product = ProductInfo.model_validate({"name": "Mug", "price": 12.5, "imageUrl": "http://i", "extra": 1})
    assert product.price == "12.5"
    assert product.image_url == "http://i"


def test_selector_repair_result_wire_names():
    data = SelectorRepairResult(selector="p", selector_type="css", reason="ok").to_dict()
    assert data["selectorType"] == "css"
    assert data["isValid"] is False
    assert data["matchCount"] is None
