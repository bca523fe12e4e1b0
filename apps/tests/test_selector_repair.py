import pytest

from libs.core.exceptions import UpstreamError
from apps.services.change_ai.services.selector_repair import SelectorRepairService, check_selector

PAGE = """
<html><body>
<div class="product">
  <h1 itemprop="name">Desk Lamp</h1>
  <span class="price" data-testid="price">$24.50</span>
</div>
<div class="related"><span class="price">$9.99</span></div>
</body></html>
"""


class TestCheckSelector:
    def test_css_counts_matches(self):
        check = check_selector("span.price", "css", PAGE)
        assert check.valid is True
        assert check.match_count == 2

    def test_css_syntax_error(self):
        check = check_selector("span[data-testid=", "css", PAGE)
        assert check.valid is False
        assert "CSS" in check.error

    def test_xpath_counts_matches(self):
        check = check_selector("//span[@data-testid='price']", "xpath", PAGE)
        assert check.valid is True
        assert check.match_count == 1

    def test_xpath_syntax_error(self):
        check = check_selector("//span[@class=", "xpath", PAGE)
        assert check.valid is False

    def test_xpath_non_node_result_counts_zero(self):
        check = check_selector("count(//span)", "xpath", PAGE)
        assert check.valid is True
        assert check.match_count == 0


class TestRepairSelector:
    @pytest.mark.asyncio
    async def test_valid_css_selector(self, fake_llm):
        fake_llm.reply = ('{"selector": "[data-testid=\\"price\\"]", "confidence": 0.9,'
                          ' "reason": "Stable test id"}')
        result = await SelectorRepairService(fake_llm).repair_selector(
            PAGE, "main product price", old_selector=".product-price-old"
        )

        assert result.selector == '[data-testid="price"]'
        assert result.selector_type == "css"
        assert result.is_valid is True
        assert result.match_count == 1
        assert result.confidence == 0.9
        prompt = fake_llm.last_user_prompt()
        assert "Write a CSS selector for: main product price" in prompt
        assert ".product-price-old" in prompt

    @pytest.mark.asyncio
    async def test_valid_xpath_selector(self, fake_llm):
        fake_llm.reply = '{"selector": "//h1[@itemprop=\'name\']", "confidence": 0.8, "reason": "itemprop"}'
        result = await SelectorRepairService(fake_llm).repair_selector(
            PAGE, "product title", selector_type="xpath"
        )
        assert result.is_valid is True
        assert result.selector_type == "xpath"
        assert result.match_count == 1
        assert "XPath expression" in fake_llm.last_user_prompt()

    @pytest.mark.asyncio
    async def test_unmatched_selector_is_kept_with_low_confidence(self, fake_llm):
        fake_llm.reply = '{"selector": "#price-box", "confidence": 0.95, "reason": "Guess"}'
        result = await SelectorRepairService(fake_llm).repair_selector(PAGE, "price")

        assert result.selector == "#price-box"
        assert result.match_count == 0
        assert result.confidence == 0.3
        assert "matches no elements" in result.reason

    @pytest.mark.asyncio
    async def test_wrong_dialect_is_rejected(self, fake_llm):
        fake_llm.reply = '{"selector": "//span[@class=\'price\']", "confidence": 0.9, "reason": "xpath"}'
        result = await SelectorRepairService(fake_llm).repair_selector(PAGE, "price", selector_type="css")

        assert result.selector is None
        assert result.is_valid is False
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_model_gives_up(self, fake_llm):
        fake_llm.reply = '{"selector": null, "confidence": 0.2, "reason": "Not on page"}'
        result = await SelectorRepairService(fake_llm).repair_selector(PAGE, "shipping estimate")
        assert result.selector is None
        assert result.reason == "Not on page"
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_upstream_failure_fails_closed(self, fake_llm):
        fake_llm.error = UpstreamError(503, "unavailable")
        result = await SelectorRepairService(fake_llm).repair_selector(PAGE, "price")
        assert result.selector is None
        assert result.is_valid is False
        assert result.confidence == 0.0

    @pytest.mark.asyncio
    async def test_unknown_selector_type(self, fake_llm):
        with pytest.raises(ValueError):
            await SelectorRepairService(fake_llm).repair_selector(PAGE, "price", selector_type="jquery")
