"""
Selector Repair Service

Produces a replacement CSS or XPath selector for an element described in
plain language, typically after a watch's old selector stopped matching.

The model proposes the selector; it is then compiled for the requested
dialect and run against the submitted page:

- does not compile  -> selector dropped, isValid false, confidence 0
- compiles, 0 hits  -> selector kept, confidence capped at 0.3
- compiles, N hits  -> selector kept with the model's confidence

Upstream or parse failures fail closed (no selector, confidence 0).
"""

import logging
from dataclasses import dataclass
from typing import Optional

import soupsieve
from bs4 import BeautifulSoup
from lxml import etree
from lxml import html as lxml_html

from libs.core.models import ChatMessage, SelectorRepairResult, SelectorType
from libs.llm.client import OpenRouterClient
from libs.llm.json_payload import clamp_confidence, extract_json_payload, optional_str
from apps.services.change_ai.utils.html_parser import clean_html

logger = logging.getLogger(__name__)

SELECTOR_TYPES = ("css", "xpath")
LLM_HTML_LIMIT = 30000
NO_MATCH_CONFIDENCE_CAP = 0.3

SYSTEM_PROMPT = """You are an expert at writing robust CSS selectors and XPath expressions for web scraping.
Given a page's HTML and a description of the element to target, write ONE selector that matches it.

Return ONLY valid JSON in this exact format:
{
  "selector": "the selector" or null,
  "confidence": 0.0-1.0,
  "reason": "Brief explanation"
}

Rules:
- Use the selector dialect you are asked for (CSS or XPath) and nothing else
- Prefer stable attributes (id, data-*, itemprop, semantic class names) over positional paths
- Avoid auto-generated class names and deep nth-child chains
- If a previous selector is given, keep its intent but fix what no longer matches
- selector: null if you cannot find the element
- confidence: How certain you are that the selector targets the described element (0.0-1.0)"""


@dataclass
class SelectorCheck:
    """Outcome of compiling and running a selector against a page."""

    valid: bool
    match_count: Optional[int] = None
    error: Optional[str] = None


def check_css(selector: str, html: str) -> SelectorCheck:
    try:
        compiled = soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        return SelectorCheck(False, error=f"invalid CSS selector: {e}")
    soup = BeautifulSoup(html, "html.parser")
    return SelectorCheck(True, match_count=len(compiled.select(soup)))


def check_xpath(selector: str, html: str) -> SelectorCheck:
    try:
        compiled = etree.XPath(selector)
    except etree.XPathSyntaxError as e:
        return SelectorCheck(False, error=f"invalid XPath expression: {e}")

    try:
        document = lxml_html.fromstring(html)
    except (etree.ParserError, ValueError) as e:
        # The expression itself is fine; the page just has no elements to hit
        logger.debug(f"Could not parse page for XPath check: {e}")
        return SelectorCheck(True, match_count=0)

    try:
        found = compiled(document)
    except etree.XPathError as e:
        return SelectorCheck(False, error=f"XPath evaluation failed: {e}")
    return SelectorCheck(True, match_count=len(found) if isinstance(found, list) else 0)


def check_selector(selector: str, selector_type: SelectorType, html: str) -> SelectorCheck:
    """Compile a selector in its dialect and count its matches in html."""
    if selector_type == "xpath":
        return check_xpath(selector, html)
    return check_css(selector, html)


class SelectorRepairService:
    """Asks the model for a selector, then verifies it against the page."""

    def __init__(self, llm: OpenRouterClient):
        self.llm = llm

    async def repair_selector(
        self,
        html: str,
        target_description: str,
        old_selector: Optional[str] = None,
        selector_type: SelectorType = "css",
    ) -> SelectorRepairResult:
        if selector_type not in SELECTOR_TYPES:
            raise ValueError(f"Unsupported selector type: {selector_type}")

        failed = SelectorRepairResult(
            selector_type=selector_type,
            reason="AI selector repair failed",
        )

        try:
            suggestion = await self._ask_llm(html, target_description, old_selector, selector_type)
        except Exception as e:
            logger.error(f"Error repairing selector: {e!r}")
            return failed
        if suggestion is None:
            return failed

        selector, confidence, reason = suggestion
        if selector is None:
            return SelectorRepairResult(selector_type=selector_type, reason=reason)

        check = check_selector(selector, selector_type, html)
        if not check.valid:
            logger.info(f"Rejected {selector_type} selector {selector!r}: {check.error}")
            return SelectorRepairResult(
                selector_type=selector_type,
                reason=f"Model returned an unusable selector ({check.error})",
            )

        if check.match_count == 0:
            confidence = min(confidence, NO_MATCH_CONFIDENCE_CAP)
            reason = f"{reason} (selector matches no elements in the supplied HTML)"

        return SelectorRepairResult(
            selector=selector,
            selector_type=selector_type,
            confidence=confidence,
            reason=reason,
            is_valid=True,
            match_count=check.match_count,
        )

    async def _ask_llm(
        self,
        html: str,
        target_description: str,
        old_selector: Optional[str],
        selector_type: SelectorType,
    ) -> Optional[tuple[Optional[str], float, str]]:
        dialect = "XPath expression" if selector_type == "xpath" else "CSS selector"
        markup = clean_html(html)[:LLM_HTML_LIMIT]
        previous = f"Previous {dialect} (no longer works): {old_selector}\n" if old_selector else ""
        user_prompt = (
            f"Write a {dialect} for: {target_description}\n"
            f"{previous}\n"
            f"HTML content:\n{markup}\n\n"
            "Return the JSON response now:"
        )

        reply = await self.llm.extract_text([
            ChatMessage(role="system", content=SYSTEM_PROMPT),
            ChatMessage(role="user", content=user_prompt),
        ])

        payload = extract_json_payload(reply)
        if not payload.ok:
            logger.error(f"Error parsing AI selector response: {payload.error}")
            return None

        data = payload.data
        reason = data.get("reason")
        return (
            optional_str(data.get("selector")),
            clamp_confidence(data.get("confidence")),
            reason if isinstance(reason, str) and reason else "Generated by AI",
        )
