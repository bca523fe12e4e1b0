"""
Change Validation Service

Decides whether a detected before/after change is meaningful or noise.

For price changes a numeric check runs first and can reject outright
(drop to zero, >10x jump, sub-0.01% wobble). Anything it does not reject
goes to the model. Failures fail open: the change is reported as valid.
"""

import logging
import re
from typing import Optional

from libs.core.models import ChatMessage, ValidationResult
from libs.llm.client import OpenRouterClient
from libs.llm.json_payload import clamp_confidence, extract_json_payload

logger = logging.getLogger(__name__)

PRICE_CONTEXT = "price"

NON_NUMERIC_RE = re.compile(r"[^\d.,]")
LEADING_NUMBER_RE = re.compile(r"\d+(?:\.\d*)?|\.\d+")

MAX_INCREASE_FACTOR = 10
MIN_PERCENT_CHANGE = 0.01

SYSTEM_PROMPT = """You are an expert at validating changes detected on web pages.
Determine if a detected change is a REAL, MEANINGFUL change or a FALSE POSITIVE (noise).

Common false positives include:
- Timestamps updating
- Ad content changing
- Recommendation sections updating
- Layout/formatting changes that don't affect content
- Cookie banners appearing/disappearing
- Social media widgets loading
- Minor text formatting differences

Return ONLY valid JSON in this exact format:
{
  "isValid": true/false,
  "reason": "Brief explanation",
  "confidence": 0.0-1.0
}

Rules:
- isValid: true if this is a REAL, MEANINGFUL change worth notifying about
- isValid: false if this is noise/false positive (ads, timestamps, formatting, etc.)
- reason: Brief explanation of your decision
- confidence: How certain you are (0.0-1.0)"""


def extract_number(value: str) -> Optional[float]:
    """
    Read a number out of a display price such as "$1,299.00".

    Everything but digits, commas and periods is dropped, commas are
    removed, and the leading numeric prefix is parsed.
    """
    cleaned = NON_NUMERIC_RE.sub("", value).replace(",", "")
    match = LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return None
    return float(match.group(0))


class ChangeValidator:
    """Separates real changes from noise, heuristics first."""

    def __init__(self, llm: OpenRouterClient):
        self.llm = llm

    async def validate_change(
        self,
        old_value: str,
        new_value: str,
        context: str = PRICE_CONTEXT,
    ) -> ValidationResult:
        try:
            if context == PRICE_CONTEXT:
                quick = self.quick_price_validation(old_value, new_value)
                if not quick.is_valid:
                    logger.debug(f"Heuristic rejected change: {quick.reason}")
                    return quick

            return await self.validate_with_llm(old_value, new_value, context)
        except Exception as e:
            logger.error(f"Error validating change: {e!r}")
            return ValidationResult(
                is_valid=True,
                reason="Unable to validate - defaulting to valid",
                confidence=0.5,
            )

    def quick_price_validation(self, old_value: str, new_value: str) -> ValidationResult:
        """
        Numeric sanity checks on a price pair.

        Only an invalid verdict is final; a valid one is a placeholder that
        still defers to the model.
        """
        deferred = ValidationResult(is_valid=True, reason="Requires AI validation", confidence=0.5)

        old_num = extract_number(old_value)
        new_num = extract_number(new_value)
        if old_num is None or new_num is None:
            return deferred

        if new_num == 0 and old_num > 0:
            return ValidationResult(
                is_valid=False,
                reason="Price dropped to zero - likely error or out of stock",
                confidence=0.9,
            )

        if new_num > old_num * MAX_INCREASE_FACTOR:
            return ValidationResult(
                is_valid=False,
                reason="Price increased by more than 10x - likely error",
                confidence=0.9,
            )

        # old == 0 has no defined percent change
        if old_num != 0:
            percent_change = abs((new_num - old_num) / old_num) * 100
            if percent_change < MIN_PERCENT_CHANGE:
                return ValidationResult(
                    is_valid=False,
                    reason="Change is less than 0.01% - likely formatting difference",
                    confidence=0.8,
                )

        return deferred

    async def validate_with_llm(self, old_value: str, new_value: str, context: str) -> ValidationResult:
        user_prompt = (
            f'Validate this change in context: "{context}"\n\n'
            f'Old value: "{old_value}"\n'
            f'New value: "{new_value}"\n\n'
            "Is this a real, meaningful change or a false positive?\n"
            "Return the JSON response now:"
        )

        failed = ValidationResult(
            is_valid=True,
            reason="AI validation failed - defaulting to valid",
            confidence=0.5,
        )

        try:
            reply = await self.llm.extract_text([
                ChatMessage(role="system", content=SYSTEM_PROMPT),
                ChatMessage(role="user", content=user_prompt),
            ])
        except Exception as e:
            logger.error(f"Error calling AI for change validation: {e!r}")
            return failed

        payload = extract_json_payload(reply)
        if not payload.ok:
            logger.error(f"Error parsing AI validation response: {payload.error}")
            return failed

        data = payload.data
        is_valid = data.get("isValid")
        reason = data.get("reason")
        return ValidationResult(
            is_valid=is_valid if isinstance(is_valid, bool) else True,
            reason=reason if isinstance(reason, str) and reason else "Validated by AI",
            confidence=clamp_confidence(data.get("confidence")),
        )
