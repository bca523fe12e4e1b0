"""LLM gateway for the changedetection AI wrapper."""

from libs.llm.client import OpenRouterClient
from libs.llm.json_payload import JsonPayload, clamp_confidence, extract_json_payload

__all__ = [
    "OpenRouterClient",
    "JsonPayload",
    "clamp_confidence",
    "extract_json_payload",
]
