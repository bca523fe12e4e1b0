"""Custom exceptions for the changedetection AI wrapper."""

from typing import Any, Optional, Sequence


class ChangeAIError(Exception):
    """Base exception for the service."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(ChangeAIError):
    """Missing or invalid startup configuration."""

    pass


class LLMError(ChangeAIError):
    """LLM-related errors."""

    pass


class TransportError(LLMError):
    """The completion endpoint could not be reached."""

    pass


class UpstreamError(LLMError):
    """The completion endpoint answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        body: str,
        context: Optional[dict[str, Any]] = None,
    ):
        message = f"OpenRouter API error: {status_code} - {body}"
        super().__init__(message, context)
        self.status_code = status_code
        self.body = body


class EmptyResponseError(LLMError):
    """The completion response carried no choices."""

    def __init__(self, context: Optional[dict[str, Any]] = None):
        super().__init__("No response from OpenRouter API", context)


class MissingFieldsError(ChangeAIError):
    """Request body is missing one or more required fields."""

    def __init__(self, fields: Sequence[str], context: Optional[dict[str, Any]] = None):
        noun = "field" if len(fields) == 1 else "fields"
        message = f"Missing required {noun}: {', '.join(fields)}"
        super().__init__(message, context)
        self.fields = list(fields)
