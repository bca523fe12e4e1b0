"""OpenRouter HTTP client for the changedetection AI wrapper."""

import logging
from typing import Any, Optional, Sequence, Union

import httpx

from libs.core.config import Settings
from libs.core.exceptions import EmptyResponseError, TransportError, UpstreamError
from libs.core.models import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000

MessageLike = Union[ChatMessage, dict[str, str]]


class OpenRouterClient:
    """
    Async client for an OpenAI-compatible chat-completions endpoint.

    Single point of contact with the model provider. One request per call:
    no retries, no backoff. Failures propagate to the caller.
    """

    def __init__(
        self,
        api_key: str,
        default_model: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: float = 60.0,
        referer: str = "https://railway.app",
        title: str = "AI Wrapper for changedetection.io",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.default_model = default_model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.referer = referer
        self.title = title
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "OpenRouterClient":
        return cls(
            api_key=settings.openrouter_api_key,
            default_model=settings.openrouter_model,
            base_url=settings.openrouter_base_url,
            timeout=settings.request_timeout,
            referer=settings.public_domain,
            title=settings.app_title,
            **kwargs,
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "HTTP-Referer": self.referer,
                    "X-Title": self.title,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def chat_completion(
        self,
        messages: Sequence[MessageLike],
        model: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> dict[str, Any]:
        """
        Send a chat-completions request.

        Args:
            messages: Role-tagged messages, system message first
            model: Model ID; defaults to the configured model
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            Decoded JSON response body

        Raises:
            UpstreamError: On a non-2xx response (carries status and body)
            TransportError: When the endpoint cannot be reached
        """
        model = model or self.default_model
        payload = {
            "model": model,
            "messages": [_as_dict(m) for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        logger.debug(f"Calling OpenRouter API with model: {model}")

        try:
            response = await self._get_client().post("/chat/completions", json=payload)
        except httpx.RequestError as e:
            logger.error(f"Error calling OpenRouter API: {e!r}")
            raise TransportError(
                f"Request to OpenRouter failed: {e}",
                context={"model": model, "base_url": self.base_url},
            ) from e

        if not response.is_success:
            body = response.text
            logger.error(f"OpenRouter API error: {response.status_code} - {body}")
            raise UpstreamError(response.status_code, body, context={"model": model})

        data = response.json()
        usage = data.get("usage") if isinstance(data, dict) else None
        if usage:
            logger.debug(f"OpenRouter usage: {usage.get('total_tokens')} tokens")
        return data

    async def extract_text(
        self,
        messages: Sequence[MessageLike],
        model: Optional[str] = None,
    ) -> str:
        """
        Send messages and return the first choice's content.

        Raises:
            EmptyResponseError: When the response has no choices
        """
        response = await self.chat_completion(messages, model=model)
        choices = response.get("choices") if isinstance(response, dict) else None
        if not choices:
            raise EmptyResponseError(context={"model": model or self.default_model})
        return choices[0]["message"]["content"]


def _as_dict(message: MessageLike) -> dict[str, str]:
    if isinstance(message, ChatMessage):
        return message.model_dump()
    return {"role": message["role"], "content": message["content"]}
