"""LLM service: a single OpenAI chat-completions call returning the raw text.

Async implementation using httpx so the FastAPI event loop is not blocked
while waiting on the upstream API. The call is deliberately not retried: a
failed or slow upstream surfaces directly to the client as a categorized
error.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings
from ..exceptions import (
    EmptyUpstreamResponseError,
    UpstreamAuthError,
    UpstreamBadRequestError,
    UpstreamPayloadTooLargeError,
    UpstreamRateLimitError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)


def _error_for_status(status: int) -> Exception:
    if status in (401, 403):
        return UpstreamAuthError("Invalid OpenAI API key")
    if status == 429:
        return UpstreamRateLimitError("OpenAI rate limit hit, try again shortly")
    if status == 413:
        return UpstreamPayloadTooLargeError("Images too large for the model, send fewer or smaller images")
    if status == 400:
        return UpstreamBadRequestError("The model rejected the request")
    return UpstreamUnavailableError(f"Model provider unavailable (HTTP {status})")


class LLMService:
    def __init__(self, settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.settings = settings
        self._transport = transport
        # Clamp to a reasonable range to avoid provider errors
        self.max_output_tokens = max(256, min(8192, settings.LLM_MAX_OUTPUT_TOKENS))

    @property
    def model(self) -> str:
        return self.settings.OPENAI_MODEL or "gpt-4o"

    def _completions_url(self) -> str:
        return f"{self.settings.OPENAI_BASE_URL}/chat/completions"

    async def _post_json(self, url: str, *, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        """HTTP POST JSON. Maps every transport or status failure to an Upstream* error."""
        t = httpx.Timeout(self.settings.LLM_TIMEOUT_SECONDS, connect=5.0)
        try:
            async with httpx.AsyncClient(timeout=t, transport=self._transport) as client:
                resp = await client.post(url, headers=headers, json=payload)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("OpenAI HTTP %s: %s", status, exc.response.text[:500])
            raise _error_for_status(status) from exc
        except httpx.RequestError as exc:
            logger.warning("OpenAI request failed: %s", exc)
            raise UpstreamUnavailableError("Could not reach the model provider") from exc
        except ValueError as exc:
            logger.warning("OpenAI returned a non-JSON body: %s", exc)
            raise UpstreamUnavailableError("Model provider returned an invalid response") from exc

    async def complete(self, messages: List[Dict[str, Any]]) -> str:
        """Run one chat completion and return the trimmed text content."""
        if not self.settings.OPENAI_API_KEY:
            raise UpstreamAuthError("Missing OPENAI_API_KEY")
        headers = {
            "Authorization": f"Bearer {self.settings.OPENAI_API_KEY}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.settings.LLM_TEMPERATURE,
            "max_tokens": self.max_output_tokens,
        }
        data = await self._post_json(self._completions_url(), headers=headers, payload=payload)
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            logger.error("OpenAI unexpected response shape: %s", str(data)[:500])
            content = None
        if not isinstance(content, str) or not content.strip():
            raise EmptyUpstreamResponseError("Empty response from model")
        return content.strip()
