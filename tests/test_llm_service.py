"""
Tests for the OpenAI chat-completions invoker, using httpx.MockTransport.
"""
import json

import httpx
import pytest

from inkparse.exceptions import (
    EmptyUpstreamResponseError,
    UpstreamAuthError,
    UpstreamBadRequestError,
    UpstreamPayloadTooLargeError,
    UpstreamRateLimitError,
    UpstreamUnavailableError,
)
from inkparse.services.llm import LLMService

MESSAGES = [{"role": "user", "content": "hi"}]


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_service(settings, handler, seen=None):
    def _handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return LLMService(settings, transport=httpx.MockTransport(_handler))


class TestLLMService:

    @pytest.mark.asyncio
    async def test_returns_trimmed_content(self, settings):
        seen = []
        service = make_service(settings, lambda r: httpx.Response(200, json=completion('  {"a": 1}\n')), seen)

        assert await service.complete(MESSAGES) == '{"a": 1}'

        request = seen[0]
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "gpt-4o"
        assert body["messages"] == MESSAGES
        assert body["max_tokens"] == 4000

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, expected",
        [
            (400, UpstreamBadRequestError),
            (401, UpstreamAuthError),
            (403, UpstreamAuthError),
            (413, UpstreamPayloadTooLargeError),
            (429, UpstreamRateLimitError),
            (500, UpstreamUnavailableError),
            (503, UpstreamUnavailableError),
        ],
    )
    async def test_status_mapping(self, settings, status, expected):
        service = make_service(settings, lambda r: httpx.Response(status, json={"error": {"message": "nope"}}))
        with pytest.raises(expected):
            await service.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_no_retry_on_failure(self, settings):
        seen = []
        service = make_service(settings, lambda r: httpx.Response(503), seen)
        with pytest.raises(UpstreamUnavailableError):
            await service.complete(MESSAGES)
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_network_error(self, settings):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        service = make_service(settings, handler)
        with pytest.raises(UpstreamUnavailableError):
            await service.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_non_json_body(self, settings):
        service = make_service(settings, lambda r: httpx.Response(200, text="<html>gateway</html>"))
        with pytest.raises(UpstreamUnavailableError):
            await service.complete(MESSAGES)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [completion(""), completion("   "), completion(None), {"choices": []}, {}],
    )
    async def test_empty_completion(self, settings, payload):
        service = make_service(settings, lambda r: httpx.Response(200, json=payload))
        with pytest.raises(EmptyUpstreamResponseError):
            await service.complete(MESSAGES)

    @pytest.mark.asyncio
    async def test_missing_api_key(self, settings):
        settings.OPENAI_API_KEY = ""
        seen = []
        service = make_service(settings, lambda r: httpx.Response(200, json=completion("{}")), seen)
        with pytest.raises(UpstreamAuthError):
            await service.complete(MESSAGES)
        assert seen == []


def test_max_output_tokens_is_clamped(settings):
    settings.LLM_MAX_OUTPUT_TOKENS = 100_000
    assert LLMService(settings).max_output_tokens == 8192
    settings.LLM_MAX_OUTPUT_TOKENS = 10
    assert LLMService(settings).max_output_tokens == 256
