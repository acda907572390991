"""
Unit tests for OpenAICompatibleProvider.

Requests are answered in-process through httpx.MockTransport.
"""
import json

import httpx
import pytest

from translation_agent.core.exceptions import CompletionError
from translation_agent.core.llm.providers.openai import OpenAICompatibleProvider


def completion_body(content, model="gpt-4o-mini"):
    return {
        "model": model,
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 12, "completion_tokens": 3},
    }


def make_provider(handler, **kwargs):
    kwargs.setdefault("api_endpoint", "https://llm.example.com/v1")
    kwargs.setdefault("model", "gpt-4o-mini")
    kwargs.setdefault("retry_delay", 0)
    return OpenAICompatibleProvider(transport=httpx.MockTransport(handler), **kwargs)


class TestRequestShape:
    """What the provider sends."""

    @pytest.mark.asyncio
    async def test_posts_chat_completion(self):
        """System message first, then the user prompt, to /chat/completions."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=completion_body("Hola"))

        async with make_provider(handler, api_key="sk-test", temperature=0.3) as provider:
            text = await provider.complete("Translate: Hello", "You are a translator.")

        assert text == "Hola"
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://llm.example.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"

        payload = json.loads(request.content)
        assert payload["model"] == "gpt-4o-mini"
        assert payload["temperature"] == 0.3
        assert payload["messages"] == [
            {"role": "system", "content": "You are a translator."},
            {"role": "user", "content": "Translate: Hello"},
        ]

    @pytest.mark.asyncio
    async def test_default_system_message(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=completion_body("ok"))

        async with make_provider(handler) as provider:
            await provider.complete("Hi", "")

        assert seen[0]["messages"][0] == {"role": "system", "content": "You are a helpful assistant."}

    @pytest.mark.asyncio
    async def test_fallback_model(self):
        """An empty model name falls back to the default model."""
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json=completion_body("ok"))

        async with make_provider(handler, model="") as provider:
            await provider.complete("Hi", "sys")

        assert seen[0]["model"] == "gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_key(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=completion_body("ok"))

        async with make_provider(handler, api_key=None) as provider:
            await provider.complete("Hi", "sys")

        assert "Authorization" not in seen[0].headers

    @pytest.mark.parametrize("endpoint", [
        "http://localhost:8080/v1",
        "http://localhost:8080/v1/",
        "http://localhost:8080/v1/chat/completions",
    ])
    def test_completions_url(self, endpoint):
        provider = OpenAICompatibleProvider(api_endpoint=endpoint)
        assert provider.completions_url == "http://localhost:8080/v1/chat/completions"


class TestResponseHandling:
    """How responses and failures are mapped."""

    @pytest.mark.asyncio
    async def test_generate_reports_usage(self):
        def handler(request):
            return httpx.Response(200, json=completion_body("Hola", model="gpt-4o-mini-2024"))

        async with make_provider(handler) as provider:
            response = await provider.generate("Hello", "sys")

        assert response.content == "Hola"
        assert response.prompt_tokens == 12
        assert response.completion_tokens == 3
        assert response.model == "gpt-4o-mini-2024"

    @pytest.mark.asyncio
    async def test_no_choices(self):
        """An empty choice list is a completion error."""
        def handler(request):
            return httpx.Response(200, json={"choices": []})

        async with make_provider(handler) as provider:
            with pytest.raises(CompletionError, match="no completion choices returned"):
                await provider.complete("Hello", "sys")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"choices": [None]},
        {"choices": ["Hola"]},
        {"choices": [{"message": None}]},
        {"choices": [{"message": "Hola"}]},
        {"choices": [{"message": {"content": [{"type": "text", "text": "Hola"}]}}]},
        {"choices": {"0": {"message": {"content": "Hola"}}}},
        ["Hola"],
    ])
    async def test_malformed_body(self, body):
        """Bodies without a usable choice are completion errors, not crashes."""
        def handler(request):
            return httpx.Response(200, json=body)

        async with make_provider(handler) as provider:
            with pytest.raises(CompletionError, match="Unexpected response body") as exc_info:
                await provider.complete("Hello", "sys")

        assert not exc_info.value.recoverable

    @pytest.mark.asyncio
    async def test_null_content_is_empty(self):
        def handler(request):
            return httpx.Response(200, json=completion_body(None))

        async with make_provider(handler) as provider:
            assert await provider.complete("Hello", "sys") == ""

    @pytest.mark.asyncio
    async def test_logs_token_usage(self, quiet_logger, log_entries):
        def handler(request):
            return httpx.Response(200, json=completion_body("Hola"))

        async with make_provider(handler) as provider:
            provider.logger = quiet_logger
            await provider.complete("Hello", "sys")

        usage = [e['data'] for e in log_entries if e['type'] == "llm_response"]
        assert usage[0]['prompt_tokens'] == 12
        assert usage[0]['completion_tokens'] == 3
        assert usage[0]['model'] == "gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_http_error(self):
        def handler(request):
            return httpx.Response(500, text="upstream exploded")

        async with make_provider(handler) as provider:
            with pytest.raises(CompletionError) as exc_info:
                await provider.complete("Hello", "sys")

        assert exc_info.value.status_code == 500
        assert exc_info.value.context['body'] == "upstream exploded"

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"not json")

        async with make_provider(handler) as provider:
            with pytest.raises(CompletionError, match="Invalid JSON"):
                await provider.complete("Hello", "sys")

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with make_provider(handler) as provider:
            with pytest.raises(CompletionError, match="Transport error"):
                await provider.complete("Hello", "sys")

    @pytest.mark.asyncio
    async def test_single_attempt_by_default(self):
        """No retries unless configured."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, text="busy")

        async with make_provider(handler) as provider:
            with pytest.raises(CompletionError):
                await provider.complete("Hello", "sys")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_retries_when_configured(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503, text="busy")
            return httpx.Response(200, json=completion_body("Hola"))

        async with make_provider(handler, max_attempts=2) as provider:
            assert await provider.complete("Hello", "sys") == "Hola"

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self):
        """A 4xx other than 408/429 fails on the first attempt."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(401, text="bad key")

        async with make_provider(handler, max_attempts=3) as provider:
            with pytest.raises(CompletionError) as exc_info:
                await provider.complete("Hello", "sys")

        assert len(calls) == 1
        assert exc_info.value.status_code == 401
        assert not exc_info.value.recoverable

    @pytest.mark.asyncio
    async def test_rate_limit_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(429, text="slow down")

        async with make_provider(handler, max_attempts=3) as provider:
            with pytest.raises(CompletionError) as exc_info:
                await provider.complete("Hello", "sys")

        assert len(calls) == 3
        assert exc_info.value.recoverable

    @pytest.mark.asyncio
    async def test_close_releases_client(self):
        def handler(request):
            return httpx.Response(200, json=completion_body("ok"))

        provider = make_provider(handler)
        await provider.complete("Hello", "sys")
        assert provider._client is not None
        await provider.close()
        assert provider._client is None
