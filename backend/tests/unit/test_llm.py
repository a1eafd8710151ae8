"""Unit tests for the OpenRouter provider and the report generator client."""

import json

import httpx
import pytest

from backend.app.core.exceptions import GeneratorUnavailableError
from backend.app.services.llm import OpenRouterProvider, RetryPolicy, ReportGeneratorClient

SCHEMA = {"type": "object", "properties": {}, "required": [], "additionalProperties": False}


def completion(content):
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}], "usage": {"total_tokens": 10}})


class TestOpenRouterProvider:
    """Test cases for OpenRouterProvider class."""

    def test_initialization_defaults(self):
        """Test OpenRouterProvider initialization with defaults."""
        provider = OpenRouterProvider(api_key="test-key")

        assert provider.api_key == "test-key"
        assert provider.base_url == "https://openrouter.ai/api/v1/chat/completions"
        assert provider.provider_sort == "price"

    @pytest.mark.asyncio
    async def test_generate_request(self):
        """Test the request body and headers sent to the endpoint."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return completion("Generated text response")

        provider = OpenRouterProvider(
            api_key="test-key",
            model="test/model",
            http_referer="https://example.test",
            x_title="Call Reports",
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        result = await provider.generate(
            "User prompt",
            system_prompt="You are an analyst",
            temperature=0.2,
            max_tokens=500,
            response_format={"type": "json_object"},
        )

        assert result == "Generated text response"
        request = requests[0]
        body = json.loads(request.content)
        assert body["model"] == "test/model"
        assert body["messages"] == [
            {"role": "system", "content": "You are an analyst"},
            {"role": "user", "content": "User prompt"},
        ]
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 500
        assert body["response_format"] == {"type": "json_object"}
        assert body["provider"] == {"sort": "price"}
        assert request.headers["Authorization"] == "Bearer test-key"
        assert request.headers["HTTP-Referer"] == "https://example.test"
        assert request.headers["X-Title"] == "Call Reports"

    @pytest.mark.asyncio
    async def test_generate_without_optional_headers(self):
        """Test attribution headers are omitted when not configured."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return completion("ok")

        provider = OpenRouterProvider(
            api_key="test-key",
            provider_sort=None,
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

        await provider.generate("Prompt")

        body = json.loads(requests[0].content)
        assert "HTTP-Referer" not in requests[0].headers
        assert "provider" not in body
        assert "response_format" not in body
        assert body["messages"] == [{"role": "user", "content": "Prompt"}]

    @pytest.mark.asyncio
    async def test_generate_missing_content(self):
        """Test an envelope without content yields an empty string."""
        provider = OpenRouterProvider(
            api_key="test-key",
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []}))),
        )

        assert await provider.generate("Prompt") == ""

    @pytest.mark.asyncio
    async def test_generate_http_error(self):
        """Test a non-2xx status raises."""
        provider = OpenRouterProvider(
            api_key="test-key",
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await provider.generate("Prompt")


class TestRetryPolicy:
    """Test cases for RetryPolicy."""

    def test_linear_backoff(self):
        """Test attempt n waits n * backoff."""
        policy = RetryPolicy(max_attempts=3, backoff_seconds=1.5)

        assert [policy.delay(n) for n in (1, 2)] == [1.5, 3.0]

    def test_from_settings(self):
        """Test defaults come from application settings."""
        policy = RetryPolicy.from_settings()

        assert policy.max_attempts == 3
        assert policy.backoff_seconds == 1.0


class TestReportGeneratorClient:
    """Test cases for ReportGeneratorClient."""

    @pytest.mark.asyncio
    async def test_call_sends_json_schema(self, generator_client_factory):
        """Test the strict JSON schema response format and per-call timeout."""
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return completion('{"tp_title": "Call"}')

        client = generator_client_factory(handler)

        result = await client.call("system", "user", SCHEMA, schema_name="ReportV3Tabs")

        assert result == '{"tp_title": "Call"}'
        body = json.loads(requests[0].content)
        assert body["response_format"] == {
            "type": "json_schema",
            "json_schema": {"name": "ReportV3Tabs", "strict": True, "schema": SCHEMA},
        }
        assert body["temperature"] == 0.1
        assert body["max_tokens"] == 1000
        assert requests[0].extensions["timeout"]["read"] == 5.0

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self, generator_client_factory):
        """Test transient failures are retried with linear backoff."""
        delays = []
        responses = [httpx.Response(503), httpx.Response(502), completion("{}")]

        client = generator_client_factory(lambda request: responses.pop(0), delays)

        result = await client.call("system", "user", SCHEMA)

        assert result == "{}"
        assert responses == []
        assert delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_attempts(self, generator_client_factory):
        """Test three failures raise GeneratorUnavailableError without a final wait."""
        delays = []
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = generator_client_factory(handler, delays)

        with pytest.raises(GeneratorUnavailableError) as exc_info:
            await client.call("system", "user", SCHEMA)

        assert len(calls) == 3
        assert delays == [1.0, 2.0]
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_non_json_body_is_retried(self, generator_client_factory):
        """Test an undecodable response body counts as a failed attempt."""
        responses = [httpx.Response(200, text="<html>gateway</html>"), completion("{}")]

        client = generator_client_factory(lambda request: responses.pop(0))

        assert await client.call("system", "user", SCHEMA) == "{}"

    @pytest.mark.asyncio
    async def test_single_attempt_policy(self):
        """Test a one-attempt policy never sleeps."""
        delays = []

        async def record_sleep(seconds):
            delays.append(seconds)

        provider = OpenRouterProvider(
            api_key="test-key",
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(500))),
        )
        client = ReportGeneratorClient(provider, RetryPolicy(max_attempts=1), sleep=record_sleep)

        with pytest.raises(GeneratorUnavailableError):
            await client.call("system", "user", SCHEMA)

        assert delays == []
