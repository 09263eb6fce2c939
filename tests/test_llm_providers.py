"""Tests for LLM providers module."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import (
    APIConnectionError,
    AuthenticationError,
    InternalServerError,
    RateLimitError,
)

from workout_scoring.exceptions import (
    ErrorCode,
    LLMAuthenticationError,
    LLMRateLimitError,
    LLMResponseInvalidError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)
from workout_scoring.llm.providers import (
    LLMClient,
    LLMMetrics,
    get_llm_client,
    looks_like_api_key,
    reset_llm_client,
)

TEST_KEY = "sk-test-0123456789abcdefghij"
OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def _http_response(status: int) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("POST", OPENAI_URL))


def _chat_response(content):
    """Build an object shaped like a chat completion."""
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture
def openai_client():
    """Create a mock AsyncOpenAI client."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_chat_response('{"ok": true}'))
    return client


@pytest.fixture
def llm_client(openai_client):
    return LLMClient(api_key=TEST_KEY, model="gpt-4o-mini", timeout=5, client=openai_client)


class TestApiKeyCheck:
    """The key is checked before any request is made."""

    def test_looks_like_api_key(self):
        assert looks_like_api_key(TEST_KEY)
        assert not looks_like_api_key("")
        assert not looks_like_api_key(None)
        assert not looks_like_api_key("pk-live-123")

    def test_missing_key_raises(self):
        with pytest.raises(LLMAuthenticationError) as exc_info:
            LLMClient()

        assert exc_info.value.code == ErrorCode.LLM_AUTH_INVALID
        assert exc_info.value.status_code == 401

    def test_malformed_key_raises(self):
        with pytest.raises(LLMAuthenticationError):
            LLMClient(api_key="not-a-key")

    def test_sdk_retries_disabled(self):
        client = LLMClient(api_key=TEST_KEY)

        assert client.client.max_retries == 0

    def test_defaults_come_from_settings(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "gpt-4.1-mini")
        client = LLMClient(api_key=TEST_KEY)

        assert client.model == "gpt-4.1-mini"
        assert client.timeout == 30.0


class TestCompletion:
    """Tests for completion and completion_json."""

    @pytest.mark.asyncio
    async def test_completion_returns_stripped_text(self, llm_client, openai_client):
        openai_client.chat.completions.create.return_value = _chat_response("  Good work.  ")

        result = await llm_client.completion(system="coach", user="feedback please")

        assert result == "Good work."
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["max_tokens"] == 200
        assert kwargs["temperature"] == 0.8
        assert "response_format" not in kwargs

    @pytest.mark.asyncio
    async def test_completion_json_uses_json_mode(self, llm_client, openai_client):
        result = await llm_client.completion_json(system="JSON only", user="score this")

        assert result == {"ok": True}
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": "JSON only"}

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, llm_client, openai_client):
        openai_client.chat.completions.create.return_value = _chat_response('{"intensityScore": 7')

        with pytest.raises(LLMResponseInvalidError) as exc_info:
            await llm_client.completion_json(system="JSON only", user="score this")

        assert "raw_response_preview" in exc_info.value.details

    @pytest.mark.asyncio
    async def test_json_array_raises(self, llm_client, openai_client):
        openai_client.chat.completions.create.return_value = _chat_response("[1, 2]")

        with pytest.raises(LLMResponseInvalidError):
            await llm_client.completion_json(system="JSON only", user="score this")

    @pytest.mark.asyncio
    async def test_empty_content_raises(self, llm_client, openai_client):
        openai_client.chat.completions.create.return_value = _chat_response(None)

        with pytest.raises(LLMResponseInvalidError):
            await llm_client.completion(system="coach", user="feedback please")

    @pytest.mark.asyncio
    async def test_no_choices_raises(self, llm_client, openai_client):
        response = _chat_response("unused")
        response.choices = []
        openai_client.chat.completions.create.return_value = response

        with pytest.raises(LLMResponseInvalidError):
            await llm_client.completion(system="coach", user="feedback please")


class TestErrorMapping:
    """Provider errors surface as the package's LLM errors."""

    @pytest.mark.asyncio
    async def test_timeout(self, openai_client):
        async def _hang(**kwargs):
            await asyncio.sleep(1)

        openai_client.chat.completions.create = _hang
        client = LLMClient(api_key=TEST_KEY, timeout=0.01, client=openai_client)

        with pytest.raises(LLMTimeoutError) as exc_info:
            await client.completion(system="coach", user="hello")

        assert exc_info.value.details["timeout_seconds"] == 0.01

    @pytest.mark.asyncio
    async def test_rate_limit(self, llm_client, openai_client):
        openai_client.chat.completions.create.side_effect = RateLimitError(
            "Rate limit reached", response=_http_response(429), body=None
        )

        with pytest.raises(LLMRateLimitError):
            await llm_client.completion(system="coach", user="hello")

    @pytest.mark.asyncio
    async def test_rejected_key(self, llm_client, openai_client):
        openai_client.chat.completions.create.side_effect = AuthenticationError(
            f"Incorrect API key provided: {TEST_KEY}", response=_http_response(401), body=None
        )

        with pytest.raises(LLMAuthenticationError):
            await llm_client.completion_json(system="JSON only", user="hello")

    @pytest.mark.asyncio
    async def test_server_error_is_unavailable(self, llm_client, openai_client):
        openai_client.chat.completions.create.side_effect = InternalServerError(
            "Bad gateway", response=_http_response(502), body=None
        )

        with pytest.raises(LLMServiceUnavailableError) as exc_info:
            await llm_client.completion(system="coach", user="hello")

        assert exc_info.value.details["status_code"] == 502

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, llm_client, openai_client):
        openai_client.chat.completions.create.side_effect = APIConnectionError(
            request=httpx.Request("POST", OPENAI_URL)
        )

        with pytest.raises(LLMServiceUnavailableError):
            await llm_client.completion(system="coach", user="hello")


class TestMetrics:
    """Tests for LLMMetrics."""

    @pytest.mark.asyncio
    async def test_client_records_outcomes(self, llm_client, openai_client):
        await llm_client.completion(system="coach", user="hello")
        openai_client.chat.completions.create.side_effect = RateLimitError(
            "Rate limit reached", response=_http_response(429), body=None
        )
        with pytest.raises(LLMRateLimitError):
            await llm_client.completion(system="coach", user="hello")

        metrics = llm_client.get_metrics()
        assert metrics["total_requests"] == 2
        assert metrics["successful_requests"] == 1
        assert metrics["failed_requests"] == 1

    def test_keeps_last_hundred_times(self):
        metrics = LLMMetrics()
        for i in range(150):
            metrics.record_request(success=True, duration_ms=float(i))

        assert metrics.total_requests == 150
        # Mean of 50..149
        assert metrics.avg_request_time_ms == 99.5

    def test_empty_average(self):
        assert LLMMetrics().to_dict()["avg_request_time_ms"] == 0.0


class TestSingleton:
    """Tests for get_llm_client and reset_llm_client."""

    def test_same_instance_until_reset(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", TEST_KEY)

        first = get_llm_client()
        assert get_llm_client() is first

        reset_llm_client()
        assert get_llm_client() is not first

    def test_missing_key_raises(self):
        with pytest.raises(LLMAuthenticationError):
            get_llm_client()
