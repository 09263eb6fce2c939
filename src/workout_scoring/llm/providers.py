"""
LLM client for the remote scorer.

This module wraps the OpenAI chat API with:
- A per-request timeout
- Error mapping to the package's LLM exceptions
- JSON mode for structured replies
- Request metrics tracking

Requests are never retried here: the caller owns retry policy and is
expected to fall back to the rule-based engine on failure.
"""

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
)

from ..config import get_settings
from ..exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
    LLMResponseInvalidError,
    LLMServiceUnavailableError,
    LLMTimeoutError,
)
from ..utils.log_sanitizer import install_log_sanitizer

logger = logging.getLogger(__name__)
install_log_sanitizer(__name__)

T = TypeVar("T")

API_KEY_PREFIX = "sk-"


def looks_like_api_key(api_key: Optional[str]) -> bool:
    """Cheap format check made before spending a request on a bad key."""
    return bool(api_key) and api_key.startswith(API_KEY_PREFIX)


class LLMMetrics:
    """Track LLM usage metrics."""

    def __init__(self) -> None:
        self.total_requests = 0
        self.successful_requests = 0
        self.failed_requests = 0
        self.total_tokens_input = 0
        self.total_tokens_output = 0
        self._request_times: list[float] = []

    def record_request(
        self,
        success: bool,
        input_tokens: int = 0,
        output_tokens: int = 0,
        duration_ms: Optional[float] = None,
    ) -> None:
        """Record a request."""
        self.total_requests += 1
        if success:
            self.successful_requests += 1
        else:
            self.failed_requests += 1
        self.total_tokens_input += input_tokens
        self.total_tokens_output += output_tokens
        if duration_ms is not None:
            self._request_times.append(duration_ms)
            # Keep only last 100 request times
            if len(self._request_times) > 100:
                self._request_times = self._request_times[-100:]

    @property
    def avg_request_time_ms(self) -> float:
        if not self._request_times:
            return 0.0
        return sum(self._request_times) / len(self._request_times)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "total_tokens_input": self.total_tokens_input,
            "total_tokens_output": self.total_tokens_output,
            "avg_request_time_ms": round(self.avg_request_time_ms, 2),
        }


class LLMClient:
    """
    Chat completion client with timeout and error mapping.

    Every provider failure surfaces as an `LLMError` subclass:
    - bad or missing key -> LLMAuthenticationError
    - HTTP 429 -> LLMRateLimitError
    - timeout -> LLMTimeoutError
    - connection or 5xx -> LLMServiceUnavailableError
    - unusable content -> LLMResponseInvalidError
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        """
        Initialize the LLM client.

        Args:
            api_key: OpenAI API key (defaults to settings)
            model: Model ID (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            client: Pre-built AsyncOpenAI client (for testing)
        """
        settings = get_settings()
        api_key = api_key or settings.openai_api_key

        if not looks_like_api_key(api_key):
            raise LLMAuthenticationError(
                message="OpenAI API key is not configured or malformed",
                details={"configuration_missing": "openai_api_key"},
            )

        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)
        self.model = model or settings.llm_model
        self.timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self.metrics = LLMMetrics()

    async def _execute(
        self,
        operation: Callable[[], Awaitable[T]],
        operation_name: str = "LLM request",
    ) -> T:
        """
        Run one request and translate provider errors.

        Raises:
            LLMError: On any failure
        """
        start_time = time.time()
        try:
            result = await operation()
        except LLMError:
            self.metrics.record_request(success=False)
            raise
        except (AuthenticationError, PermissionDeniedError) as e:
            self.metrics.record_request(success=False)
            raise LLMAuthenticationError(message=f"LLM credential rejected: {e}")
        except RateLimitError as e:
            self.metrics.record_request(success=False)
            retry_after = getattr(e, "retry_after", None)
            raise LLMRateLimitError(retry_after=int(retry_after) if retry_after else None)
        except (asyncio.TimeoutError, APITimeoutError):
            self.metrics.record_request(success=False)
            raise LLMTimeoutError(timeout_seconds=self.timeout)
        except APIConnectionError as e:
            self.metrics.record_request(success=False)
            raise LLMServiceUnavailableError(message=f"Connection to LLM service failed: {e}")
        except APIError as e:
            self.metrics.record_request(success=False)
            status = getattr(e, "status_code", None)
            if status is not None and status >= 500:
                raise LLMServiceUnavailableError(
                    message=f"LLM API error: {e}",
                    details={"status_code": status},
                )
            raise LLMError(message=f"LLM API error: {e}", details={"status_code": status})

        duration_ms = (time.time() - start_time) * 1000
        self.metrics.record_request(success=True, duration_ms=duration_ms)
        logger.debug(f"{operation_name} finished in {duration_ms:.0f}ms")
        return result

    async def _create(
        self,
        system: str,
        user: str,
        max_tokens: int,
        temperature: float,
        **extra: Any,
    ) -> str:
        response = await asyncio.wait_for(
            self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
                **extra,
            ),
            timeout=self.timeout,
        )
        if not response.choices:
            raise LLMResponseInvalidError(message="LLM response has no choices")
        content = response.choices[0].message.content
        if not content:
            raise LLMResponseInvalidError(message="Empty response from LLM")
        return content.strip()

    async def completion(
        self,
        system: str,
        user: str,
        max_tokens: int = 200,
        temperature: float = 0.8,
    ) -> str:
        """
        Get a free-text completion.

        Args:
            system: System prompt
            user: User message
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            The assistant's response text

        Raises:
            LLMError: On failure
        """
        async def _make_request() -> str:
            return await self._create(system, user, max_tokens, temperature)

        return await self._execute(_make_request, "completion")

    async def completion_json(
        self,
        system: str,
        user: str,
        max_tokens: int = 800,
        temperature: float = 0.7,
    ) -> Dict[str, Any]:
        """
        Get a JSON object completion using JSON mode.

        Args:
            system: System prompt (must mention JSON)
            user: User message
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature

        Returns:
            The parsed JSON object

        Raises:
            LLMError: On failure
            LLMResponseInvalidError: If the reply is not a JSON object
        """
        async def _make_request() -> Dict[str, Any]:
            content = await self._create(
                system, user, max_tokens, temperature,
                response_format={"type": "json_object"},
            )
            try:
                parsed = json.loads(content)
            except json.JSONDecodeError as e:
                raise LLMResponseInvalidError(
                    message=f"Invalid JSON response from LLM: {e}",
                    raw_response=content,
                )
            if not isinstance(parsed, dict):
                raise LLMResponseInvalidError(
                    message="LLM JSON response is not an object",
                    raw_response=content,
                )
            return parsed

        return await self._execute(_make_request, "completion_json")

    def get_metrics(self) -> Dict[str, Any]:
        return self.metrics.to_dict()


# Singleton instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def reset_llm_client() -> None:
    """Drop the singleton so the next call re-reads settings (for testing)."""
    global _llm_client
    _llm_client = None
