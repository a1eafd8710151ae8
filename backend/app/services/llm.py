"""
LLM service for structured report generation through OpenRouter.

The provider performs single chat-completion calls; the report generator
client wraps it with the bounded retry policy. Nothing else in the
application performs network I/O.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from backend.app.core.config import settings
from backend.app.core.exceptions import GeneratorUnavailableError

logger = logging.getLogger(__name__)


class OpenRouterProvider:
    """OpenRouter chat-completion provider."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "qwen/qwen3-235b-a22b:free",
        base_url: str = "https://openrouter.ai/api/v1/chat/completions",
        provider_sort: str | None = "price",
        http_referer: str | None = None,
        x_title: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key (bearer credential)
            model: Model identifier
            base_url: Chat completion endpoint
            provider_sort: Provider routing preference (price/quality/speed)
            http_referer: Optional HTTP-Referer attribution header
            x_title: Optional X-Title attribution header
            client: Optional preconfigured HTTP client (owned by the caller)
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.provider_sort = provider_sort
        self.http_referer = http_referer
        self.x_title = x_title
        self._client = client
        self._owns_client = client is None

    async def init(self) -> None:
        """Open the HTTP connection pool."""
        if not self.api_key:
            logger.warning("[LLM] OPENROUTER_API_KEY is not configured; generator calls will fail")
        if self._client is None:
            self._client = httpx.AsyncClient()
            self._owns_client = True

    async def dispose(self) -> None:
        """Close the HTTP connection pool if this provider opened it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.http_referer:
            headers["HTTP-Referer"] = self.http_referer
        if self.x_title:
            headers["X-Title"] = self.x_title
        return headers

    async def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        temperature: float = 0.1,
        max_tokens: int = 16000,
        response_format: dict | None = None,
        timeout: float = 180.0,
    ) -> str:
        """
        Generate a completion.

        Args:
            prompt: User prompt
            system_prompt: System instruction
            temperature: Sampling temperature (0-2)
            max_tokens: Maximum tokens to generate
            response_format: Optional JSON schema response format
            timeout: Request timeout in seconds

        Returns:
            Message content of the first choice (empty string when absent)

        Raises:
            httpx.HTTPError: If the request fails or returns a non-2xx status
            ValueError: If the response body is not JSON
        """
        if self._client is None:
            await self.init()

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        request_body: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format:
            request_body["response_format"] = response_format
        if self.provider_sort:
            request_body["provider"] = {"sort": self.provider_sort}

        prompt_chars = len(prompt) + len(system_prompt or "")
        logger.info(
            f"[LLM REQUEST] Model: {self.model}, Temperature: {temperature}, "
            f"Structured: {response_format is not None}, ~{prompt_chars // 4} tokens"
        )

        start_time = time.time()
        response = await self._client.post(
            self.base_url,
            headers=self._headers(),
            json=request_body,
            timeout=timeout,
        )
        if response.is_error:
            logger.error(f"[LLM RESPONSE] Status {response.status_code}: {response.text[:200]}")
        response.raise_for_status()
        data = response.json()

        elapsed_time = time.time() - start_time
        if not isinstance(data, dict):
            logger.warning(f"[LLM RESPONSE] Unexpected envelope type {type(data).__name__}")
            return ""
        logger.info(f"[LLM RESPONSE] Time: {elapsed_time:.2f}s, Usage: {data.get('usage')}")

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        return content if isinstance(content, str) else ""


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with linear backoff.

    Attempt ``n`` that fails waits ``n * backoff_seconds`` before attempt
    ``n + 1``; no wait follows the last attempt.
    """

    max_attempts: int = 3
    backoff_seconds: float = 1.0
    timeout_seconds: float = 180.0

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        return cls(
            max_attempts=settings.report_max_attempts,
            backoff_seconds=settings.report_backoff_seconds,
            timeout_seconds=settings.report_timeout_seconds,
        )

    def delay(self, attempt: int) -> float:
        return attempt * self.backoff_seconds


class ReportGeneratorClient:
    """Calls the provider for one structured report, retrying transient failures."""

    def __init__(
        self,
        provider: OpenRouterProvider,
        policy: RetryPolicy | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.provider = provider
        self.policy = policy or RetryPolicy.from_settings()
        self.temperature = settings.report_temperature if temperature is None else temperature
        self.max_tokens = settings.report_max_tokens if max_tokens is None else max_tokens
        self._sleep = sleep

    async def init(self) -> None:
        await self.provider.init()

    async def dispose(self) -> None:
        await self.provider.dispose()

    async def call(
        self,
        system_prompt: str,
        user_prompt: str,
        schema: dict[str, Any],
        schema_name: str = "ReportDataV3",
    ) -> str:
        """
        Generate raw report output for the given prompts.

        Args:
            system_prompt: System instruction
            user_prompt: Serialized session context
            schema: Strict JSON schema for the response
            schema_name: Schema name reported to the endpoint

        Returns:
            Raw generator output

        Raises:
            GeneratorUnavailableError: If every attempt failed
        """
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": schema_name, "strict": True, "schema": schema},
        }

        last_error: Exception | None = None
        for attempt in range(1, self.policy.max_attempts + 1):
            try:
                return await self.provider.generate(
                    prompt=user_prompt,
                    system_prompt=system_prompt,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    response_format=response_format,
                    timeout=self.policy.timeout_seconds,
                )
            except (httpx.HTTPError, ValueError) as e:
                last_error = e
                logger.warning(
                    f"[LLM] Attempt {attempt}/{self.policy.max_attempts} failed: {type(e).__name__}: {e}"
                )
                if attempt < self.policy.max_attempts:
                    await self._sleep(self.policy.delay(attempt))

        logger.error(f"[LLM] Generator unavailable after {self.policy.max_attempts} attempts")
        raise GeneratorUnavailableError(self.policy.max_attempts, last_error)


def build_generator_client() -> ReportGeneratorClient:
    """Build the report generator client from application settings."""
    provider = OpenRouterProvider(
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        base_url=settings.openrouter_base_url,
        provider_sort=settings.openrouter_provider_sort,
        http_referer=settings.openrouter_http_referer,
        x_title=settings.openrouter_x_title,
    )
    return ReportGeneratorClient(provider, RetryPolicy.from_settings())
