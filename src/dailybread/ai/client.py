"""Chat-completion client for the DeepSeek-compatible AI endpoint.

Requests are plain JSON POSTs with a Bearer token. Transient failures are
retried with a linear backoff; timeouts are not retried.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import requests

from ..config import DEFAULT_AI_API_URL, Config, get_config

logger = logging.getLogger(__name__)

MIN_KEY_LENGTH = 10


class AIClientError(Exception):
    """Raised when a completion cannot be obtained."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        retryable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.retryable = retryable


class CompletionClient:
    """Client for an OpenAI-style chat completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = DEFAULT_AI_API_URL,
        model: str = "deepseek-chat",
        timeout: float = 15.0,
        max_retries: int = 2,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize client.

        Args:
            api_key: Bearer token for the completion API
            api_url: Full chat completions URL
            model: Model name sent with every request
            timeout: Request timeout in seconds
            max_retries: Extra attempts after a retryable failure
            sleep: Sleep coroutine, injectable for tests
        """
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self.max_retries = max_retries
        self._sleep = sleep
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        if api_key:
            self._session.headers["Authorization"] = f"Bearer {api_key}"

    @classmethod
    def from_config(cls, config: Optional[Config] = None, **overrides: Any) -> "CompletionClient":
        config = config or get_config()
        kwargs: dict[str, Any] = {
            "api_key": config.ai_api_key,
            "api_url": config.ai_api_url,
            "model": config.ai_model,
            "timeout": config.api_timeout,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and len(self.api_key) >= MIN_KEY_LENGTH)

    def close(self) -> None:
        self._session.close()

    def _post(self, payload: dict) -> str:
        try:
            response = self._session.post(self.api_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            raise AIClientError(f"AI request timed out after {self.timeout:g} seconds", retryable=False)
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise AIClientError(f"AI API error: {status}", status=status)
        except requests.exceptions.RequestException as e:
            raise AIClientError(f"AI request failed: {e}")
        except ValueError as e:
            raise AIClientError(f"Invalid JSON from AI API: {e}", retryable=False)

        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            raise AIClientError("Unexpected AI response format", retryable=False)

    async def complete(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        """Request a completion and return the assistant message text.

        Args:
            messages: Chat messages (``role`` and ``content``)
            temperature: Sampling temperature
            max_tokens: Completion token limit

        Returns:
            Content of the first choice

        Raises:
            AIClientError: If not configured, or every attempt failed
        """
        if not self.is_configured:
            raise AIClientError("AI API key is not configured", retryable=False)

        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        attempt = 0
        while True:
            try:
                return await asyncio.to_thread(self._post, payload)
            except AIClientError as e:
                if not e.retryable or attempt >= self.max_retries:
                    raise
                attempt += 1
                logger.warning(
                    "%s; retrying (attempt %d/%d)", e.message, attempt, self.max_retries
                )
                await self._sleep(1.0 * attempt)
