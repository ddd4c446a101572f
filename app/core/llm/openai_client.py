from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from app.core.llm.schemas import ChatCompletion


class OpenAIError(Exception):
    """Base error for chat-completion failures.

    `status_code` is the upstream HTTP status when one was received; `details` is the
    upstream error payload (parsed JSON, or raw text) when the service attached one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


class OpenAIUpstreamError(OpenAIError):
    """Raised on transport failures or an unreadable response (no status code)."""


class OpenAIStatusError(OpenAIError):
    """Raised when the API answers with a non-2xx status."""


class OpenAIAuthenticationError(OpenAIStatusError):
    """HTTP 401: missing or invalid API key."""


class OpenAIRateLimitError(OpenAIStatusError):
    """HTTP 429: the caller is being rate limited."""


_STATUS_ERRORS: dict[int, type[OpenAIStatusError]] = {
    401: OpenAIAuthenticationError,
    429: OpenAIRateLimitError,
}


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str | None
    base_url: str
    model: str
    timeout_seconds: float


def _error_details(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


class OpenAIClient:
    """
    Minimal chat-completion client for OpenAI-compatible APIs.

    Design notes:
    - No logging in this module (prompts/outputs may contain PHI).
    - Stateless requests; one POST per call, no retries.
    - Failures are raised as `OpenAIError` subclasses so callers can branch on kind.
    """

    def __init__(self, *, config: OpenAIConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport

    @property
    def model(self) -> str:
        return self._config.model

    async def create_chat_completion(
        self, *, prompt: str, max_tokens: int, temperature: float
    ) -> ChatCompletion:
        url = f"{self._config.base_url.rstrip('/')}/chat/completions"
        headers = {"Content-Type": "application/json"}
        # Without a key the request still goes out; the API answers 401.
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        payload: dict[str, Any] = {
            "model": self._config.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise OpenAIUpstreamError("LLM request timed out") from exc
        except httpx.HTTPError as exc:
            raise OpenAIUpstreamError(f"LLM request failed: {exc}") from exc
        except (httpx.InvalidURL, ValueError) as exc:
            # Raised while building the request, e.g. a non-ASCII API key or a malformed base URL.
            raise OpenAIUpstreamError("LLM request could not be built") from exc

        if not resp.is_success:
            error_cls = _STATUS_ERRORS.get(resp.status_code, OpenAIStatusError)
            raise error_cls(
                f"Request failed with status code {resp.status_code}",
                status_code=resp.status_code,
                details=_error_details(resp),
            )

        try:
            return ChatCompletion.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise OpenAIUpstreamError("LLM response was not a valid chat completion") from exc
