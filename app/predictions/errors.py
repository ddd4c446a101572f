"""Mapping from chat-completion failures to caller-facing messages."""

from __future__ import annotations

from enum import StrEnum

from app.core.llm.openai_client import (
    OpenAIAuthenticationError,
    OpenAIError,
    OpenAIRateLimitError,
)

AUTHENTICATION_MESSAGE = "Authentication error: Please check API key"
RATE_LIMIT_MESSAGE = "Rate limit exceeded: Please try again later"
GENERIC_MESSAGE_PREFIX = "Error getting prediction: "


class ErrorKind(StrEnum):
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"


def classify_error(exc: OpenAIError) -> ErrorKind:
    if isinstance(exc, OpenAIAuthenticationError) or exc.status_code == 401:
        return ErrorKind.AUTHENTICATION
    if isinstance(exc, OpenAIRateLimitError) or exc.status_code == 429:
        return ErrorKind.RATE_LIMIT
    return ErrorKind.GENERIC


def error_message(kind: ErrorKind, raw_message: str) -> str:
    if kind is ErrorKind.AUTHENTICATION:
        return AUTHENTICATION_MESSAGE
    if kind is ErrorKind.RATE_LIMIT:
        return RATE_LIMIT_MESSAGE
    return GENERIC_MESSAGE_PREFIX + raw_message
