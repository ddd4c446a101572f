from __future__ import annotations

from functools import lru_cache

from app.core.llm.openai_client import OpenAIClient, OpenAIConfig
from app.core.settings import get_settings


@lru_cache
def get_openai_client() -> OpenAIClient:
    """
    Dependency provider for OpenAIClient.

    Built once per process from settings. A missing API key is not rejected here;
    the first call fails with an authentication error instead.
    """

    settings = get_settings()
    config = OpenAIConfig(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        timeout_seconds=float(settings.openai_timeout_seconds),
    )
    return OpenAIClient(config=config)
