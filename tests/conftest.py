from __future__ import annotations

import os

import pytest


@pytest.fixture(autouse=True)
def _set_test_llm_env() -> None:
    os.environ["OPENAI_API_KEY"] = "test-key"
    os.environ["OPENAI_BASE_URL"] = "https://llm.test/v1"
    os.environ["OPENAI_MODEL"] = "meta-llama/llama-3-8b"
    # Settings and the client are cached via @lru_cache; clear so each test sees its own env.
    from app.core.llm.deps import get_openai_client
    from app.core.settings import get_settings

    get_settings.cache_clear()
    get_openai_client.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from app.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
