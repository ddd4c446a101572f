from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.core.llm.deps import get_openai_client
from app.core.llm.openai_client import OpenAIAuthenticationError, OpenAIRateLimitError
from app.main import create_app
from tests.predictions._helpers import FakeLLMClient, make_completion

_BODY = {
    "age": 45,
    "category": "chronic pain",
    "problem_description": "persistent lower back pain for 3 months",
    "medication": "naproxen",
}


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient(completion=make_completion("Take rest and hydrate."))


@pytest.fixture
def prediction_client(fake_llm: FakeLLMClient) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_openai_client] = lambda: fake_llm
    with TestClient(app) as c:
        yield c


def test_post_prediction_plain(prediction_client: TestClient, fake_llm: FakeLLMClient) -> None:
    res = prediction_client.post("/predictions", json=_BODY)

    assert res.status_code == 200, res.text
    assert "X-Request-ID" in res.headers
    assert res.json() == {"prediction": "Take rest and hydrate."}
    assert "Medication: naproxen." in fake_llm.calls[0]["prompt"]


def test_post_prediction_full(prediction_client: TestClient) -> None:
    res = prediction_client.post("/predictions?full=true", json=_BODY)

    assert res.status_code == 200, res.text
    payload = res.json()
    assert payload["prediction"] == "Take rest and hydrate."
    assert payload["metadata"]["model"] == "meta-llama/llama-3-8b"
    assert payload["metadata"]["created"] == 1_700_000_000
    assert payload["full_response"]["id"] == "chatcmpl-test"


def test_post_prediction_accepts_numeric_string_age(
    prediction_client: TestClient, fake_llm: FakeLLMClient
) -> None:
    res = prediction_client.post("/predictions", json={**_BODY, "age": "45"})

    assert res.status_code == 200, res.text
    assert "45-year-old" in fake_llm.calls[0]["prompt"]


@pytest.mark.parametrize(
    ("overrides", "detail"),
    [
        ({"age": 200}, "Age must be a valid number between 0 and 150"),
        ({"age": "abc"}, "Age must be a valid number between 0 and 150"),
        ({"category": "   "}, "Category must be a non-empty string"),
        ({"problem_description": ""}, "Problem description must be a non-empty string"),
        ({"age": True}, "Age must be a valid number between 0 and 150"),
        ({"category": 12}, "Category must be a non-empty string"),
        ({"problem_description": ["pain"]}, "Problem description must be a non-empty string"),
        ({"medication": 5}, "Medication must be a string if provided"),
    ],
)
def test_post_prediction_invalid_input_returns_400(
    prediction_client: TestClient, fake_llm: FakeLLMClient, overrides: dict, detail: str
) -> None:
    res = prediction_client.post("/predictions", json={**_BODY, **overrides})

    assert res.status_code == 400
    assert res.json() == {"detail": detail}
    assert fake_llm.calls == []


def test_post_prediction_missing_field_returns_400(
    prediction_client: TestClient, fake_llm: FakeLLMClient
) -> None:
    body = {k: v for k, v in _BODY.items() if k != "category"}
    res = prediction_client.post("/predictions", json=body)

    assert res.status_code == 400
    assert fake_llm.calls == []


def test_upstream_auth_failure_is_a_result_not_an_http_error() -> None:
    llm = FakeLLMClient(
        error=OpenAIAuthenticationError("Request failed with status code 401", status_code=401)
    )
    app = create_app()
    app.dependency_overrides[get_openai_client] = lambda: llm
    with TestClient(app) as client:
        plain = client.post("/predictions", json=_BODY)
        full = client.post("/predictions?full=true", json=_BODY)

    assert plain.status_code == 200
    assert plain.json() == {"prediction": "Authentication error: Please check API key"}

    assert full.status_code == 200
    payload = full.json()
    assert payload["message"] == "Authentication error: Please check API key"
    assert payload["status"] == 401
    assert payload["error"] == "Request failed with status code 401"


def test_upstream_rate_limit_full_mode() -> None:
    llm = FakeLLMClient(
        error=OpenAIRateLimitError("Request failed with status code 429", status_code=429)
    )
    app = create_app()
    app.dependency_overrides[get_openai_client] = lambda: llm
    with TestClient(app) as client:
        res = client.post("/predictions?full=true", json=_BODY)

    assert res.status_code == 200
    assert res.json()["message"] == "Rate limit exceeded: Please try again later"


def test_empty_completion_full_mode_returns_error_object() -> None:
    llm = FakeLLMClient(completion=make_completion(""))
    app = create_app()
    app.dependency_overrides[get_openai_client] = lambda: llm
    with TestClient(app) as client:
        res = client.post("/predictions?full=true", json=_BODY)

    assert res.status_code == 200
    payload = res.json()
    assert payload["error"] == "No valid prediction received"
    assert payload["response"]["id"] == "chatcmpl-test"


def test_metrics_count_prediction_outcomes(prediction_client: TestClient) -> None:
    prediction_client.post("/predictions", json=_BODY)

    res = prediction_client.get("/metrics")

    assert res.status_code == 200
    assert 'llm_predictions_total{outcome="success"}' in res.text
