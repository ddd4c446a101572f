from __future__ import annotations

import asyncio

import pytest

from app.predictions.service import PredictionService
from app.predictions.validation import (
    PredictionValidationError,
    ValidationReason,
    parse_age,
    validate_prediction_input,
)
from tests.predictions._helpers import FakeLLMClient, make_completion


def _call(llm: FakeLLMClient, **overrides):
    kwargs = {
        "age": 45,
        "category": "chronic pain",
        "problem_description": "persistent lower back pain",
        "medication": None,
    }
    kwargs.update(overrides)
    svc = PredictionService(llm_client=llm)
    return asyncio.run(
        svc.get_prediction(
            kwargs["age"], kwargs["category"], kwargs["problem_description"], kwargs["medication"]
        )
    )


@pytest.mark.parametrize("age", [-1, 151, 1000, "abc", "", None, True, float("nan"), [45]])
def test_invalid_age_fails_before_network_call(age) -> None:
    llm = FakeLLMClient(completion=make_completion("ok"))
    with pytest.raises(PredictionValidationError) as exc_info:
        _call(llm, age=age)

    assert exc_info.value.field == "age"
    assert exc_info.value.reason is ValidationReason.INVALID_AGE
    assert exc_info.value.message == "Age must be a valid number between 0 and 150"
    assert llm.calls == []


@pytest.mark.parametrize("category", ["", "   ", "\t\n", None, 12])
def test_blank_category_fails(category) -> None:
    llm = FakeLLMClient(completion=make_completion("ok"))
    with pytest.raises(PredictionValidationError) as exc_info:
        _call(llm, category=category)

    assert exc_info.value.field == "category"
    assert exc_info.value.message == "Category must be a non-empty string"
    assert llm.calls == []


@pytest.mark.parametrize("problem", ["", "  ", None])
def test_blank_problem_description_fails(problem) -> None:
    llm = FakeLLMClient(completion=make_completion("ok"))
    with pytest.raises(PredictionValidationError) as exc_info:
        _call(llm, problem_description=problem)

    assert exc_info.value.field == "problem_description"
    assert exc_info.value.reason is ValidationReason.EMPTY_PROBLEM_DESCRIPTION
    assert llm.calls == []


def test_non_string_medication_fails() -> None:
    llm = FakeLLMClient(completion=make_completion("ok"))
    with pytest.raises(PredictionValidationError) as exc_info:
        _call(llm, medication=["ibuprofen"])

    assert exc_info.value.field == "medication"
    assert exc_info.value.message == "Medication must be a string if provided"
    assert llm.calls == []


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (0, 0),
        (150, 150),
        ("45", 45),
        (" 45 ", 45),
        ("45 years", 45),
        (45.9, 45),
        ("-3", -3),
        ("years 45", None),
        (False, None),
    ],
)
def test_parse_age(value, expected) -> None:
    assert parse_age(value) == expected


def test_validate_trims_and_normalizes_blank_medication() -> None:
    request = validate_prediction_input(
        age="30",
        category="  headache ",
        problem_description=" throbbing pain ",
        medication="   ",
    )

    assert request.age == 30
    assert request.category == "headache"
    assert request.problem_description == "throbbing pain"
    assert request.medication is None
