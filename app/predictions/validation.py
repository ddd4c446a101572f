"""Input validation for prediction requests.

Runs before any network activity: a request that fails here never reaches the LLM.
"""

from __future__ import annotations

import math
import re
from enum import StrEnum
from typing import Any

from app.domain.exceptions import BusinessValidationError
from app.predictions.schemas import PredictionRequest

MIN_AGE = 0
MAX_AGE = 150

# Leading optionally-signed integer, e.g. "45", " 45 ", "45 years".
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class ValidationReason(StrEnum):
    INVALID_AGE = "invalid_age"
    EMPTY_CATEGORY = "empty_category"
    EMPTY_PROBLEM_DESCRIPTION = "empty_problem_description"
    INVALID_MEDICATION = "invalid_medication"


_MESSAGES: dict[ValidationReason, str] = {
    ValidationReason.INVALID_AGE: f"Age must be a valid number between {MIN_AGE} and {MAX_AGE}",
    ValidationReason.EMPTY_CATEGORY: "Category must be a non-empty string",
    ValidationReason.EMPTY_PROBLEM_DESCRIPTION: "Problem description must be a non-empty string",
    ValidationReason.INVALID_MEDICATION: "Medication must be a string if provided",
}


class PredictionValidationError(BusinessValidationError):
    """Raised when a prediction input is invalid. Identifies the offending field."""

    def __init__(self, *, field: str, reason: ValidationReason):
        super().__init__(_MESSAGES[reason], field=field)
        self.reason = reason


def parse_age(value: Any) -> int | None:
    """Return `value` as an int, or None if it does not parse.

    Floats are truncated and strings are read up to the first non-digit.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return None
        return int(match.group(1))
    return None


def _non_empty(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def validate_prediction_input(
    *,
    age: Any,
    category: Any,
    problem_description: Any,
    medication: Any = None,
) -> PredictionRequest:
    """Validate raw caller input and return a normalized `PredictionRequest`.

    Strings are trimmed; an absent or blank medication becomes None.
    """

    parsed_age = parse_age(age)
    if parsed_age is None or not MIN_AGE <= parsed_age <= MAX_AGE:
        raise PredictionValidationError(field="age", reason=ValidationReason.INVALID_AGE)

    clean_category = _non_empty(category)
    if clean_category is None:
        raise PredictionValidationError(field="category", reason=ValidationReason.EMPTY_CATEGORY)

    clean_problem = _non_empty(problem_description)
    if clean_problem is None:
        raise PredictionValidationError(
            field="problem_description", reason=ValidationReason.EMPTY_PROBLEM_DESCRIPTION
        )

    if medication and not isinstance(medication, str):
        raise PredictionValidationError(
            field="medication", reason=ValidationReason.INVALID_MEDICATION
        )

    return PredictionRequest(
        age=parsed_age,
        category=clean_category,
        problem_description=clean_problem,
        medication=_non_empty(medication),
    )
