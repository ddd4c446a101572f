from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PredictionRequest(BaseModel):
    """Validated, normalized prediction input (see `validation.validate_prediction_input`)."""

    age: int = Field(ge=0, le=150)
    category: str = Field(min_length=1)
    problem_description: str = Field(min_length=1)
    medication: str | None = None


class PredictionIn(BaseModel):
    """HTTP request body. Values are checked by the prediction validator, not here."""

    age: Any = Field(
        default=None,
        description="Patient age in years (0-150). Numeric strings are accepted.",
        examples=[45],
    )
    category: Any = Field(
        default=None,
        description="Symptom category.",
        examples=["chronic pain"],
    )
    problem_description: Any = Field(
        default=None,
        description="Free-text description of the problem.",
        examples=["persistent lower back pain for 3 months"],
    )
    medication: Any = Field(
        default=None,
        description="Current medication, if any.",
        examples=["naproxen"],
    )


class PredictionMetadata(BaseModel):
    model: str | None = None
    usage: dict[str, Any] | None = None
    created: int | None = None


class PredictionOut(BaseModel):
    """Structured successful prediction."""

    prediction: str
    full_response: dict[str, Any]
    metadata: PredictionMetadata


class PredictionErrorOut(BaseModel):
    """Structured failure: either a remote error or an empty completion."""

    error: str
    status: int | None = None
    details: Any = None
    message: str | None = None
    response: dict[str, Any] | None = None


class PredictionTextOut(BaseModel):
    """Plain-mode HTTP response wrapper."""

    # Keeps structured results from collapsing into this shape in union responses.
    model_config = ConfigDict(extra="forbid")

    prediction: str


PredictionResult = str | PredictionOut | PredictionErrorOut
