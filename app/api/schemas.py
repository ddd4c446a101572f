from __future__ import annotations

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Liveness response. Does not reflect LLM availability."""

    status: str = Field(
        description="`ok` when the API process is up and serving requests.",
        examples=["ok"],
    )
