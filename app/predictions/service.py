from __future__ import annotations

import logging
from typing import Any, Protocol

from app.core.llm.deps import get_openai_client
from app.core.llm.openai_client import OpenAIError
from app.core.llm.schemas import ChatCompletion
from app.core.metrics import record_prediction_outcome
from app.predictions.errors import classify_error, error_message
from app.predictions.prompt import build_prediction_prompt
from app.predictions.schemas import (
    PredictionErrorOut,
    PredictionMetadata,
    PredictionOut,
    PredictionResult,
)
from app.predictions.validation import validate_prediction_input

logger = logging.getLogger("app.predictions")

# Generation parameters are fixed for every call.
MAX_TOKENS = 300
TEMPERATURE = 0.7

NO_PREDICTION_MESSAGE = "No valid prediction received from the model"
NO_PREDICTION_ERROR = "No valid prediction received"


class LLMClient(Protocol):
    @property
    def model(self) -> str: ...

    async def create_chat_completion(
        self, *, prompt: str, max_tokens: int, temperature: float
    ) -> ChatCompletion: ...


class PredictionService:
    """
    Turn patient context into a short model-generated explanation.

    Validation errors are raised to the caller. Remote failures are never raised:
    they come back as a message string or a `PredictionErrorOut`.
    """

    def __init__(self, *, llm_client: LLMClient):
        self._llm = llm_client

    async def get_prediction(
        self,
        age: Any,
        category: Any,
        problem_description: Any,
        medication: Any = None,
        *,
        return_full_response: bool = False,
        request_id: str | None = None,
    ) -> PredictionResult:
        request = validate_prediction_input(
            age=age,
            category=category,
            problem_description=problem_description,
            medication=medication,
        )
        prompt = build_prediction_prompt(request)

        try:
            completion = await self._llm.create_chat_completion(
                prompt=prompt, max_tokens=MAX_TOKENS, temperature=TEMPERATURE
            )
        except OpenAIError as exc:
            return self._handle_error(
                exc, return_full_response=return_full_response, request_id=request_id
            )

        content = completion.first_content()
        prediction = content.strip() if content else ""
        if not prediction:
            record_prediction_outcome("empty")
            logger.info(
                "LLM returned no prediction",
                extra={"request_id": request_id, "model": completion.model},
            )
            if return_full_response:
                return PredictionErrorOut(
                    error=NO_PREDICTION_ERROR,
                    response=completion.model_dump(exclude_unset=True),
                )
            return NO_PREDICTION_MESSAGE

        record_prediction_outcome("success")
        if not return_full_response:
            return prediction
        return PredictionOut(
            prediction=prediction,
            full_response=completion.model_dump(exclude_unset=True),
            metadata=PredictionMetadata(
                model=completion.model,
                usage=completion.usage,
                created=completion.created,
            ),
        )

    def _handle_error(
        self, exc: OpenAIError, *, return_full_response: bool, request_id: str | None
    ) -> PredictionResult:
        kind = classify_error(exc)
        message = error_message(kind, exc.message)
        record_prediction_outcome(kind.value)
        # Only metadata: the upstream payload may echo the prompt.
        logger.error(
            "LLM API error: %s",
            exc.message,
            extra={
                "request_id": request_id,
                "error_kind": kind.value,
                "upstream_status": exc.status_code,
                "model": self._llm.model,
            },
        )

        if not return_full_response:
            return message
        return PredictionErrorOut(
            error=exc.message,
            status=exc.status_code,
            details=exc.details,
            message=message,
        )


async def get_prediction(
    age: Any,
    category: Any,
    problem_description: Any,
    medication: Any = None,
    *,
    return_full_response: bool = False,
) -> PredictionResult:
    """Convenience wrapper using the process-wide configured client."""
    service = PredictionService(llm_client=get_openai_client())
    return await service.get_prediction(
        age,
        category,
        problem_description,
        medication,
        return_full_response=return_full_response,
    )
