from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request

from app.core.llm.deps import get_openai_client
from app.predictions.schemas import (
    PredictionErrorOut,
    PredictionIn,
    PredictionOut,
    PredictionTextOut,
)
from app.predictions.service import PredictionService

router = APIRouter(prefix="/predictions", tags=["predictions"])
logger = logging.getLogger("app.predictions")


@router.post(
    "",
    response_model=PredictionTextOut | PredictionOut | PredictionErrorOut,
    summary="Get a health prediction",
)
async def create_prediction(
    payload: PredictionIn,
    request: Request,
    full: bool = Query(
        default=False,
        description="Return the structured result (raw response and metadata) instead of text.",
    ),
    openai_client=Depends(get_openai_client),
) -> PredictionTextOut | PredictionOut | PredictionErrorOut:
    """
    Generate a short, non-persistent explanation for the given context.

    Invalid input returns 400. Upstream LLM failures are part of the result
    (a message, or an error object when `full=true`), not an HTTP error.

    IMPORTANT (safety): neither the prompt nor the model output is logged or stored.
    """

    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    svc = PredictionService(llm_client=openai_client)
    result = await svc.get_prediction(
        payload.age,
        payload.category,
        payload.problem_description,
        payload.medication,
        return_full_response=full,
        request_id=request_id,
    )

    logger.info(
        "Prediction request handled",
        extra={"request_id": request_id, "full_response": full},
    )
    if isinstance(result, str):
        return PredictionTextOut(prediction=result)
    return result
