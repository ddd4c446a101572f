from __future__ import annotations

from app.predictions.schemas import PredictionRequest

NO_MEDICATION = "None"


def build_prediction_prompt(request: PredictionRequest) -> str:
    """
    Render the single user message sent to the model.

    The request is expected to be validated already (trimmed, non-empty fields).
    """

    medication = request.medication or NO_MEDICATION
    return (
        f"Predict the health sum-up for a {request.age}-year-old with {request.category} "
        f"symptoms. Problem description: {request.problem_description}. "
        f"Medication: {medication}. Provide a short, simple explanation."
    )
