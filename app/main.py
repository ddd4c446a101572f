from __future__ import annotations

from fastapi import FastAPI

from app.api.exception_handlers import register_exception_handlers
from app.api.schemas import HealthOut
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMetricsMiddleware, metrics_router
from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.core.settings import get_settings
from app.predictions.router import router as predictions_router

setup_logging()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Health Prediction API",
        description=(
            "Short, plain-language health explanations generated by a hosted LLM.\n\n"
            "Design principles:\n"
            "- Inputs are validated before any call to the model.\n"
            "- Upstream LLM failures are returned as results, not HTTP errors.\n"
            "- Nothing is stored; logs and metrics carry metadata only (no PHI)."
        ),
        docs_url="/swagger",
        redoc_url="/docs",
        debug=settings.is_development,
        openapi_tags=[
            {
                "name": "health",
                "description": (
                    "Basic uptime and readiness checks for load balancers and monitoring."
                ),
            },
            {
                "name": "predictions",
                "description": "Generate a short explanation from age, symptoms and medication.",
            },
            {
                "name": "metrics",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the API process is running.\n\n"
            "This endpoint intentionally does not call the LLM so it can be used safely "
            "for basic uptime checks."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok")

    app.include_router(metrics_router)
    app.include_router(predictions_router)
    return app


app = create_app()
