"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from receivables_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from receivables_gateway.api.v1 import debts, payments, summary
from receivables_gateway.infrastructure.observability.logging import setup_logging
from receivables_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Receivables Gateway",
        description="Debt tracking, installment schedules and payment reconciliation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(debts.router, prefix="/v1", tags=["debts"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()
