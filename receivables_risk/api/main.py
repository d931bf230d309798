"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from receivables_risk.api.middleware import RequestIDMiddleware, MetricsMiddleware
from receivables_risk.api.v1 import portfolios, query
from receivables_risk.infrastructure.observability.logging import setup_logging
from receivables_risk.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Receivables Risk Service",
        description="Client credit-risk scoring and chat context for accounts receivable",
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

    app.include_router(portfolios.router, prefix="/v1", tags=["portfolios"])
    app.include_router(query.router, prefix="/v1", tags=["query"])

    return app


app = create_app()
