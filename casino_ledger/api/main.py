"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from casino_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from casino_ledger.api.v1 import accounts, bank, games, stocks
from casino_ledger.infrastructure.observability.logging import setup_logging
from casino_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Casino Ledger",
        description="Accounting core for wagers, lending and simulated stock trading",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(games.router, prefix="/v1", tags=["games"])
    app.include_router(bank.router, prefix="/v1", tags=["bank"])
    app.include_router(stocks.router, prefix="/v1", tags=["stocks"])

    return app


app = create_app()
