"""FastAPI application factory"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from sincro_dashboard.api.middleware import RequestIDMiddleware, MetricsMiddleware
from sincro_dashboard.api.v1 import clients, contracts, dashboard, postal_codes, receivables, reports, users
from sincro_dashboard.infrastructure.database.session import init_db
from sincro_dashboard.infrastructure.observability.logging import setup_logging
from sincro_dashboard.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Sincro Dashboard",
        description="Clients, installation contracts, warranties and receivables for accessibility equipment",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
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
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])
    app.include_router(clients.router, prefix="/v1", tags=["clients"])
    app.include_router(contracts.router, prefix="/v1", tags=["contracts"])
    app.include_router(receivables.router, prefix="/v1", tags=["receivables"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(users.router, prefix="/v1", tags=["users"])
    app.include_router(postal_codes.router, prefix="/v1", tags=["postal-codes"])

    return app


app = create_app()
