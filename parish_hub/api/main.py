"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from parish_hub.api.errors import add_exception_handlers
from parish_hub.api.middleware import MetricsMiddleware, RequestIDMiddleware
from parish_hub.api.v1 import attendance, branches, card_scanner, cards, devices, finances, members, transfers
from parish_hub.config import settings
from parish_hub.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_schema:
        from parish_hub.infrastructure.database.session import init_schema

        init_schema()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Parish Hub",
        description="Branch administration, attendance, card check-in, transfers and finances",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    add_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(branches.router, prefix="/v1", tags=["branches"])
    app.include_router(transfers.router, prefix="/v1", tags=["transfers"])
    app.include_router(members.router, prefix="/v1", tags=["members"])
    app.include_router(attendance.router, prefix="/v1", tags=["attendance"])
    app.include_router(cards.router, prefix="/v1", tags=["cards"])
    app.include_router(devices.router, prefix="/v1", tags=["devices"])
    app.include_router(card_scanner.router, prefix="/v1", tags=["card-scanner"])
    app.include_router(finances.router, prefix="/v1", tags=["finances"])

    return app


app = create_app()
