from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.juris.api.middlewares import logging_context_middleware
from src.juris.api.v1.router import api_router
from src.juris.core.config import get_settings
from src.juris.core.db import dispose_engine
from src.juris.core.exceptions import setup_exception_handlers
from src.juris.core.health import setup_health_endpoint
from src.juris.core.logging import get_logger, setup_logging
from src.juris.core.redis import close_redis

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info(f"Starting {settings.app_name}", env=settings.app_env)

    yield

    logger.info("Closing connections...")
    await close_redis()
    await dispose_engine()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "admin", "description": "Tenant onboarding, updates and deletion"},
    {"name": "records", "description": "Tenant-scoped records of every catalog table"},
    {"name": "health", "description": "Dependency health"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Schema-per-tenant data layer for legal practice management",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)

    # Registration order is inverse of execution: correlation id must run first
    app.middleware("http")(logging_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(api_router)
    setup_health_endpoint(app)

    return app


app = create_app()
