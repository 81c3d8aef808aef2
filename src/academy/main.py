"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from academy.auth.router import router as auth_router
from academy.catalog.router import router as catalog_router
from academy.config import get_settings
from academy.database import close_db, init_db
from academy.enrollment.router import router as enrollment_router
from academy.feed.router import router as feed_router
from academy.health.router import router as health_router
from academy.middleware import setup_middleware
from academy.pairing.router import router as pairing_router
from academy.payments.router import router as payments_router
from academy.redis_client import close_redis, init_redis
from academy.submissions.router import router as submissions_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    if settings.document_store_backend == "sql":
        await init_db(settings.database_url, create_tables=True)
    if settings.redis_url:
        await init_redis(settings.redis_url, max_connections=settings.redis_max_connections)
    logger.info(
        "app_started",
        environment=settings.environment,
        document_store=settings.document_store_backend,
    )

    yield

    await close_db()
    await close_redis()
    logger.info("app_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Academy of Curiosity API",
        description="Challenges, accountability partners, and a community of published essays",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(catalog_router)
    app.include_router(enrollment_router)
    app.include_router(payments_router)
    app.include_router(pairing_router)
    app.include_router(submissions_router)
    app.include_router(feed_router)

    return app


app = create_app()
