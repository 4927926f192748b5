from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from local_yield.api.v1.router import router as api_v1_router
from local_yield.config.logging import setup_logging
from local_yield.config.settings import settings
from local_yield.core.error_handlers import register_exception_handlers
from local_yield.core.logging import get_logger
from local_yield.core.middleware import register_middlewares
from local_yield.core.rate_limiting import RateLimiter, RedisRateLimitBackend
from local_yield.db.init_db import init_db

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version, debug mode from Settings.
    - Registers CORS, core middleware, rate limiter and exception handlers.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS Configuration
    if settings.CORS_ORIGINS and settings.CORS_ORIGINS != ["*"]:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        # Wildcard origins cannot carry credentials
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Register shared core middlewares (request ID, timing, etc.)
    register_middlewares(app)
    register_exception_handlers(app)

    app.state.rate_limiter = RateLimiter.from_settings(settings) if settings.RATE_LIMIT_ENABLED else None

    # Mount API v1 under /api/v1
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    @app.on_event("startup")
    async def on_startup() -> None:
        # Production schemas are managed by migrations
        if not settings.is_production():
            init_db()
        logger.info(f"{settings.APP_NAME} started", extra={"environment": settings.ENVIRONMENT})

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        limiter = app.state.rate_limiter
        if limiter is not None and isinstance(limiter.backend, RedisRateLimitBackend):
            await limiter.backend.close()

    return app


app = create_app()
