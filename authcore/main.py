"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from authcore.application.exceptions import ApplicationError
from authcore.domain.exceptions import DomainException
from authcore.infrastructure.cache.memory_cache import InMemoryCache
from authcore.infrastructure.cache.redis_cache import RedisCache
from authcore.infrastructure.config.settings import Settings, get_settings
from authcore.infrastructure.system_clock import SystemClock
from authcore.presentation.api.v1 import auth
from authcore.presentation.exception_handlers import (
    application_error_handler,
    domain_exception_handler,
    generic_exception_handler,
    validation_error_handler,
)

logger = logging.getLogger(__name__)


def build_cache(settings: Settings) -> InMemoryCache | RedisCache:
    """Create the shared session cache selected by ``cache_backend``."""
    if settings.cache_backend == "memory":
        logger.warning("Using in-memory session cache; do not run more than one worker")
        return InMemoryCache(SystemClock())
    return RedisCache.from_url(
        settings.redis_url, operation_timeout=settings.cache_timeout_seconds
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.cache = build_cache(settings)
    try:
        yield
    finally:
        await app.state.cache.close()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Session and token security service: registration, login, "
        "refresh-token rotation, revocation and login rate limiting",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ApplicationError and DomainException cover every raised error kind
    app.add_exception_handler(ApplicationError, application_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DomainException, domain_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(auth.router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "message": settings.app_name,
            "status": "running",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    return app
