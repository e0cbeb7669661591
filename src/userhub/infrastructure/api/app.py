"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with middleware, routes,
exception handlers and lifecycle handlers.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from userhub.core.config import get_settings
from userhub.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from userhub.domain.exceptions import DuplicateEmailError, MappingError, OperationFailedError
from userhub.infrastructure.api.schemas import ApiResponse
from userhub.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging and the database on startup and disposes the
    engine on shutdown.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting UserHub",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    logger.info("Shutting down UserHub")
    await close_database()
    logger.info("Database connection closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="User management API",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints.

    Args:
        app: FastAPI application instance.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        """Return 200 while the process is serving requests."""
        return {
            "status": "healthy",
            "service": "UserHub",
            "version": get_settings().app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Return 200 when the database is reachable, 503 otherwise."""
        db_healthy = await get_db_manager().check_connection()

        if db_healthy:
            return {
                "status": "ready",
                "service": "UserHub",
                "version": get_settings().app_version,
                "database": "connected",
            }
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "service": "UserHub",
                "database": "disconnected",
            },
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes.

    Args:
        app: FastAPI application instance.
    """
    from userhub.infrastructure.api.routes import users_router

    settings = get_settings()

    app.include_router(users_router, prefix=f"{settings.api_prefix}/users")

    @app.get(settings.api_prefix, tags=["root"])
    async def api_root():
        """API root endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "api_version": "v1",
        }


def _envelope(status_code: int, message: str, errors: list[str]) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse.fail(message, errors).model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Answer malformed requests with 400 and the list of problems."""
        errors = [
            f"{'.'.join(str(part) for part in error['loc'][1:]) or error['loc'][0]}: {error['msg']}"
            for error in exc.errors()
        ]
        logger.warning(
            "Invalid request",
            path=str(request.url.path),
            method=request.method,
            errors=errors,
        )
        return _envelope(status.HTTP_400_BAD_REQUEST, "Invalid input data", errors)

    @app.exception_handler(DuplicateEmailError)
    async def duplicate_email_handler(request: Request, exc: DuplicateEmailError):
        logger.warning("Email conflict", path=str(request.url.path), email=exc.email)
        return _envelope(status.HTTP_409_CONFLICT, "Duplicate email", [exc.message])

    @app.exception_handler(MappingError)
    async def mapping_error_handler(request: Request, exc: MappingError):
        logger.error(
            "Mapping configuration error",
            path=str(request.url.path),
            method=request.method,
            error=exc.message,
        )
        return _envelope(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Configuration error",
            ["Data mapping failed. Contact the administrator."],
        )

    @app.exception_handler(OperationFailedError)
    async def operation_failed_handler(request: Request, exc: OperationFailedError):
        logger.error(
            "Operation failed",
            path=str(request.url.path),
            method=request.method,
            error=exc.message,
            exc_type=type(exc).__name__,
        )
        detail = exc.message if get_settings().debug else "An unexpected error occurred"
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", [detail])

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        detail = str(exc) if get_settings().debug else "An unexpected error occurred"
        return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", [detail])


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware.

    Args:
        app: FastAPI application instance.
    """

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log each request and propagate the X-Correlation-ID header."""
        correlation_id = request.headers.get("X-Correlation-ID", f"cid_{uuid.uuid4().hex[:12]}")
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
