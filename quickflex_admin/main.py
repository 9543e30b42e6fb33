"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from quickflex_admin.api.v1.endpoints import health
from quickflex_admin.api.v1.router import api_router
from quickflex_admin.core.config import Settings, get_settings
from quickflex_admin.core.database import DatabaseClient, close_database, init_database
from quickflex_admin.core.exceptions import (
    AppError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from quickflex_admin.utils.logging import get_logger
from quickflex_admin.utils.responses import create_error_detail

LOGGER = get_logger(__name__, level=get_settings().log_level)


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    db_client: DatabaseClient = app.state.db_client

    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )

    try:
        await asyncio.wait_for(
            init_database(db_client, create_tables=True),
            timeout=settings.db_init_timeout,
        )
        LOGGER.info("Database initialized successfully")
    except asyncio.TimeoutError:
        LOGGER.error(f"Database initialization timed out after {settings.db_init_timeout}s")
    except Exception as e:
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    LOGGER.info("Shutting down application")
    await close_database(db_client)


_ERROR_STATUS = (
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Not Found"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "Validation Error"),
    (DatabaseError, status.HTTP_500_INTERNAL_SERVER_ERROR, "Storage Error"),
)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map application errors to problem-details responses."""
    status_code, title = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"
    for error_cls, code, error_title in _ERROR_STATUS:
        if isinstance(exc, error_cls):
            status_code, title = code, error_title
            break

    if isinstance(exc, DatabaseError) or status_code >= 500:
        # Storage details stay in the logs
        LOGGER.error(
            f"{exc.message}: {exc.original_error}",
            exc_info=exc.original_error or exc,
            extra={"path": request.url.path, "error_type": exc.error_type},
        )
        detail = exc.message if isinstance(exc, DatabaseError) else "Internal server error"
    else:
        LOGGER.info(f"{title} on {request.url.path}: {exc.message}")
        detail = exc.message

    error = create_error_detail(
        title=title,
        status=status_code,
        detail=detail,
        error_type=exc.error_type,
        request=request,
    )
    return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as validation errors."""
    fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
    error = create_error_detail(
        title="Validation Error",
        status=status.HTTP_400_BAD_REQUEST,
        detail=f"Invalid request fields: {', '.join(fields)}" if fields else "Invalid request",
        error_type=ValidationError.error_type,
        request=request,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.model_dump(mode="json"))


def create_app(
    settings: Optional[Settings] = None,
    db_client: Optional[DatabaseClient] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Application settings; defaults to the process settings
        db_client: Database client to serve requests with; built from
            settings when omitted

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Administrative backend for driver onboarding records",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db_client = db_client or DatabaseClient.from_settings(settings)

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
        request.state.correlation_id = correlation_id
        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    # CORS middleware - added last to ensure it wraps all other middleware/responses
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    app.include_router(health.router, prefix="/health", tags=["Health"])

    @app.get(
        "/",
        response_model=RootResponse,
        tags=["Root"],
        summary="Root endpoint",
        operation_id="get_public_root_metadata",
    )
    async def root() -> RootResponse:
        return RootResponse(
            message=f"{settings.app_name} is running.",
            version=settings.app_version,
            docs="/docs",
            health="/health",
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "quickflex_admin.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
