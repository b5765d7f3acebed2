"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Type
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from insurance_api.api.v1.router import api_router
from insurance_api.core.config import settings
from insurance_api.core.database import async_session_maker, close_database, init_database
from insurance_api.core.exceptions import (
    AppError,
    AuthorizationError,
    ConsistencyError,
    NotFoundError,
    TransientError,
    ValidationError,
)
from insurance_api.services.offers.offer_service import OfferService
from insurance_api.utils.logging import get_logger
from insurance_api.utils.responses import create_error_detail

LOGGER = get_logger(__name__, level=settings.log_level)

# Most specific first; AppError itself falls through to 500
ERROR_STATUS: Dict[Type[AppError], tuple] = {
    ValidationError: (status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation Failed"),
    AuthorizationError: (status.HTTP_403_FORBIDDEN, "Forbidden"),
    NotFoundError: (status.HTTP_404_NOT_FOUND, "Not Found"),
    ConsistencyError: (status.HTTP_409_CONFLICT, "Conflict"),
    TransientError: (status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable"),
}


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


async def expire_offers_periodically(interval_seconds: int) -> None:
    """Background task that expires stale offers on a fixed interval."""
    while True:
        try:
            async with async_session_maker() as session:
                expired = await OfferService(session).expire_stale_offers()
            if expired:
                LOGGER.info("Expiry sweep completed", extra={"expired": expired})
        except AppError as e:
            LOGGER.warning(f"Expiry sweep failed: {e.message}")
        except Exception as e:
            LOGGER.error(f"Expiry sweep failed: {e}", exc_info=True)

        await asyncio.sleep(interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )

    if not settings.auth.jwt_secret:
        LOGGER.error("JWT_SECRET is missing; all authenticated requests will be rejected")

    try:
        await asyncio.wait_for(
            # SQLite is only used locally; PostgreSQL schemas come from Alembic
            init_database(create_tables=settings.db.is_sqlite),
            timeout=settings.db_init_timeout,
        )
        LOGGER.info("Database initialized successfully")
    except asyncio.TimeoutError:
        LOGGER.error(f"Database initialization timed out after {settings.db_init_timeout}s")
    except Exception as e:
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

    sweep_task = None
    if settings.offers.enable_expiry_sweep:
        sweep_task = asyncio.create_task(
            expire_offers_periodically(settings.offers.expiry_sweep_seconds)
        )

    yield

    LOGGER.info("Shutting down application")

    if sweep_task is not None:
        sweep_task.cancel()
        try:
            await sweep_task
        except asyncio.CancelledError:
            LOGGER.info("Expiry sweep task cancelled")

    try:
        await close_database()
    except Exception as e:
        LOGGER.error(
            "Error closing database",
            exc_info=True,
            extra={"error": str(e)}
        )


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Insurance offer lifecycle and policy issuance service",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
    request.state.correlation_id = correlation_id
    request.state.request_id = correlation_id
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code, title = status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"
    for error_type, mapping in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            status_code, title = mapping
            break

    if status_code >= 500:
        LOGGER.error(
            f"{exc.__class__.__name__}: {exc.message}",
            extra={"path": request.url.path, "original_error": repr(exc.original_error)},
        )
        detail = exc.message if status_code == 503 else "The operation failed and was rolled back"
    else:
        LOGGER.info(
            f"{exc.__class__.__name__}: {exc.message}",
            extra={"path": request.url.path, "status_code": status_code},
        )
        detail = exc.message

    error_detail = create_error_detail(
        title=title,
        status=status_code,
        detail=detail,
        request=request,
    )
    return JSONResponse(status_code=status_code, content=error_detail.model_dump(mode="json"))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)

app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get(
    "/",
    response_model=RootResponse,
    tags=["Root"],
    summary="Root endpoint",
    description="Get basic information about the API",
    operation_id="get_public_root_metadata",
)
async def root() -> RootResponse:
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        docs="/docs",
        health=f"{settings.api_v1_prefix}/health",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "insurance_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
