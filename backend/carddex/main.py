"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from carddex.api import api_router
from carddex.core.config import settings
from carddex.core.exceptions import (
    CollaboratorUnavailableError,
    GraceDayConflictError,
    InvalidStateError,
    NotFoundError,
    ProgressionError,
)
from carddex.core.logging import setup_logging
from carddex.services.progression import catalog

# Setup logging
setup_logging()
logger = structlog.get_logger()

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (GraceDayConflictError, 409),
    (InvalidStateError, 422),
    (CollaboratorUnavailableError, 503),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup and shutdown events.
    """
    logger.info(
        "Starting CardDex Progression API",
        version="1.0.0",
        debug=settings.api_debug,
        badges=catalog.total_badge_count(),
        grace_days_per_week=settings.grace_days_per_week,
    )

    yield

    logger.info("Shutting down CardDex Progression API")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="CardDex progression - badges, progress and collecting streaks",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.exception_handler(ProgressionError)
async def progression_exception_handler(request: Request, exc: ProgressionError):
    """Map engine errors to HTTP status codes."""
    status_code = 500
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status_code = code
            break

    log = logger.error if status_code >= 500 else logger.info
    log(
        "Progression request failed",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
        status=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


# Include API routes with /api prefix
app.include_router(api_router, prefix="/api")


# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(
        "Request",
        method=request.method,
        path=request.url.path,
    )
    response = await call_next(request)
    logger.debug(
        "Response",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "carddex.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
