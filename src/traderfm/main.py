# src/traderfm/main.py
"""Main entry point for the TraderFM application."""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from traderfm.api.v1 import (
    answers_router,
    auth_router,
    questions_router,
    stats_router,
    system_router,
    users_router,
)
from traderfm.api.v1.dependencies import enforce_global_rate_limit
from traderfm.core.errors import AppError, RateLimited, ValidationError
from traderfm.core.logging import RecentLogBuffer, configure_logging
from traderfm.core.settings import settings
from traderfm.db.session import create_tables
from traderfm.db.time import utcnow

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="TraderFM API",
    description="Anonymous Q&A: ask any handle, answers are public",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers; every API route counts against the caller's global window.
_api_dependencies = [Depends(enforce_global_rate_limit)]
app.include_router(users_router, prefix="/api/v1", dependencies=_api_dependencies)
app.include_router(auth_router, prefix="/api/v1", dependencies=_api_dependencies)
app.include_router(questions_router, prefix="/api/v1", dependencies=_api_dependencies)
app.include_router(answers_router, prefix="/api/v1", dependencies=_api_dependencies)
app.include_router(stats_router, prefix="/api/v1", dependencies=_api_dependencies)
app.include_router(system_router, prefix="/api/v1", dependencies=_api_dependencies)


def _format_request_errors(exc: RequestValidationError) -> list[str]:
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return messages


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    content: dict[str, object] = {"detail": exc.detail}
    headers: dict[str, str] | None = None
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    if isinstance(exc, RateLimited):
        headers = {"Retry-After": str(exc.retry_after)}
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            {"detail": "Validation failed", "errors": _format_request_errors(exc)}
        ),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    if settings.auto_create_tables:
        create_tables()
    buffer = RecentLogBuffer(capacity=settings.log_buffer_capacity)
    buffer.install("traderfm")
    app.state.log_buffer = buffer
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    buffer: RecentLogBuffer | None = getattr(app.state, "log_buffer", None)
    if buffer:
        buffer.uninstall()
    app.state.log_buffer = None


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok", "timestamp": utcnow().isoformat()}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "TraderFM API",
        "version": settings.app_version,
        "description": "Anonymous Q&A: ask any handle, answers are public",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("traderfm.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
