"""
Exception handlers.

Maps the service error hierarchy onto HTTP statuses so every failure
reaches the client as {error, message, details}.
"""

import logging

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from wing.services.base import (
    EmptySeriesError,
    ExternalAPIError,
    GraphNotFoundError,
    InsufficientHistoryError,
    InvalidArgumentError,
    NoDataError,
    ResolutionFailedError,
    ServiceError,
)

logger = logging.getLogger(__name__)

# Checked in order; first match wins.
STATUS_BY_ERROR = (
    (InvalidArgumentError, 400),
    (InsufficientHistoryError, 422),
    (EmptySeriesError, 404),
    (NoDataError, 404),
    (GraphNotFoundError, 404),
    (ResolutionFailedError, 502),
    (ExternalAPIError, 502),
)


def status_for(exc: ServiceError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def register_error_handlers(app: FastAPI) -> None:
    """Register the service error handler on the FastAPI app."""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        status = status_for(exc)
        if status >= 500:
            logger.error(f"{request.method} {request.url.path} -> {status}: {exc}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {status}: {exc}")

        return JSONResponse(
            status_code=status,
            content={
                "error": type(exc).__name__,
                "message": exc.message,
                "details": exc.details,
            },
        )
