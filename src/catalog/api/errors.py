"""Translate catalog error kinds into HTTP responses.

This is the only place a domain error becomes a status code. Failure
bodies share one shape: ``{"success": false, "error": {"kind", "message"}}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from catalog.shared.errors import (
    DUPLICATE_KEY,
    INSUFFICIENT_AVAILABLE,
    INVALID_ADJUSTMENT,
    NOT_FOUND,
    OVER_RELEASE,
    REFERENTIAL_CONFLICT,
    VALIDATION_ERROR,
    error_kind,
    error_message,
)

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    NOT_FOUND: 404,
    VALIDATION_ERROR: 400,
    INVALID_ADJUSTMENT: 400,
    INSUFFICIENT_AVAILABLE: 400,
    OVER_RELEASE: 400,
    DUPLICATE_KEY: 400,
    REFERENTIAL_CONFLICT: 400,
}

INTERNAL_ERROR = "InternalError"
INTERNAL_ERROR_MESSAGE = "Server Error"


def error_body(kind: str, message: str) -> dict:
    return {"success": False, "error": {"kind": kind, "message": message}}


async def _handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
    kind = error_kind(exc)
    status_code = STATUS_BY_KIND[kind]
    message = error_message(exc)

    logger.warning(
        "Request failed",
        kind=kind,
        status_code=status_code,
        path=request.url.path,
        method=request.method,
        error=message,
    )
    return JSONResponse(status_code=status_code, content=error_body(kind, message))


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content=error_body(INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE))


def register_error_handlers(app: FastAPI) -> None:
    """Install the error-kind handlers on ``app``.

    Subclasses of ``ValidationError`` carry their own kind, so one handler
    covers the whole family.
    """
    app.add_exception_handler(ObjectNotFoundError, _handle_domain_error)
    app.add_exception_handler(ValidationError, _handle_domain_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
