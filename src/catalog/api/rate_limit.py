"""Per-client request rate limiting.

Every route shares one default limit keyed by the client address. The
limit is read from the environment:

- ``RATE_LIMIT_MAX``: requests allowed per window (default 100)
- ``RATE_LIMIT_WINDOW``: window length in milliseconds (default 900000, 15 minutes)

Requests over the limit get a 429 in the usual failure envelope.
"""

import os

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from catalog.api.errors import error_body

logger = structlog.get_logger(__name__)

RATE_LIMITED = "RateLimitExceeded"
RATE_LIMITED_MESSAGE = "Too many requests, please try again later"

DEFAULT_MAX_REQUESTS = 100
DEFAULT_WINDOW_MS = 15 * 60 * 1000


def build_limiter(max_requests: int | None = None, window_ms: int | None = None) -> Limiter:
    if max_requests is None:
        max_requests = int(os.getenv("RATE_LIMIT_MAX", DEFAULT_MAX_REQUESTS))
    if window_ms is None:
        window_ms = int(os.getenv("RATE_LIMIT_WINDOW", DEFAULT_WINDOW_MS))

    # Limit strings are second-grained
    window_seconds = max(1, window_ms // 1000)
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{max_requests} per {window_seconds} seconds"],
    )


def rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # Called synchronously by SlowAPIMiddleware, so this must not be a coroutine
    logger.warning("rate_limit_exceeded", path=request.url.path, client=get_remote_address(request))
    return JSONResponse(status_code=429, content=error_body(RATE_LIMITED, RATE_LIMITED_MESSAGE))


def register_rate_limiting(app: FastAPI, limiter: Limiter | None = None) -> Limiter:
    """Attach a limiter to ``app`` and apply its default limit to every route."""
    limiter = limiter or build_limiter()
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded)
    return limiter
