"""Catalog FastAPI application.

Serves the product catalog over HTTP; commands are processed synchronously
inside the catalog domain context pushed for each request.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os
import uuid

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from catalog/domain.toml.
from catalog.domain import catalog  # noqa: E402
from catalog.utils.logging import add_context, clear_context
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

catalog.init()

API_PREFIX = "/api/v1"


def _allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Catalog API",
    description="Products, variants, categories, inventory, search and reports",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the catalog domain context and bind request details to the log context."""
    add_context(request_id=request.headers.get("x-request-id", str(uuid.uuid4())), path=request.url.path)
    try:
        with catalog.domain_context():
            response = await call_next(request)
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers, error handlers and rate limiting
# ---------------------------------------------------------------------------
from catalog.api import (  # noqa: E402
    category_router,
    product_router,
    register_error_handlers,
    register_rate_limiting,
    report_router,
    search_router,
    variant_router,
)

for router in (product_router, variant_router, category_router, search_router, report_router):
    app.include_router(router, prefix=API_PREFIX)

register_error_handlers(app)
register_rate_limiting(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": catalog.name})
