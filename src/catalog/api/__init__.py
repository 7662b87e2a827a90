"""Catalog API package."""

from catalog.api.errors import register_error_handlers
from catalog.api.rate_limit import build_limiter, register_rate_limiting
from catalog.api.reporting import report_router, search_router
from catalog.api.routes import category_router, product_router, variant_router

__all__ = [
    "product_router",
    "variant_router",
    "category_router",
    "report_router",
    "search_router",
    "register_error_handlers",
    "register_rate_limiting",
    "build_limiter",
]
