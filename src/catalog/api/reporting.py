"""FastAPI endpoints for inventory reports and catalog search."""

from fastapi import APIRouter, Query

from catalog.api.schemas import (
    CategoryResponse,
    CategorySearchResponse,
    ProductResponse,
    ProductSearchResponse,
    SuggestionsResponse,
)
from catalog.reports.inventory_reports import InventoryReports
from catalog.search.catalog_search import CatalogSearch

report_router = APIRouter(prefix="/reports", tags=["reports"])
search_router = APIRouter(prefix="/search", tags=["search"])


# --- Reports ---


@report_router.get("/low-stock")
async def low_stock_report(threshold: int | None = None) -> dict:
    return InventoryReports().low_stock(threshold=threshold)


@report_router.get("/reorder")
async def reorder_report() -> dict:
    return InventoryReports().reorder()


@report_router.get("/inventory-valuation")
async def inventory_valuation_report() -> dict:
    return InventoryReports().valuation()


@report_router.get("/inventory-summary")
async def inventory_summary_report() -> dict:
    return InventoryReports().summary()


# --- Search ---


@search_router.get("/products", response_model=ProductSearchResponse)
async def search_products(q: str = Query(..., min_length=1)) -> ProductSearchResponse:
    products = CatalogSearch().search_products(q)
    return ProductSearchResponse(count=len(products), items=[ProductResponse.from_aggregate(p) for p in products])


@search_router.get("/categories", response_model=CategorySearchResponse)
async def search_categories(q: str = Query(..., min_length=1)) -> CategorySearchResponse:
    categories = CatalogSearch().search_categories(q)
    return CategorySearchResponse(
        count=len(categories), items=[CategoryResponse.from_aggregate(c) for c in categories]
    )


@search_router.get("/suggestions", response_model=SuggestionsResponse)
async def search_suggestions(prefix: str = Query(..., min_length=1)) -> SuggestionsResponse:
    return SuggestionsResponse(suggestions=CatalogSearch().suggestions(prefix))
