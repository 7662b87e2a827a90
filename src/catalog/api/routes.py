"""FastAPI endpoints for products, variants, inventory and categories."""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from catalog.api.schemas import (
    AdjustInventoryRequest,
    AdjustInventoryResponse,
    AdjustmentResult,
    CategoryDetailResponse,
    CategoryIdResponse,
    CategoryListResponse,
    CategoryResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    CreateVariantRequest,
    InventoryResponse,
    ProductIdResponse,
    ProductListResponse,
    ProductResponse,
    ReleaseInventoryRequest,
    ReserveInventoryRequest,
    SetInventoryRequest,
    StatusResponse,
    UpdateCategoryRequest,
    UpdateProductRequest,
    UpdateVariantRequest,
    VariantIdResponse,
    VariantListResponse,
    VariantResponse,
)
from catalog.category.category import Category
from catalog.category.management import CreateCategory, DeleteCategory, UpdateCategory
from catalog.inventory.inventory import Inventory
from catalog.inventory.ledger import (
    AdjustInventory,
    EnsureInventory,
    ReleaseInventory,
    ReserveInventory,
    SetInventory,
)
from catalog.product.management import CreateProduct, DeleteProduct, UpdateProduct
from catalog.product.product import Product
from catalog.variant.management import CreateVariant, DeleteVariant, UpdateVariant
from catalog.variant.variant import Variant

product_router = APIRouter(prefix="/products", tags=["products"])
variant_router = APIRouter(prefix="/variants", tags=["variants"])
category_router = APIRouter(prefix="/categories", tags=["categories"])

SORT_ORDER_PATTERN = "^(asc|desc)$"


def _dumps(value):
    return json.dumps(value) if value is not None else None


def _variant_with_inventory(variant):
    inventory = current_domain.repository_for(Inventory).find_for_variant(variant.id)
    return VariantResponse.from_aggregate(variant, inventory)


def _inventory_for(variant_id) -> InventoryResponse:
    inventory = current_domain.repository_for(Inventory).find_for_variant(variant_id)
    return InventoryResponse.from_aggregate(inventory)


# --- Product endpoints ---


@product_router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = 1,
    limit: int = 10,
    sort: str = "created_at",
    order: str = Query("desc", pattern=SORT_ORDER_PATTERN),
    category: str | None = None,
    featured: bool | None = None,
    active: bool | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
) -> ProductListResponse:
    result = current_domain.repository_for(Product).list_products(
        category=category,
        featured=featured,
        active=active,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return ProductListResponse(
        items=[ProductResponse.from_aggregate(p) for p in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        description=body.description,
        sku=body.sku,
        base_price=body.base_price,
        discount_percent=body.discount_percent,
        categories=json.dumps(body.categories),
        tags=json.dumps(body.tags),
        attributes=json.dumps(body.attributes),
        active=body.active,
        featured=body.featured,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{id_or_slug}", response_model=ProductResponse)
async def get_product(id_or_slug: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get_by_id_or_slug(id_or_slug)
    variants = current_domain.repository_for(Variant).for_product(product.id)
    return ProductResponse.from_aggregate(product, variants=[_variant_with_inventory(v) for v in variants])


@product_router.put("/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        sku=body.sku,
        base_price=body.base_price,
        discount_percent=body.discount_percent,
        categories=_dumps(body.categories),
        tags=_dumps(body.tags),
        attributes=_dumps(body.attributes),
        active=body.active,
        featured=body.featured,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.get("/{product_id}/variants", response_model=VariantListResponse)
async def list_variants(product_id: str) -> VariantListResponse:
    current_domain.repository_for(Product).get(product_id)
    variants = current_domain.repository_for(Variant).for_product(product_id)
    return VariantListResponse(count=len(variants), items=[_variant_with_inventory(v) for v in variants])


@product_router.post("/{product_id}/variants", status_code=201, response_model=VariantIdResponse)
async def create_variant(product_id: str, body: CreateVariantRequest) -> VariantIdResponse:
    opening = body.initial_inventory
    command = CreateVariant(
        product_id=product_id,
        sku=body.sku,
        name=body.name,
        attributes=json.dumps(body.attributes),
        price_difference=body.price_difference,
        active=body.active,
        initial_quantity=opening.quantity if opening else None,
        low_stock_threshold=opening.low_stock_threshold if opening else None,
        reorder_point=opening.reorder_point if opening else None,
        reorder_quantity=opening.reorder_quantity if opening else None,
        warehouse_location=opening.warehouse_location if opening else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return VariantIdResponse(variant_id=result)


# --- Variant endpoints ---


@variant_router.get("/{variant_id}", response_model=VariantResponse)
async def get_variant(variant_id: str) -> VariantResponse:
    variant = current_domain.repository_for(Variant).get(variant_id)
    return _variant_with_inventory(variant)


@variant_router.put("/{variant_id}", response_model=StatusResponse)
async def update_variant(variant_id: str, body: UpdateVariantRequest) -> StatusResponse:
    command = UpdateVariant(
        variant_id=variant_id,
        sku=body.sku,
        name=body.name,
        attributes=_dumps(body.attributes),
        price_difference=body.price_difference,
        active=body.active,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@variant_router.delete("/{variant_id}", response_model=StatusResponse)
async def delete_variant(variant_id: str) -> StatusResponse:
    current_domain.process(DeleteVariant(variant_id=variant_id), asynchronous=False)
    return StatusResponse()


# --- Inventory endpoints ---


@variant_router.get("/{variant_id}/inventory", response_model=InventoryResponse)
async def get_inventory(variant_id: str) -> InventoryResponse:
    """Fetch the variant's inventory, opening an empty record if none exists."""
    current_domain.process(EnsureInventory(variant_id=variant_id), asynchronous=False)
    return _inventory_for(variant_id)


@variant_router.put("/{variant_id}/inventory", response_model=InventoryResponse)
async def set_inventory(variant_id: str, body: SetInventoryRequest) -> InventoryResponse:
    command = SetInventory(
        variant_id=variant_id,
        quantity=body.quantity,
        reserved=body.reserved,
        low_stock_threshold=body.low_stock_threshold,
        reorder_point=body.reorder_point,
        reorder_quantity=body.reorder_quantity,
        warehouse_location=body.warehouse_location,
    )
    current_domain.process(command, asynchronous=False)
    return _inventory_for(variant_id)


@variant_router.patch("/{variant_id}/inventory/adjust", response_model=AdjustInventoryResponse)
async def adjust_inventory(variant_id: str, body: AdjustInventoryRequest) -> AdjustInventoryResponse:
    command = AdjustInventory(variant_id=variant_id, adjustment=body.adjustment, reason=body.reason)
    result = current_domain.process(command, asynchronous=False)
    return AdjustInventoryResponse(adjustment=AdjustmentResult(**result), inventory=_inventory_for(variant_id))


@variant_router.patch("/{variant_id}/inventory/reserve", response_model=InventoryResponse)
async def reserve_inventory(variant_id: str, body: ReserveInventoryRequest) -> InventoryResponse:
    command = ReserveInventory(variant_id=variant_id, quantity=body.quantity, reference=body.reference)
    current_domain.process(command, asynchronous=False)
    return _inventory_for(variant_id)


@variant_router.patch("/{variant_id}/inventory/release", response_model=InventoryResponse)
async def release_inventory(variant_id: str, body: ReleaseInventoryRequest) -> InventoryResponse:
    command = ReleaseInventory(variant_id=variant_id, quantity=body.quantity, reference=body.reference)
    current_domain.process(command, asynchronous=False)
    return _inventory_for(variant_id)


# --- Category endpoints ---


@category_router.get("", response_model=CategoryListResponse)
async def list_categories(
    page: int = 1,
    limit: int = 10,
    sort: str = "name",
    order: str = Query("asc", pattern=SORT_ORDER_PATTERN),
    active: bool | None = None,
    parent: str | None = Query(None, description='Parent category id, or "null" for root categories'),
) -> CategoryListResponse:
    roots_only = parent == "null"
    result = current_domain.repository_for(Category).list_categories(
        active=active,
        parent_id=None if roots_only else parent,
        roots_only=roots_only,
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return CategoryListResponse(
        items=[CategoryResponse.from_aggregate(c) for c in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@category_router.post("", status_code=201, response_model=CategoryIdResponse)
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    command = CreateCategory(
        name=body.name,
        description=body.description,
        parent_category_id=body.parent_category_id,
        active=body.active,
    )
    result = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=result)


@category_router.get("/{id_or_slug}", response_model=CategoryDetailResponse)
async def get_category(id_or_slug: str) -> CategoryDetailResponse:
    repo = current_domain.repository_for(Category)
    category = repo.get_by_id_or_slug(id_or_slug)

    parent = None
    if category.parent_category_id:
        parent = CategoryResponse.from_aggregate(repo.get(category.parent_category_id))

    return CategoryDetailResponse(
        **CategoryResponse.from_aggregate(category).model_dump(),
        parent=parent,
        subcategories=[CategoryResponse.from_aggregate(c) for c in repo.children_of(category.id)],
    )


@category_router.put("/{category_id}", response_model=StatusResponse)
async def update_category(category_id: str, body: UpdateCategoryRequest) -> StatusResponse:
    clear_parent = "parent_category_id" in body.model_fields_set and body.parent_category_id is None
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        active=body.active,
        parent_category_id=body.parent_category_id,
        clear_parent=clear_parent,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@category_router.delete("/{category_id}", response_model=StatusResponse)
async def delete_category(category_id: str) -> StatusResponse:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return StatusResponse()
