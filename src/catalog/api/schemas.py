"""Pydantic request/response schemas for the catalog API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Shared ---


class StatusResponse(BaseModel):
    status: str = "ok"


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


# --- Product ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Trail Running Shoe",
                    "description": "Lightweight shoe with a grippy outsole.",
                    "sku": "SHOE-TRAIL-01",
                    "base_price": 120.0,
                    "discount_percent": 10,
                    "categories": ["<category-id>"],
                    "tags": ["running", "outdoor"],
                    "attributes": {"brand": "Acme"},
                }
            ]
        }
    }

    name: str = Field(..., max_length=100)
    description: str
    sku: str = Field(..., max_length=50)
    base_price: float = Field(..., ge=0)
    discount_percent: float = Field(0.0, ge=0, le=100)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    attributes: dict[str, str] = Field(default_factory=dict)
    active: bool = True
    featured: bool = False


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    description: str | None = None
    sku: str | None = Field(None, max_length=50)
    base_price: float | None = Field(None, ge=0)
    discount_percent: float | None = Field(None, ge=0, le=100)
    categories: list[str] | None = None
    tags: list[str] | None = None
    attributes: dict[str, str] | None = None
    active: bool | None = None
    featured: bool | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class InventoryResponse(BaseModel):
    id: str
    variant_id: str
    quantity: int
    reserved: int
    available: int
    low_stock_threshold: int
    reorder_point: int
    reorder_quantity: int
    warehouse_location: str | None = None
    is_low_stock: bool
    needs_reorder: bool
    adjustments: list[dict] = Field(default_factory=list)
    reservations: list[dict] = Field(default_factory=list)
    releases: list[dict] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_aggregate(cls, inventory) -> InventoryResponse:
        return cls(
            id=str(inventory.id),
            variant_id=str(inventory.variant_id),
            quantity=inventory.quantity,
            reserved=inventory.reserved,
            available=inventory.available,
            low_stock_threshold=inventory.low_stock_threshold,
            reorder_point=inventory.reorder_point,
            reorder_quantity=inventory.reorder_quantity,
            warehouse_location=inventory.warehouse_location,
            is_low_stock=inventory.is_low_stock,
            needs_reorder=inventory.needs_reorder,
            adjustments=[
                {"adjustment": e.adjustment, "reason": e.reason, "date": e.date} for e in inventory.adjustments or []
            ],
            reservations=[
                {"quantity": e.quantity, "reference": e.reference, "date": e.date}
                for e in inventory.reservations or []
            ],
            releases=[
                {"quantity": e.quantity, "reference": e.reference, "date": e.date} for e in inventory.releases or []
            ],
            created_at=inventory.created_at,
            updated_at=inventory.updated_at,
        )


class VariantResponse(BaseModel):
    id: str
    product_id: str
    sku: str
    name: str
    attributes: dict[str, str] = Field(default_factory=dict)
    price_difference: float
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    inventory: InventoryResponse | None = None

    @classmethod
    def from_aggregate(cls, variant, inventory=None) -> VariantResponse:
        return cls(
            id=str(variant.id),
            product_id=str(variant.product_id),
            sku=variant.sku,
            name=variant.name,
            attributes=dict(variant.attributes or {}),
            price_difference=variant.price_difference or 0.0,
            active=variant.active,
            created_at=variant.created_at,
            updated_at=variant.updated_at,
            inventory=InventoryResponse.from_aggregate(inventory) if inventory is not None else None,
        )


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    slug: str | None = None
    sku: str
    base_price: float
    discount_percent: float
    sale_price: float
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    attributes: dict[str, str] = Field(default_factory=dict)
    active: bool
    featured: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    variants: list[VariantResponse] | None = None

    @classmethod
    def from_aggregate(cls, product, variants=None) -> ProductResponse:
        return cls(
            id=str(product.id),
            name=product.name,
            description=product.description,
            slug=product.slug,
            sku=product.sku,
            base_price=product.base_price,
            discount_percent=product.discount_percent or 0.0,
            sale_price=product.sale_price,
            categories=list(product.categories or []),
            tags=list(product.tags or []),
            attributes=dict(product.attributes or {}),
            active=product.active,
            featured=product.featured,
            created_at=product.created_at,
            updated_at=product.updated_at,
            variants=variants,
        )


class ProductListResponse(PageMeta):
    items: list[ProductResponse]


# --- Variant ---


class InitialInventory(BaseModel):
    quantity: int = 0
    low_stock_threshold: int | None = None
    reorder_point: int | None = None
    reorder_quantity: int | None = None
    warehouse_location: str | None = Field(None, max_length=100)


class CreateVariantRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "sku": "SHOE-TRAIL-01-42",
                    "name": "EU 42",
                    "attributes": {"size": "42"},
                    "price_difference": 5.0,
                    "initial_inventory": {"quantity": 25, "warehouse_location": "Main Warehouse"},
                }
            ]
        }
    }

    sku: str = Field(..., max_length=50)
    name: str = Field(..., max_length=100)
    attributes: dict[str, str]
    price_difference: float = 0.0
    active: bool = True
    initial_inventory: InitialInventory | None = None


class UpdateVariantRequest(BaseModel):
    sku: str | None = Field(None, max_length=50)
    name: str | None = Field(None, max_length=100)
    attributes: dict[str, str] | None = None
    price_difference: float | None = None
    active: bool | None = None


class VariantIdResponse(BaseModel):
    variant_id: str


class VariantListResponse(BaseModel):
    count: int
    items: list[VariantResponse]


# --- Inventory ---


class SetInventoryRequest(BaseModel):
    quantity: int | None = None
    reserved: int | None = None
    low_stock_threshold: int | None = None
    reorder_point: int | None = None
    reorder_quantity: int | None = None
    warehouse_location: str | None = Field(None, max_length=100)


class AdjustInventoryRequest(BaseModel):
    adjustment: int
    reason: str | None = Field(None, max_length=255)


class ReserveInventoryRequest(BaseModel):
    quantity: int
    reference: str | None = Field(None, max_length=255)


class ReleaseInventoryRequest(BaseModel):
    quantity: int
    reference: str | None = Field(None, max_length=255)


class AdjustmentResult(BaseModel):
    previous: int
    current: int
    difference: int


class AdjustInventoryResponse(BaseModel):
    adjustment: AdjustmentResult
    inventory: InventoryResponse


# --- Category ---


class CreateCategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Footwear",
                    "description": "Shoes, boots and sandals",
                    "parent_category_id": None,
                }
            ]
        }
    }

    name: str = Field(..., max_length=50)
    description: str | None = Field(None, max_length=500)
    parent_category_id: str | None = None
    active: bool = True


class UpdateCategoryRequest(BaseModel):
    """Partial update; an explicit ``"parent_category_id": null`` detaches the category."""

    name: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=500)
    parent_category_id: str | None = None
    active: bool | None = None


class CategoryIdResponse(BaseModel):
    category_id: str


class CategoryResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    slug: str | None = None
    parent_category_id: str | None = None
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_aggregate(cls, category) -> CategoryResponse:
        return cls(
            id=str(category.id),
            name=category.name,
            description=category.description,
            slug=category.slug,
            parent_category_id=str(category.parent_category_id) if category.parent_category_id else None,
            active=category.active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryDetailResponse(CategoryResponse):
    parent: CategoryResponse | None = None
    subcategories: list[CategoryResponse] = Field(default_factory=list)


class CategoryListResponse(PageMeta):
    items: list[CategoryResponse]


# --- Search ---


class ProductSearchResponse(BaseModel):
    count: int
    items: list[ProductResponse]


class CategorySearchResponse(BaseModel):
    count: int
    items: list[CategoryResponse]


class SuggestionsResponse(BaseModel):
    suggestions: list[str]
