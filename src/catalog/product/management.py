"""Product management: commands and handlers."""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.product.product import Product
from catalog.shared.errors import DuplicateKeyError
from catalog.shared.slug import slugify

logger = structlog.get_logger(__name__)


@catalog.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=100)
    description: Text(required=True)
    sku: String(required=True, max_length=50)
    base_price: Float(required=True)
    discount_percent: Float(default=0.0)
    categories: Text()  # JSON list of category ids
    tags: Text()  # JSON list of strings
    attributes: Text()  # JSON object of string -> string
    active: Boolean(default=True)
    featured: Boolean(default=False)


@catalog.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()
    sku: String(max_length=50)
    base_price: Float()
    discount_percent: Float()
    categories: Text()
    tags: Text()
    attributes: Text()
    active: Boolean()
    featured: Boolean()


@catalog.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def _decode(payload):
    return json.loads(payload) if payload else None


def _ensure_unique(repo, sku=None, slug=None, product_id=None):
    if sku is not None:
        existing = repo.find_by_sku(sku)
        if existing is not None and str(existing.id) != str(product_id):
            raise DuplicateKeyError({"sku": [f"Duplicate value entered for sku: {sku}"]})
    if slug is not None:
        existing = repo.find_by_slug(slug)
        if existing is not None and str(existing.id) != str(product_id):
            raise DuplicateKeyError({"slug": [f"Duplicate value entered for slug: {slug}"]})


@catalog.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        _ensure_unique(repo, sku=command.sku, slug=slugify(command.name))

        product = Product.create(
            name=command.name,
            description=command.description,
            sku=command.sku,
            base_price=command.base_price,
            discount_percent=command.discount_percent,
            categories=_decode(command.categories),
            tags=_decode(command.tags),
            attributes=_decode(command.attributes),
            active=command.active,
            featured=command.featured,
        )
        repo.add(product)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        _ensure_unique(
            repo,
            sku=command.sku,
            slug=slugify(command.name) if command.name is not None else None,
            product_id=product.id,
        )

        product.update_details(
            name=command.name,
            description=command.description,
            sku=command.sku,
            base_price=command.base_price,
            discount_percent=command.discount_percent,
            categories=_decode(command.categories),
            tags=_decode(command.tags),
            attributes=_decode(command.attributes),
            active=command.active,
            featured=command.featured,
        )
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("Product deleted", product_id=str(product.id), sku=product.sku)
