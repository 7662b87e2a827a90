"""Variant management: commands and handlers.

Creating a variant can open its inventory record in the same unit of work;
deleting a variant removes that record with it.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.inventory.inventory import Inventory
from catalog.product.product import Product
from catalog.shared.errors import DuplicateKeyError
from catalog.variant.variant import Variant

logger = structlog.get_logger(__name__)


@catalog.command(part_of="Variant")
class CreateVariant:
    product_id: Identifier(required=True)
    sku: String(required=True, max_length=50)
    name: String(required=True, max_length=100)
    attributes: Text()  # JSON object of string -> string
    price_difference: Float(default=0.0)
    active: Boolean(default=True)

    # Optional opening stock; when absent no inventory record is created.
    initial_quantity: Integer()
    low_stock_threshold: Integer()
    reorder_point: Integer()
    reorder_quantity: Integer()
    warehouse_location: String(max_length=100)


@catalog.command(part_of="Variant")
class UpdateVariant:
    variant_id: Identifier(required=True)
    sku: String(max_length=50)
    name: String(max_length=100)
    attributes: Text()
    price_difference: Float()
    active: Boolean()


@catalog.command(part_of="Variant")
class DeleteVariant:
    variant_id: Identifier(required=True)


def _ensure_sku_available(repo, sku, variant_id=None):
    existing = repo.find_by_sku(sku)
    if existing is not None and str(existing.id) != str(variant_id):
        raise DuplicateKeyError({"sku": [f"Duplicate value entered for sku: {sku}"]})


def _wants_inventory(command):
    return any(
        value is not None
        for value in (
            command.initial_quantity,
            command.low_stock_threshold,
            command.reorder_point,
            command.reorder_quantity,
            command.warehouse_location,
        )
    )


@catalog.command_handler(part_of=Variant)
class ManageVariantHandler:
    @handle(CreateVariant)
    def create_variant(self, command):
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Variant)
        _ensure_sku_available(repo, command.sku)

        variant = Variant.create(
            product_id=command.product_id,
            sku=command.sku,
            name=command.name,
            attributes=json.loads(command.attributes) if command.attributes else None,
            price_difference=command.price_difference,
            active=command.active,
        )
        repo.add(variant)

        if _wants_inventory(command):
            inventory = Inventory.create(
                variant_id=variant.id,
                quantity=command.initial_quantity or 0,
                low_stock_threshold=command.low_stock_threshold,
                reorder_point=command.reorder_point,
                reorder_quantity=command.reorder_quantity,
                warehouse_location=command.warehouse_location,
            )
            current_domain.repository_for(Inventory).add(inventory)

        return str(variant.id)

    @handle(UpdateVariant)
    def update_variant(self, command):
        repo = current_domain.repository_for(Variant)
        variant = repo.get(command.variant_id)

        if command.sku is not None:
            _ensure_sku_available(repo, command.sku, variant.id)

        variant.update_details(
            sku=command.sku,
            name=command.name,
            attributes=json.loads(command.attributes) if command.attributes else None,
            price_difference=command.price_difference,
            active=command.active,
        )
        repo.add(variant)

    @handle(DeleteVariant)
    def delete_variant(self, command):
        repo = current_domain.repository_for(Variant)
        variant = repo.get(command.variant_id)

        removed = current_domain.repository_for(Inventory).remove_for_variant(variant.id)
        repo._dao.delete(variant)
        logger.info("Variant deleted", variant_id=str(variant.id), inventory_removed=removed)
