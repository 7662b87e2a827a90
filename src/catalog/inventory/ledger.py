"""Inventory ledger: commands and handlers for stock movements.

Each handler loads (or lazily opens) the variant's record, applies one
ledger operation and persists it. Handlers do not retry; a rejected
operation raises before anything is saved.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.inventory.inventory import Inventory
from catalog.variant.variant import Variant

logger = structlog.get_logger(__name__)


@catalog.command(part_of="Inventory")
class EnsureInventory:
    variant_id: Identifier(required=True)


@catalog.command(part_of="Inventory")
class SetInventory:
    variant_id: Identifier(required=True)
    quantity: Integer()
    reserved: Integer()
    low_stock_threshold: Integer()
    reorder_point: Integer()
    reorder_quantity: Integer()
    warehouse_location: String(max_length=100)


@catalog.command(part_of="Inventory")
class AdjustInventory:
    variant_id: Identifier(required=True)
    adjustment: Integer(required=True)
    reason: String(max_length=255)


@catalog.command(part_of="Inventory")
class ReserveInventory:
    variant_id: Identifier(required=True)
    quantity: Integer(required=True)
    reference: String(max_length=255)


@catalog.command(part_of="Inventory")
class ReleaseInventory:
    variant_id: Identifier(required=True)
    quantity: Integer(required=True)
    reference: String(max_length=255)


def _ledger_for(variant_id):
    current_domain.repository_for(Variant).get(variant_id)
    repo = current_domain.repository_for(Inventory)
    return repo, repo.get_or_create_for_variant(variant_id)


@catalog.command_handler(part_of=Inventory)
class InventoryLedgerHandler:
    @handle(EnsureInventory)
    def ensure_inventory(self, command):
        _, inventory = _ledger_for(command.variant_id)
        return str(inventory.id)

    @handle(SetInventory)
    def set_inventory(self, command):
        repo, inventory = _ledger_for(command.variant_id)
        inventory.update_levels(
            quantity=command.quantity,
            reserved=command.reserved,
            low_stock_threshold=command.low_stock_threshold,
            reorder_point=command.reorder_point,
            reorder_quantity=command.reorder_quantity,
            warehouse_location=command.warehouse_location,
        )
        repo.add(inventory)

        logger.info("Inventory levels set", variant_id=str(command.variant_id), quantity=inventory.quantity)
        return str(inventory.id)

    @handle(AdjustInventory)
    def adjust_inventory(self, command):
        repo, inventory = _ledger_for(command.variant_id)
        result = inventory.adjust(command.adjustment, command.reason)
        repo.add(inventory)

        logger.info(
            "Inventory adjusted",
            variant_id=str(command.variant_id),
            previous=result["previous"],
            current=result["current"],
        )
        return result

    @handle(ReserveInventory)
    def reserve_inventory(self, command):
        repo, inventory = _ledger_for(command.variant_id)
        inventory.reserve(command.quantity, command.reference)
        repo.add(inventory)

        logger.info("Inventory reserved", variant_id=str(command.variant_id), quantity=command.quantity)
        return str(inventory.id)

    @handle(ReleaseInventory)
    def release_inventory(self, command):
        repo, inventory = _ledger_for(command.variant_id)
        inventory.release(command.quantity, command.reference)
        repo.add(inventory)

        logger.info("Inventory released", variant_id=str(command.variant_id), quantity=command.quantity)
        return str(inventory.id)
