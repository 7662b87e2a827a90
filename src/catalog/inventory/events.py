"""Domain events for the Inventory aggregate.

Events are informational facts about stock movements; nothing in the
catalog is required to consume them.
"""

from protean.fields import DateTime, Identifier, Integer, String

from catalog.domain import catalog


@catalog.event(part_of="Inventory")
class InventoryCreated:
    """An inventory record was opened for a variant."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    quantity: Integer(required=True)
    warehouse_location: String()
    created_at: DateTime(required=True)


@catalog.event(part_of="Inventory")
class InventoryUpdated:
    """Stock levels or thresholds were replaced wholesale."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    quantity: Integer(required=True)
    reserved: Integer(required=True)
    low_stock_threshold: Integer(required=True)
    reorder_point: Integer(required=True)
    reorder_quantity: Integer(required=True)
    warehouse_location: String()
    updated_at: DateTime(required=True)


@catalog.event(part_of="Inventory")
class InventoryAdjusted:
    __version__ = 1

    inventory_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    adjustment: Integer(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)
    reason: String(required=True)
    adjusted_at: DateTime(required=True)


@catalog.event(part_of="Inventory")
class InventoryReserved:
    __version__ = 1

    inventory_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    quantity: Integer(required=True)
    reference: String(required=True)
    reserved: Integer(required=True)
    available: Integer(required=True)
    reserved_at: DateTime(required=True)


@catalog.event(part_of="Inventory")
class InventoryReleased:
    __version__ = 1

    inventory_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    quantity: Integer(required=True)
    reference: String(required=True)
    reserved: Integer(required=True)
    available: Integer(required=True)
    released_at: DateTime(required=True)


@catalog.event(part_of="Inventory")
class LowStockDetected:
    """Available stock dropped to or below the reorder point."""

    __version__ = 1

    inventory_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    available: Integer(required=True)
    reorder_point: Integer(required=True)
    reorder_quantity: Integer(required=True)
    detected_at: DateTime(required=True)
