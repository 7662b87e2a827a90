"""Read-only inventory reports.

Each report reads the current records through the domain's repositories
and aggregates in memory. Reports share no state and take no snapshot;
they tolerate empty collections.
"""

from collections import defaultdict

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalog.inventory.inventory import Inventory
from catalog.product.product import Product
from catalog.variant.variant import Variant

logger = structlog.get_logger(__name__)


def _product_block(product):
    if product is None:
        return None
    return {"id": str(product.id), "name": product.name, "sku": product.sku}


def _variant_block(variant):
    if variant is None:
        return None
    return {
        "id": str(variant.id),
        "name": variant.name,
        "sku": variant.sku,
        "attributes": dict(variant.attributes or {}),
    }


def _inventory_block(inventory):
    return {
        "quantity": inventory.quantity,
        "reserved": inventory.reserved,
        "available": inventory.available,
        "low_stock_threshold": inventory.low_stock_threshold,
        "reorder_point": inventory.reorder_point,
        "reorder_quantity": inventory.reorder_quantity,
        "warehouse_location": inventory.warehouse_location,
    }


class InventoryReports:
    """Low-stock, reorder, valuation and summary reports."""

    def __init__(self):
        self.inventories = current_domain.repository_for(Inventory)
        self.variants = current_domain.repository_for(Variant)
        self.products = current_domain.repository_for(Product)

    def _find(self, repo, identifier):
        if not identifier:
            return None
        try:
            return repo.get(identifier)
        except ObjectNotFoundError:
            return None

    def _joined(self, inventory):
        """Product, variant and inventory blocks; dangling references render as None."""
        variant = self._find(self.variants, inventory.variant_id)
        product = self._find(self.products, variant.product_id) if variant else None
        return {
            "product": _product_block(product),
            "variant": _variant_block(variant),
            "inventory": _inventory_block(inventory),
        }

    def low_stock(self, threshold: int | None = None) -> dict:
        """Records whose available stock is at or below the threshold.

        An explicit ``threshold`` overrides each record's own
        ``low_stock_threshold``.
        """
        if threshold is None:
            matching = [inv for inv in self.inventories.list_all() if inv.is_low_stock]
        else:
            matching = [inv for inv in self.inventories.list_all() if inv.available <= threshold]

        items = [self._joined(inv) for inv in matching]
        logger.info("Low stock report generated", count=len(items), threshold=threshold)
        return {"count": len(items), "items": items}

    def reorder(self) -> dict:
        items = []
        for inventory in self.inventories.list_all():
            if not inventory.needs_reorder:
                continue
            item = self._joined(inventory)
            item["reorder"] = {"recommended": inventory.reorder_quantity}
            items.append(item)

        logger.info("Reorder report generated", count=len(items))
        return {"count": len(items), "items": items}

    def valuation(self) -> dict:
        """Stock value per variant at the variant's effective price.

        Variants without an inventory record, or whose product is gone,
        are left out.
        """
        by_variant = {str(inv.variant_id): inv for inv in self.inventories.list_all()}

        total_value = 0.0
        items = []
        for variant in self.variants.list_all():
            inventory = by_variant.get(str(variant.id))
            if inventory is None:
                continue
            product = self._find(self.products, variant.product_id)
            if product is None:
                continue

            unit_price = variant.effective_price(product)
            item_value = unit_price * inventory.quantity
            total_value += item_value

            items.append(
                {
                    "product": _product_block(product),
                    "variant": _variant_block(variant),
                    "inventory": {
                        "quantity": inventory.quantity,
                        "reserved": inventory.reserved,
                        "available": inventory.available,
                    },
                    "valuation": {"unit_price": unit_price, "total_value": item_value},
                }
            )

        logger.info("Valuation report generated", count=len(items), total_value=total_value)
        return {"total_value": total_value, "count": len(items), "items": items}

    def summary(self) -> dict:
        inventories = self.inventories.list_all()

        total_quantity = sum(inv.quantity for inv in inventories)
        total_reserved = sum(inv.reserved for inv in inventories)
        summary = {
            "total_items": len(inventories),
            "total_quantity": total_quantity,
            "total_reserved": total_reserved,
            "low_stock_items": sum(1 for inv in inventories if inv.is_low_stock),
            "out_of_stock_items": sum(1 for inv in inventories if inv.available <= 0),
            "needs_reorder_items": sum(1 for inv in inventories if inv.needs_reorder),
            "total_available": total_quantity - total_reserved,
        }

        locations = defaultdict(lambda: {"count": 0, "total_quantity": 0, "total_reserved": 0})
        for inventory in inventories:
            bucket = locations[inventory.warehouse_location]
            bucket["count"] += 1
            bucket["total_quantity"] += inventory.quantity
            bucket["total_reserved"] += inventory.reserved

        distribution = [
            {
                "location": location,
                "count": totals["count"],
                "total_quantity": totals["total_quantity"],
                "total_reserved": totals["total_reserved"],
                "available": totals["total_quantity"] - totals["total_reserved"],
            }
            for location, totals in sorted(locations.items(), key=lambda pair: pair[0] or "")
        ]

        logger.info("Inventory summary generated", total_items=summary["total_items"])
        return {"summary": summary, "warehouse_distribution": distribution}
