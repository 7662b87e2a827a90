"""Repository for the Inventory aggregate.

Inventory records are keyed by variant; ``get_or_create_for_variant`` is
the one place a record is opened lazily.
"""

import structlog
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.inventory.inventory import Inventory
from catalog.shared.listing import scan

logger = structlog.get_logger(__name__)


@catalog.repository(part_of=Inventory)
class InventoryRepository:
    def find_for_variant(self, variant_id):
        matches = self._dao.query.filter(variant_id=str(variant_id)).all().items
        return matches[0] if matches else None

    def get_or_create_for_variant(self, variant_id):
        """Return the variant's record, creating an empty one when absent.

        Creation persists immediately with quantity 0 and default thresholds.
        """
        inventory = self.find_for_variant(variant_id)
        if inventory is None:
            inventory = Inventory.create(variant_id=variant_id)
            self.add(inventory)
            logger.info("Inventory record created", variant_id=str(variant_id), inventory_id=str(inventory.id))
        return inventory

    def remove_for_variant(self, variant_id):
        """Delete the variant's record together with its log entries.

        Log entries are stored apart from the record, so each is removed
        through its own repository first.
        """
        inventory = self.find_for_variant(variant_id)
        if inventory is None:
            return False

        for entry in [*inventory.adjustments, *inventory.reservations, *inventory.releases]:
            current_domain.repository_for(type(entry))._dao.delete(entry)
        self._dao.delete(inventory)
        return True

    def list_all(self):
        return list(scan(self._dao.query))
