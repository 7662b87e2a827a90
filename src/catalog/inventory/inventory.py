"""Inventory aggregate: the stock ledger for one variant.

Stock model:
    quantity:  units physically held
    reserved:  units promised but not yet shipped
    available: quantity - reserved (derived, never stored)

Every mutation either applies completely or raises before touching state,
so a failed operation leaves the record as it was. Each successful change
appends to one of three append-only logs (adjustments, reservations,
releases) or, for a wholesale update, raises InventoryUpdated.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from catalog.domain import catalog
from catalog.inventory.events import (
    InventoryAdjusted,
    InventoryCreated,
    InventoryReleased,
    InventoryReserved,
    InventoryUpdated,
    LowStockDetected,
)
from catalog.shared.errors import InsufficientAvailableError, InvalidAdjustmentError, OverReleaseError

DEFAULT_LOW_STOCK_THRESHOLD = 5
DEFAULT_REORDER_POINT = 10
DEFAULT_REORDER_QUANTITY = 20
DEFAULT_WAREHOUSE_LOCATION = "Main Warehouse"

DEFAULT_ADJUSTMENT_REASON = "Manual adjustment"
DEFAULT_RESERVATION_REFERENCE = "Manual reservation"
DEFAULT_RELEASE_REFERENCE = "Manual release"

# Lower bounds for the stock level fields accepted by ``update_levels``.
LEVEL_MINIMUMS = {
    "quantity": 0,
    "reserved": 0,
    "low_stock_threshold": 0,
    "reorder_point": 1,
    "reorder_quantity": 1,
}


@catalog.entity(part_of="Inventory")
class AdjustmentEntry:
    adjustment: Integer(required=True)
    reason: String(required=True, max_length=255)
    date: DateTime(required=True)


@catalog.entity(part_of="Inventory")
class ReservationEntry:
    quantity: Integer(required=True, min_value=1)
    reference: String(required=True, max_length=255)
    date: DateTime(required=True)


@catalog.entity(part_of="Inventory")
class ReleaseEntry:
    quantity: Integer(required=True, min_value=1)
    reference: String(required=True, max_length=255)
    date: DateTime(required=True)


@catalog.aggregate
class Inventory:
    """Stock ledger for a single variant (one record per variant)."""

    variant_id: Identifier(required=True)
    quantity: Integer(default=0, min_value=0)
    reserved: Integer(default=0, min_value=0)
    low_stock_threshold: Integer(default=DEFAULT_LOW_STOCK_THRESHOLD, min_value=0)
    reorder_point: Integer(default=DEFAULT_REORDER_POINT, min_value=1)
    reorder_quantity: Integer(default=DEFAULT_REORDER_QUANTITY, min_value=1)
    warehouse_location: String(max_length=100, default=DEFAULT_WAREHOUSE_LOCATION)
    adjustments: HasMany(AdjustmentEntry)
    reservations: HasMany(ReservationEntry)
    releases: HasMany(ReleaseEntry)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def reserved_cannot_exceed_quantity(self):
        if (self.reserved or 0) > (self.quantity or 0):
            raise ValidationError({"reserved": ["Reserved quantity cannot exceed total quantity"]})

    @property
    def available(self):
        return (self.quantity or 0) - (self.reserved or 0)

    @property
    def is_low_stock(self):
        return self.available <= self.low_stock_threshold

    @property
    def needs_reorder(self):
        return self.available <= self.reorder_point

    @classmethod
    def create(
        cls,
        variant_id,
        quantity=0,
        low_stock_threshold=None,
        reorder_point=None,
        reorder_quantity=None,
        warehouse_location=None,
    ):
        """Open a ledger for ``variant_id``; unset thresholds take the defaults."""
        now = datetime.now(UTC)
        inventory = cls(
            variant_id=str(variant_id),
            quantity=quantity,
            reserved=0,
            low_stock_threshold=(
                DEFAULT_LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold
            ),
            reorder_point=DEFAULT_REORDER_POINT if reorder_point is None else reorder_point,
            reorder_quantity=DEFAULT_REORDER_QUANTITY if reorder_quantity is None else reorder_quantity,
            warehouse_location=warehouse_location or DEFAULT_WAREHOUSE_LOCATION,
            created_at=now,
            updated_at=now,
        )
        inventory.raise_(
            InventoryCreated(
                inventory_id=str(inventory.id),
                variant_id=str(inventory.variant_id),
                quantity=inventory.quantity,
                warehouse_location=inventory.warehouse_location,
                created_at=now,
            )
        )
        return inventory

    def _check_low_stock(self):
        if self.needs_reorder:
            self.raise_(
                LowStockDetected(
                    inventory_id=str(self.id),
                    variant_id=str(self.variant_id),
                    available=self.available,
                    reorder_point=self.reorder_point,
                    reorder_quantity=self.reorder_quantity,
                    detected_at=datetime.now(UTC),
                )
            )

    def update_levels(self, **changes):
        """Replace any subset of the stock levels, thresholds and location.

        Keys left out (or passed as None) keep their current value. The
        whole change set is validated before anything is applied.
        """
        unknown = set(changes) - set(LEVEL_MINIMUMS) - {"warehouse_location"}
        if unknown:
            raise ValidationError({field: ["Unknown inventory field"] for field in sorted(unknown)})

        changes = {key: value for key, value in changes.items() if value is not None}
        resulting = {field: changes.get(field, getattr(self, field)) for field in LEVEL_MINIMUMS}

        errors = {}
        for field, minimum in LEVEL_MINIMUMS.items():
            if resulting[field] < minimum:
                errors[field] = [f"{field} must be at least {minimum}"]
        if not errors and resulting["reserved"] > resulting["quantity"]:
            errors["reserved"] = ["Reserved quantity cannot exceed total quantity"]
        if errors:
            raise ValidationError(errors)

        now = datetime.now(UTC)
        with atomic_change(self):
            for field, value in changes.items():
                setattr(self, field, value)
            self.updated_at = now

        self.raise_(
            InventoryUpdated(
                inventory_id=str(self.id),
                variant_id=str(self.variant_id),
                quantity=self.quantity,
                reserved=self.reserved,
                low_stock_threshold=self.low_stock_threshold,
                reorder_point=self.reorder_point,
                reorder_quantity=self.reorder_quantity,
                warehouse_location=self.warehouse_location,
                updated_at=now,
            )
        )
        self._check_low_stock()

    def adjust(self, adjustment, reason=None):
        """Shift quantity by a signed amount and log it.

        Returns the previous quantity, the new quantity and the difference.
        """
        reason = reason or DEFAULT_ADJUSTMENT_REASON
        previous = self.quantity
        new_quantity = previous + adjustment

        if new_quantity < 0:
            raise InvalidAdjustmentError(
                {"adjustment": [f"Adjustment would result in negative inventory ({new_quantity})"]}
            )
        if new_quantity < self.reserved:
            raise InvalidAdjustmentError(
                {"adjustment": [f"Adjustment would leave {new_quantity} units, fewer than the {self.reserved} reserved"]}
            )

        now = datetime.now(UTC)
        self.quantity = new_quantity
        self.updated_at = now
        self.add_adjustments(AdjustmentEntry(adjustment=adjustment, reason=reason, date=now))

        self.raise_(
            InventoryAdjusted(
                inventory_id=str(self.id),
                variant_id=str(self.variant_id),
                adjustment=adjustment,
                previous_quantity=previous,
                new_quantity=new_quantity,
                reason=reason,
                adjusted_at=now,
            )
        )
        self._check_low_stock()

        return {"previous": previous, "current": new_quantity, "difference": adjustment}

    def reserve(self, quantity, reference=None):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Reservation quantity must be positive"]})
        if self.available < quantity:
            raise InsufficientAvailableError(
                {"quantity": [f"Insufficient inventory. Available: {self.available}, Requested: {quantity}"]}
            )

        reference = reference or DEFAULT_RESERVATION_REFERENCE
        now = datetime.now(UTC)
        self.reserved = self.reserved + quantity
        self.updated_at = now
        self.add_reservations(ReservationEntry(quantity=quantity, reference=reference, date=now))

        self.raise_(
            InventoryReserved(
                inventory_id=str(self.id),
                variant_id=str(self.variant_id),
                quantity=quantity,
                reference=reference,
                reserved=self.reserved,
                available=self.available,
                reserved_at=now,
            )
        )
        self._check_low_stock()

    def release(self, quantity, reference=None):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Release quantity must be positive"]})
        if self.reserved < quantity:
            raise OverReleaseError(
                {"quantity": [f"Cannot release more than reserved. Reserved: {self.reserved}, Requested: {quantity}"]}
            )

        reference = reference or DEFAULT_RELEASE_REFERENCE
        now = datetime.now(UTC)
        self.reserved = self.reserved - quantity
        self.updated_at = now
        self.add_releases(ReleaseEntry(quantity=quantity, reference=reference, date=now))

        self.raise_(
            InventoryReleased(
                inventory_id=str(self.id),
                variant_id=str(self.variant_id),
                quantity=quantity,
                reference=reference,
                reserved=self.reserved,
                available=self.available,
                released_at=now,
            )
        )
        self._check_low_stock()
