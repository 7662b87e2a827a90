"""Variant aggregate: a purchasable configuration of a product."""

from datetime import datetime

from protean.fields import Boolean, DateTime, Dict, Float, Identifier, String

from catalog.domain import catalog


@catalog.aggregate
class Variant:
    """A size/colour/etc. configuration of a Product.

    Variants are stored separately and reference their product by id.
    Stock for a variant is kept on its Inventory record.
    """

    product_id: Identifier(required=True)
    sku: String(required=True, max_length=50)
    name: String(required=True, max_length=100)
    attributes: Dict(default=dict)
    price_difference: Float(default=0.0)
    active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, product_id, sku, name, attributes=None, price_difference=None, active=None):
        now = datetime.now()
        return cls(
            product_id=str(product_id),
            sku=sku,
            name=name,
            attributes=dict(attributes or {}),
            price_difference=price_difference or 0.0,
            active=True if active is None else active,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, sku=None, name=None, attributes=None, price_difference=None, active=None):
        if sku is not None:
            self.sku = sku
        if name is not None:
            self.name = name
        if attributes is not None:
            self.attributes = dict(attributes)
        if price_difference is not None:
            self.price_difference = price_difference
        if active is not None:
            self.active = active

        self.updated_at = datetime.now()

    def unit_price(self, base_price):
        return base_price + (self.price_difference or 0.0)

    def effective_price(self, product):
        """Price of this variant given its owning product."""
        return self.unit_price(product.base_price)
