"""Product aggregate root."""

from datetime import datetime

from protean.fields import Boolean, DateTime, Dict, Float, List, String, Text

from catalog.domain import catalog
from catalog.shared.slug import slugify


@catalog.aggregate
class Product:
    """A sellable catalogue item.

    Variants live in their own collection and point back at the product.
    ``sale_price`` is always computed from ``base_price`` and
    ``discount_percent``; it is never stored.
    """

    name: String(required=True, max_length=100)
    description: Text(required=True)
    slug: String(max_length=200)
    sku: String(required=True, max_length=50)
    base_price: Float(required=True, min_value=0.0)
    discount_percent: Float(default=0.0, min_value=0.0, max_value=100.0)
    categories: List(content_type=String, default=list)
    tags: List(content_type=String, default=list)
    attributes: Dict(default=dict)
    active: Boolean(default=True)
    featured: Boolean(default=False)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @property
    def sale_price(self):
        discount = self.discount_percent or 0.0
        return self.base_price - (self.base_price * discount) / 100

    @classmethod
    def create(
        cls,
        name,
        description,
        sku,
        base_price,
        discount_percent=None,
        categories=None,
        tags=None,
        attributes=None,
        active=None,
        featured=None,
    ):
        now = datetime.now()
        return cls(
            name=name,
            description=description,
            slug=slugify(name),
            sku=sku,
            base_price=base_price,
            discount_percent=discount_percent or 0.0,
            categories=[str(c) for c in categories or []],
            tags=list(tags or []),
            attributes=dict(attributes or {}),
            active=True if active is None else active,
            featured=False if featured is None else featured,
            created_at=now,
            updated_at=now,
        )

    def update_details(
        self,
        name=None,
        description=None,
        sku=None,
        base_price=None,
        discount_percent=None,
        categories=None,
        tags=None,
        attributes=None,
        active=None,
        featured=None,
    ):
        """Apply a partial update; arguments left as None keep their value."""
        if name is not None and name != self.name:
            self.name = name
            self.slug = slugify(name)
        if description is not None:
            self.description = description
        if sku is not None:
            self.sku = sku
        if base_price is not None:
            self.base_price = base_price
        if discount_percent is not None:
            self.discount_percent = discount_percent
        if categories is not None:
            self.categories = [str(c) for c in categories]
        if tags is not None:
            self.tags = list(tags)
        if attributes is not None:
            self.attributes = dict(attributes)
        if active is not None:
            self.active = active
        if featured is not None:
            self.featured = featured

        self.updated_at = datetime.now()

    def in_category(self, category_id):
        return str(category_id) in {str(c) for c in (self.categories or [])}

    def matches_text(self, text):
        """Case-insensitive substring match on name, description and tags."""
        needle = text.casefold()
        haystacks = [self.name or "", self.description or "", *(self.tags or [])]
        return any(needle in h.casefold() for h in haystacks)
