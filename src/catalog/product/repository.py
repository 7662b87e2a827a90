"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from catalog.domain import catalog
from catalog.product.product import Product
from catalog.shared.listing import DEFAULT_LIMIT, DEFAULT_PAGE, Page, check_sort_field, paginate, scan, sort_records

PRODUCT_SORT_FIELDS = ("name", "sku", "slug", "base_price", "discount_percent", "created_at", "updated_at")


@catalog.repository(part_of=Product)
class ProductRepository:
    def find_by_slug(self, slug):
        matches = self._dao.query.filter(slug=slug).all().items
        return matches[0] if matches else None

    def find_by_sku(self, sku):
        matches = self._dao.query.filter(sku=sku).all().items
        return matches[0] if matches else None

    def get_by_id_or_slug(self, key):
        """Look a product up by identifier first, then by slug."""
        try:
            return self.get(key)
        except ObjectNotFoundError:
            product = self.find_by_slug(key)
            if product is None:
                raise ObjectNotFoundError(f"Product not found with ID: {key}") from None
            return product

    def list_all(self):
        return list(scan(self._dao.query))

    def list_products(
        self,
        category=None,
        featured=None,
        active=None,
        min_price=None,
        max_price=None,
        sort="created_at",
        order="desc",
        page=DEFAULT_PAGE,
        limit=DEFAULT_LIMIT,
    ) -> Page:
        """Filter, sort and slice the product collection.

        Flag filters go to the store; category membership and the price
        range are applied to the fetched records.
        """
        check_sort_field(sort, PRODUCT_SORT_FIELDS)

        criteria = {}
        if featured is not None:
            criteria["featured"] = featured
        if active is not None:
            criteria["active"] = active
        query = self._dao.query.filter(**criteria) if criteria else self._dao.query

        products = list(scan(query))
        if category is not None:
            products = [p for p in products if p.in_category(category)]
        if min_price is not None:
            products = [p for p in products if p.base_price >= min_price]
        if max_price is not None:
            products = [p for p in products if p.base_price <= max_price]

        products = sort_records(products, sort, descending=order == "desc")
        return paginate(products, page=page, limit=limit)
