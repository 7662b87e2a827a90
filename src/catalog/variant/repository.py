from catalog.domain import catalog
from catalog.shared.listing import scan
from catalog.variant.variant import Variant


@catalog.repository(part_of=Variant)
class VariantRepository:
    def find_by_sku(self, sku):
        matches = self._dao.query.filter(sku=sku).all().items
        return matches[0] if matches else None

    def for_product(self, product_id):
        return list(scan(self._dao.query.filter(product_id=str(product_id))))

    def list_all(self):
        return list(scan(self._dao.query))
