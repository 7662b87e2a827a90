"""Free-text search over products and categories.

Queries are matched literally and case-insensitively; no pattern syntax is
interpreted.
"""

from protean.utils.globals import current_domain

from catalog.category.category import Category
from catalog.product.product import Product

SUGGESTION_LIMIT = 5


class CatalogSearch:
    def __init__(self):
        self.products = current_domain.repository_for(Product)
        self.categories = current_domain.repository_for(Category)

    def search_products(self, query):
        return [product for product in self.products.list_all() if product.matches_text(query)]

    def search_categories(self, query):
        needle = query.casefold()
        return [category for category in self.categories.list_all() if needle in (category.name or "").casefold()]

    def suggestions(self, prefix, limit=SUGGESTION_LIMIT):
        """Names of up to ``limit`` products starting with ``prefix``."""
        needle = prefix.casefold()
        names = [p.name for p in self.products.list_all() if (p.name or "").casefold().startswith(needle)]
        return names[:limit]
