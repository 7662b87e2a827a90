"""Catalog bounded context: products, variants, categories and inventory.

Product, Category, Variant and Inventory are separate aggregates stored in
their own collections. Variants reference their product, inventory records
reference their variant, and categories may reference a parent category.
"""

from protean.domain import Domain

from catalog.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
catalog = Domain(name="catalog")
