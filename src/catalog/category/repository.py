"""Repository for the Category aggregate."""

from protean.exceptions import ObjectNotFoundError

from catalog.category.category import Category
from catalog.domain import catalog
from catalog.shared.listing import DEFAULT_LIMIT, DEFAULT_PAGE, Page, check_sort_field, paginate, scan, sort_records

CATEGORY_SORT_FIELDS = ("name", "slug", "created_at", "updated_at")


@catalog.repository(part_of=Category)
class CategoryRepository:
    def find_by_slug(self, slug):
        matches = self._dao.query.filter(slug=slug).all().items
        return matches[0] if matches else None

    def get_by_id_or_slug(self, key):
        """Look a category up by identifier first, then by slug."""
        try:
            return self.get(key)
        except ObjectNotFoundError:
            category = self.find_by_slug(key)
            if category is None:
                raise ObjectNotFoundError(f"Category not found with ID: {key}") from None
            return category

    def children_of(self, category_id):
        return list(scan(self._dao.query.filter(parent_category_id=str(category_id))))

    def list_all(self):
        return list(scan(self._dao.query))

    def list_categories(
        self,
        active=None,
        parent_id=None,
        roots_only=False,
        sort="name",
        order="asc",
        page=DEFAULT_PAGE,
        limit=DEFAULT_LIMIT,
    ) -> Page:
        check_sort_field(sort, CATEGORY_SORT_FIELDS)

        categories = self.list_all()
        if active is not None:
            categories = [c for c in categories if c.active == active]
        if roots_only:
            categories = [c for c in categories if c.is_root]
        elif parent_id is not None:
            categories = [c for c in categories if str(c.parent_category_id) == str(parent_id)]

        categories = sort_records(categories, sort, descending=order == "desc")
        return paginate(categories, page=page, limit=limit)
