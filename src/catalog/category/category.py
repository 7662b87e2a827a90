"""Category aggregate root for product categorization."""

from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from catalog.domain import catalog
from catalog.shared.slug import slugify


@catalog.aggregate
class Category:
    """A node in the category tree.

    Categories reference an optional parent; the parent chain never loops
    back on itself and a category with children cannot be removed.
    """

    name: String(required=True, max_length=50)
    description: String(max_length=500)
    slug: String(max_length=100)
    parent_category_id: Identifier()
    active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @property
    def is_root(self):
        return self.parent_category_id is None

    @classmethod
    def create(cls, name, description=None, parent_category_id=None, active=True):
        now = datetime.now()
        return cls(
            name=name,
            description=description,
            slug=slugify(name),
            parent_category_id=parent_category_id,
            active=True if active is None else active,
            created_at=now,
            updated_at=now,
        )

    def update_details(self, name=None, description=None, active=None):
        if name is not None and name != self.name:
            self.name = name
            self.slug = slugify(name)
        if description is not None:
            self.description = description
        if active is not None:
            self.active = active

        self.updated_at = datetime.now()

    def move_under(self, parent_category_id):
        """Attach to a new parent, or detach to the root when given None."""
        if parent_category_id is not None and str(parent_category_id) == str(self.id):
            raise ValidationError({"parent_category_id": ["Category cannot be its own parent"]})

        self.parent_category_id = parent_category_id
        self.updated_at = datetime.now()
