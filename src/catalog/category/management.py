"""Category management: commands and handlers."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from catalog.category.category import Category
from catalog.domain import catalog
from catalog.shared.errors import DuplicateKeyError, ReferentialConflictError
from catalog.shared.slug import slugify

logger = structlog.get_logger(__name__)


@catalog.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=50)
    description: String(max_length=500)
    parent_category_id: Identifier()
    active: Boolean(default=True)


@catalog.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=50)
    description: String(max_length=500)
    active: Boolean()
    parent_category_id: Identifier()
    clear_parent: Boolean(default=False)


@catalog.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def _ensure_slug_available(repo, slug, category_id=None):
    existing = repo.find_by_slug(slug)
    if existing is not None and str(existing.id) != str(category_id):
        raise DuplicateKeyError({"slug": [f"Duplicate value entered for slug: {slug}"]})


def _ensure_no_cycle(repo, category, parent_id):
    """Walk up from the proposed parent; meeting the category again means a loop."""
    seen = set()
    current_id = parent_id
    while current_id is not None and str(current_id) not in seen:
        if str(current_id) == str(category.id):
            raise ValidationError({"parent_category_id": ["Category cannot be moved under one of its descendants"]})
        seen.add(str(current_id))
        current_id = repo.get(current_id).parent_category_id


@catalog.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        if command.parent_category_id:
            repo.get(command.parent_category_id)

        _ensure_slug_available(repo, slugify(command.name))

        category = Category.create(
            name=command.name,
            description=command.description,
            parent_category_id=command.parent_category_id,
            active=command.active,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None:
            _ensure_slug_available(repo, slugify(command.name), category.id)

        category.update_details(
            name=command.name,
            description=command.description,
            active=command.active,
        )

        if command.clear_parent:
            category.move_under(None)
        elif command.parent_category_id:
            category.move_under(command.parent_category_id)
            _ensure_no_cycle(repo, category, command.parent_category_id)

        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        children = repo.children_of(category.id)
        if children:
            raise ReferentialConflictError({"category": ["Cannot delete category with subcategories"]})

        repo._dao.delete(category)
        logger.info("Category deleted", category_id=str(category.id))
