"""Application tests for category management handlers."""

import pytest
from catalog.category.category import Category
from catalog.category.management import CreateCategory, DeleteCategory, UpdateCategory
from catalog.shared.errors import DuplicateKeyError, ReferentialConflictError
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain


def _create_category(**overrides):
    defaults = {"name": "Footwear"}
    defaults.update(overrides)
    return current_domain.process(CreateCategory(**defaults), asynchronous=False)


class TestCreateCategoryHandler:
    def test_create_root_category(self):
        category_id = _create_category(description="Shoes and boots")

        category = current_domain.repository_for(Category).get(category_id)
        assert category.name == "Footwear"
        assert category.slug == "footwear"
        assert category.description == "Shoes and boots"
        assert category.parent_category_id is None

    def test_create_child_category(self):
        parent_id = _create_category()
        child_id = _create_category(name="Boots", parent_category_id=parent_id)

        child = current_domain.repository_for(Category).get(child_id)
        assert str(child.parent_category_id) == parent_id

    def test_unknown_parent(self):
        with pytest.raises(ObjectNotFoundError):
            _create_category(name="Boots", parent_category_id="missing")

    def test_duplicate_slug(self):
        _create_category(name="Foot Wear")
        with pytest.raises(DuplicateKeyError):
            _create_category(name="foot wear")


class TestUpdateCategoryHandler:
    def test_rename(self):
        category_id = _create_category()
        current_domain.process(UpdateCategory(category_id=category_id, name="Shoes"), asynchronous=False)

        category = current_domain.repository_for(Category).get(category_id)
        assert category.name == "Shoes"
        assert category.slug == "shoes"

    def test_rename_to_taken_slug(self):
        _create_category(name="Shoes")
        category_id = _create_category(name="Boots")

        with pytest.raises(DuplicateKeyError):
            current_domain.process(UpdateCategory(category_id=category_id, name="Shoes"), asynchronous=False)

    def test_own_parent_rejected(self):
        category_id = _create_category()
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateCategory(category_id=category_id, parent_category_id=category_id), asynchronous=False
            )

    def test_descendant_as_parent_rejected(self):
        root_id = _create_category(name="Root")
        child_id = _create_category(name="Child", parent_category_id=root_id)
        grandchild_id = _create_category(name="Grandchild", parent_category_id=child_id)

        with pytest.raises(ValidationError) as exc:
            current_domain.process(
                UpdateCategory(category_id=root_id, parent_category_id=grandchild_id), asynchronous=False
            )
        assert "descendants" in str(exc.value.messages)

        root = current_domain.repository_for(Category).get(root_id)
        assert root.parent_category_id is None

    def test_clear_parent(self):
        parent_id = _create_category(name="Root")
        child_id = _create_category(name="Child", parent_category_id=parent_id)

        current_domain.process(UpdateCategory(category_id=child_id, clear_parent=True), asynchronous=False)

        child = current_domain.repository_for(Category).get(child_id)
        assert child.parent_category_id is None


class TestDeleteCategoryHandler:
    def test_delete_leaf(self):
        category_id = _create_category()
        current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Category).get(category_id)

    def test_delete_with_children_rejected(self):
        parent_id = _create_category(name="Root")
        _create_category(name="Child", parent_category_id=parent_id)

        with pytest.raises(ReferentialConflictError):
            current_domain.process(DeleteCategory(category_id=parent_id), asynchronous=False)

        assert current_domain.repository_for(Category).get(parent_id) is not None


class TestCategoryListing:
    def test_roots_only(self):
        root_id = _create_category(name="Root")
        _create_category(name="Child", parent_category_id=root_id)

        page = current_domain.repository_for(Category).list_categories(roots_only=True)
        assert [c.name for c in page.items] == ["Root"]

    def test_children_of_parent(self):
        root_id = _create_category(name="Root")
        _create_category(name="Beta", parent_category_id=root_id)
        _create_category(name="Alpha", parent_category_id=root_id)

        page = current_domain.repository_for(Category).list_categories(parent_id=root_id)
        assert [c.name for c in page.items] == ["Alpha", "Beta"]

    def test_lookup_by_slug(self):
        category_id = _create_category(name="Running Gear")
        category = current_domain.repository_for(Category).get_by_id_or_slug("running-gear")
        assert str(category.id) == category_id

    def test_unsupported_sort_field(self):
        with pytest.raises(ValidationError):
            current_domain.repository_for(Category).list_categories(sort="colour")
