"""Tests for slugs, listing helpers and error classification."""

from types import SimpleNamespace

import pytest
from catalog.shared.errors import (
    DuplicateKeyError,
    InsufficientAvailableError,
    error_kind,
    error_message,
)
from catalog.shared.listing import Page, paginate, sort_records
from catalog.shared.slug import slugify
from protean.exceptions import ObjectNotFoundError, ValidationError


class TestSlugify:
    @pytest.mark.parametrize(
        "name, slug",
        [
            ("Running Shoes", "running-shoes"),
            (" Kids' Wear ", "-kids--wear-"),
            ("4K TV/Monitor", "4k-tv-monitor"),
            ("Café", "caf-"),
        ],
    )
    def test_slugify(self, name, slug):
        assert slugify(name) == slug


class TestPaginate:
    def test_slices_and_counts(self):
        page = paginate(list(range(25)), page=3, limit=10)
        assert page.items == [20, 21, 22, 23, 24]
        assert page.total == 25
        assert page.pages == 3

    def test_page_past_the_end_is_empty(self):
        page = paginate([1, 2], page=5, limit=10)
        assert page.items == []
        assert page.total == 2

    def test_empty(self):
        assert Page().pages == 0

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0)])
    def test_rejects_non_positive(self, page, limit):
        with pytest.raises(ValidationError):
            paginate([1], page=page, limit=limit)


class TestSortRecords:
    def test_missing_values_last(self):
        records = [SimpleNamespace(name=n) for n in ("b", None, "a")]
        assert [r.name for r in sort_records(records, "name")] == ["a", "b", None]

    def test_descending(self):
        records = [SimpleNamespace(price=p) for p in (3, 1, 2)]
        assert [r.price for r in sort_records(records, "price", descending=True)] == [3, 2, 1]


class TestErrorClassification:
    def test_kind_tags(self):
        assert error_kind(InsufficientAvailableError({"quantity": ["short"]})) == "InsufficientAvailable"
        assert error_kind(DuplicateKeyError({"sku": ["taken"]})) == "DuplicateKey"
        assert error_kind(ValidationError({"name": ["required"]})) == "ValidationError"
        assert error_kind(ObjectNotFoundError("missing")) == "NotFound"
        assert error_kind(RuntimeError("boom")) is None

    def test_message_flattening(self):
        exc = ValidationError({"quantity": ["must be positive"], "reference": ["too long"]})
        assert error_message(exc) == "must be positive, too long"
