"""Shared BDD fixtures and step definitions for the catalog domain."""

import pytest
from catalog.inventory.inventory import Inventory
from catalog.inventory.ledger import SetInventory
from catalog.product.management import CreateProduct
from catalog.shared.errors import error_kind
from catalog.variant.management import CreateVariant
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for the captured domain error."""
    return {"exc": None}


@given(
    parsers.cfparse("a variant with {quantity:d} units on hand and {reserved:d} reserved"),
    target_fixture="variant_id",
)
def variant_with_stock(quantity, reserved):
    product_id = current_domain.process(
        CreateProduct(name="Lantern", description="Camping lantern", sku="LANTERN", base_price=35.0),
        asynchronous=False,
    )
    variant_id = current_domain.process(
        CreateVariant(product_id=product_id, sku="LANTERN-RED", name="Red", attributes='{"colour": "red"}'),
        asynchronous=False,
    )
    current_domain.process(
        SetInventory(variant_id=variant_id, quantity=quantity, reserved=reserved),
        asynchronous=False,
    )
    return variant_id


def _inventory(variant_id):
    return current_domain.repository_for(Inventory).find_for_variant(variant_id)


@then(parsers.cfparse("the variant has {reserved:d} units reserved"))
def units_reserved(variant_id, reserved):
    assert _inventory(variant_id).reserved == reserved


@then(parsers.cfparse("the variant has {quantity:d} units on hand"))
def units_on_hand(variant_id, quantity):
    assert _inventory(variant_id).quantity == quantity


@then(parsers.cfparse("{available:d} units are available"))
def units_available(variant_id, available):
    assert _inventory(variant_id).available == available


@then(parsers.cfparse('the request fails with "{kind}"'))
def request_fails(error, kind):
    assert error["exc"] is not None
    assert error_kind(error["exc"]) == kind
    error["exc"] = None
