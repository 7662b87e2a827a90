"""Integration tests for the catalog HTTP endpoints."""

import pytest
from catalog.api import (
    build_limiter,
    category_router,
    product_router,
    register_error_handlers,
    register_rate_limiting,
    report_router,
    search_router,
    variant_router,
)
from catalog.inventory.inventory import Inventory
from catalog.product.product import Product
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain

PREFIX = "/api/v1"


@pytest.fixture()
def app():
    app = FastAPI()
    for router in (product_router, variant_router, category_router, search_router, report_router):
        app.include_router(router, prefix=PREFIX)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


def _create_product(client, **overrides):
    body = {
        "name": "Trail Shoe",
        "description": "A grippy running shoe",
        "sku": "SHOE-01",
        "base_price": 100.0,
        "tags": ["running"],
    }
    body.update(overrides)
    response = client.post(f"{PREFIX}/products", json=body)
    assert response.status_code == 201, response.text
    return response.json()["product_id"]


def _create_variant(client, product_id, **overrides):
    body = {"sku": "SHOE-01-42", "name": "EU 42", "attributes": {"size": "42"}}
    body.update(overrides)
    response = client.post(f"{PREFIX}/products/{product_id}/variants", json=body)
    assert response.status_code == 201, response.text
    return response.json()["variant_id"]


class TestProductEndpoints:
    def test_create_and_get_by_slug(self, client):
        product_id = _create_product(client, discount_percent=20)

        response = client.get(f"{PREFIX}/products/trail-shoe")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == product_id
        assert data["sale_price"] == pytest.approx(80.0)
        assert data["variants"] == []

    def test_get_includes_variants_and_inventory(self, client):
        product_id = _create_product(client)
        _create_variant(client, product_id, initial_inventory={"quantity": 12})
        _create_variant(client, product_id, sku="SHOE-01-43", name="EU 43", attributes={"size": "43"})

        data = client.get(f"{PREFIX}/products/{product_id}").json()
        inventories = {v["sku"]: v["inventory"] for v in data["variants"]}
        assert inventories["SHOE-01-42"]["quantity"] == 12
        assert inventories["SHOE-01-43"] is None

    def test_list_with_pagination(self, client):
        for i in range(3):
            _create_product(client, name=f"Shoe {i}", sku=f"S-{i}", base_price=10.0 * (i + 1))

        response = client.get(f"{PREFIX}/products", params={"sort": "base_price", "order": "asc", "limit": 2})
        data = response.json()
        assert [p["base_price"] for p in data["items"]] == [10.0, 20.0]
        assert data["total"] == 3
        assert data["pages"] == 2

    def test_invalid_sort_order(self, client):
        response = client.get(f"{PREFIX}/products", params={"order": "sideways"})
        assert response.status_code == 422

    def test_update(self, client):
        product_id = _create_product(client)
        response = client.put(f"{PREFIX}/products/{product_id}", json={"featured": True})
        assert response.status_code == 200

        product = current_domain.repository_for(Product).get(product_id)
        assert product.featured is True
        assert product.tags == ["running"]

    def test_delete(self, client):
        product_id = _create_product(client)
        assert client.delete(f"{PREFIX}/products/{product_id}").status_code == 200
        assert client.get(f"{PREFIX}/products/{product_id}").status_code == 404

    def test_missing_required_field(self, client):
        response = client.post(f"{PREFIX}/products", json={"name": "No SKU", "description": "x", "base_price": 1})
        assert response.status_code == 422

    def test_duplicate_sku(self, client):
        _create_product(client)
        response = client.post(
            f"{PREFIX}/products",
            json={"name": "Other", "description": "x", "sku": "SHOE-01", "base_price": 1},
        )
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "DuplicateKey"


class TestVariantEndpoints:
    def test_list_for_product(self, client):
        product_id = _create_product(client)
        _create_variant(client, product_id)

        data = client.get(f"{PREFIX}/products/{product_id}/variants").json()
        assert data["count"] == 1
        assert data["items"][0]["attributes"] == {"size": "42"}

    def test_list_for_unknown_product(self, client):
        response = client.get(f"{PREFIX}/products/missing/variants")
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_attributes_required(self, client):
        product_id = _create_product(client)
        response = client.post(f"{PREFIX}/products/{product_id}/variants", json={"sku": "X", "name": "X"})
        assert response.status_code == 422

    def test_update_and_delete(self, client):
        product_id = _create_product(client)
        variant_id = _create_variant(client, product_id, initial_inventory={"quantity": 2})

        response = client.put(f"{PREFIX}/variants/{variant_id}", json={"price_difference": 7.5})
        assert response.status_code == 200
        assert client.get(f"{PREFIX}/variants/{variant_id}").json()["price_difference"] == 7.5

        assert client.delete(f"{PREFIX}/variants/{variant_id}").status_code == 200
        assert client.get(f"{PREFIX}/variants/{variant_id}").status_code == 404
        assert current_domain.repository_for(Inventory).find_for_variant(variant_id) is None


class TestInventoryEndpoints:
    @pytest.fixture()
    def variant_id(self, client):
        return _create_variant(client, _create_product(client))

    def test_get_opens_record(self, client, variant_id):
        response = client.get(f"{PREFIX}/variants/{variant_id}/inventory")
        assert response.status_code == 200
        data = response.json()
        assert data["quantity"] == 0
        assert data["low_stock_threshold"] == 5
        assert data["warehouse_location"] == "Main Warehouse"

    def test_get_for_unknown_variant(self, client):
        response = client.get(f"{PREFIX}/variants/missing/inventory")
        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "NotFound"

    def test_set_and_adjust(self, client, variant_id):
        client.put(f"{PREFIX}/variants/{variant_id}/inventory", json={"quantity": 10, "reserved": 2})

        response = client.patch(
            f"{PREFIX}/variants/{variant_id}/inventory/adjust",
            json={"adjustment": 5, "reason": "Restock"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["adjustment"] == {"previous": 10, "current": 15, "difference": 5}
        assert data["inventory"]["available"] == 13
        assert data["inventory"]["adjustments"][0]["reason"] == "Restock"

    def test_set_invalid_levels(self, client, variant_id):
        response = client.put(f"{PREFIX}/variants/{variant_id}/inventory", json={"quantity": 1, "reserved": 2})
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "ValidationError"

    def test_ledger_walkthrough(self, client, variant_id):
        base = f"{PREFIX}/variants/{variant_id}/inventory"
        client.put(base, json={"quantity": 10, "reserved": 2})

        data = client.patch(f"{base}/reserve", json={"quantity": 5}).json()
        assert data["reserved"] == 7
        assert data["available"] == 3

        response = client.patch(f"{base}/reserve", json={"quantity": 5})
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "InsufficientAvailable"

        data = client.patch(f"{base}/release", json={"quantity": 7}).json()
        assert data["reserved"] == 0

        response = client.patch(f"{base}/adjust", json={"adjustment": -15})
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": {"kind": "InvalidAdjustment", "message": "Adjustment would result in negative inventory (-5)"},
        }

    def test_over_release(self, client, variant_id):
        response = client.patch(f"{PREFIX}/variants/{variant_id}/inventory/release", json={"quantity": 1})
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "OverRelease"

    def test_non_positive_reservation(self, client, variant_id):
        response = client.patch(f"{PREFIX}/variants/{variant_id}/inventory/reserve", json={"quantity": 0})
        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "ValidationError"


class TestCategoryEndpoints:
    def _create(self, client, **body):
        response = client.post(f"{PREFIX}/categories", json=body)
        assert response.status_code == 201, response.text
        return response.json()["category_id"]

    def test_get_with_parent_and_subcategories(self, client):
        root_id = self._create(client, name="Footwear")
        self._create(client, name="Boots", parent_category_id=root_id)

        data = client.get(f"{PREFIX}/categories/boots").json()
        assert data["parent"]["id"] == root_id

        data = client.get(f"{PREFIX}/categories/{root_id}").json()
        assert data["parent"] is None
        assert [c["name"] for c in data["subcategories"]] == ["Boots"]

    def test_list_roots(self, client):
        root_id = self._create(client, name="Footwear")
        self._create(client, name="Boots", parent_category_id=root_id)

        data = client.get(f"{PREFIX}/categories", params={"parent": "null"}).json()
        assert [c["name"] for c in data["items"]] == ["Footwear"]
        assert data["total"] == 1

    def test_explicit_null_parent_detaches(self, client):
        root_id = self._create(client, name="Footwear")
        child_id = self._create(client, name="Boots", parent_category_id=root_id)

        response = client.put(f"{PREFIX}/categories/{child_id}", json={"parent_category_id": None})
        assert response.status_code == 200
        assert client.get(f"{PREFIX}/categories/{child_id}").json()["parent_category_id"] is None

    def test_omitted_parent_is_kept(self, client):
        root_id = self._create(client, name="Footwear")
        child_id = self._create(client, name="Boots", parent_category_id=root_id)

        client.put(f"{PREFIX}/categories/{child_id}", json={"description": "Sturdy"})
        assert client.get(f"{PREFIX}/categories/{child_id}").json()["parent_category_id"] == root_id

    def test_delete_with_children(self, client):
        root_id = self._create(client, name="Footwear")
        self._create(client, name="Boots", parent_category_id=root_id)

        response = client.delete(f"{PREFIX}/categories/{root_id}")
        assert response.status_code == 400
        assert response.json()["error"] == {
            "kind": "ReferentialConflict",
            "message": "Cannot delete category with subcategories",
        }

    def test_unknown_category(self, client):
        response = client.get(f"{PREFIX}/categories/nowhere")
        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Category not found with ID: nowhere"


class TestSearchAndReportEndpoints:
    def test_product_search(self, client):
        _create_product(client)
        data = client.get(f"{PREFIX}/search/products", params={"q": "RUNNING"}).json()
        assert data["count"] == 1

    def test_suggestions(self, client):
        _create_product(client)
        data = client.get(f"{PREFIX}/search/suggestions", params={"prefix": "tra"}).json()
        assert data == {"suggestions": ["Trail Shoe"]}

    def test_search_requires_query(self, client):
        assert client.get(f"{PREFIX}/search/categories").status_code == 422

    def test_reports(self, client):
        product_id = _create_product(client)
        _create_variant(client, product_id, price_difference=10.0, initial_inventory={"quantity": 3})

        low_stock = client.get(f"{PREFIX}/reports/low-stock").json()
        assert low_stock["count"] == 1

        reorder = client.get(f"{PREFIX}/reports/reorder").json()
        assert reorder["items"][0]["reorder"]["recommended"] == 20

        valuation = client.get(f"{PREFIX}/reports/inventory-valuation").json()
        assert valuation["total_value"] == pytest.approx(330.0)

        summary = client.get(f"{PREFIX}/reports/inventory-summary").json()
        assert summary["summary"]["total_quantity"] == 3
        assert summary["warehouse_distribution"][0]["location"] == "Main Warehouse"

    def test_low_stock_threshold_parameter(self, client):
        product_id = _create_product(client)
        _create_variant(client, product_id, initial_inventory={"quantity": 30})

        assert client.get(f"{PREFIX}/reports/low-stock").json()["count"] == 0
        assert client.get(f"{PREFIX}/reports/low-stock", params={"threshold": 30}).json()["count"] == 1


class TestUnclassifiedErrors:
    def test_generic_500(self, app):
        @app.get("/boom")
        async def boom():
            raise RuntimeError("database exploded")

        response = TestClient(app, raise_server_exceptions=False).get("/boom")
        assert response.status_code == 500
        assert response.json() == {"success": False, "error": {"kind": "InternalError", "message": "Server Error"}}


class TestRateLimiting:
    def test_requests_over_limit_get_429(self, app):
        register_rate_limiting(app, build_limiter(max_requests=2, window_ms=60_000))
        client = TestClient(app)

        assert client.get(f"{PREFIX}/products").status_code == 200
        assert client.get(f"{PREFIX}/products").status_code == 200

        response = client.get(f"{PREFIX}/products")
        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "error": {"kind": "RateLimitExceeded", "message": "Too many requests, please try again later"},
        }

    def test_limit_read_from_environment(self, app, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_MAX", "1")
        monkeypatch.setenv("RATE_LIMIT_WINDOW", "30000")
        register_rate_limiting(app)
        client = TestClient(app)

        assert client.get(f"{PREFIX}/products").status_code == 200
        assert client.get(f"{PREFIX}/products").status_code == 429
