"""Integration tests for the catalogue endpoints, public and admin."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.utils.globals import current_domain
from storefront.api import admin_router, category_router, product_router, register_error_handlers
from storefront.catalogue.product import Product


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(product_router)
    app.include_router(category_router)
    app.include_router(admin_router)
    register_error_handlers(app)
    return TestClient(app)


def _create_product(client, **overrides):
    payload = {"name": "Wireless Mouse", "price": 24.99, "stock": 40, "sku": "WM-001"}
    payload.update(overrides)
    response = client.post("/admin/products", json=payload)
    assert response.status_code == 201
    return response.json()["id"]


class TestAdminProducts:
    def test_create_product(self, client):
        product_id = _create_product(client)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Wireless Mouse"
        assert product.stock == 40

    def test_create_product_defaults(self, client):
        product_id = _create_product(client, stock=None, sku=None)

        data = client.get(f"/products/{product_id}").json()
        assert data["stock"] == 10
        assert data["image_url"] == "/img/product-placeholder.png"

    def test_negative_price_is_rejected(self, client):
        response = client.post("/admin/products", json={"name": "Broken", "price": -1})
        assert response.status_code == 422

    def test_unknown_category(self, client):
        response = client.post("/admin/products", json={"name": "Lamp", "price": 10, "category_id": "missing"})
        assert response.status_code == 404
        assert response.json()["error"] == "category_not_found"

    def test_update_details(self, client):
        product_id = _create_product(client)
        response = client.put(f"/admin/products/{product_id}", json={"description": "Quiet clicks"})
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["description"] == "Quiet clicks"

    def test_change_price(self, client):
        product_id = _create_product(client)
        response = client.put(f"/admin/products/{product_id}/price", json={"price": 19.99, "old_price": 24.99})
        assert response.status_code == 200

        data = client.get(f"/products/{product_id}").json()
        assert data["price"] == 19.99
        assert data["old_price"] == 24.99

    def test_adjust_stock(self, client):
        product_id = _create_product(client)
        response = client.put(f"/admin/products/{product_id}/stock", json={"stock": 3, "reason": "Recount"})
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["stock"] == 3

    def test_hidden_product_leaves_public_listing(self, client):
        visible = _create_product(client, name="Keyboard", sku="KB-001")
        hidden = _create_product(client)
        client.put(f"/admin/products/{hidden}/availability", json={"is_available": False})

        public = [p["product_id"] for p in client.get("/products").json()["products"]]
        admin = [p["product_id"] for p in client.get("/admin/products").json()["products"]]

        assert public == [visible]
        assert set(admin) == {visible, hidden}

    def test_delete_product(self, client):
        product_id = _create_product(client)
        assert client.delete(f"/admin/products/{product_id}").status_code == 200
        assert client.get(f"/products/{product_id}").status_code == 404

    def test_unknown_product(self, client):
        response = client.get("/products/missing")
        assert response.status_code == 404
        assert response.json()["product_id"] == "missing"


class TestProductListing:
    def test_pagination_envelope(self, client):
        for index in range(3):
            _create_product(client, name=f"Cable {index}", sku=f"CB-{index}")

        data = client.get("/products", params={"limit": 2, "sort_by": "name", "order": "asc"}).json()

        assert [p["name"] for p in data["products"]] == ["Cable 0", "Cable 1"]
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_next"] is True

    def test_search(self, client):
        _create_product(client, name="Wireless Mouse")
        _create_product(client, name="USB Hub", sku="HUB-1")

        data = client.get("/products", params={"search": "mouse"}).json()
        assert [p["name"] for p in data["products"]] == ["Wireless Mouse"]

    def test_unknown_sort_field(self, client):
        assert client.get("/products", params={"sort_by": "colour"}).status_code == 400


class TestCategories:
    def test_create_and_browse(self, client):
        response = client.post("/admin/categories", json={"name": "Electronics"})
        assert response.status_code == 201
        category_id = response.json()["id"]

        data = client.get("/categories").json()
        assert [c["category_id"] for c in data["categories"]] == [category_id]
        assert client.get(f"/categories/{category_id}").json()["name"] == "Electronics"

    def test_duplicate_name(self, client):
        client.post("/admin/categories", json={"name": "Electronics"})
        response = client.post("/admin/categories", json={"name": "electronics"})
        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_category"

    def test_inactive_category_only_listed_for_admin(self, client):
        category_id = client.post("/admin/categories", json={"name": "Garden"}).json()["id"]
        client.put(f"/admin/categories/{category_id}", json={"is_active": False})

        assert client.get("/categories").json()["categories"] == []
        assert len(client.get("/admin/categories").json()["categories"]) == 1

    def test_filter_products_by_category(self, client):
        category_id = client.post("/admin/categories", json={"name": "Electronics"}).json()["id"]
        _create_product(client, name="Monitor", sku="MN-1", category_id=category_id)
        _create_product(client, name="Chair", sku="CH-1")

        data = client.get("/products", params={"category_id": category_id}).json()
        assert [p["name"] for p in data["products"]] == ["Monitor"]


class TestCsvTransfer:
    def test_template(self, client):
        response = client.get("/admin/products/template")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text.strip() == "name,price,old_price,category,image_url,stock,description,sku"

    def test_import_then_export(self, client):
        content = "name,price,category,stock\nDesk Lamp,19.5,Lighting,7\nFloor Lamp,oops,Lighting,\n"

        response = client.post("/admin/products/import", json={"content": content})
        assert response.json() == {"imported": 2, "skipped": 0}

        exported = client.get("/admin/products/export")
        assert 'filename="products.csv"' in exported.headers["content-disposition"]
        assert "Desk Lamp,19.5,,Lighting" in exported.text

    def test_import_skips_existing_names(self, client):
        _create_product(client, name="Desk Lamp")
        response = client.post("/admin/products/import", json={"content": "name,price\nDesk Lamp,10\n"})
        assert response.json() == {"imported": 0, "skipped": 1}

    def test_import_empty_file(self, client):
        response = client.post("/admin/products/import", json={"content": ""})
        assert response.status_code == 400
