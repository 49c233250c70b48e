"""Catalogue administration load test scenarios.

Administrators build up the catalogue the shoppers buy from, tune prices
and stock, and pull CSV exports.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import category_data, product_csv, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import CatalogueState


class CatalogueBuilderJourney(SequentialTaskSet):
    """Create Category -> Create Products -> Reprice -> Restock -> Export.

    Generates events: CategoryCreated, ProductCreated (x3),
    ProductPriceChanged, ProductStockAdjusted.
    """

    def on_start(self):
        self.state = CatalogueState()

    @task
    def create_category(self):
        with self.client.post(
            "/admin/categories",
            json=category_data(),
            catch_response=True,
            name="POST /admin/categories",
        ) as resp:
            if resp.status_code == 201:
                self.state.category_ids.append(resp.json()["id"])
            else:
                resp.failure(f"Create category failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_products(self):
        for _ in range(3):
            with self.client.post(
                "/admin/products",
                json=product_data(category_id=self.state.category_ids[-1]),
                catch_response=True,
                name="POST /admin/products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(resp.json()["id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def reprice(self):
        if not self.state.product_ids:
            self.interrupt()
        product_id = random.choice(self.state.product_ids)
        with self.client.put(
            f"/admin/products/{product_id}/price",
            json={"price": round(random.uniform(5, 400), 2)},
            catch_response=True,
            name="PUT /admin/products/{id}/price",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Reprice failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def restock(self):
        product_id = random.choice(self.state.product_ids)
        with self.client.put(
            f"/admin/products/{product_id}/stock",
            json={"stock": random.randint(500, 1500), "reason": "load test restock"},
            catch_response=True,
            name="PUT /admin/products/{id}/stock",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Restock failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def export_catalogue(self):
        self.client.get("/admin/products/export", name="GET /admin/products/export")
        self.interrupt()


class CsvImportJourney(SequentialTaskSet):
    """Bulk product import through the CSV endpoint."""

    @task
    def import_products(self):
        with self.client.post(
            "/admin/products/import",
            json={"content": product_csv(rows=random.randint(5, 25))},
            catch_response=True,
            name="POST /admin/products/import",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Import failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()


class CatalogueAdminUser(HttpUser):
    wait_time = between(1, 3)
    tasks = {CatalogueBuilderJourney: 4, CsvImportJourney: 1}
