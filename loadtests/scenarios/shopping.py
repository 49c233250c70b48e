"""Shopper load test scenarios.

Four stateful SequentialTaskSet journeys: browsing with an abandoned cart,
a direct cash-on-delivery order through delivery, a card checkout from the
cart, and a cancellation that puts stock back.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import card_payment_data, checkout_data, customer_id, order_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class _ShopperJourney(SequentialTaskSet):
    def on_start(self):
        self.state = ShopperState(customer_id=customer_id())
        self.headers = {"X-Customer-Id": self.state.customer_id}

        resp = self.client.get("/products", params={"limit": 50}, name="GET /products")
        if resp.status_code == 200:
            products = resp.json()["products"]
            self.state.product_ids = [p["product_id"] for p in products if p["stock"] > 5]
        if not self.state.product_ids:
            self.interrupt()

    def add_to_cart(self, quantity=1):
        with self.client.post(
            "/cart/items",
            json={"product_id": random.choice(self.state.product_ids), "quantity": quantity},
            headers=self.headers,
            catch_response=True,
            name="POST /cart/items",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_item_ids.append(resp.json()["id"])
            else:
                resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")


class BrowseAndAbandonJourney(_ShopperJourney):
    """Browse -> Add Items -> Change Quantity -> Remove Item -> Leave."""

    @task
    def browse(self):
        self.client.get("/categories", name="GET /categories")
        self.client.get("/products", params={"sort_by": "price", "order": "asc"}, name="GET /products?sort")

    @task
    def fill_cart(self):
        self.add_to_cart()
        self.add_to_cart(quantity=2)

    @task
    def change_quantity(self):
        if not self.state.cart_item_ids:
            self.interrupt()
        self.client.put(
            f"/cart/items/{self.state.cart_item_ids[0]}",
            json={"quantity": 3},
            headers=self.headers,
            name="PUT /cart/items/{id}",
        )

    @task
    def remove_item(self):
        self.client.delete(
            f"/cart/items/{self.state.cart_item_ids[-1]}",
            headers=self.headers,
            name="DELETE /cart/items/{id}",
        )
        self.client.get("/cart/count", headers=self.headers, name="GET /cart/count")
        self.interrupt()


class CashOnDeliveryJourney(_ShopperJourney):
    """Place COD Order -> View -> Confirm Delivery.

    Generates events: OrderPlaced, StockCommitted (per line), OrderStockCommitted,
    OrderStatusChanged.
    """

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.product_ids),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_number = resp.json()["order_number"]
                self.state.order_id = resp.json()["order_id"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def view_order(self):
        self.client.get(f"/orders/{self.state.order_number}", headers=self.headers, name="GET /orders/{number}")

    @task
    def ship_order(self):
        self.client.put(
            f"/admin/orders/{self.state.order_id}",
            json={"status": "Shipped"},
            name="PUT /admin/orders/{id}",
        )

    @task
    def confirm_delivery(self):
        with self.client.post(
            f"/orders/{self.state.order_number}/delivery",
            json={"payment_received": True},
            headers=self.headers,
            catch_response=True,
            name="POST /orders/{number}/delivery",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Delivery failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()


class CardCheckoutJourney(_ShopperJourney):
    """Fill Cart -> Checkout -> Pay by Card.

    A declined payment (402) leaves the order pending and is not a failure.
    """

    @task
    def fill_cart(self):
        self.add_to_cart()
        self.add_to_cart()

    @task
    def checkout(self):
        with self.client.post(
            "/orders/checkout",
            json=checkout_data("card"),
            headers=self.headers,
            catch_response=True,
            name="POST /orders/checkout",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_number = resp.json()["order_number"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def pay(self):
        with self.client.post(
            "/orders/payments",
            json=card_payment_data(self.state.order_number),
            headers=self.headers,
            catch_response=True,
            name="POST /orders/payments",
        ) as resp:
            if resp.status_code in (200, 402):
                resp.success()
            else:
                resp.failure(f"Payment failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()


class CancellationJourney(_ShopperJourney):
    """Place Order -> Cancel -> Cancel Again (idempotent)."""

    @task
    def place_order(self):
        resp = self.client.post("/orders", json=order_data(self.state.product_ids), headers=self.headers, name="POST /orders")
        if resp.status_code != 201:
            self.interrupt()
        self.state.order_number = resp.json()["order_number"]

    @task
    def cancel(self):
        for _ in range(2):
            with self.client.post(
                f"/orders/{self.state.order_number}/cancel",
                json={"reason": "Changed my mind"},
                headers=self.headers,
                catch_response=True,
                name="POST /orders/{number}/cancel",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Cancel failed: {resp.status_code} - {extract_error_detail(resp)}")
        self.interrupt()


class ShopperUser(HttpUser):
    wait_time = between(1, 3)
    tasks = {
        BrowseAndAbandonJourney: 5,
        CashOnDeliveryJourney: 3,
        CardCheckoutJourney: 3,
        CancellationJourney: 1,
    }
