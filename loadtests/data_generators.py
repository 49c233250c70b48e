"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's Pydantic request
schemas and the domain's own checks (non-negative prices and stock,
structured addresses with street, city, country and a phone number).
"""

import random
import uuid

from faker import Faker

fake = Faker()

PAYMENT_METHODS = ["card", "COD"]


def customer_id() -> str:
    """Identity as resolved by the upstream auth layer (X-Customer-Id)."""
    return f"cust-lt-{uuid.uuid4().hex[:12]}"


def category_data() -> dict:
    return {
        "name": f"{fake.word().title()} {uuid.uuid4().hex[:6]}",
        "description": fake.sentence(nb_words=8),
    }


def product_data(category_id: str | None = None) -> dict:
    price = round(random.uniform(5, 500), 2)
    return {
        "name": f"{fake.color_name()} {fake.word().title()} {uuid.uuid4().hex[:6]}",
        "price": price,
        "old_price": round(price * 1.2, 2) if random.random() < 0.3 else None,
        "stock": random.randint(200, 1000),
        "sku": f"LT-{uuid.uuid4().hex[:10].upper()}",
        "category_id": category_id,
        "description": fake.paragraph(nb_sentences=2),
    }


def structured_address() -> dict:
    return {
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "postal_code": fake.postcode(),
        "country": "US",
    }


def phone_number() -> str:
    return f"+1-{random.randint(200, 999)}-{random.randint(200, 999)}-{random.randint(1000, 9999)}"


def raw_address() -> str:
    return fake.address().replace("\n", ", ")


def order_data(product_ids: list[str]) -> dict:
    """Direct COD order for one to three distinct catalogue products."""
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, 3)))
    return {
        "items": [{"product_id": pid, "quantity": random.randint(1, 3)} for pid in chosen],
        "shipping_address": structured_address(),
        "phone_number": phone_number(),
        "notes": fake.sentence() if random.random() < 0.2 else None,
    }


def checkout_data(payment_method: str = "card") -> dict:
    return {
        "shipping_address": structured_address(),
        "payment_method": payment_method,
        "phone_number": phone_number(),
    }


def card_payment_data(order_number: str) -> dict:
    return {
        "order_number": order_number,
        "payment_method": "card",
        "card_number": fake.credit_card_number(card_type="visa16"),
        "expiry_date": "12/39",
        "cvv": f"{random.randint(100, 999)}",
    }


def product_csv(rows: int = 20) -> str:
    lines = ["name,price,old_price,category,image_url,stock,description,sku"]
    for _ in range(rows):
        lines.append(
            ",".join(
                [
                    f"Imported {fake.word().title()} {uuid.uuid4().hex[:8]}",
                    f"{random.uniform(1, 200):.2f}",
                    "",
                    f"LT Import {random.randint(1, 3)}",
                    "",
                    str(random.randint(10, 100)),
                    fake.word(),
                    f"IMP-{uuid.uuid4().hex[:8].upper()}",
                ]
            )
        )
    return "\n".join(lines) + "\n"
