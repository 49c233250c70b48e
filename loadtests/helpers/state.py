"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state, with no cross-user sharing.
State tracks IDs returned by earlier requests so follow-up operations can
reference them.
"""

from dataclasses import dataclass, field


@dataclass
class CatalogueState:
    """Categories and products created by an administrator journey."""

    category_ids: list[str] = field(default_factory=list)
    product_ids: list[str] = field(default_factory=list)


@dataclass
class ShopperState:
    """Tracks a single simulated shopper."""

    customer_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    cart_item_ids: list[str] = field(default_factory=list)
    order_number: str | None = None
    order_id: str | None = None
