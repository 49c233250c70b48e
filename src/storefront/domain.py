"""Storefront bounded context: catalogue, shopping cart and orders.

Products, carts and orders share one domain so that placing an order, taking
its stock and emptying the cart commit in a single unit of work.
"""

import structlog
from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
