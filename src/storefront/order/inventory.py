"""Inventory reservation protocol.

Stock is taken from products in one of two places:

* when an order is placed from an explicit list of items (immediate policy)
* when payment for a cart order is confirmed (deferred policy)

and put back when an order holding stock is cancelled.

Taking stock is all-or-nothing: every product is re-read and every line is
checked before any product is written, and the caller's unit of work persists
the products together with the order. A product written concurrently by
another request fails the version check on save, so no unit is sold twice.
"""

from collections import OrderedDict

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.lookups import load_product
from storefront.catalogue.product import Product
from storefront.domain import logger
from storefront.errors import ProductNotFound


def requested_quantities(pairs):
    """Collapse ``(product_id, quantity)`` pairs into one quantity per product, keeping first-seen order."""
    quantities = OrderedDict()
    for product_id, quantity in pairs:
        if not product_id:
            raise ValidationError({"items": ["Each item needs a product id"]})
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"items": [f"Quantity for product {product_id} must be a whole number of at least 1"]})
        key = str(product_id)
        quantities[key] = quantities.get(key, 0) + quantity
    return quantities


def check_stock(quantities, require_available=True):
    """Load every product and verify it can cover its quantity. Writes nothing.

    Returns the loaded products keyed by id. The first offending product
    raises ``ProductNotFound``, ``ProductUnavailable`` or ``InsufficientStock``.
    """
    products = {}
    for product_id, quantity in quantities.items():
        product = load_product(product_id)
        if require_available:
            product.ensure_orderable(quantity)
        else:
            product.ensure_in_stock(quantity)
        products[product_id] = product
    return products


def take_stock(order_number, quantities, products=None, require_available=True):
    """Decrement stock for every product, or for none of them."""
    if products is None:
        products = check_stock(quantities, require_available=require_available)

    repo = current_domain.repository_for(Product)
    for product_id, quantity in quantities.items():
        product = products[product_id]
        product.commit_stock(quantity, order_number)
        repo.add(product)

    logger.info(
        "stock_committed",
        order_number=order_number,
        products={product_id: quantity for product_id, quantity in quantities.items()},
    )
    return products


def order_quantities(order):
    return requested_quantities((line.product_id, line.quantity) for line in order.items)


def commit_order_stock(order):
    """Take stock for an order that does not hold any yet. No-op otherwise."""
    if order.stock_committed:
        return

    take_stock(order.order_number, order_quantities(order), require_available=False)
    order.record_stock_committed()


def restore_order_stock(order):
    """Put back the stock an order holds. No-op for an order that holds none.

    A product deleted since the order was placed cannot be restocked and is
    skipped.
    """
    if not order.stock_committed:
        return

    repo = current_domain.repository_for(Product)
    for product_id, quantity in order_quantities(order).items():
        try:
            product = load_product(product_id)
        except ProductNotFound:
            logger.warning(
                "restock_skipped_missing_product",
                order_number=order.order_number,
                product_id=product_id,
                quantity=quantity,
            )
            continue

        product.restore_stock(quantity, order.order_number)
        repo.add(product)

    order.record_stock_released()
    logger.info("stock_restored", order_number=order.order_number)
