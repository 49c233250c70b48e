"""Order placement — commands and handler.

Two ways to place an order:

* ``CreateOrderFromItems`` — an explicit list of items, cash on delivery by
  default. Stock is taken as part of placing the order.
* ``CreateOrderFromCart`` — the customer's cart. Stock is only checked here
  and taken when payment is confirmed; the cart is left as it is.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.items import find_cart
from storefront.domain import logger, storefront
from storefront.errors import EmptyCart
from storefront.order import inventory
from storefront.order.addresses import decode_address
from storefront.order.numbering import allocate_order_number
from storefront.order.order import CASH_ON_DELIVERY, InventoryPolicy, Order


@storefront.command(part_of="Order")
class CreateOrderFromItems:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping_address = Text(required=True)  # JSON: tagged address, or plain text
    billing_address = Text()  # JSON: tagged address, or plain text
    payment_method = String(max_length=50, default=CASH_ON_DELIVERY)
    phone_number = String(max_length=30)
    notes = Text()


@storefront.command(part_of="Order")
class CreateOrderFromCart:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)
    billing_address = Text()
    payment_method = String(required=True, max_length=50)
    phone_number = String(max_length=30)
    notes = Text()


def _parse_items(raw):
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from None

    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["At least one item is required"]})
    if not all(isinstance(item, dict) for item in items):
        raise ValidationError({"items": ["Each item must be an object with product_id and quantity"]})

    return inventory.requested_quantities((item.get("product_id"), item.get("quantity")) for item in items)


def _addresses(command):
    shipping = decode_address(command.shipping_address, phone=command.phone_number)
    if shipping is None:
        raise ValidationError({"shipping_address": ["Shipping address is required"]})
    if shipping.is_structured and not shipping.phone:
        raise ValidationError({"phone_number": ["Phone number is required"]})

    billing = decode_address(command.billing_address, phone=command.phone_number, field="billing_address")
    return shipping, billing or shipping


def _line_snapshots(quantities, products):
    return [
        {
            "product_id": product_id,
            "product_name": products[product_id].name,
            "sku": products[product_id].sku,
            "quantity": quantity,
            "unit_price": products[product_id].price,
        }
        for product_id, quantity in quantities.items()
    ]


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(CreateOrderFromItems)
    def create_order_from_items(self, command):
        quantities = _parse_items(command.items)
        shipping, billing = _addresses(command)

        products = inventory.check_stock(quantities, require_available=True)
        order_number = allocate_order_number()

        order = Order.create(
            order_number=order_number,
            customer_id=command.customer_id,
            lines_data=_line_snapshots(quantities, products),
            shipping_address=shipping,
            billing_address=billing,
            payment_method=command.payment_method or CASH_ON_DELIVERY,
            notes=command.notes,
            inventory_policy=InventoryPolicy.IMMEDIATE,
        )

        inventory.take_stock(order_number, quantities, products=products)
        order.record_stock_committed()
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_number=order_number,
            customer_id=str(command.customer_id),
            total_amount=order.total_amount,
            inventory_policy=order.inventory_policy,
        )
        return str(order.id)

    @handle(CreateOrderFromCart)
    def create_order_from_cart(self, command):
        cart = find_cart(command.customer_id)
        if cart is None or not cart.items:
            raise EmptyCart(str(command.customer_id))

        shipping, billing = _addresses(command)
        quantities = inventory.requested_quantities((item.product_id, item.quantity) for item in cart.items)
        products = inventory.check_stock(quantities, require_available=True)
        order_number = allocate_order_number()

        order = Order.create(
            order_number=order_number,
            customer_id=command.customer_id,
            lines_data=_line_snapshots(quantities, products),
            shipping_address=shipping,
            billing_address=billing,
            payment_method=command.payment_method,
            notes=command.notes,
            inventory_policy=InventoryPolicy.DEFERRED,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_number=order_number,
            customer_id=str(command.customer_id),
            total_amount=order.total_amount,
            inventory_policy=order.inventory_policy,
        )
        return str(order.id)
