"""Payment confirmation — command and handler.

The payment gateway is called by the HTTP layer; this handler only records
its verdict. A failed verdict leaves the order untouched so the customer can
try again.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import find_cart
from storefront.domain import logger, storefront
from storefront.order import inventory
from storefront.order.lookups import find_order_by_number
from storefront.order.order import Order, OrderStatus


@storefront.command(part_of="Order")
class ConfirmPayment:
    order_number = String(required=True, max_length=40)
    success = Boolean(required=True)
    transaction_id = String(max_length=255)
    customer_id = Identifier()  # when given, the order must belong to this customer


@storefront.command_handler(part_of=Order)
class ConfirmPaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        order = find_order_by_number(command.order_number, customer_id=command.customer_id)
        order.assert_payable()

        if not command.success:
            logger.warning(
                "payment_not_confirmed",
                order_number=order.order_number,
                transaction_id=command.transaction_id,
            )
            return False

        order.assert_can_transition(OrderStatus.PAID)
        inventory.commit_order_stock(order)
        order.record_payment(command.transaction_id)
        current_domain.repository_for(Order).add(order)

        cart = find_cart(order.customer_id)
        if cart is not None and cart.items:
            cart.clear(reason="paid")
            current_domain.repository_for(ShoppingCart).add(cart)

        logger.info(
            "order_paid",
            order_number=order.order_number,
            transaction_id=command.transaction_id,
            amount=order.total_amount,
        )
        return True
