"""Delivery confirmation by the customer, for cash-on-delivery orders."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order.lookups import find_order_by_number
from storefront.order.order import CASH_ON_DELIVERY, Order, OrderStatus


@storefront.command(part_of="Order")
class ConfirmDelivery:
    customer_id = Identifier(required=True)
    order_number = String(required=True, max_length=40)
    payment_received = Boolean(default=True)


@storefront.command_handler(part_of=Order)
class ConfirmDeliveryHandler:
    @handle(ConfirmDelivery)
    def confirm_delivery(self, command):
        order = find_order_by_number(command.order_number, customer_id=command.customer_id)

        if order.payment_method != CASH_ON_DELIVERY:
            raise ValidationError({"payment_method": ["Only cash-on-delivery orders can be confirmed by the customer"]})
        order.assert_can_transition(OrderStatus.DELIVERED)

        payment_received = command.payment_received is not False
        order.deliver(payment_collected=payment_received, changed_by="customer")
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_delivered",
            order_number=order.order_number,
            payment_received=payment_received,
        )
