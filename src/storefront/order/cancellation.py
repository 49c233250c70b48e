"""Customer cancellation — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.order import inventory
from storefront.order.lookups import find_order_by_number
from storefront.order.order import Order


@storefront.command(part_of="Order")
class CancelMyOrder:
    customer_id = Identifier(required=True)
    order_number = String(required=True, max_length=40)
    reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class CancelMyOrderHandler:
    @handle(CancelMyOrder)
    def cancel_my_order(self, command):
        """Customers may cancel while the order is Pending or Processing.

        Any stock the order holds goes back to the shelf in the same unit of
        work. Cancelling an already cancelled order fails.
        """
        order = find_order_by_number(command.order_number, customer_id=command.customer_id)
        order.assert_customer_cancellable()

        inventory.restore_order_stock(order)
        order.cancel(cancelled_by="customer", reason=command.reason)
        current_domain.repository_for(Order).add(order)

        logger.info("order_cancelled", order_number=order.order_number, cancelled_by="customer")
