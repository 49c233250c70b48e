"""Order administration — status changes, single and bulk.

Every change goes through the order state machine, with its stock effects:
cancelling an order that holds stock puts it back, and moving an order that
holds none into Paid, Processing or Shipped takes it first, so an order can
never be fulfilled without its inventory having been taken.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import StorefrontError
from storefront.order import inventory
from storefront.order.lookups import load_order
from storefront.order.order import Order, OrderStatus

_STOCK_HOLDING_STATES = {OrderStatus.PAID, OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED}


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(choices=OrderStatus)
    notes = Text()
    payment_collected = Boolean(default=False)
    reason = String(max_length=500)


@storefront.command(part_of="Order")
class BulkUpdateOrderStatus:
    order_ids = Text(required=True)  # JSON: list of order ids
    status = String(required=True, choices=OrderStatus)


def apply_transition(order, target, changed_by="admin", payment_collected=False, reason=None):
    """Move ``order`` to ``target`` along with the stock movement the move implies."""
    order.assert_can_transition(target)
    if target == OrderStatus.PAID:
        order.assert_payable()

    if target == OrderStatus.CANCELLED:
        inventory.restore_order_stock(order)
    elif target in _STOCK_HOLDING_STATES:
        inventory.commit_order_stock(order)

    order.transition_to(target, changed_by=changed_by, payment_collected=payment_collected, reason=reason)


def _parse_order_ids(raw):
    try:
        order_ids = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        raise ValidationError({"order_ids": ["Order ids must be a JSON list"]}) from None

    if not isinstance(order_ids, list) or not order_ids:
        raise ValidationError({"order_ids": ["At least one order id is required"]})

    return list(dict.fromkeys(str(order_id) for order_id in order_ids))


@storefront.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        order = load_order(command.order_id)

        if command.status:
            apply_transition(
                order,
                OrderStatus(command.status),
                payment_collected=bool(command.payment_collected),
                reason=command.reason,
            )
        if command.notes is not None:
            order.update_notes(command.notes)

        current_domain.repository_for(Order).add(order)
        logger.info("order_updated", order_number=order.order_number, status=order.status)

    @handle(BulkUpdateOrderStatus)
    def bulk_update_order_status(self, command):
        """Apply one status to many orders.

        Orders that are missing, or cannot make the move, are skipped and
        reported with the reason; the others are updated.
        """
        target = OrderStatus(command.status)
        repo = current_domain.repository_for(Order)
        updated, skipped = [], {}

        for order_id in _parse_order_ids(command.order_ids):
            try:
                order = load_order(order_id)
                apply_transition(order, target)
            except StorefrontError as exc:
                skipped[order_id] = exc.message
                continue

            repo.add(order)
            updated.append(order_id)

        logger.info("orders_bulk_updated", status=target.value, updated=len(updated), skipped=len(skipped))
        return {"updated": updated, "skipped": skipped}
