"""Order aggregate — a customer's purchase and its lifecycle.

State Machine:
    PENDING    → PROCESSING, PAID, CANCELLED
    PAID       → PROCESSING, CANCELLED
    PROCESSING → SHIPPED, CANCELLED
    SHIPPED    → DELIVERED, CANCELLED
    DELIVERED and CANCELLED are terminal.

Every line freezes the unit price at the moment of ordering, and the order
total is the sum of the line subtotals; neither is ever recomputed from the
catalogue. ``stock_committed`` records whether the order currently holds
stock, which is what decides if a cancellation has anything to put back.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.errors import AlreadyPaid, InvalidTransition, OrderCancelled
from storefront.order.addresses import OrderAddress
from storefront.order.events import (
    OrderNotesUpdated,
    OrderPaid,
    OrderPlaced,
    OrderStatusChanged,
    OrderStockCommitted,
    OrderStockReleased,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"


class InventoryPolicy(Enum):
    IMMEDIATE = "Immediate"  # stock taken when the order is placed
    DEFERRED = "Deferred"  # stock taken when payment is confirmed


CASH_ON_DELIVERY = "COD"

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which the customer may cancel their own order
_CUSTOMER_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


def allowed_transitions(status):
    return set(_VALID_TRANSITIONS[OrderStatus(status)])


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLine:
    """One product on an order, priced as it was when the order was placed."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    sku = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=40, unique=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderLine)
    total_amount = Float(required=True, min_value=0.0)
    shipping_address = ValueObject(OrderAddress)
    billing_address = ValueObject(OrderAddress)
    payment_method = String(required=True, max_length=50)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_reference = String(max_length=255)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    inventory_policy = String(choices=InventoryPolicy, default=InventoryPolicy.IMMEDIATE.value)
    stock_committed = Boolean(default=False)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()
    cancelled_at = DateTime()

    @invariant.post
    def order_must_have_lines(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_number,
        customer_id,
        lines_data,
        shipping_address,
        billing_address=None,
        payment_method=CASH_ON_DELIVERY,
        notes=None,
        inventory_policy=InventoryPolicy.IMMEDIATE,
    ):
        """Create a new order.

        Args:
            lines_data: List of dicts with product_id, product_name, sku,
                        quantity and unit_price, as read from the catalogue.
            shipping_address: An ``OrderAddress``.
            billing_address: An ``OrderAddress``; the shipping address when omitted.
        """
        now = datetime.now(UTC)
        lines = [
            OrderLine(
                product_id=line["product_id"],
                product_name=line["product_name"],
                sku=line.get("sku"),
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                subtotal=round(line["unit_price"] * line["quantity"], 2),
            )
            for line in lines_data
        ]

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            items=lines,
            total_amount=round(sum(line.subtotal for line in lines), 2),
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            payment_method=payment_method or CASH_ON_DELIVERY,
            payment_status=PaymentStatus.PENDING.value,
            status=OrderStatus.PENDING.value,
            inventory_policy=inventory_policy.value,
            stock_committed=False,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(line.product_id),
                            "product_name": line.product_name,
                            "quantity": line.quantity,
                            "unit_price": line.unit_price,
                        }
                        for line in lines
                    ]
                ),
                total_amount=order.total_amount,
                status=order.status,
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                inventory_policy=order.inventory_policy,
                item_count=sum(line.quantity for line in lines),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def is_owned_by(self, customer_id):
        return str(self.customer_id) == str(customer_id)

    @property
    def is_paid(self):
        return self.payment_status == PaymentStatus.PAID.value

    def can_transition_to(self, target_status):
        return target_status in _VALID_TRANSITIONS[OrderStatus(self.status)]

    def assert_can_transition(self, target_status):
        """Raise ``InvalidTransition`` unless the lifecycle has this edge."""
        if not self.can_transition_to(target_status):
            raise InvalidTransition(self.status, target_status.value)

    def assert_payable(self):
        """Payment may only be taken once, and never for a cancelled order."""
        if self.is_paid:
            raise AlreadyPaid(self.order_number)
        if self.status == OrderStatus.CANCELLED.value:
            raise OrderCancelled(self.order_number)

    def assert_customer_cancellable(self):
        if OrderStatus(self.status) not in _CUSTOMER_CANCELLABLE_STATES:
            raise InvalidTransition(self.status, OrderStatus.CANCELLED.value)

    # -------------------------------------------------------------------
    # Stock bookkeeping
    # -------------------------------------------------------------------
    def record_stock_committed(self):
        if self.stock_committed:
            return
        self.stock_committed = True
        self.raise_(OrderStockCommitted(order_id=str(self.id), order_number=self.order_number))

    def record_stock_released(self):
        if not self.stock_committed:
            return
        self.stock_committed = False
        self.raise_(OrderStockReleased(order_id=str(self.id), order_number=self.order_number))

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def record_payment(self, payment_reference=None):
        """Mark the order paid and move it to PAID."""
        self.assert_payable()
        self.assert_can_transition(OrderStatus.PAID)

        previous_status = self.status
        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.status = OrderStatus.PAID.value
        if payment_reference:
            self.payment_reference = payment_reference
        self.updated_at = now

        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous_status,
                payment_reference=self.payment_reference,
                amount=self.total_amount,
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Fulfilment
    # -------------------------------------------------------------------
    def _move_to(self, target_status, changed_by=None, reason=None):
        self.assert_can_transition(target_status)

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        if target_status == OrderStatus.CANCELLED and self.cancelled_at is None:
            self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous_status,
                new_status=self.status,
                payment_status=self.payment_status,
                changed_by=changed_by,
                reason=reason,
                changed_at=now,
                cancelled_at=self.cancelled_at,
                total_amount=self.total_amount,
                placed_at=self.created_at,
            )
        )

    def mark_processing(self, changed_by=None):
        self._move_to(OrderStatus.PROCESSING, changed_by=changed_by)

    def ship(self, changed_by=None):
        self._move_to(OrderStatus.SHIPPED, changed_by=changed_by)

    def deliver(self, payment_collected=False, changed_by=None):
        """Mark the order delivered. Cash collected on delivery settles the payment."""
        self.assert_can_transition(OrderStatus.DELIVERED)
        if payment_collected:
            self.payment_status = PaymentStatus.PAID.value
        self._move_to(OrderStatus.DELIVERED, changed_by=changed_by)

    def cancel(self, cancelled_by, reason=None):
        """Move the order to CANCELLED.

        Putting stock back is the caller's job (see ``storefront.order.inventory``)
        and must happen in the same unit of work.
        """
        self._move_to(OrderStatus.CANCELLED, changed_by=cancelled_by, reason=reason)

    def transition_to(self, target_status, changed_by=None, payment_collected=False, reason=None):
        """Generic entry point used by order administration."""
        if target_status == OrderStatus.PAID:
            self.record_payment()
        elif target_status == OrderStatus.PROCESSING:
            self.mark_processing(changed_by=changed_by)
        elif target_status == OrderStatus.SHIPPED:
            self.ship(changed_by=changed_by)
        elif target_status == OrderStatus.DELIVERED:
            self.deliver(payment_collected=payment_collected, changed_by=changed_by)
        elif target_status == OrderStatus.CANCELLED:
            self.cancel(cancelled_by=changed_by, reason=reason)
        else:
            raise InvalidTransition(self.status, target_status.value)

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_notes(self, notes):
        self.notes = (notes or "").strip() or None
        self.updated_at = datetime.now(UTC)
        self.raise_(OrderNotesUpdated(order_id=str(self.id), order_number=self.order_number, notes=self.notes))
