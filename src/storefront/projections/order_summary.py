"""Order summary — listing view for customers, administrators and the dashboard."""

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.events import OrderPaid, OrderPlaced, OrderStatusChanged
from storefront.order.order import Order, OrderStatus, PaymentStatus


@storefront.projection
class OrderSummary:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(required=True, max_length=40)
    customer_id = Identifier(required=True)
    status = String(required=True)
    payment_status = String(required=True)
    payment_method = String(max_length=50)
    total_amount = Float(default=0.0)
    item_count = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()
    cancelled_at = DateTime()


@storefront.projector(projector_for=OrderSummary, aggregates=[Order])
class OrderSummaryProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(OrderSummary).add(
            OrderSummary(
                order_id=event.order_id,
                order_number=event.order_number,
                customer_id=event.customer_id,
                status=event.status,
                payment_status=event.payment_status,
                payment_method=event.payment_method,
                total_amount=event.total_amount,
                item_count=event.item_count,
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    @on(OrderPaid)
    def on_order_paid(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.status = OrderStatus.PAID.value
        summary.payment_status = PaymentStatus.PAID.value
        summary.updated_at = event.paid_at
        repo.add(summary)

    @on(OrderStatusChanged)
    def on_order_status_changed(self, event):
        repo = current_domain.repository_for(OrderSummary)
        summary = repo.get(event.order_id)
        summary.status = event.new_status
        summary.payment_status = event.payment_status
        summary.updated_at = event.changed_at
        if event.cancelled_at:
            summary.cancelled_at = event.cancelled_at
        repo.add(summary)
