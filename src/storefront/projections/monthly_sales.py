"""Monthly sales projection — figures for the admin dashboard.

Keyed by month (YYYY-MM) of order placement. Revenue counts every order that
has not been cancelled; a cancellation takes the order back out of the month
it was placed in.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.order import Order, OrderStatus


@storefront.projection
class MonthlySales:
    month = String(identifier=True, required=True, max_length=7)  # YYYY-MM
    orders_placed = Integer(default=0)
    orders_cancelled = Integer(default=0)
    revenue = Float(default=0.0)


def month_key(moment):
    return moment.strftime("%Y-%m")


def _get_or_create(key):
    repo = current_domain.repository_for(MonthlySales)
    try:
        return repo.get(key)
    except ObjectNotFoundError:
        return MonthlySales(month=key, orders_placed=0, orders_cancelled=0, revenue=0.0)


@storefront.projector(projector_for=MonthlySales, aggregates=[Order])
class MonthlySalesProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        record = _get_or_create(month_key(event.placed_at))
        record.orders_placed = (record.orders_placed or 0) + 1
        record.revenue = round((record.revenue or 0.0) + (event.total_amount or 0.0), 2)
        current_domain.repository_for(MonthlySales).add(record)

    @on(OrderStatusChanged)
    def on_order_status_changed(self, event):
        if event.new_status != OrderStatus.CANCELLED.value or event.placed_at is None:
            return

        record = _get_or_create(month_key(event.placed_at))
        record.orders_cancelled = (record.orders_cancelled or 0) + 1
        record.revenue = round((record.revenue or 0.0) - (event.total_amount or 0.0), 2)
        current_domain.repository_for(MonthlySales).add(record)
