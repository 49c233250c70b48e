"""Order CSV export — one row per order line."""

import csv
import io

from protean.utils.globals import current_domain

from storefront.order.order import Order
from storefront.pagination import iterate

ORDER_EXPORT_COLUMNS = [
    "order_id",
    "order_number",
    "created_at",
    "status",
    "payment_status",
    "payment_method",
    "total_amount",
    "customer_id",
    "product_name",
    "product_sku",
    "quantity",
    "unit_price",
    "subtotal",
    "shipping_address",
]


def export_orders_csv(status=None) -> str | None:
    """Render orders, newest first, or None when there is nothing to export."""
    queryset = current_domain.repository_for(Order)._dao.query.order_by("-created_at")
    if status:
        queryset = queryset.filter(status=status)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=ORDER_EXPORT_COLUMNS)
    writer.writeheader()

    rows = 0
    for order in iterate(queryset):
        address = order.shipping_address.formatted() if order.shipping_address else ""
        for line in order.items:
            writer.writerow(
                {
                    "order_id": str(order.id),
                    "order_number": order.order_number,
                    "created_at": order.created_at.isoformat() if order.created_at else "",
                    "status": order.status,
                    "payment_status": order.payment_status,
                    "payment_method": order.payment_method,
                    "total_amount": order.total_amount,
                    "customer_id": str(order.customer_id),
                    "product_name": line.product_name,
                    "product_sku": line.sku or "",
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "subtotal": line.subtotal,
                    "shipping_address": address,
                }
            )
            rows += 1

    return buffer.getvalue() if rows else None
