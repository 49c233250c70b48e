"""Read-side queries over orders."""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.queries import count_products
from storefront.order.order import Order, OrderStatus, allowed_transitions
from storefront.pagination import Page, iterate, paginate, sort_key
from storefront.projections.monthly_sales import MonthlySales, month_key
from storefront.projections.order_summary import OrderSummary

ORDER_SORT_FIELDS = {"created_at", "updated_at", "total_amount", "status", "order_number"}


def list_customer_orders(customer_id, page=None, limit=None) -> Page:
    """The customer's own orders, newest first."""
    queryset = current_domain.repository_for(OrderSummary)._dao.query.filter(customer_id=str(customer_id))
    return paginate(queryset, page=page, limit=limit, order_by="-created_at")


def list_orders(
    status=None,
    payment_status=None,
    customer_id=None,
    search=None,
    sort_by=None,
    order=None,
    page=None,
    limit=None,
) -> Page:
    """Administrator listing with filters, sorting and pagination."""
    queryset = current_domain.repository_for(OrderSummary)._dao.query
    if status:
        queryset = queryset.filter(status=status)
    if payment_status:
        queryset = queryset.filter(payment_status=payment_status)
    if customer_id:
        queryset = queryset.filter(customer_id=str(customer_id))
    if search:
        queryset = queryset.filter(order_number__icontains=search.strip())

    return paginate(
        queryset,
        page=page,
        limit=limit,
        order_by=sort_key(sort_by, order, ORDER_SORT_FIELDS, default="created_at"),
    )


def order_detail(order: Order) -> dict:
    """Full view of an order, with its lines as they were priced at placement."""
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "payment_reference": order.payment_reference,
        "total_amount": order.total_amount,
        "inventory_policy": order.inventory_policy,
        "stock_committed": order.stock_committed,
        "notes": order.notes,
        "shipping_address": order.shipping_address.to_dict() if order.shipping_address else None,
        "billing_address": order.billing_address.to_dict() if order.billing_address else None,
        "shipping_address_text": order.shipping_address.formatted() if order.shipping_address else None,
        "items": [
            {
                "item_id": str(line.id),
                "product_id": str(line.product_id),
                "product_name": line.product_name,
                "sku": line.sku,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "subtotal": line.subtotal,
            }
            for line in order.items
        ],
        "allowed_transitions": sorted(status.value for status in allowed_transitions(order.status)),
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
        "cancelled_at": order.cancelled_at.isoformat() if order.cancelled_at else None,
    }


def _recent_months(count, today):
    year, month = today.year, today.month
    keys = []
    for _ in range(count):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


def dashboard(months=6, today=None) -> dict:
    """Headline figures: catalogue size, order count, revenue, and sales per month."""
    today = today or datetime.now(UTC)
    summaries = current_domain.repository_for(OrderSummary)._dao.query
    sales_repo = current_domain.repository_for(MonthlySales)

    monthly = []
    for key in _recent_months(months, today):
        try:
            record = sales_repo.get(key)
            monthly.append({"month": key, "orders": record.orders_placed, "revenue": record.revenue})
        except ObjectNotFoundError:
            monthly.append({"month": key, "orders": 0, "revenue": 0.0})

    total_revenue = sum(record.revenue or 0.0 for record in iterate(sales_repo._dao.query))

    return {
        "total_products": count_products(),
        "total_orders": summaries.all().total,
        "cancelled_orders": summaries.filter(status=OrderStatus.CANCELLED.value).all().total,
        "total_revenue": round(total_revenue, 2),
        "monthly_sales": monthly,
        "current_month": month_key(today),
    }
