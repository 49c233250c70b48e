"""Repository lookups for orders."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.errors import OrderNotFound
from storefront.order.order import Order


def load_order(order_id):
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound(str(order_id)) from None


def find_order_by_number(order_number, customer_id=None):
    """Fetch an order by its number.

    With ``customer_id`` the order must also belong to that customer; an order
    owned by someone else is reported as not found.
    """
    orders = current_domain.repository_for(Order)._dao.query.filter(order_number=order_number).all().items
    if not orders:
        raise OrderNotFound(order_number)

    order = orders[0]
    if customer_id is not None and not order.is_owned_by(customer_id):
        raise OrderNotFound(order_number)
    return order


def order_number_taken(order_number) -> bool:
    return bool(current_domain.repository_for(Order)._dao.query.filter(order_number=order_number).all().total)
