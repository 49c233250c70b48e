"""BDD tests for order cancellation by the customer."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, when
from storefront.order.cancellation import CancelMyOrder
from storefront.order.order import Order

scenarios("features/order_cancellation.feature")


def _cancel(shop, attempt, customer):
    order = current_domain.repository_for(Order).get(shop["order_id"])
    attempt(CancelMyOrder(customer_id=customer, order_number=order.order_number, reason="Changed my mind"))


@when("the customer cancels the order")
def _(shop, attempt, customer_id):
    _cancel(shop, attempt, customer_id)


@when(parsers.cfparse('customer "{customer}" cancels the order'))
def _(shop, attempt, customer):
    _cancel(shop, attempt, customer)
