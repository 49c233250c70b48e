"""Application tests for customers confirming delivery of cash-on-delivery orders."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.errors import InvalidTransition
from storefront.order.delivery import ConfirmDelivery
from storefront.order.order import OrderStatus, PaymentStatus
from storefront.order.status import UpdateOrderStatus


def _ship(order):
    for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED):
        current_domain.process(UpdateOrderStatus(order_id=str(order.id), status=status.value), asynchronous=False)
    return order


def _confirm(order, payment_received=True, customer_id="cust-001"):
    current_domain.process(
        ConfirmDelivery(customer_id=customer_id, order_number=order.order_number, payment_received=payment_received),
        asynchronous=False,
    )


class TestConfirmDelivery:
    def test_cash_collected(self, place_order, make_product, reload_order):
        order = _ship(place_order([(make_product(), 1)]))
        _confirm(order)
        order = reload_order(order)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.payment_status == PaymentStatus.PAID.value

    def test_delivered_without_payment(self, place_order, make_product, reload_order):
        order = _ship(place_order([(make_product(), 1)]))
        _confirm(order, payment_received=False)
        order = reload_order(order)
        assert order.status == OrderStatus.DELIVERED.value
        assert order.payment_status == PaymentStatus.PENDING.value

    def test_not_yet_shipped(self, place_order, make_product):
        order = place_order([(make_product(), 1)])
        with pytest.raises(InvalidTransition):
            _confirm(order)

    def test_card_orders_are_not_customer_confirmed(self, place_order, make_product):
        order = _ship(place_order([(make_product(), 1)], payment_method="card"))
        with pytest.raises(ValidationError):
            _confirm(order)
