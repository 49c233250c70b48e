"""Shared BDD fixtures and step definitions for orders."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.cart.items import AddToCart
from storefront.catalogue.administration import CreateProduct, SetProductAvailability
from storefront.catalogue.product import Product
from storefront.errors import StorefrontError
from storefront.order.creation import CreateOrderFromCart, CreateOrderFromItems
from storefront.order.order import Order
from storefront.order.status import UpdateOrderStatus

ADDRESS = json.dumps(
    {
        "street": "12 Harbour Road",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
    }
)
PHONE = "+1 217 555 0100"


@pytest.fixture()
def error():
    """Container for the business error raised by a When step."""
    return {"exc": None}


@pytest.fixture()
def shop():
    """Products by name and the order under test."""
    return {"products": {}, "order_id": None}


def _attempt(error, command):
    try:
        return current_domain.process(command, asynchronous=False)
    except (StorefrontError, ValidationError) as exc:
        error["exc"] = exc
        return None


@pytest.fixture()
def attempt(error):
    """Process a command, capturing any business or validation error in ``error``."""
    return lambda command: _attempt(error, command)


@pytest.fixture()
def delivery():
    return {"shipping_address": ADDRESS, "phone_number": PHONE}


def _order(shop):
    return current_domain.repository_for(Order).get(shop["order_id"])


def _product(shop, name):
    return current_domain.repository_for(Product).get(shop["products"][name])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:g} with {stock:d} units in stock'))
def _(shop, name, price, stock):
    shop["products"][name] = current_domain.process(
        CreateProduct(name=name, price=price, stock=stock),
        asynchronous=False,
    )


@given(parsers.cfparse('the product "{name}" is withdrawn from sale'))
def _(shop, name):
    current_domain.process(
        SetProductAvailability(product_id=shop["products"][name], is_available=False),
        asynchronous=False,
    )


@given(parsers.cfparse('the customer has placed an order for {quantity:d} "{name}"'))
def _(shop, customer_id, quantity, name):
    shop["order_id"] = current_domain.process(
        CreateOrderFromItems(
            customer_id=customer_id,
            items=json.dumps([{"product_id": shop["products"][name], "quantity": quantity}]),
            shipping_address=ADDRESS,
            phone_number=PHONE,
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('the customer has {quantity:d} "{name}" in the cart'))
def _(shop, customer_id, quantity, name):
    current_domain.process(
        AddToCart(customer_id=customer_id, product_id=shop["products"][name], quantity=quantity),
        asynchronous=False,
    )


@given(parsers.cfparse('the customer has checked out paying by "{method}"'))
def _(shop, customer_id, method):
    shop["order_id"] = current_domain.process(
        CreateOrderFromCart(
            customer_id=customer_id,
            shipping_address=ADDRESS,
            phone_number=PHONE,
            payment_method=method,
        ),
        asynchronous=False,
    )


@given(parsers.cfparse('the order has been moved to "{status}"'))
def _(shop, status):
    current_domain.process(UpdateOrderStatus(order_id=shop["order_id"], status=status), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the administrator moves the order to "{status}"'))
def _(shop, error, status):
    try:
        current_domain.process(UpdateOrderStatus(order_id=shop["order_id"], status=status), asynchronous=False)
    except (StorefrontError, ValidationError) as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the product "{name}" has {stock:d} units in stock'))
def _(shop, name, stock):
    assert _product(shop, name).stock == stock


@then(parsers.cfparse('the order status is "{status}"'))
def _(shop, status):
    assert _order(shop).status == status


@then(parsers.cfparse('the payment status is "{payment_status}"'))
def _(shop, payment_status):
    assert _order(shop).payment_status == payment_status


@then(parsers.cfparse('the request is rejected with "{code}"'))
def _(error, code):
    assert isinstance(error["exc"], StorefrontError)
    assert error["exc"].code == code


@then("the request is rejected as invalid")
def _(error):
    assert isinstance(error["exc"], ValidationError)


@then("no order is recorded")
def _(shop):
    assert shop["order_id"] is None
    assert current_domain.repository_for(Order)._dao.query.all().total == 0
