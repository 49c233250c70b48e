"""BDD fixtures and step definitions for the shopping cart."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartItem, find_cart
from storefront.cart.queries import cart_view
from storefront.catalogue.administration import ChangeProductPrice, CreateProduct
from storefront.errors import StorefrontError


@pytest.fixture()
def error():
    return {"exc": None}


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


def _line(customer_id, product_id):
    cart = find_cart(customer_id)
    return cart.line_for(product_id) if cart else None


@given(parsers.cfparse('a product "{name}" priced {price:g} with {stock:d} units in stock'))
def _(products, name, price, stock):
    products[name] = current_domain.process(CreateProduct(name=name, price=price, stock=stock), asynchronous=False)


@given(parsers.cfparse('the price of "{name}" changes to {price:g}'))
def _(products, name, price):
    current_domain.process(ChangeProductPrice(product_id=products[name], price=price), asynchronous=False)


@given(parsers.cfparse('the customer adds {quantity:d} "{name}" to the cart'))
@when(parsers.cfparse('the customer adds {quantity:d} "{name}" to the cart'))
def _(products, error, customer_id, quantity, name):
    try:
        current_domain.process(
            AddToCart(customer_id=customer_id, product_id=products[name], quantity=quantity),
            asynchronous=False,
        )
    except (StorefrontError, ValidationError) as exc:
        error["exc"] = exc


@when(parsers.cfparse('the customer changes "{name}" to {quantity:d}'))
def _(products, error, customer_id, name, quantity):
    line = _line(customer_id, products[name])
    try:
        current_domain.process(
            UpdateCartItem(customer_id=customer_id, item_id=str(line.id), quantity=quantity),
            asynchronous=False,
        )
    except (StorefrontError, ValidationError) as exc:
        error["exc"] = exc


@when(parsers.cfparse('the customer removes "{name}" from the cart'))
def _(products, customer_id, name):
    line = _line(customer_id, products[name])
    current_domain.process(RemoveFromCart(customer_id=customer_id, item_id=str(line.id)), asynchronous=False)


@then(parsers.cfparse('the cart holds {quantity:d} "{name}"'))
def _(products, customer_id, quantity, name):
    line = _line(customer_id, products[name])
    assert (line.quantity if line else 0) == quantity


@then(parsers.cfparse("the cart total is {total:g}"))
def _(customer_id, total):
    assert cart_view(customer_id)["total"] == total


@then(parsers.cfparse('the request is rejected with "{code}"'))
def _(error, code):
    assert isinstance(error["exc"], StorefrontError)
    assert error["exc"].code == code
