import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay before the domain is imported, so that
    `domain.toml` is read with the right environment.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    from storefront.payment import FakeGateway, reset_gateway, set_gateway

    ctx = _storefront_domain.domain_context()
    ctx.push()
    set_gateway(FakeGateway())

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_gateway()
    ctx.pop()


# ---------------------------------------------------------------------------
# Catalogue and order builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def make_category():
    from protean import current_domain
    from storefront.catalogue.management import CreateCategory

    def _make(name="Electronics", description=None):
        return current_domain.process(CreateCategory(name=name, description=description), asynchronous=False)

    return _make


@pytest.fixture()
def make_product():
    """Create a product through the admin command and return it reloaded."""
    from protean import current_domain
    from storefront.catalogue.administration import CreateProduct
    from storefront.catalogue.product import Product

    def _make(name="Wireless Mouse", price=25.0, stock=10, is_available=True, **kwargs):
        product_id = current_domain.process(
            CreateProduct(name=name, price=price, stock=stock, is_available=is_available, **kwargs),
            asynchronous=False,
        )
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def reload_product():
    from protean import current_domain
    from storefront.catalogue.product import Product

    def _reload(product):
        return current_domain.repository_for(Product).get(product if isinstance(product, str) else product.id)

    return _reload


@pytest.fixture()
def shipping_address():
    return {
        "street": "12 Harbour Road",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
    }


@pytest.fixture()
def place_order(customer_id, shipping_address):
    """Place a cash-on-delivery order for ``[(product, quantity), ...]`` and return it."""
    import json

    from protean import current_domain
    from storefront.order.creation import CreateOrderFromItems
    from storefront.order.order import Order

    def _place(lines, customer=None, payment_method="COD"):
        order_id = current_domain.process(
            CreateOrderFromItems(
                customer_id=customer or customer_id,
                items=json.dumps([{"product_id": str(p.id), "quantity": q} for p, q in lines]),
                shipping_address=json.dumps(shipping_address),
                phone_number="+1 217 555 0100",
                payment_method=payment_method,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Order).get(order_id)

    return _place


@pytest.fixture()
def checkout(customer_id, shipping_address):
    """Fill the customer's cart with ``[(product, quantity), ...]`` and check out."""
    import json

    from protean import current_domain
    from storefront.cart.items import AddToCart
    from storefront.order.creation import CreateOrderFromCart
    from storefront.order.order import Order

    def _checkout(lines, customer=None, payment_method="card"):
        customer = customer or customer_id
        for product, quantity in lines:
            current_domain.process(
                AddToCart(customer_id=customer, product_id=str(product.id), quantity=quantity),
                asynchronous=False,
            )
        order_id = current_domain.process(
            CreateOrderFromCart(
                customer_id=customer,
                shipping_address=json.dumps(shipping_address),
                phone_number="+1 217 555 0100",
                payment_method=payment_method,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Order).get(order_id)

    return _checkout


@pytest.fixture()
def reload_order():
    from protean import current_domain
    from storefront.order.order import Order

    def _reload(order):
        return current_domain.repository_for(Order).get(order.id)

    return _reload
