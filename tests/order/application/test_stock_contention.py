"""Two placements racing for the last units of a product."""

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError
from storefront.catalogue.product import Product
from storefront.order import inventory


def test_stale_product_cannot_be_committed_twice(make_product, reload_product):
    mouse = make_product(stock=1)
    repo = current_domain.repository_for(Product)
    first, second = repo.get(mouse.id), repo.get(mouse.id)

    first.commit_stock(1, "ORD-A")
    repo.add(first)

    second.commit_stock(1, "ORD-B")
    with pytest.raises(ExpectedVersionError):
        repo.add(second)

    assert reload_product(mouse).stock == 0


def test_interleaved_take_stock_sells_each_unit_once(make_product, reload_product):
    mouse = make_product(stock=1)
    quantities = {str(mouse.id): 1}

    # Both requests pass the stock check before either writes.
    seen_by_a = inventory.check_stock(quantities)
    seen_by_b = inventory.check_stock(quantities)

    inventory.take_stock("ORD-A", quantities, products=seen_by_a)
    with pytest.raises(ExpectedVersionError):
        inventory.take_stock("ORD-B", quantities, products=seen_by_b)

    assert reload_product(mouse).stock == 0
