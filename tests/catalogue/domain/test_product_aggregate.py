"""Tests for the Product aggregate: creation, pricing, and stock movements."""

import pytest
from protean.exceptions import ValidationError
from storefront.catalogue.events import (
    ProductCreated,
    ProductPriceChanged,
    ProductStockAdjusted,
    StockCommitted,
    StockRestored,
)
from storefront.catalogue.product import Product
from storefront.errors import InsufficientStock, ProductUnavailable


def _make_product(**overrides):
    params = {"name": "Desk Lamp", "price": 40.0, "stock": 5}
    params.update(overrides)
    return Product.create(**params)


class TestProductCreation:
    def test_create_sets_fields(self):
        product = _make_product(sku="LAMP-1")
        assert product.name == "Desk Lamp"
        assert product.price == 40.0
        assert product.stock == 5
        assert product.is_available is True
        assert product.sku == "LAMP-1"
        assert product.created_at is not None

    def test_description_defaults_to_name(self):
        product = _make_product()
        assert product.description == "Desk Lamp"

    def test_create_raises_event(self):
        product = _make_product()
        assert len(product._events) == 1
        assert isinstance(product._events[0], ProductCreated)
        assert product._events[0].stock == 5

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-1.0)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(stock=-1)


class TestPriceChanges:
    def test_outgoing_price_becomes_old_price(self):
        product = _make_product()
        product.change_price(35.0)
        assert product.price == 35.0
        assert product.old_price == 40.0

    def test_explicit_old_price_wins(self):
        product = _make_product()
        product.change_price(35.0, old_price=50.0)
        assert product.old_price == 50.0

    def test_price_change_event(self):
        product = _make_product()
        product._events.clear()
        product.change_price(30.0)
        event = product._events[0]
        assert isinstance(event, ProductPriceChanged)
        assert event.previous_price == 40.0
        assert event.new_price == 30.0

    def test_negative_price_change_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.change_price(-5.0)


class TestStockAdjustment:
    def test_adjust_sets_level(self):
        product = _make_product()
        product._events.clear()
        product.adjust_stock(12, reason="recount")
        assert product.stock == 12
        assert isinstance(product._events[0], ProductStockAdjusted)
        assert product._events[0].previous_stock == 5

    def test_adjust_to_negative_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.adjust_stock(-3)
        assert product.stock == 5


class TestOrderability:
    def test_available_and_in_stock(self):
        _make_product().ensure_orderable(5)

    def test_unavailable_product(self):
        product = _make_product(is_available=False)
        with pytest.raises(ProductUnavailable):
            product.ensure_orderable(1)

    def test_insufficient_stock_message(self):
        product = _make_product(stock=2)
        with pytest.raises(InsufficientStock) as exc:
            product.ensure_orderable(3)
        assert exc.value.available == 2
        assert exc.value.requested == 3
        assert exc.value.message == 'Insufficient stock for "Desk Lamp". Available: 2'

    def test_unavailability_reported_before_stock(self):
        product = _make_product(stock=0, is_available=False)
        with pytest.raises(ProductUnavailable):
            product.ensure_orderable(1)


class TestStockCommitAndRestore:
    def test_commit_decrements(self):
        product = _make_product()
        product._events.clear()
        product.commit_stock(3, "ORD-1")
        assert product.stock == 2
        event = product._events[0]
        assert isinstance(event, StockCommitted)
        assert event.order_number == "ORD-1"
        assert event.remaining == 2

    def test_commit_whole_stock(self):
        product = _make_product()
        product.commit_stock(5, "ORD-1")
        assert product.stock == 0

    def test_commit_more_than_available_leaves_stock_untouched(self):
        product = _make_product()
        product._events.clear()
        with pytest.raises(InsufficientStock):
            product.commit_stock(6, "ORD-1")
        assert product.stock == 5
        assert product._events == []

    def test_restore_increments(self):
        product = _make_product()
        product.commit_stock(2, "ORD-1")
        product._events.clear()
        product.restore_stock(2, "ORD-1")
        assert product.stock == 5
        assert isinstance(product._events[0], StockRestored)

    def test_set_availability_is_idempotent(self):
        product = _make_product()
        product._events.clear()
        product.set_availability(True)
        assert product._events == []
        product.set_availability(False)
        assert product.is_available is False
        assert len(product._events) == 1
