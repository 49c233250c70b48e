"""Application tests for product administration commands and catalogue queries."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.catalogue.administration import (
    AdjustStock,
    ChangeProductPrice,
    CreateProduct,
    DeleteProduct,
    SetProductAvailability,
    UpdateProductDetails,
)
from storefront.catalogue.queries import count_products, list_products
from storefront.errors import CategoryNotFound, ProductNotFound


class TestCreateProduct:
    def test_defaults(self, reload_product):
        product_id = current_domain.process(CreateProduct(name="Kettle", price=30.0), asynchronous=False)
        product = reload_product(product_id)
        assert product.stock == 10
        assert product.image_url == "/img/product-placeholder.png"
        assert product.description == "Kettle"
        assert product.is_available is True

    def test_explicit_stock_of_zero_is_kept(self, make_product):
        assert make_product(stock=0).stock == 0

    def test_unknown_category(self):
        with pytest.raises(CategoryNotFound):
            current_domain.process(CreateProduct(name="Kettle", price=30.0, category_id="missing"), asynchronous=False)

    def test_negative_price(self):
        with pytest.raises(ValidationError):
            current_domain.process(CreateProduct(name="Kettle", price=-1.0), asynchronous=False)


class TestUpdateProduct:
    def test_update_details(self, make_product, make_category, reload_product):
        product = make_product()
        category_id = make_category(name="Peripherals")
        current_domain.process(
            UpdateProductDetails(product_id=str(product.id), name="Silent Mouse", category_id=category_id),
            asynchronous=False,
        )
        product = reload_product(product)
        assert product.name == "Silent Mouse"
        assert str(product.category_id) == category_id

    def test_change_price(self, make_product, reload_product):
        product = make_product(price=25.0)
        current_domain.process(ChangeProductPrice(product_id=str(product.id), price=19.99), asynchronous=False)
        product = reload_product(product)
        assert product.price == 19.99
        assert product.old_price == 25.0

    def test_adjust_stock(self, make_product, reload_product):
        product = make_product(stock=10)
        current_domain.process(AdjustStock(product_id=str(product.id), stock=3, reason="damaged"), asynchronous=False)
        assert reload_product(product).stock == 3

    def test_adjust_stock_negative(self, make_product):
        product = make_product()
        with pytest.raises(ValidationError):
            current_domain.process(AdjustStock(product_id=str(product.id), stock=-1), asynchronous=False)

    def test_set_availability(self, make_product, reload_product):
        product = make_product()
        current_domain.process(
            SetProductAvailability(product_id=str(product.id), is_available=False),
            asynchronous=False,
        )
        assert reload_product(product).is_available is False

    def test_delete(self, make_product):
        product = make_product()
        current_domain.process(DeleteProduct(product_id=str(product.id)), asynchronous=False)
        assert count_products() == 0

    def test_delete_unknown(self):
        with pytest.raises(ProductNotFound):
            current_domain.process(DeleteProduct(product_id="missing"), asynchronous=False)


class TestListProducts:
    def test_pagination(self, make_product):
        for i in range(5):
            make_product(name=f"Item {i}", price=float(i + 1))
        page = list_products(page=2, limit=2, sort_by="price", order="asc")
        assert [p.price for p in page.items] == [3.0, 4.0]
        assert page.total == 5
        assert page.pagination() == {
            "page": 2,
            "limit": 2,
            "total": 5,
            "pages": 3,
            "has_next": True,
            "has_prev": True,
        }

    def test_search_is_case_insensitive(self, make_product):
        make_product(name="Wireless Mouse")
        make_product(name="Keyboard")
        assert [p.name for p in list_products(search="MOUSE").items] == ["Wireless Mouse"]

    def test_available_only(self, make_product):
        make_product(name="On sale")
        make_product(name="Withdrawn", is_available=False)
        assert [p.name for p in list_products(available_only=True).items] == ["On sale"]

    def test_category_filter(self, make_product, make_category):
        category_id = make_category(name="Peripherals")
        make_product(name="Mouse", category_id=category_id)
        make_product(name="Lamp")
        assert [p.name for p in list_products(category_id=category_id).items] == ["Mouse"]

    def test_unknown_sort_field(self):
        with pytest.raises(ValidationError):
            list_products(sort_by="password")

    def test_limit_is_capped(self, make_product):
        make_product()
        assert list_products(limit=10_000).limit == 100
