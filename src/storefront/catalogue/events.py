"""Domain events for the Category and Product aggregates."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the catalogue."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)


@storefront.event(part_of="Category")
class CategoryUpdated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    is_active: Boolean()


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue with its opening stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """The selling price changed. Orders already placed keep their own unit prices."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Float(required=True)
    new_price: Float(required=True)


@storefront.event(part_of="Product")
class ProductStockAdjusted:
    """An administrator set the stock level directly."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    reason: String()


@storefront.event(part_of="Product")
class ProductAvailabilityChanged:
    __version__ = 1

    product_id: Identifier(required=True)
    is_available: Boolean(required=True)


@storefront.event(part_of="Product")
class StockCommitted:
    """Stock was taken for an order."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_number: String(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
    committed_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockRestored:
    """Stock taken for an order was put back after the order was cancelled."""

    __version__ = 1

    product_id: Identifier(required=True)
    order_number: String(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)
    restored_at: DateTime(required=True)
