"""Product aggregate root: what is for sale, at what price, and how many are left.

``stock`` is the only inventory counter in the system. It is changed by:

* order placement with immediate reservation (``commit_stock``)
* payment confirmation of a deferred order (``commit_stock``)
* cancellation of an order whose stock was taken (``restore_stock``)
* an administrator setting the level directly (``adjust_stock``)

The field itself refuses negative values, and every write of a Product is
version-checked by the repository, so two requests racing on the last unit
cannot both succeed.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    ProductAvailabilityChanged,
    ProductCreated,
    ProductDetailsUpdated,
    ProductPriceChanged,
    ProductStockAdjusted,
    StockCommitted,
    StockRestored,
)
from storefront.domain import storefront
from storefront.errors import InsufficientStock, ProductUnavailable


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    sku: String(max_length=50)
    description: Text()
    price: Float(required=True, min_value=0.0)
    old_price: Float(min_value=0.0)
    stock: Integer(default=0, min_value=0)
    is_available: Boolean(default=True)
    category_id: Identifier()
    image_url: String(max_length=500)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(
        cls,
        name,
        price,
        stock=0,
        description=None,
        sku=None,
        old_price=None,
        category_id=None,
        image_url=None,
        is_available=True,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            price=price,
            stock=stock,
            description=description or name,
            sku=sku,
            old_price=old_price,
            category_id=category_id,
            image_url=image_url,
            is_available=is_available,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                price=product.price,
                stock=product.stock,
                category_id=category_id,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_details(self, name=None, description=None, sku=None, image_url=None, category_id=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if sku is not None:
            self.sku = sku
        if image_url is not None:
            self.image_url = image_url
        if category_id is not None:
            self.category_id = category_id
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductDetailsUpdated(
                product_id=self.id,
                name=self.name,
                category_id=self.category_id,
            )
        )

    def change_price(self, new_price, old_price=None):
        """Set a new selling price.

        The outgoing price becomes ``old_price`` (shown struck-through on the
        storefront) unless one is given explicitly.
        """
        if new_price is None or new_price < 0:
            raise ValidationError({"price": ["Price must be zero or more"]})

        previous_price = self.price
        self.old_price = old_price if old_price is not None else previous_price
        self.price = new_price
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductPriceChanged(
                product_id=self.id,
                previous_price=previous_price,
                new_price=new_price,
            )
        )

    def adjust_stock(self, new_stock, reason=None):
        if new_stock is None or new_stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        previous_stock = self.stock
        self.stock = new_stock
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductStockAdjusted(
                product_id=self.id,
                previous_stock=previous_stock,
                new_stock=new_stock,
                reason=reason,
            )
        )

    def set_availability(self, is_available):
        if self.is_available == is_available:
            return

        self.is_available = is_available
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductAvailabilityChanged(product_id=self.id, is_available=is_available))

    # -------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------
    def ensure_orderable(self, quantity):
        """Check the product can be put on a new order. Mutates nothing."""
        if not self.is_available:
            raise ProductUnavailable(str(self.id), self.name)
        self.ensure_in_stock(quantity)

    def ensure_in_stock(self, quantity):
        if self.stock < quantity:
            raise InsufficientStock(str(self.id), self.name, available=self.stock, requested=quantity)

    def commit_stock(self, quantity, order_number):
        """Take ``quantity`` units for an order. Fails without touching stock when short."""
        self.ensure_in_stock(quantity)

        now = datetime.now(UTC)
        self.stock -= quantity
        self.updated_at = now

        self.raise_(
            StockCommitted(
                product_id=self.id,
                order_number=order_number,
                quantity=quantity,
                remaining=self.stock,
                committed_at=now,
            )
        )

    def restore_stock(self, quantity, order_number):
        now = datetime.now(UTC)
        self.stock += quantity
        self.updated_at = now

        self.raise_(
            StockRestored(
                product_id=self.id,
                order_number=order_number,
                quantity=quantity,
                remaining=self.stock,
                restored_at=now,
            )
        )
