"""Product administration — commands and handler.

Covers creating, editing, re-pricing, re-stocking, switching availability and
deleting products. Re-pricing never reaches into existing orders: order lines
carry their own unit price.
"""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.lookups import load_category, load_product
from storefront.catalogue.product import Product
from storefront.domain import logger, storefront
from storefront.settings import default_product_stock, placeholder_image


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    old_price: Float(min_value=0.0)
    stock: Integer(min_value=0)
    description: Text()
    sku: String(max_length=50)
    category_id: Identifier()
    image_url: String(max_length=500)
    is_available: Boolean(default=True)


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    sku: String(max_length=50)
    category_id: Identifier()
    image_url: String(max_length=500)


@storefront.command(part_of="Product")
class ChangeProductPrice:
    product_id: Identifier(required=True)
    price: Float(required=True, min_value=0.0)
    old_price: Float(min_value=0.0)


@storefront.command(part_of="Product")
class AdjustStock:
    product_id: Identifier(required=True)
    stock: Integer(required=True, min_value=0)
    reason: String(max_length=255)


@storefront.command(part_of="Product")
class SetProductAvailability:
    product_id: Identifier(required=True)
    is_available: Boolean(required=True)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ProductAdministrationHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if command.category_id:
            load_category(command.category_id)

        product = Product.create(
            name=command.name,
            price=command.price,
            old_price=command.old_price,
            stock=command.stock if command.stock is not None else default_product_stock(),
            description=command.description,
            sku=command.sku,
            category_id=command.category_id,
            image_url=command.image_url or placeholder_image(),
            is_available=command.is_available if command.is_available is not None else True,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        product = load_product(command.product_id)
        if command.category_id:
            load_category(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            sku=command.sku,
            image_url=command.image_url,
            category_id=command.category_id,
        )
        current_domain.repository_for(Product).add(product)

    @handle(ChangeProductPrice)
    def change_product_price(self, command):
        product = load_product(command.product_id)
        product.change_price(command.price, old_price=command.old_price)
        current_domain.repository_for(Product).add(product)

    @handle(AdjustStock)
    def adjust_stock(self, command):
        product = load_product(command.product_id)
        product.adjust_stock(command.stock, reason=command.reason)
        current_domain.repository_for(Product).add(product)

        logger.info(
            "stock_adjusted",
            product_id=str(product.id),
            stock=product.stock,
            reason=command.reason,
        )

    @handle(SetProductAvailability)
    def set_product_availability(self, command):
        product = load_product(command.product_id)
        product.set_availability(command.is_available)
        current_domain.repository_for(Product).add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_product(command.product_id)
        current_domain.repository_for(Product)._dao.delete(product)
        logger.info("product_deleted", product_id=str(product.id), name=product.name)
