"""Cart item management — commands and handler.

Carts are created on first use. Adding or re-quantifying a line checks that
the product exists, is on sale and has stock for the resulting quantity; the
check is advisory only, stock is not held for carts.
"""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.lookups import load_product
from storefront.domain import storefront
from storefront.errors import CartItemNotFound


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


def find_cart(customer_id):
    """Return the customer's cart, or None if they never had one."""
    carts = (
        current_domain.repository_for(ShoppingCart)._dao.query.filter(customer_id=str(customer_id)).all().items
    )
    return carts[0] if carts else None


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = load_product(command.product_id)
        cart = find_cart(command.customer_id) or ShoppingCart.create(command.customer_id)

        existing = cart.line_for(product.id)
        line_quantity = command.quantity + (existing.quantity if existing else 0)
        product.ensure_orderable(line_quantity)

        item = cart.add_item(product_id=product.id, quantity=command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = find_cart(command.customer_id)
        if cart is None:
            raise CartItemNotFound(str(command.item_id))

        if command.quantity > 0:
            item = cart.item(command.item_id)
            load_product(item.product_id).ensure_orderable(command.quantity)

        cart.update_item_quantity(command.item_id, command.quantity)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = find_cart(command.customer_id)
        if cart is None:
            raise CartItemNotFound(str(command.item_id))

        cart.remove_item(command.item_id)
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.customer_id)
        if cart is None:
            return

        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)
