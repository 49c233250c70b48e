"""Read-side queries over shopping carts."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.items import find_cart
from storefront.catalogue.product import Product
from storefront.domain import logger


def cart_view(customer_id) -> dict:
    """The customer's cart priced at current catalogue prices.

    Lines whose product has since been deleted are left out of the view.
    """
    cart = find_cart(customer_id)
    if cart is None:
        return {"cart_id": None, "items": [], "total": 0.0, "item_count": 0}

    repo = current_domain.repository_for(Product)
    lines = []
    for item in sorted(cart.items, key=lambda i: i.added_at):
        try:
            product = repo.get(item.product_id)
        except ObjectNotFoundError:
            logger.warning("cart_product_missing", cart_id=str(cart.id), product_id=str(item.product_id))
            continue

        lines.append(
            {
                "item_id": str(item.id),
                "product_id": str(product.id),
                "name": product.name,
                "image_url": product.image_url,
                "unit_price": product.price,
                "quantity": item.quantity,
                "stock": product.stock,
                "is_available": product.is_available,
                "subtotal": round(product.price * item.quantity, 2),
            }
        )

    return {
        "cart_id": str(cart.id),
        "items": lines,
        "total": round(sum(line["subtotal"] for line in lines), 2),
        "item_count": sum(line["quantity"] for line in lines),
    }


def cart_count(customer_id) -> int:
    cart = find_cart(customer_id)
    return cart.item_count if cart else 0
