"""Repository lookups shared by the catalogue, cart and order handlers."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.errors import CategoryNotFound, ProductNotFound
from storefront.pagination import iterate


def load_product(product_id):
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFound(str(product_id)) from None


def load_category(category_id):
    try:
        return current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError:
        raise CategoryNotFound(str(category_id)) from None


def find_category_by_name(name):
    """Return the category whose name matches ``name`` ignoring case, or None."""
    wanted = (name or "").strip().lower()
    if not wanted:
        return None
    categories = iterate(current_domain.repository_for(Category)._dao.query)
    return next((c for c in categories if c.name.lower() == wanted), None)
