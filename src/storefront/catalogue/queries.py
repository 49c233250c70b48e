"""Read-side queries over the catalogue."""

from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.pagination import Page, iterate, paginate, sort_key

PRODUCT_SORT_FIELDS = {"name", "price", "stock", "created_at", "updated_at"}


def list_products(
    page=None,
    limit=None,
    sort_by=None,
    order=None,
    category_id=None,
    search=None,
    available_only=False,
) -> Page:
    queryset = current_domain.repository_for(Product)._dao.query
    if category_id:
        queryset = queryset.filter(category_id=str(category_id))
    if search:
        queryset = queryset.filter(name__icontains=search.strip())
    if available_only:
        queryset = queryset.filter(is_available=True)

    return paginate(
        queryset,
        page=page,
        limit=limit,
        order_by=sort_key(sort_by, order, PRODUCT_SORT_FIELDS, default="created_at"),
    )


def list_categories(active_only=False) -> list[Category]:
    queryset = current_domain.repository_for(Category)._dao.query
    if active_only:
        queryset = queryset.filter(is_active=True)
    return list(iterate(queryset.order_by("name")))


def all_products() -> list[Product]:
    return list(iterate(current_domain.repository_for(Product)._dao.query.order_by("name")))


def count_products() -> int:
    return current_domain.repository_for(Product)._dao.query.all().total
