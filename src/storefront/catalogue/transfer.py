"""Product CSV import/export — the bulk editing path for the catalogue.

The same column layout is used for the blank template, for exports and for
imports, so an exported file can be edited and imported back. Categories are
referred to by name.
"""

import csv
import io

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.lookups import find_category_by_name
from storefront.catalogue.product import Product
from storefront.catalogue.queries import all_products, list_categories
from storefront.domain import logger, storefront
from storefront.pagination import iterate
from storefront.settings import placeholder_image

PRODUCT_COLUMNS = ["name", "price", "old_price", "category", "image_url", "stock", "description", "sku"]
EXPORT_COLUMNS = PRODUCT_COLUMNS + ["created_at", "updated_at"]


def _to_float(value, default=0.0):
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def _to_int(value, default=0):
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return default


def product_template_csv() -> str:
    buffer = io.StringIO()
    csv.writer(buffer).writerow(PRODUCT_COLUMNS)
    return buffer.getvalue()


def export_products_csv() -> str:
    category_names = {str(c.id): c.name for c in list_categories()}

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    for product in all_products():
        writer.writerow(
            {
                "name": product.name,
                "price": product.price,
                "old_price": product.old_price if product.old_price is not None else "",
                "category": category_names.get(str(product.category_id), ""),
                "image_url": product.image_url or "",
                "stock": product.stock,
                "description": product.description or "",
                "sku": product.sku or "",
                "created_at": product.created_at.isoformat() if product.created_at else "",
                "updated_at": product.updated_at.isoformat() if product.updated_at else "",
            }
        )
    return buffer.getvalue()


@storefront.command(part_of="Product")
class ImportProducts:
    content = Text(required=True)  # CSV text with a header row
    skip_duplicates = Boolean(default=True)


@storefront.command_handler(part_of=Product)
class ImportProductsHandler:
    @handle(ImportProducts)
    def import_products(self, command):
        """Create one product per CSV row.

        Unknown categories are created on the fly. Unparseable prices and
        stock levels fall back to 0. Rows whose product name already exists
        are skipped, as are rows without a name.
        """
        rows = list(csv.DictReader(io.StringIO((command.content or "").lstrip("\ufeff"))))
        if not rows:
            raise ValidationError({"file": ["CSV file is empty"]})

        product_repo = current_domain.repository_for(Product)
        category_repo = current_domain.repository_for(Category)
        existing_names = {p.name.strip().lower() for p in iterate(product_repo._dao.query)}

        category_ids = {}
        imported, skipped = 0, 0
        for row in rows:
            name = (row.get("name") or "").strip()
            if not name or (command.skip_duplicates is not False and name.lower() in existing_names):
                skipped += 1
                continue

            category_id = None
            category_name = (row.get("category") or "").strip()
            if category_name:
                key = category_name.lower()
                if key not in category_ids:
                    category = find_category_by_name(category_name)
                    if category is None:
                        category = Category.create(name=category_name)
                        category_repo.add(category)
                    category_ids[key] = str(category.id)
                category_id = category_ids[key]

            old_price = (row.get("old_price") or "").strip()
            product = Product.create(
                name=name,
                price=max(0.0, _to_float(row.get("price"))),
                old_price=max(0.0, _to_float(old_price)) if old_price else None,
                stock=max(0, _to_int(row.get("stock"))),
                description=(row.get("description") or "").strip() or None,
                sku=(row.get("sku") or "").strip() or None,
                category_id=category_id,
                image_url=(row.get("image_url") or row.get("img") or "").strip() or placeholder_image(),
            )
            product_repo.add(product)
            existing_names.add(name.lower())
            imported += 1

        logger.info("products_imported", imported=imported, skipped=skipped)
        return {"imported": imported, "skipped": skipped}
