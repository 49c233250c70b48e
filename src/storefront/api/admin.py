"""FastAPI endpoints for store administration.

Access control for these routes is enforced in front of the application.
"""

import json

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse, Response
from protean.utils.globals import current_domain

from storefront.api.routes import category_view, product_view
from storefront.api.schemas import (
    AdjustStockRequest,
    AvailabilityRequest,
    BulkStatusRequest,
    BulkStatusResponse,
    ChangePriceRequest,
    CreateCategoryRequest,
    CreateProductRequest,
    IdResponse,
    ImportProductsRequest,
    ImportResponse,
    StatusResponse,
    UpdateCategoryRequest,
    UpdateOrderRequest,
    UpdateProductRequest,
)
from storefront.catalogue.administration import (
    AdjustStock,
    ChangeProductPrice,
    CreateProduct,
    DeleteProduct,
    SetProductAvailability,
    UpdateProductDetails,
)
from storefront.catalogue.management import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.queries import list_categories, list_products
from storefront.catalogue.transfer import ImportProducts, export_products_csv, product_template_csv
from storefront.order.export import export_orders_csv
from storefront.order.lookups import load_order
from storefront.order.queries import dashboard, list_orders, order_detail
from storefront.order.status import BulkUpdateOrderStatus, UpdateOrderStatus

admin_router = APIRouter(prefix="/admin", tags=["admin"])


def _csv_download(content: str, filename: str) -> PlainTextResponse:
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# --- Categories ---


@admin_router.get("/categories")
async def all_categories() -> dict:
    return {"categories": [category_view(c) for c in list_categories()]}


@admin_router.post("/categories", status_code=201, response_model=IdResponse)
async def create_category(body: CreateCategoryRequest) -> IdResponse:
    command = CreateCategory(name=body.name, description=body.description, image_url=body.image_url)
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@admin_router.put("/categories/{category_id}", response_model=StatusResponse)
async def update_category(category_id: str, body: UpdateCategoryRequest) -> StatusResponse:
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        image_url=body.image_url,
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.delete("/categories/{category_id}", response_model=StatusResponse)
async def delete_category(category_id: str) -> StatusResponse:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return StatusResponse()


# --- Products ---
# Static paths are declared before /products/{product_id} so they are matched first.


@admin_router.get("/products/export")
async def export_products() -> PlainTextResponse:
    return _csv_download(export_products_csv(), "products.csv")


@admin_router.get("/products/template")
async def products_template() -> PlainTextResponse:
    return _csv_download(product_template_csv(), "products_template.csv")


@admin_router.post("/products/import", response_model=ImportResponse)
async def import_products(body: ImportProductsRequest) -> ImportResponse:
    command = ImportProducts(content=body.content, skip_duplicates=body.skip_duplicates)
    result = current_domain.process(command, asynchronous=False)
    return ImportResponse(**result)


@admin_router.get("/products")
async def all_products(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    sort_by: str | None = None,
    order: str | None = None,
    category_id: str | None = None,
    search: str | None = None,
) -> dict:
    result = list_products(
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        category_id=category_id,
        search=search,
    )
    return {"products": [product_view(p) for p in result.items], "pagination": result.pagination()}


@admin_router.post("/products", status_code=201, response_model=IdResponse)
async def create_product(body: CreateProductRequest) -> IdResponse:
    command = CreateProduct(
        name=body.name,
        price=body.price,
        old_price=body.old_price,
        stock=body.stock,
        description=body.description,
        sku=body.sku,
        category_id=body.category_id,
        image_url=body.image_url,
        is_available=body.is_available,
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@admin_router.put("/products/{product_id}", response_model=StatusResponse)
async def update_product(product_id: str, body: UpdateProductRequest) -> StatusResponse:
    command = UpdateProductDetails(
        product_id=product_id,
        name=body.name,
        description=body.description,
        sku=body.sku,
        category_id=body.category_id,
        image_url=body.image_url,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/products/{product_id}/price", response_model=StatusResponse)
async def change_price(product_id: str, body: ChangePriceRequest) -> StatusResponse:
    command = ChangeProductPrice(product_id=product_id, price=body.price, old_price=body.old_price)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/products/{product_id}/stock", response_model=StatusResponse)
async def adjust_stock(product_id: str, body: AdjustStockRequest) -> StatusResponse:
    command = AdjustStock(product_id=product_id, stock=body.stock, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.put("/products/{product_id}/availability", response_model=StatusResponse)
async def set_availability(product_id: str, body: AvailabilityRequest) -> StatusResponse:
    command = SetProductAvailability(product_id=product_id, is_available=body.is_available)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@admin_router.delete("/products/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


# --- Orders ---


@admin_router.get("/orders/export", response_model=None)
async def export_orders(status: str | None = None) -> Response:
    content = export_orders_csv(status=status)
    if content is None:
        return Response(status_code=204)
    return _csv_download(content, "orders.csv")


@admin_router.put("/orders/bulk-status", response_model=BulkStatusResponse)
async def bulk_update_status(body: BulkStatusRequest) -> BulkStatusResponse:
    command = BulkUpdateOrderStatus(order_ids=json.dumps(body.order_ids), status=body.status)
    result = current_domain.process(command, asynchronous=False)
    return BulkStatusResponse(**result)


@admin_router.get("/orders")
async def all_orders(
    status: str | None = None,
    payment_status: str | None = None,
    customer_id: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    order: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> dict:
    result = list_orders(
        status=status,
        payment_status=payment_status,
        customer_id=customer_id,
        search=search,
        sort_by=sort_by,
        order=order,
        page=page,
        limit=limit,
    )
    return {"orders": [summary.to_dict() for summary in result.items], "pagination": result.pagination()}


@admin_router.get("/orders/{order_id}")
async def get_order(order_id: str) -> dict:
    return order_detail(load_order(order_id))


@admin_router.put("/orders/{order_id}", response_model=StatusResponse)
async def update_order(order_id: str, body: UpdateOrderRequest) -> StatusResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        notes=body.notes,
        payment_collected=body.payment_collected,
        reason=body.reason,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# --- Dashboard ---


@admin_router.get("/dashboard")
async def get_dashboard(months: int = Query(6, ge=1, le=24)) -> dict:
    return dashboard(months=months)
