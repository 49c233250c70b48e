"""FastAPI endpoints for shoppers: catalogue browsing, cart, orders and payment."""

import json

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_customer
from storefront.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CheckoutRequest,
    ConfirmDeliveryRequest,
    CreateOrderRequest,
    IdResponse,
    OrderPlacedResponse,
    PaymentRequest,
    PaymentResponse,
    StatusResponse,
    UpdateCartItemRequest,
    address_payload,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.cart.queries import cart_count, cart_view
from storefront.catalogue.lookups import load_category, load_product
from storefront.catalogue.queries import list_categories, list_products
from storefront.domain import logger
from storefront.errors import PaymentDeclined, PaymentDetailsInvalid, StorefrontError
from storefront.order.cancellation import CancelMyOrder
from storefront.order.creation import CreateOrderFromCart, CreateOrderFromItems
from storefront.order.delivery import ConfirmDelivery
from storefront.order.lookups import find_order_by_number, load_order
from storefront.order.payment import ConfirmPayment
from storefront.order.queries import list_customer_orders, order_detail
from storefront.payment import get_gateway
from storefront.payment.port import PaymentDetails

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def product_view(product) -> dict:
    return {
        "product_id": str(product.id),
        "name": product.name,
        "sku": product.sku,
        "description": product.description,
        "price": product.price,
        "old_price": product.old_price,
        "stock": product.stock,
        "is_available": product.is_available,
        "category_id": str(product.category_id) if product.category_id else None,
        "image_url": product.image_url,
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


def category_view(category) -> dict:
    return {
        "category_id": str(category.id),
        "name": category.name,
        "description": category.description,
        "image_url": category.image_url,
        "is_active": category.is_active,
    }


def _placed(order) -> OrderPlacedResponse:
    return OrderPlacedResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        total_amount=order.total_amount,
        status=order.status,
        payment_status=order.payment_status,
        payment_method=order.payment_method,
        items=order_detail(order)["items"],
    )


# --- Catalogue endpoints ---


@product_router.get("")
async def browse_products(
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
        available_only=True,
    )
    return {"products": [product_view(p) for p in result.items], "pagination": result.pagination()}


@product_router.get("/{product_id}")
async def get_product(product_id: str) -> dict:
    return product_view(load_product(product_id))


@category_router.get("")
async def browse_categories() -> dict:
    return {"categories": [category_view(c) for c in list_categories(active_only=True)]}


@category_router.get("/{category_id}")
async def get_category(category_id: str) -> dict:
    return category_view(load_category(category_id))


# --- Cart endpoints ---


@cart_router.get("")
async def view_cart(customer_id: str = Depends(current_customer)) -> dict:
    return cart_view(customer_id)


@cart_router.get("/count")
async def count_cart_items(customer_id: str = Depends(current_customer)) -> dict:
    return {"count": cart_count(customer_id)}


@cart_router.post("/items", status_code=201, response_model=IdResponse)
async def add_to_cart(body: AddToCartRequest, customer_id: str = Depends(current_customer)) -> IdResponse:
    command = AddToCart(customer_id=customer_id, product_id=body.product_id, quantity=body.quantity)
    item_id = current_domain.process(command, asynchronous=False)
    return IdResponse(id=item_id)


@cart_router.put("/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartItemRequest,
    customer_id: str = Depends(current_customer),
) -> StatusResponse:
    command = UpdateCartItem(customer_id=customer_id, item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{item_id}", response_model=StatusResponse)
async def remove_from_cart(item_id: str, customer_id: str = Depends(current_customer)) -> StatusResponse:
    current_domain.process(RemoveFromCart(customer_id=customer_id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(customer_id: str = Depends(current_customer)) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=customer_id), asynchronous=False)
    return StatusResponse()


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderPlacedResponse)
async def place_order(body: CreateOrderRequest, customer_id: str = Depends(current_customer)) -> OrderPlacedResponse:
    command = CreateOrderFromItems(
        customer_id=customer_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        shipping_address=address_payload(body.shipping_address),
        billing_address=address_payload(body.billing_address),
        phone_number=body.phone_number,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _placed(load_order(order_id))


@order_router.post("/checkout", status_code=201, response_model=OrderPlacedResponse)
async def checkout(body: CheckoutRequest, customer_id: str = Depends(current_customer)) -> OrderPlacedResponse:
    command = CreateOrderFromCart(
        customer_id=customer_id,
        shipping_address=address_payload(body.shipping_address),
        billing_address=address_payload(body.billing_address),
        payment_method=body.payment_method,
        phone_number=body.phone_number,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _placed(load_order(order_id))


@order_router.post("/payments", response_model=PaymentResponse)
async def pay_for_order(body: PaymentRequest, customer_id: str = Depends(current_customer)) -> PaymentResponse:
    """Charge the order total through the payment gateway.

    The gateway is called outside any unit of work; its verdict is then
    recorded against the order, which re-checks stock before marking it paid.
    """
    order = find_order_by_number(body.order_number, customer_id=customer_id)
    order.assert_payable()

    gateway = get_gateway()
    validation = gateway.validate(
        PaymentDetails(
            order_number=order.order_number,
            amount=order.total_amount,
            payment_method=body.payment_method,
            card_number=body.card_number,
            expiry_date=body.expiry_date,
            cvv=body.cvv,
        )
    )
    if not validation.valid:
        raise PaymentDetailsInvalid(validation.errors)

    result = await gateway.process(
        order.order_number,
        order.total_amount,
        body.payment_method,
        force_success=body.force_success,
    )

    confirm = ConfirmPayment(
        order_number=order.order_number,
        success=result.success,
        transaction_id=result.transaction_id,
        customer_id=customer_id,
    )
    try:
        current_domain.process(confirm, asynchronous=False)
    except (StorefrontError, ExpectedVersionError) as exc:
        if result.success:
            # The charge went through but the order cannot take it; hand the money back.
            refund = await gateway.refund(result.transaction_id, order.total_amount)
            logger.warning(
                "payment_refunded_after_failed_confirmation",
                order_number=order.order_number,
                transaction_id=result.transaction_id,
                refund_transaction_id=refund.transaction_id,
                refunded=refund.success,
                reason=getattr(exc, "code", type(exc).__name__),
            )
        raise

    if not result.success:
        logger.warning("payment_declined", order_number=order.order_number, reason=result.message)
        raise PaymentDeclined(order.order_number, result.message, transaction_id=result.transaction_id)

    paid = load_order(str(order.id))
    return PaymentResponse(
        order_number=paid.order_number,
        transaction_id=result.transaction_id,
        status=paid.status,
        payment_status=paid.payment_status,
        message=result.message,
    )


@order_router.get("")
async def my_orders(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    customer_id: str = Depends(current_customer),
) -> dict:
    result = list_customer_orders(customer_id, page=page, limit=limit)
    return {"orders": [summary.to_dict() for summary in result.items], "pagination": result.pagination()}


@order_router.get("/{order_number}")
async def my_order(order_number: str, customer_id: str = Depends(current_customer)) -> dict:
    return order_detail(find_order_by_number(order_number, customer_id=customer_id))


@order_router.post("/{order_number}/cancel", response_model=StatusResponse)
async def cancel_order(
    order_number: str,
    body: CancelOrderRequest | None = None,
    customer_id: str = Depends(current_customer),
) -> StatusResponse:
    command = CancelMyOrder(
        customer_id=customer_id,
        order_number=order_number,
        reason=body.reason if body else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_number}/delivery", response_model=StatusResponse)
async def confirm_delivery(
    order_number: str,
    body: ConfirmDeliveryRequest | None = None,
    customer_id: str = Depends(current_customer),
) -> StatusResponse:
    command = ConfirmDelivery(
        customer_id=customer_id,
        order_number=order_number,
        payment_received=body.payment_received if body else True,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
