"""Pydantic request/response schemas for the Storefront API."""

from __future__ import annotations

import json
from typing import Literal

from pydantic import BaseModel, Field

# --- Addresses ---


class StructuredAddress(BaseModel):
    kind: Literal["structured"] = "structured"
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=30)


class RawAddress(BaseModel):
    kind: Literal["raw"] = "raw"
    text: str = Field(..., min_length=1)
    phone: str | None = Field(None, max_length=30)


AddressInput = StructuredAddress | RawAddress | str


def address_payload(address: AddressInput | None) -> str | None:
    """Serialise an address for a command, keeping its kind explicit."""
    if address is None:
        return None
    if isinstance(address, str):
        return json.dumps({"kind": "raw", "text": address})
    return json.dumps(address.model_dump())


# --- Catalogue ---


class CreateCategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Electronics", "description": "Phones, laptops and accessories"}]
        }
    }

    name: str = Field(..., max_length=100)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, max_length=100)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Wireless Mouse",
                    "price": 24.99,
                    "stock": 40,
                    "sku": "WM-001",
                    "category_id": "8a7e6c1e-6f57-4a53-9a38-0a4c3c2f9d11",
                    "description": "Ergonomic 2.4GHz wireless mouse",
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    old_price: float | None = Field(None, ge=0)
    stock: int | None = Field(None, ge=0)
    description: str | None = None
    sku: str | None = Field(None, max_length=50)
    category_id: str | None = None
    image_url: str | None = Field(None, max_length=500)
    is_available: bool = True


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    sku: str | None = Field(None, max_length=50)
    category_id: str | None = None
    image_url: str | None = Field(None, max_length=500)


class ChangePriceRequest(BaseModel):
    price: float = Field(..., ge=0)
    old_price: float | None = Field(None, ge=0)


class AdjustStockRequest(BaseModel):
    stock: int = Field(..., ge=0)
    reason: str | None = Field(None, max_length=255)


class AvailabilityRequest(BaseModel):
    is_available: bool


class ImportProductsRequest(BaseModel):
    content: str
    skip_duplicates: bool = True


# --- Cart ---


class AddToCartRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"product_id": "prod-001", "quantity": 2}]}}

    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=0)


# --- Orders ---


class OrderItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": {
                        "street": "12 Harbour Road",
                        "city": "Springfield",
                        "state": "IL",
                        "postal_code": "62701",
                        "country": "US",
                    },
                    "phone_number": "+1 217 555 0100",
                    "notes": "Leave with the concierge",
                }
            ]
        }
    }

    items: list[OrderItemRequest] = Field(..., min_length=1)
    shipping_address: AddressInput
    billing_address: AddressInput | None = None
    phone_number: str | None = Field(None, max_length=30)
    notes: str | None = None


class CheckoutRequest(BaseModel):
    shipping_address: AddressInput
    billing_address: AddressInput | None = None
    payment_method: str = Field(..., max_length=50)
    phone_number: str | None = Field(None, max_length=30)
    notes: str | None = None


class PaymentRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order_number": "ORD-1760000000000-8K2QZ1",
                    "payment_method": "card",
                    "card_number": "4242 4242 4242 4242",
                    "expiry_date": "12/30",
                    "cvv": "123",
                }
            ]
        }
    }

    order_number: str
    payment_method: str
    card_number: str | None = None
    expiry_date: str | None = None
    cvv: str | None = None
    force_success: bool = False


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class ConfirmDeliveryRequest(BaseModel):
    payment_received: bool = True


class UpdateOrderRequest(BaseModel):
    status: str | None = None
    notes: str | None = None
    payment_collected: bool = False
    reason: str | None = Field(None, max_length=500)


class BulkStatusRequest(BaseModel):
    order_ids: list[str] = Field(..., min_length=1)
    status: str


# --- Responses ---


class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


class PlacedLineResponse(BaseModel):
    item_id: str
    product_id: str
    product_name: str
    sku: str | None = None
    quantity: int
    unit_price: float
    subtotal: float


class OrderPlacedResponse(BaseModel):
    order_id: str
    order_number: str
    total_amount: float
    status: str
    payment_status: str
    payment_method: str
    items: list[PlacedLineResponse]


class PaymentResponse(BaseModel):
    order_number: str
    transaction_id: str | None = None
    status: str
    payment_status: str
    message: str | None = None


class BulkStatusResponse(BaseModel):
    updated: list[str]
    skipped: dict[str, str]


class ImportResponse(BaseModel):
    imported: int
    skipped: int
