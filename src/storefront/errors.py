"""Business-rule exceptions raised by the storefront domain.

Malformed input is reported with Protean's ``ValidationError``. The classes
below cover requests that are well-formed but break a business rule; each one
carries the identifiers it complains about so callers can render them.
"""


class StorefrontError(Exception):
    """Base exception for all storefront business-rule errors."""

    code = "storefront_error"

    def __init__(self, message: str, **details):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(StorefrontError):
    """Base for lookups of something that does not exist (or is not yours)."""

    code = "not_found"


class ProductNotFound(NotFoundError):
    code = "product_not_found"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found", product_id=product_id)


class CategoryNotFound(NotFoundError):
    code = "category_not_found"

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Category {category_id} not found", category_id=category_id)


class OrderNotFound(NotFoundError):
    code = "order_not_found"

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Order {reference} not found", order=reference)


class CartItemNotFound(NotFoundError):
    code = "cart_item_not_found"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Cart item {item_id} not found", item_id=item_id)


class ProductUnavailable(StorefrontError):
    """Raised when ordering a product that has been switched off for sale."""

    code = "product_unavailable"

    def __init__(self, product_id: str, product_name: str):
        self.product_id = product_id
        self.product_name = product_name
        super().__init__(
            f'Product "{product_name}" is currently unavailable',
            product_id=product_id,
            product_name=product_name,
        )


class InsufficientStock(StorefrontError):
    """Raised when a product cannot cover the requested quantity."""

    code = "insufficient_stock"

    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f'Insufficient stock for "{product_name}". Available: {available}',
            product_id=product_id,
            product_name=product_name,
            available=available,
            requested=requested,
        )


class EmptyCart(StorefrontError):
    code = "empty_cart"

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__("Cart is empty", customer_id=customer_id)


class InvalidTransition(StorefrontError):
    """Raised when an order is asked to move along an edge the lifecycle does not have."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot transition order from {current} to {target}",
            current=current,
            target=target,
        )


class AlreadyPaid(StorefrontError):
    code = "already_paid"

    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Order {order_number} is already paid", order_number=order_number)


class OrderCancelled(StorefrontError):
    code = "order_cancelled"

    def __init__(self, order_number: str):
        self.order_number = order_number
        super().__init__(f"Cannot pay for cancelled order {order_number}", order_number=order_number)


class OrderNumberConflict(StorefrontError):
    """Raised when no free order number could be allocated."""

    code = "order_number_conflict"

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique order number after {attempts} attempts",
            attempts=attempts,
        )


class DuplicateCategory(StorefrontError):
    code = "duplicate_category"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Category "{name}" already exists', name=name)


class PaymentDetailsInvalid(StorefrontError):
    """Raised when payment details fail validation before any charge is attempted."""

    code = "payment_details_invalid"

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid payment details", errors=errors)


class PaymentDeclined(StorefrontError):
    """Raised when the payment gateway rejects a charge. The order is left untouched."""

    code = "payment_declined"

    def __init__(self, order_number: str, reason: str, transaction_id: str | None = None):
        self.order_number = order_number
        self.reason = reason
        self.transaction_id = transaction_id
        super().__init__(
            f"Payment for order {order_number} failed: {reason}",
            order_number=order_number,
            transaction_id=transaction_id,
        )
