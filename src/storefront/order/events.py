"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order, from a list of items or from their cart."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: line snapshots
    total_amount = Float(required=True)
    status = String(required=True)
    payment_method = String(required=True)
    payment_status = String(required=True)
    inventory_policy = String(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaid:
    """Payment for the order was confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    payment_reference = String()
    amount = Float(required=True)
    paid_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to a new lifecycle state other than Paid."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    payment_status = String(required=True)
    changed_by = String()
    reason = String()
    changed_at = DateTime(required=True)
    cancelled_at = DateTime()
    total_amount = Float()
    placed_at = DateTime()


@storefront.event(part_of="Order")
class OrderStockCommitted:
    """The products on the order were taken out of stock."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)


@storefront.event(part_of="Order")
class OrderStockReleased:
    """Stock taken for the order was put back."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)


@storefront.event(part_of="Order")
class OrderNotesUpdated:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    notes = Text()
