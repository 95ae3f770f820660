"""Domain events for the Order aggregate.

Per-line lifecycle events (OrderPending, OrderConfirmed, OrderCancelled) are
raised once per affected OrderDetail and consumed by the Inventory domain.
Their shape is mirrored by the contracts in shared.events.ordering.

Order-level events (OrderPlaced, OrderPaid, OrderDetailsUpdated,
OrderDelivered) describe the order as a whole.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from ordering.domain import ordering


# ---------------------------------------------------------------------------
# Per-line lifecycle events
# ---------------------------------------------------------------------------
@ordering.event(part_of="Order")
class OrderPending:
    """An order line was placed and awaits payment."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.event(part_of="Order")
class OrderConfirmed:
    """Payment for the order was confirmed. Raised for each line."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    """An order line was cancelled, either with its order or by a detail replacement."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True)


# ---------------------------------------------------------------------------
# Order-level events
# ---------------------------------------------------------------------------
@ordering.event(part_of="Order")
class OrderPlaced:
    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    address = String(required=True)
    total_amount = Float(required=True)
    total_items = Integer(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDetailsUpdated:
    """The client replaced the order lines while the order was pending."""

    __version__ = 1

    order_id = Identifier(required=True)
    total_amount = Float(required=True)
    total_items = Integer(required=True)
    updated_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderPaid:
    """Payment was recorded on the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    details = Text(required=True)  # JSON list of {product_offer_id, quantity, subtotal}
    total_amount = Float(required=True)
    total_items = Integer(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    delivered_at = DateTime(required=True)
