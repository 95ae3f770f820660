"""Cross-domain event contracts for Ordering domain events.

These classes define the event shape for consumption by other domains
(the Inventory domain holds and releases stock from the per-line lifecycle
events). They are registered as external events via
domain.register_external_event() with matching __type__ strings so Protean's
stream deserialization works correctly.

Every per-line event carries both ``order_id`` and ``order_detail_id``: the
consumer uses the detail id as its idempotency key and the order id to
re-check the order's authoritative status.

The source-of-truth events are in src/ordering/order/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, Integer, Text


class OrderPending(BaseEvent):
    """An order line was placed and awaits payment (topic ``order.pending``)."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True)


class OrderConfirmed(BaseEvent):
    """Payment for the order was confirmed (topic ``order.confirmed``), one per line."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True)


class OrderCancelled(BaseEvent):
    """An order line was cancelled or replaced (topic ``order.cancelled``)."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True)


class OrderPaid(BaseEvent):
    """Order-level payment fact. Consumed for producer notifications."""

    __version__ = 1

    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    details = Text(required=True)  # JSON list of {product_offer_id, quantity, subtotal}
    total_amount = Float(required=True)
    total_items = Integer(required=True)
    paid_at = DateTime(required=True)
