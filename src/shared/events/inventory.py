"""Cross-domain event contracts for Inventory domain events.

These classes define the event shape for consumption by other domains
(the Notification service alerts producers on low stock; the Catalog marks
offers sold out or restocked). They are registered as external events via
domain.register_external_event() with matching __type__ strings so Protean's
stream deserialization works correctly.

The source-of-truth events are in src/inventory/stock/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import Boolean, DateTime, Float, Identifier


class LowStockDetected(BaseEvent):
    """Available quantity dropped to or below the producer's threshold (``inventory.lowStock``)."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    producer_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available_quantity = Float(required=True)
    minimum_threshold = Float(required=True)
    detected_at = DateTime(required=True)


class OfferAvailabilityChanged(BaseEvent):
    """Emitted after every stock mutation (``offer.availabilityChanged``)."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available = Boolean(required=True)
    changed_at = DateTime(required=True)
