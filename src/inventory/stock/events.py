"""Domain events for the Inventory aggregate.

All events are versioned, immutable facts about a producer's stock of one
product offer. They are used for:
- Updating projections via projectors (low stock report)
- Cross-domain communication (``inventory.lowStock`` for notifications,
  ``offer.availabilityChanged`` for the catalog)
- An audit trail of every hold and release applied for an order line
"""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from inventory.domain import inventory


@inventory.event(part_of="Inventory")
class StockRegistered:
    """A producer registered stock for a product offer."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    producer_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available_quantity = Float(required=True)
    unit = String(required=True)
    minimum_threshold = Float(required=True)
    maximum_capacity = Float(required=True)
    registered_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockLevelsUpdated:
    """The producer changed the available quantity and/or the low-stock threshold."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    previous_available = Float(required=True)
    available_quantity = Float(required=True)
    minimum_threshold = Float(required=True)
    updated_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockHeld:
    """Stock was taken out of availability for a confirmed order line."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Float(required=True)  # In the inventory's unit
    previous_available = Float(required=True)
    new_available = Float(required=True)
    held_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockReleased:
    """A previously held quantity was returned to availability."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Float(required=True)
    previous_available = Float(required=True)
    new_available = Float(required=True)
    released_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class LowStockDetected:
    """Available quantity is at or below the minimum threshold."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    producer_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available_quantity = Float(required=True)
    minimum_threshold = Float(required=True)
    detected_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class OfferAvailabilityChanged:
    """Raised after every mutation so the catalog can mark the offer sold out or restocked."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available = Boolean(required=True)
    changed_at = DateTime(required=True)


@inventory.event(part_of="Inventory")
class StockRemoved:
    """The inventory record for an offer was deleted."""

    __version__ = 1

    inventory_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    removed_at = DateTime(required=True)
