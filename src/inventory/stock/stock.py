"""Inventory aggregate (CQRS) — a producer's stock of one product offer.

There is at most one Inventory per product offer. The quantity is kept in the
inventory's own stocking unit; holds and releases arrive already converted
from the offer's packaging unit.

Invariants (checked after every mutation):
    0 <= available_quantity <= maximum_capacity
    0 <= minimum_threshold  <= maximum_capacity

After every mutation the aggregate raises OfferAvailabilityChanged. After
every mutation that can lower availability (holds and producer updates) it
also evaluates the low-stock rule: ``available_quantity <= minimum_threshold``
raises LowStockDetected.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from inventory.domain import inventory
from inventory.stock.events import (
    LowStockDetected,
    OfferAvailabilityChanged,
    StockHeld,
    StockLevelsUpdated,
    StockRegistered,
    StockReleased,
    StockRemoved,
)
from inventory.stock.units import PRECISION
from shared.exceptions import InsufficientStock


@inventory.aggregate
class Inventory:
    """Stock a producer holds for one of their product offers."""

    producer_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available_quantity = Float(default=0.0)
    unit = String(required=True, max_length=30)
    minimum_threshold = Float(default=0.0)
    maximum_capacity = Float(required=True, min_value=1.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def available_quantity_must_be_within_capacity(self):
        if self.available_quantity is None or self.maximum_capacity is None:
            return
        if self.available_quantity < 0:
            raise ValidationError({"available_quantity": ["Available quantity cannot be negative"]})
        if self.available_quantity > self.maximum_capacity:
            raise ValidationError(
                {
                    "available_quantity": [
                        f"Available quantity {self.available_quantity} exceeds maximum capacity {self.maximum_capacity}"
                    ]
                }
            )

    @invariant.post
    def minimum_threshold_must_be_within_capacity(self):
        if self.minimum_threshold is None or self.maximum_capacity is None:
            return
        if self.minimum_threshold < 0 or self.minimum_threshold > self.maximum_capacity:
            raise ValidationError({"minimum_threshold": ["Minimum threshold must be between 0 and maximum capacity"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        producer_id,
        product_offer_id,
        available_quantity,
        unit,
        maximum_capacity,
        minimum_threshold=0.0,
    ):
        """Register stock for a product offer."""
        now = datetime.now(UTC)
        item = cls(
            producer_id=producer_id,
            product_offer_id=product_offer_id,
            available_quantity=available_quantity,
            unit=unit,
            minimum_threshold=minimum_threshold,
            maximum_capacity=maximum_capacity,
            created_at=now,
            updated_at=now,
        )
        item.raise_(
            StockRegistered(
                inventory_id=str(item.id),
                producer_id=str(producer_id),
                product_offer_id=str(product_offer_id),
                available_quantity=item.available_quantity,
                unit=unit,
                minimum_threshold=item.minimum_threshold,
                maximum_capacity=item.maximum_capacity,
                registered_at=now,
            )
        )
        item._publish_availability()
        return item

    # -------------------------------------------------------------------
    # Derived events
    # -------------------------------------------------------------------
    @property
    def is_low(self):
        return self.available_quantity <= self.minimum_threshold

    def _check_low_stock(self):
        """Raise LowStockDetected if available is at or below the minimum threshold."""
        if self.is_low:
            self.raise_(
                LowStockDetected(
                    inventory_id=str(self.id),
                    producer_id=str(self.producer_id),
                    product_offer_id=str(self.product_offer_id),
                    available_quantity=self.available_quantity,
                    minimum_threshold=self.minimum_threshold,
                    detected_at=datetime.now(UTC),
                )
            )

    def _publish_availability(self):
        self.raise_(
            OfferAvailabilityChanged(
                inventory_id=str(self.id),
                product_offer_id=str(self.product_offer_id),
                available=self.available_quantity > 0,
                changed_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Producer updates
    # -------------------------------------------------------------------
    def update_levels(self, available_quantity=None, minimum_threshold=None):
        """Apply a patch of levels.

        Missing values keep their current value; the invariants are checked
        against the resulting state, never against the patch alone.
        """
        previous_available = self.available_quantity
        with atomic_change(self):
            if available_quantity is not None:
                self.available_quantity = available_quantity
            if minimum_threshold is not None:
                self.minimum_threshold = minimum_threshold
            self.updated_at = datetime.now(UTC)

        self.raise_(
            StockLevelsUpdated(
                inventory_id=str(self.id),
                previous_available=previous_available,
                available_quantity=self.available_quantity,
                minimum_threshold=self.minimum_threshold,
                updated_at=self.updated_at,
            )
        )
        self._check_low_stock()
        self._publish_availability()

    # -------------------------------------------------------------------
    # Holds for order lines
    # -------------------------------------------------------------------
    def hold(self, quantity, order_id, order_detail_id):
        """Take ``quantity`` (in the inventory's unit) out of availability."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.available_quantity
        if previous < quantity:
            raise InsufficientStock(
                {"available_quantity": [f"Insufficient stock: {previous} {self.unit} available, {quantity} required"]}
            )

        self.available_quantity = round(previous - quantity, PRECISION)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockHeld(
                inventory_id=str(self.id),
                order_id=str(order_id),
                order_detail_id=str(order_detail_id),
                product_offer_id=str(self.product_offer_id),
                quantity=quantity,
                previous_available=previous,
                new_available=self.available_quantity,
                held_at=self.updated_at,
            )
        )
        self._check_low_stock()
        self._publish_availability()

    def release(self, quantity, order_id, order_detail_id):
        """Return a previously held quantity to availability."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous = self.available_quantity
        self.available_quantity = round(previous + quantity, PRECISION)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockReleased(
                inventory_id=str(self.id),
                order_id=str(order_id),
                order_detail_id=str(order_detail_id),
                product_offer_id=str(self.product_offer_id),
                quantity=quantity,
                previous_available=previous,
                new_available=self.available_quantity,
                released_at=self.updated_at,
            )
        )
        self._publish_availability()

    def mark_removed(self):
        self.raise_(
            StockRemoved(
                inventory_id=str(self.id),
                product_offer_id=str(self.product_offer_id),
                removed_at=datetime.now(UTC),
            )
        )
