"""Order aggregate (CQRS) — the core of the ordering domain.

State Machine:
    PENDING → PAID → DELIVERED
    PENDING → CANCELLED

Nothing returns to PENDING. Requesting the status the order already has is a
no-op that raises no events.

Totals are always derived from the detail lines:
    total_amount == Σ detail.subtotal
    total_items  == Σ detail.quantity
They are recomputed whenever the lines change and checked as a post-invariant.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderDetailsUpdated,
    OrderPaid,
    OrderPending,
    OrderPlaced,
)
from shared.exceptions import Conflict, Forbidden


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

MONEY_PRECISION = 2


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderDetail:
    """One line of an order.

    ``price`` is the catalog unit price captured when the line was placed; it
    stays authoritative even if the catalog price changes later.
    """

    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    client_id = Identifier(required=True)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    address = String(required=True, max_length=500)
    details = HasMany(OrderDetail)
    total_amount = Float(default=0.0)
    total_items = Integer(default=0)
    order_date = DateTime()
    paid = Boolean(default=False)
    paid_at = DateTime()
    external_payment_ref = String(max_length=255)
    receipt_ref = String(max_length=255)
    updated_at = DateTime()

    @invariant.post
    def totals_must_match_details(self):
        details = self.details or []
        expected_amount = round(sum(d.subtotal for d in details), MONEY_PRECISION)
        expected_items = sum(d.quantity for d in details)
        if abs((self.total_amount or 0.0) - expected_amount) > 10**-MONEY_PRECISION / 2:
            raise ValidationError({"total_amount": [f"Total amount must equal the sum of subtotals ({expected_amount})"]})
        if (self.total_items or 0) != expected_items:
            raise ValidationError({"total_items": [f"Total items must equal the sum of quantities ({expected_items})"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, client_id, address, lines):
        """Create a pending order.

        Args:
            client_id: The client placing the order.
            address: Delivery address resolved from the client's profile.
            lines: List of dicts with product_offer_id, quantity and price
                   (the current catalog price).
        """
        now = datetime.now(UTC)
        order = cls(
            client_id=client_id,
            address=address,
            status=OrderStatus.PENDING.value,
            order_date=now,
            updated_at=now,
        )
        with atomic_change(order):
            order._add_lines(lines)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                client_id=str(client_id),
                address=address,
                total_amount=order.total_amount,
                total_items=order.total_items,
                placed_at=now,
            )
        )
        order._raise_for_each_detail(OrderPending)
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @staticmethod
    def validate_lines(lines):
        if not lines:
            raise ValidationError({"details": ["An order must have at least one line"]})
        for line in lines:
            if not line.get("product_offer_id"):
                raise ValidationError({"product_offer_id": ["Every line needs a product offer"]})
            if line.get("quantity") is None or line["quantity"] <= 0:
                raise ValidationError({"quantity": ["Quantity must be greater than zero"]})

    def _add_lines(self, lines):
        self.validate_lines(lines)
        for line in lines:
            self.add_details(
                OrderDetail(
                    product_offer_id=line["product_offer_id"],
                    quantity=line["quantity"],
                    price=line["price"],
                    subtotal=round(line["quantity"] * line["price"], MONEY_PRECISION),
                )
            )
        self._recalculate_totals()

    def _recalculate_totals(self):
        """Recompute totals from the lines; never patched incrementally."""
        self.total_amount = round(sum(d.subtotal for d in self.details), MONEY_PRECISION)
        self.total_items = sum(d.quantity for d in self.details)

    def _raise_for_each_detail(self, event_cls, details=None):
        for detail in self.details if details is None else details:
            self.raise_(
                event_cls(
                    order_id=str(self.id),
                    order_detail_id=str(detail.id),
                    product_offer_id=str(detail.product_offer_id),
                    quantity=detail.quantity,
                )
            )

    def _assert_owner(self, client_id):
        if str(self.client_id) != str(client_id):
            raise Forbidden({"client_id": ["Order belongs to another client"]})

    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise Conflict({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    @property
    def product_offer_ids(self):
        return [str(d.product_offer_id) for d in self.details]

    # -------------------------------------------------------------------
    # Detail replacement (only while PENDING)
    # -------------------------------------------------------------------
    def replace_details(self, client_id, lines):
        """Replace every line of a pending order."""
        self._assert_owner(client_id)
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": [f"Details can only be changed while PENDING, order is {self.status}"]})
        self.validate_lines(lines)

        previous = list(self.details)
        with atomic_change(self):
            for detail in previous:
                self.remove_details(detail)
            self._add_lines(lines)
            self.updated_at = datetime.now(UTC)

        self._raise_for_each_detail(OrderCancelled, details=previous)
        self._raise_for_each_detail(OrderPending)
        self.raise_(
            OrderDetailsUpdated(
                order_id=str(self.id),
                total_amount=self.total_amount,
                total_items=self.total_items,
                updated_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, client_id):
        """Cancel a pending order on behalf of its client."""
        self._assert_owner(client_id)
        current = OrderStatus(self.status)
        if current != OrderStatus.PENDING:
            raise ValidationError({"status": [f"Only PENDING orders can be cancelled, order is {current.value}"]})

        self.status = OrderStatus.CANCELLED.value
        self.updated_at = datetime.now(UTC)
        self._raise_for_each_detail(OrderCancelled)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def confirm_payment(self, payment_ref, receipt_ref=None):
        """Record payment. Returns False when the order was already paid."""
        if OrderStatus(self.status) == OrderStatus.PAID:
            return False
        self._assert_can_transition(OrderStatus.PAID)

        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.paid = True
        self.paid_at = now
        self.external_payment_ref = payment_ref
        self.receipt_ref = receipt_ref
        self.updated_at = now

        self._raise_for_each_detail(OrderConfirmed)
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                client_id=str(self.client_id),
                details=json.dumps(
                    [
                        {
                            "product_offer_id": str(d.product_offer_id),
                            "quantity": d.quantity,
                            "subtotal": d.subtotal,
                        }
                        for d in self.details
                    ]
                ),
                total_amount=self.total_amount,
                total_items=self.total_items,
                paid_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Generic status transitions
    # -------------------------------------------------------------------
    def update_status(self, status):
        """Move the order to DELIVERED or CANCELLED. Returns False when nothing changed.

        Payment has its own entry point (confirm_payment) because it records
        the payment reference and drives stock holds.
        """
        try:
            target = OrderStatus(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {status}"]}) from None

        if target == OrderStatus(self.status):
            return False
        if target == OrderStatus.PAID:
            raise ValidationError({"status": ["Orders become PAID through payment confirmation"]})
        self._assert_can_transition(target)

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        if target == OrderStatus.CANCELLED:
            self._raise_for_each_detail(OrderCancelled)
        elif target == OrderStatus.DELIVERED:
            self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))
        return True
