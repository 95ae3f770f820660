"""StockHold aggregate (CQRS) — ledger of holds applied per order line.

Ordering events are delivered at least once and in no particular order, so
the reservation engine records every hold it applies, keyed by the order
line (``order_detail_id``). A line is held at most once and released at most
once, and only after it was held:

    (none) --hold--> HELD --release--> RELEASED

Redelivered confirmations find the line HELD or RELEASED and do nothing;
redelivered cancellations find it RELEASED (or absent) and do nothing. The
ledger entry is written in the same unit of work as the Inventory change it
records.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, String

from inventory.domain import inventory


class HoldStatus(Enum):
    HELD = "Held"
    RELEASED = "Released"


@inventory.aggregate
class StockHold:
    order_detail_id = Identifier(identifier=True)
    order_id = Identifier(required=True)
    inventory_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Float(required=True)  # In the inventory's unit
    status = String(choices=HoldStatus, default=HoldStatus.HELD.value)
    held_at = DateTime()
    released_at = DateTime()

    @classmethod
    def place(cls, order_detail_id, order_id, inventory_id, product_offer_id, quantity):
        return cls(
            order_detail_id=str(order_detail_id),
            order_id=str(order_id),
            inventory_id=str(inventory_id),
            product_offer_id=str(product_offer_id),
            quantity=quantity,
            status=HoldStatus.HELD.value,
            held_at=datetime.now(UTC),
        )

    @property
    def is_released(self):
        return self.status == HoldStatus.RELEASED.value

    def release(self):
        if self.is_released:
            raise ValidationError({"status": ["Hold was already released"]})
        self.status = HoldStatus.RELEASED.value
        self.released_at = datetime.now(UTC)
