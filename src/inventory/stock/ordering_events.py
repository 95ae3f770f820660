"""Inbound cross-domain event handler — Inventory reacts to Ordering events.

Listens for the per-line order lifecycle events:

- OrderPending:   informational under the default hold policy; holds stock
                  when the on_pending policy is active
- OrderConfirmed: holds the stock equivalence of the line
- OrderCancelled: re-checks the order's authoritative status with Ordering
                  and releases the line's hold only if the order never
                  reached payment

Nothing raised while handling an event escapes into the bus: every failure
is logged with the event payload so the divergence can be reconciled by
hand. InsufficientStock is logged as an error, not retried.

Cross-domain events are imported from shared.events.ordering and registered
as external events via inventory.register_external_event().
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from inventory.domain import inventory
from inventory.stock.holding import HoldStock, ReleaseStock
from inventory.stock.settings import HoldPolicy, get_settings
from inventory.stock.stock import Inventory
from shared.events.ordering import OrderCancelled, OrderConfirmed, OrderPending
from shared.exceptions import InsufficientStock
from shared.gateways import get_gateways

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
inventory.register_external_event(OrderPending, "Ordering.OrderPending.v1")
inventory.register_external_event(OrderConfirmed, "Ordering.OrderConfirmed.v1")
inventory.register_external_event(OrderCancelled, "Ordering.OrderCancelled.v1")

# Order statuses reached only through payment; stock held for them stays held
CONFIRMED_STATUSES = {"PAID", "DELIVERED"}


def _line_context(event):
    return {
        "order_id": str(event.order_id),
        "order_detail_id": str(event.order_detail_id),
        "product_offer_id": str(event.product_offer_id),
        "quantity": event.quantity,
    }


@inventory.event_handler(part_of=Inventory, stream_category="ordering::order")
class OrderingInventoryEventHandler:
    """Reacts to Ordering domain events to hold and release stock."""

    def _hold(self, event, trigger):
        try:
            return current_domain.process(
                HoldStock(
                    order_id=str(event.order_id),
                    order_detail_id=str(event.order_detail_id),
                    product_offer_id=str(event.product_offer_id),
                    quantity=event.quantity,
                ),
                asynchronous=False,
            )
        except InsufficientStock as exc:
            logger.error("Insufficient stock for order line", trigger=trigger, error=str(exc), **_line_context(event))
        except ObjectNotFoundError as exc:
            logger.warning("Cannot hold stock, lookup failed", trigger=trigger, error=str(exc), **_line_context(event))
        except Exception as exc:
            logger.exception("Failed to hold stock for order line", trigger=trigger, error=str(exc), **_line_context(event))
        return None

    @handle(OrderPending)
    def on_order_pending(self, event: OrderPending) -> None:
        if get_settings().hold_policy != HoldPolicy.ON_PENDING:
            logger.debug("Order line pending, stock is held on confirmation", **_line_context(event))
            return
        self._hold(event, trigger="order.pending")

    @handle(OrderConfirmed)
    def on_order_confirmed(self, event: OrderConfirmed) -> None:
        self._hold(event, trigger="order.confirmed")

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        try:
            status = get_gateways().ordering.get_order_status(str(event.order_id))
        except Exception as exc:
            logger.error("Cannot verify order status, stock not released", error=str(exc), **_line_context(event))
            return

        if status in CONFIRMED_STATUSES:
            logger.warning(
                "Ignoring cancellation for an order that reached payment",
                order_status=status,
                **_line_context(event),
            )
            return

        try:
            current_domain.process(
                ReleaseStock(
                    order_id=str(event.order_id),
                    order_detail_id=str(event.order_detail_id),
                    product_offer_id=str(event.product_offer_id),
                ),
                asynchronous=False,
            )
        except Exception as exc:
            logger.exception("Failed to release stock for order line", error=str(exc), **_line_context(event))
