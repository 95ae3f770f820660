"""Producer notifications for paid orders.

When an order is paid, every producer whose offers appear in it receives a
NEW_ORDER notification. Delivery is best-effort: a failing lookup or
notification is logged and the remaining producers are still notified. The
order itself is never affected.
"""

import json
from collections import defaultdict

import structlog
from protean.utils.mixins import handle

from ordering.domain import ordering
from ordering.order.events import OrderPaid
from ordering.order.order import Order
from shared.gateways import get_gateways

logger = structlog.get_logger(__name__)

NEW_ORDER = "NEW_ORDER"


@ordering.event_handler(part_of=Order)
class ProducerNotificationHandler:
    @handle(OrderPaid)
    def on_order_paid(self, event: OrderPaid) -> None:
        gateways = get_gateways()
        details = json.loads(event.details) if isinstance(event.details, str) else event.details

        try:
            client_name = gateways.identity.get_user(str(event.client_id)).full_name
        except Exception as exc:
            logger.warning("Client lookup failed, notifying without name", order_id=str(event.order_id), error=str(exc))
            client_name = None

        lines_by_producer = defaultdict(list)
        for detail in details:
            try:
                offer = gateways.catalog.get_product_offer(detail["product_offer_id"])
            except Exception as exc:
                logger.warning(
                    "Offer lookup failed, producer not notified",
                    order_id=str(event.order_id),
                    product_offer_id=detail["product_offer_id"],
                    error=str(exc),
                )
                continue
            lines_by_producer[offer.producer_id].append(detail)

        for producer_id, lines in lines_by_producer.items():
            payload = {
                "order_id": str(event.order_id),
                "client_name": client_name,
                "total_amount": event.total_amount,
                "product_count": sum(line["quantity"] for line in lines),
                "order_date": event.paid_at.isoformat(),
            }
            try:
                gateways.notification.notify_producer(producer_id, NEW_ORDER, payload)
            except Exception as exc:
                logger.warning(
                    "Producer notification failed",
                    order_id=str(event.order_id),
                    producer_id=producer_id,
                    error=str(exc),
                )
