"""Payment confirmation: command and handler.

Confirmation is idempotent: a second ConfirmPayment for a PAID order leaves
it untouched and raises no events, so the Inventory domain sees exactly one
set of OrderConfirmed events per order.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ConfirmPayment:
    order_id = Identifier(required=True)
    payment_ref = String(required=True, max_length=255)
    receipt_ref = String(max_length=255)


@ordering.command_handler(part_of=Order)
class PaymentHandler:
    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if not order.confirm_payment(payment_ref=command.payment_ref, receipt_ref=command.receipt_ref):
            logger.info("Payment already confirmed", order_id=str(order.id))
            return str(order.id)

        repo.add(order)
        logger.info("Payment confirmed", order_id=str(order.id), payment_ref=command.payment_ref)
        return str(order.id)
