"""Order placement and detail replacement: commands and handler.

Both use cases price every line from the catalog at the time of the request;
clients never supply prices. An offer that is missing or currently
unavailable rejects the whole request with a ValidationError.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order
from shared.gateways import get_gateways

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    client_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_offer_id, quantity}


@ordering.command(part_of="Order")
class UpdateOrderDetails:
    order_id = Identifier(required=True)
    client_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: list of {product_offer_id, quantity}


def _parse_lines(raw):
    lines = json.loads(raw) if isinstance(raw, str) else raw
    Order.validate_lines(lines)
    return lines


def _price_lines(lines):
    """Attach the current catalog price to every line."""
    catalog = get_gateways().catalog
    priced = []
    for line in lines:
        product_offer_id = str(line["product_offer_id"])
        try:
            offer = catalog.get_product_offer(product_offer_id)
        except ObjectNotFoundError:
            raise ValidationError({"product_offer_id": [f"Product offer {product_offer_id} does not exist"]}) from None
        if not offer.is_available:
            raise ValidationError({"product_offer_id": [f"Product offer {product_offer_id} is not available"]})
        priced.append(
            {
                "product_offer_id": product_offer_id,
                "quantity": line["quantity"],
                "price": offer.price,
            }
        )
    return priced


@ordering.command_handler(part_of=Order)
class OrderPlacementHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = _parse_lines(command.lines)

        client = get_gateways().identity.get_user(command.client_id)
        if not client.address:
            raise ValidationError({"address": ["Client has no registered delivery address"]})

        order = Order.create(
            client_id=command.client_id,
            address=client.address,
            lines=_price_lines(lines),
        )
        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order placed",
            order_id=str(order.id),
            client_id=str(command.client_id),
            total_amount=order.total_amount,
            total_items=order.total_items,
        )
        return str(order.id)

    @handle(UpdateOrderDetails)
    def update_order_details(self, command):
        lines = _parse_lines(command.lines)

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.replace_details(client_id=command.client_id, lines=_price_lines(lines))
        repo.add(order)
