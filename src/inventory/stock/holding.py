"""Holds for order lines: commands and handler.

HoldStock and ReleaseStock are dispatched by the Ordering event handler. Each
one reads and writes the Inventory and its StockHold ledger entry in a
single unit of work, so a hold is either fully applied (stock decremented and
recorded) or not applied at all.

Quantities on the commands are in order units. The handler converts them to
the inventory's unit (stock equivalence):

    required = quantity * offer.packaging_size    (in offer.unit)
    held     = convert(required, offer.unit, inventory.unit)
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.hold import StockHold
from inventory.stock.settings import get_settings
from inventory.stock.stock import Inventory
from shared.gateways import get_gateways

logger = structlog.get_logger(__name__)


@inventory.command(part_of="Inventory")
class HoldStock:
    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@inventory.command(part_of="Inventory")
class ReleaseStock:
    order_id = Identifier(required=True)
    order_detail_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)


def inventory_for_offer(product_offer_id):
    """Return the Inventory registered for an offer or raise ObjectNotFoundError."""
    items = (
        current_domain.repository_for(Inventory)._dao.query.filter(product_offer_id=str(product_offer_id)).all().items
    )
    if not items:
        raise ObjectNotFoundError({"_entity": [f"No inventory registered for product offer {product_offer_id}"]})
    return items[0]


def stock_equivalence(item, offer, quantity):
    """Quantity of ``item``'s unit that ``quantity`` units of ``offer`` amount to."""
    return get_settings().converter.convert(quantity * offer.packaging_size, offer.unit, item.unit)


def _find_hold(order_detail_id):
    try:
        return current_domain.repository_for(StockHold).get(str(order_detail_id))
    except ObjectNotFoundError:
        return None


@inventory.command_handler(part_of=Inventory)
class StockHoldHandler:
    @handle(HoldStock)
    def hold_stock(self, command):
        """Hold stock for one order line. Returns the held quantity, or None if already applied."""
        existing = _find_hold(command.order_detail_id)
        if existing is not None:
            logger.info(
                "Hold already applied for order line",
                order_id=str(command.order_id),
                order_detail_id=str(command.order_detail_id),
                hold_status=existing.status,
            )
            return None

        item = inventory_for_offer(command.product_offer_id)
        offer = get_gateways().catalog.get_product_offer(command.product_offer_id)
        required = stock_equivalence(item, offer, command.quantity)

        item.hold(required, order_id=command.order_id, order_detail_id=command.order_detail_id)
        current_domain.repository_for(Inventory).add(item)
        current_domain.repository_for(StockHold).add(
            StockHold.place(
                order_detail_id=command.order_detail_id,
                order_id=command.order_id,
                inventory_id=item.id,
                product_offer_id=command.product_offer_id,
                quantity=required,
            )
        )
        logger.info(
            "Held stock for order line",
            inventory_id=str(item.id),
            order_id=str(command.order_id),
            order_detail_id=str(command.order_detail_id),
            quantity=required,
            unit=item.unit,
            available_quantity=item.available_quantity,
        )
        return required

    @handle(ReleaseStock)
    def release_stock(self, command):
        """Release the hold recorded for one order line. Returns the released quantity, or None."""
        hold = _find_hold(command.order_detail_id)
        if hold is None:
            logger.info(
                "No hold recorded for order line, nothing to release",
                order_id=str(command.order_id),
                order_detail_id=str(command.order_detail_id),
            )
            return None
        if hold.is_released:
            logger.info(
                "Hold already released for order line",
                order_id=str(command.order_id),
                order_detail_id=str(command.order_detail_id),
            )
            return None

        repo = current_domain.repository_for(Inventory)
        item = repo.get(hold.inventory_id)
        item.release(hold.quantity, order_id=command.order_id, order_detail_id=command.order_detail_id)
        hold.release()
        repo.add(item)
        current_domain.repository_for(StockHold).add(hold)
        logger.info(
            "Released stock for order line",
            inventory_id=str(item.id),
            order_id=str(command.order_id),
            order_detail_id=str(command.order_detail_id),
            quantity=hold.quantity,
            available_quantity=item.available_quantity,
        )
        return hold.quantity
