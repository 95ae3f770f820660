"""Read-side queries over Inventory records."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from inventory.stock.holding import inventory_for_offer, stock_equivalence
from inventory.stock.stock import Inventory
from shared.gateways import get_gateways


def list_inventories():
    return current_domain.repository_for(Inventory)._dao.query.all().items


def find_inventory(inventory_id):
    return current_domain.repository_for(Inventory).get(inventory_id)


def find_by_product_offer(product_offer_id):
    return inventory_for_offer(product_offer_id)


def find_by_producer(producer_id):
    """All inventories of a producer. Raises NotFound for an unknown producer."""
    get_gateways().identity.get_user(producer_id)
    return current_domain.repository_for(Inventory)._dao.query.filter(producer_id=str(producer_id)).all().items


def validate_stock(product_offer_id, quantity) -> bool:
    """Non-binding check that ``quantity`` units of the offer are currently available.

    Unknown offers and offers without registered stock are reported as not
    available. Nothing is held.
    """
    if quantity <= 0:
        return False
    try:
        item = inventory_for_offer(product_offer_id)
        offer = get_gateways().catalog.get_product_offer(product_offer_id)
    except ObjectNotFoundError:
        return False
    return item.available_quantity >= stock_equivalence(item, offer, quantity)
