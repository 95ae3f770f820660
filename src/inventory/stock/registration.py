"""Stock registration and producer maintenance: commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.settings import get_settings
from inventory.stock.stock import Inventory
from shared.exceptions import Conflict
from shared.gateways import get_gateways

logger = structlog.get_logger(__name__)


@inventory.command(part_of="Inventory")
class RegisterStock:
    """Register a producer's stock for one product offer."""

    producer_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available_quantity = Float(required=True)
    unit = String(required=True, max_length=30)
    minimum_threshold = Float(default=0.0)
    maximum_capacity = Float(required=True)


@inventory.command(part_of="Inventory")
class UpdateStockLevels:
    """Patch available quantity and/or minimum threshold."""

    inventory_id = Identifier(required=True)
    available_quantity = Float()
    minimum_threshold = Float()


@inventory.command(part_of="Inventory")
class RemoveStock:
    inventory_id = Identifier(required=True)


@inventory.command_handler(part_of=Inventory)
class StockManagementHandler:
    @handle(RegisterStock)
    def register_stock(self, command):
        repo = current_domain.repository_for(Inventory)
        existing = repo._dao.query.filter(product_offer_id=str(command.product_offer_id)).all().items
        if existing:
            raise Conflict({"product_offer_id": ["Inventory already registered for this product offer"]})

        gateways = get_gateways()
        gateways.identity.get_user(command.producer_id)
        offer = gateways.catalog.get_product_offer(command.product_offer_id)

        # The stocking unit must be registered and convertible from the offer's packaging unit
        converter = get_settings().converter
        converter.category_of(command.unit)
        converter.convert(1.0, offer.unit, command.unit)

        item = Inventory.register(
            producer_id=command.producer_id,
            product_offer_id=command.product_offer_id,
            available_quantity=command.available_quantity,
            unit=command.unit,
            minimum_threshold=command.minimum_threshold or 0.0,
            maximum_capacity=command.maximum_capacity,
        )
        repo.add(item)
        logger.info(
            "Registered stock",
            inventory_id=str(item.id),
            product_offer_id=str(command.product_offer_id),
            available_quantity=item.available_quantity,
            unit=item.unit,
        )
        return str(item.id)

    @handle(UpdateStockLevels)
    def update_stock_levels(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get(command.inventory_id)
        item.update_levels(
            available_quantity=command.available_quantity,
            minimum_threshold=command.minimum_threshold,
        )
        repo.add(item)

    @handle(RemoveStock)
    def remove_stock(self, command):
        repo = current_domain.repository_for(Inventory)
        item = repo.get(command.inventory_id)

        try:
            get_gateways().catalog.get_product_offer(item.product_offer_id)
        except ObjectNotFoundError:
            pass
        else:
            raise Conflict({"inventory_id": ["Stock cannot be removed while its product offer is still in the catalog"]})

        item.mark_removed()
        repo.add(item)
        repo._dao.delete(item)
        logger.info("Removed stock", inventory_id=str(item.id), product_offer_id=str(item.product_offer_id))
