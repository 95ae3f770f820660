"""Low stock report: inventories at or below their minimum threshold, for producer alerts."""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Float, Identifier
from protean.utils.globals import current_domain

from inventory.domain import inventory
from inventory.stock.events import LowStockDetected, StockLevelsUpdated, StockReleased, StockRemoved
from inventory.stock.stock import Inventory


@inventory.projection
class LowStockReport:
    inventory_id = Identifier(identifier=True, required=True)
    producer_id = Identifier(required=True)
    product_offer_id = Identifier(required=True)
    available_quantity = Float(default=0.0)
    minimum_threshold = Float(default=0.0)
    is_sold_out = Boolean(default=False)  # available == 0
    detected_at = DateTime()


@inventory.projector(projector_for=LowStockReport, aggregates=[Inventory])
class LowStockReportProjector:
    @on(LowStockDetected)
    def on_low_stock_detected(self, event):
        repo = current_domain.repository_for(LowStockReport)
        try:
            report = repo.get(event.inventory_id)
            report.available_quantity = event.available_quantity
            report.minimum_threshold = event.minimum_threshold
            report.is_sold_out = event.available_quantity == 0
            report.detected_at = event.detected_at
        except ObjectNotFoundError:
            report = LowStockReport(
                inventory_id=event.inventory_id,
                producer_id=event.producer_id,
                product_offer_id=event.product_offer_id,
                available_quantity=event.available_quantity,
                minimum_threshold=event.minimum_threshold,
                is_sold_out=event.available_quantity == 0,
                detected_at=event.detected_at,
            )
        repo.add(report)

    @on(StockLevelsUpdated)
    def on_stock_levels_updated(self, event):
        """Drop the row once the producer restocks above the threshold."""
        self._refresh(event.inventory_id, event.available_quantity, event.minimum_threshold)

    @on(StockReleased)
    def on_stock_released(self, event):
        self._refresh(event.inventory_id, event.new_available)

    @on(StockRemoved)
    def on_stock_removed(self, event):
        repo = current_domain.repository_for(LowStockReport)
        try:
            report = repo.get(event.inventory_id)
        except ObjectNotFoundError:
            return
        repo._dao.delete(report)

    def _refresh(self, inventory_id, available_quantity, minimum_threshold=None):
        repo = current_domain.repository_for(LowStockReport)
        try:
            report = repo.get(inventory_id)
        except ObjectNotFoundError:
            return  # Not in the report

        threshold = report.minimum_threshold if minimum_threshold is None else minimum_threshold
        if available_quantity > threshold:
            repo._dao.delete(report)
        else:
            report.available_quantity = available_quantity
            report.minimum_threshold = threshold
            report.is_sold_out = available_quantity == 0
            repo.add(report)
