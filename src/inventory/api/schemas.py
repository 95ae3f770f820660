"""Pydantic request/response schemas for the Inventory API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class RegisterStockRequest(BaseModel):
    producer_id: str
    product_offer_id: str
    available_quantity: float
    unit: str
    minimum_threshold: float = 0.0
    maximum_capacity: float


class UpdateStockLevelsRequest(BaseModel):
    available_quantity: float | None = None
    minimum_threshold: float | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class InventoryIdResponse(BaseModel):
    inventory_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class InventoryResponse(BaseModel):
    id: str
    producer_id: str
    product_offer_id: str
    available_quantity: float
    unit: str
    minimum_threshold: float
    maximum_capacity: float

    @classmethod
    def from_aggregate(cls, item):
        return cls(
            id=str(item.id),
            producer_id=str(item.producer_id),
            product_offer_id=str(item.product_offer_id),
            available_quantity=item.available_quantity,
            unit=item.unit,
            minimum_threshold=item.minimum_threshold,
            maximum_capacity=item.maximum_capacity,
        )


class StockValidationResponse(BaseModel):
    product_offer_id: str
    quantity: int
    available: bool


class LowStockEntry(BaseModel):
    inventory_id: str
    producer_id: str
    product_offer_id: str
    available_quantity: float
    minimum_threshold: float
    is_sold_out: bool
