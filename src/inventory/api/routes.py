"""FastAPI routes for the Inventory domain."""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from inventory.api.schemas import (
    InventoryIdResponse,
    InventoryResponse,
    LowStockEntry,
    RegisterStockRequest,
    StatusResponse,
    StockValidationResponse,
    UpdateStockLevelsRequest,
)
from inventory.projections.low_stock_report import LowStockReport
from inventory.stock.queries import (
    find_by_producer,
    find_by_product_offer,
    find_inventory,
    list_inventories,
    validate_stock,
)
from inventory.stock.registration import RegisterStock, RemoveStock, UpdateStockLevels

inventory_router = APIRouter(prefix="/inventory", tags=["inventory"])


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@inventory_router.post("", status_code=201, response_model=InventoryIdResponse)
async def register_stock(body: RegisterStockRequest) -> InventoryIdResponse:
    command = RegisterStock(
        producer_id=body.producer_id,
        product_offer_id=body.product_offer_id,
        available_quantity=body.available_quantity,
        unit=body.unit,
        minimum_threshold=body.minimum_threshold,
        maximum_capacity=body.maximum_capacity,
    )
    result = current_domain.process(command, asynchronous=False)
    return InventoryIdResponse(inventory_id=result)


@inventory_router.patch("/{inventory_id}", response_model=StatusResponse)
async def update_stock_levels(inventory_id: str, body: UpdateStockLevelsRequest) -> StatusResponse:
    command = UpdateStockLevels(
        inventory_id=inventory_id,
        available_quantity=body.available_quantity,
        minimum_threshold=body.minimum_threshold,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@inventory_router.delete("/{inventory_id}", response_model=StatusResponse)
async def remove_stock(inventory_id: str) -> StatusResponse:
    current_domain.process(RemoveStock(inventory_id=inventory_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@inventory_router.get("", response_model=list[InventoryResponse])
async def get_inventories() -> list[InventoryResponse]:
    return [InventoryResponse.from_aggregate(item) for item in list_inventories()]


@inventory_router.get("/validate-stock", response_model=StockValidationResponse)
async def get_stock_validation(product_offer_id: str, quantity: int = Query(ge=1)) -> StockValidationResponse:
    return StockValidationResponse(
        product_offer_id=product_offer_id,
        quantity=quantity,
        available=validate_stock(product_offer_id, quantity),
    )


@inventory_router.get("/low-stock", response_model=list[LowStockEntry])
async def get_low_stock_report() -> list[LowStockEntry]:
    rows = current_domain.repository_for(LowStockReport)._dao.query.all().items
    return [
        LowStockEntry(
            inventory_id=str(row.inventory_id),
            producer_id=str(row.producer_id),
            product_offer_id=str(row.product_offer_id),
            available_quantity=row.available_quantity,
            minimum_threshold=row.minimum_threshold,
            is_sold_out=row.is_sold_out,
        )
        for row in rows
    ]


@inventory_router.get("/offers/{product_offer_id}", response_model=InventoryResponse)
async def get_inventory_for_offer(product_offer_id: str) -> InventoryResponse:
    return InventoryResponse.from_aggregate(find_by_product_offer(product_offer_id))


@inventory_router.get("/producers/{producer_id}", response_model=list[InventoryResponse])
async def get_inventories_for_producer(producer_id: str) -> list[InventoryResponse]:
    return [InventoryResponse.from_aggregate(item) for item in find_by_producer(producer_id)]


@inventory_router.get("/{inventory_id}", response_model=InventoryResponse)
async def get_inventory(inventory_id: str) -> InventoryResponse:
    return InventoryResponse.from_aggregate(find_inventory(inventory_id))
