"""FastAPI routes for the Ordering domain."""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CancelOrderRequest,
    ConfirmPaymentRequest,
    OfferUsageResponse,
    OrderDetailResponse,
    OrderIdResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusResponse,
    PaginationMeta,
    PlaceOrderRequest,
    StatusResponse,
    UpdateOrderDetailsRequest,
    UpdateOrderStatusRequest,
)
from ordering.order.cancellation import CancelOrder
from ordering.order.payment import ConfirmPayment
from ordering.order.placement import PlaceOrder, UpdateOrderDetails
from ordering.order.queries import (
    get_order,
    get_order_status,
    list_orders,
    offer_has_orders,
    order_details,
    orders_for_client,
    orders_for_producer,
)
from ordering.order.status import UpdateOrderStatus

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _lines(lines):
    return json.dumps([line.model_dump() for line in lines])


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(client_id=body.client_id, lines=_lines(body.lines))
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.put("/{order_id}/details", response_model=StatusResponse)
async def update_order_details(order_id: str, body: UpdateOrderDetailsRequest) -> StatusResponse:
    command = UpdateOrderDetails(order_id=order_id, client_id=body.client_id, lines=_lines(body.lines))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    current_domain.process(CancelOrder(order_id=order_id, client_id=body.client_id), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/payment", response_model=StatusResponse)
async def confirm_payment(order_id: str, body: ConfirmPaymentRequest) -> StatusResponse:
    command = ConfirmPayment(order_id=order_id, payment_ref=body.payment_ref, receipt_ref=body.receipt_ref)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
@order_router.get("", response_model=OrderListResponse)
async def get_orders(
    status: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> OrderListResponse:
    result = list_orders(status=status, page=page, limit=limit)
    return OrderListResponse(
        data=[OrderResponse.from_aggregate(order) for order in result.items],
        meta=PaginationMeta(total=result.total, page=result.page, last_page=result.last_page),
    )


@order_router.get("/clients/{client_id}", response_model=list[OrderResponse])
async def get_client_orders(client_id: str) -> list[OrderResponse]:
    return [OrderResponse.from_aggregate(order) for order in orders_for_client(client_id)]


@order_router.get("/producers/{producer_id}", response_model=list[OrderResponse])
async def get_producer_orders(producer_id: str) -> list[OrderResponse]:
    return [OrderResponse.from_aggregate(entry.order, details=entry.details) for entry in orders_for_producer(producer_id)]


@order_router.get("/offers/{product_offer_id}", response_model=OfferUsageResponse)
async def get_offer_usage(product_offer_id: str) -> OfferUsageResponse:
    return OfferUsageResponse(product_offer_id=product_offer_id, has_orders=offer_has_orders(product_offer_id))


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order_by_id(order_id: str) -> OrderResponse:
    return OrderResponse.from_aggregate(get_order(order_id))


@order_router.get("/{order_id}/status", response_model=OrderStatusResponse)
async def get_status(order_id: str) -> OrderStatusResponse:
    return OrderStatusResponse(order_id=order_id, status=get_order_status(order_id))


@order_router.get("/{order_id}/details", response_model=list[OrderDetailResponse])
async def get_order_details(order_id: str) -> list[OrderDetailResponse]:
    return [OrderDetailResponse.from_entity(detail) for detail in order_details(order_id)]
