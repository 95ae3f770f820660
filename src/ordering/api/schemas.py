"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class OrderLineSchema(BaseModel):
    product_offer_id: str
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    client_id: str
    lines: list[OrderLineSchema]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "client_id": "client-001",
                    "lines": [{"product_offer_id": "offer-001", "quantity": 2}],
                }
            ]
        }
    }


class UpdateOrderDetailsRequest(BaseModel):
    client_id: str
    lines: list[OrderLineSchema]


class CancelOrderRequest(BaseModel):
    client_id: str


class ConfirmPaymentRequest(BaseModel):
    payment_ref: str
    receipt_ref: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class OrderDetailResponse(BaseModel):
    id: str
    product_offer_id: str
    quantity: int
    price: float
    subtotal: float

    @classmethod
    def from_entity(cls, detail):
        return cls(
            id=str(detail.id),
            product_offer_id=str(detail.product_offer_id),
            quantity=detail.quantity,
            price=detail.price,
            subtotal=detail.subtotal,
        )


class OrderResponse(BaseModel):
    id: str
    client_id: str
    status: str
    address: str
    total_amount: float
    total_items: int
    order_date: datetime | None = None
    paid: bool
    paid_at: datetime | None = None
    external_payment_ref: str | None = None
    receipt_ref: str | None = None
    details: list[OrderDetailResponse]

    @classmethod
    def from_aggregate(cls, order, details=None):
        return cls(
            id=str(order.id),
            client_id=str(order.client_id),
            status=order.status,
            address=order.address,
            total_amount=order.total_amount,
            total_items=order.total_items,
            order_date=order.order_date,
            paid=bool(order.paid),
            paid_at=order.paid_at,
            external_payment_ref=order.external_payment_ref,
            receipt_ref=order.receipt_ref,
            details=[OrderDetailResponse.from_entity(d) for d in (order.details if details is None else details)],
        )


class PaginationMeta(BaseModel):
    total: int
    page: int
    last_page: int


class OrderListResponse(BaseModel):
    data: list[OrderResponse]
    meta: PaginationMeta


class OfferUsageResponse(BaseModel):
    product_offer_id: str
    has_orders: bool
