"""Read-side queries over Orders."""

import math
from dataclasses import dataclass, field

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from ordering.order.order import Order, OrderStatus
from shared.gateways import get_gateways


@dataclass
class OrderPage:
    items: list
    total: int
    page: int
    last_page: int


@dataclass
class ProducerOrder:
    """A paid order restricted to the lines of one producer's offers."""

    order: Order
    details: list = field(default_factory=list)


def _orders():
    return current_domain.repository_for(Order)._dao.query


def get_order(order_id):
    return current_domain.repository_for(Order).get(order_id)


def get_order_status(order_id) -> str:
    """Authoritative status of an order. Raises ObjectNotFoundError for unknown orders."""
    return get_order(order_id).status


def list_orders(status=None, page=1, limit=10) -> OrderPage:
    """Orders newest first, optionally filtered by status."""
    if page < 1 or limit < 1:
        raise ValidationError({"page": ["Page and limit must be positive"]})

    query = _orders()
    if status is not None:
        try:
            query = query.filter(status=OrderStatus(status).value)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status {status}"]}) from None

    result = query.order_by("-order_date").offset((page - 1) * limit).limit(limit).all()
    return OrderPage(
        items=result.items,
        total=result.total,
        page=page,
        last_page=math.ceil(result.total / limit),
    )


def orders_for_client(client_id):
    return _orders().filter(client_id=str(client_id)).order_by("-order_date").all().items


def order_details(order_id):
    return list(get_order(order_id).details)


def offer_has_orders(product_offer_id) -> bool:
    """True when any order, in any status, contains the offer."""
    return any(str(product_offer_id) in order.product_offer_ids for order in _orders().all().items)


def orders_for_producer(producer_id) -> list[ProducerOrder]:
    """Paid orders containing the producer's offers, each restricted to those offers."""
    offer_ids = {offer.id for offer in get_gateways().catalog.offers_for_producer(str(producer_id))}
    if not offer_ids:
        return []

    paid = _orders().filter(status=OrderStatus.PAID.value).order_by("-order_date").all().items
    result = []
    for order in paid:
        details = [d for d in order.details if str(d.product_offer_id) in offer_ids]
        if details:
            result.append(ProducerOrder(order=order, details=details))
    return result
