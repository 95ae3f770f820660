"""HTTP adapters for the collaborator ports.

Every call goes through an ``httpx.Client`` with a bounded timeout. A 404
answer becomes ``NotFound``; timeouts, connection errors and 5xx answers
become ``ServiceUnavailable``. Collaborator payloads use camelCase keys and
are parsed with pydantic models before being handed to the domain as port
dataclasses.
"""

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PayloadError

from shared.exceptions import NotFound, ServiceUnavailable
from shared.gateways.port import (
    CatalogGateway,
    IdentityGateway,
    NotificationGateway,
    OrderingGateway,
    ProductOffer,
    User,
)

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


# ---------------------------------------------------------------------------
# Wire payloads
# ---------------------------------------------------------------------------
class UserPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    full_name: str = Field(alias="fullName")
    address: str | None = None
    role: str = "CLIENT"


class ProductOfferPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    producer_id: str = Field(alias="producerId")
    packaging_size: float = Field(alias="packagingSize")
    unit: str
    price: float
    is_available: bool = Field(alias="isAvailable", default=True)

    def to_offer(self) -> ProductOffer:
        return ProductOffer(**self.model_dump())


class OrderStatusPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId")
    status: str


# ---------------------------------------------------------------------------
# Base adapter
# ---------------------------------------------------------------------------
class _HttpCollaborator:
    service_name = "collaborator"

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS, transport: httpx.BaseTransport | None = None) -> None:
        self.client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self.client.close()

    def _unavailable(self, reason: str) -> ServiceUnavailable:
        return ServiceUnavailable({"_service": [f"{self.service_name} service unavailable: {reason}"]})

    def _request(self, method: str, path: str, entity: str | None = None, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("Collaborator call timed out", service=self.service_name, path=path)
            raise self._unavailable("timeout") from exc
        except httpx.HTTPError as exc:
            logger.warning("Collaborator call failed", service=self.service_name, path=path, error=str(exc))
            raise self._unavailable(str(exc)) from exc

        if response.status_code == 404 and entity is not None:
            raise NotFound({"_entity": [f"{entity} does not exist"]})
        if response.status_code >= 500:
            raise self._unavailable(f"HTTP {response.status_code}")

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise self._unavailable(f"HTTP {response.status_code}") from exc
        return response

    def _parse(self, model: type[BaseModel], data):
        try:
            return model.model_validate(data)
        except PayloadError as exc:
            raise self._unavailable("malformed response") from exc


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------
class HttpIdentityGateway(_HttpCollaborator, IdentityGateway):
    service_name = "identity"

    def get_user(self, user_id: str) -> User:
        response = self._request("GET", f"/users/{user_id}", entity=f"User with id {user_id}")
        payload = self._parse(UserPayload, response.json())
        return User(**payload.model_dump())


class HttpCatalogGateway(_HttpCollaborator, CatalogGateway):
    service_name = "catalog"

    def get_product_offer(self, product_offer_id: str) -> ProductOffer:
        response = self._request(
            "GET",
            f"/product-offers/{product_offer_id}",
            entity=f"Product offer with id {product_offer_id}",
        )
        return self._parse(ProductOfferPayload, response.json()).to_offer()

    def offers_for_producer(self, producer_id: str) -> list[ProductOffer]:
        response = self._request("GET", "/product-offers", params={"producerId": producer_id})
        return [self._parse(ProductOfferPayload, item).to_offer() for item in response.json()]


class HttpOrderingGateway(_HttpCollaborator, OrderingGateway):
    service_name = "ordering"

    def get_order_status(self, order_id: str) -> str:
        response = self._request("GET", f"/orders/{order_id}/status", entity=f"Order with id {order_id}")
        return self._parse(OrderStatusPayload, response.json()).status


class HttpNotificationGateway(_HttpCollaborator, NotificationGateway):
    service_name = "notification"

    def notify_producer(self, producer_id: str, subject: str, payload: dict) -> None:
        self._request(
            "POST",
            f"/notifications/producers/{producer_id}",
            json={"type": subject, **payload},
        )
