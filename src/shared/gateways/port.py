"""Collaborator ports (abstract interfaces).

The Ordering and Inventory domains consult four services they do not own:

- Identity: user lookup (delivery address, display name, role)
- Catalog: product offers (packaging size and unit, price, availability)
- Ordering: authoritative order status, consulted by Inventory before
  releasing stock on cancellation
- Notification: best-effort producer alerts

Adapters raise ``NotFound`` when the collaborator answers that the entity
does not exist and ``ServiceUnavailable`` on timeouts or transport errors.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """A user as seen by the core: only what order placement needs."""

    id: str
    full_name: str
    address: str | None = None
    role: str = "CLIENT"


@dataclass(frozen=True)
class ProductOffer:
    """A producer's sellable listing.

    ``packaging_size`` is expressed in ``unit``; one ordered unit of the offer
    equals ``packaging_size`` of ``unit``.
    """

    id: str
    producer_id: str
    packaging_size: float
    unit: str
    price: float
    is_available: bool = True


class IdentityGateway(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> User:
        """Return the user or raise NotFound."""
        ...


class CatalogGateway(ABC):
    @abstractmethod
    def get_product_offer(self, product_offer_id: str) -> ProductOffer:
        """Return the offer or raise NotFound."""
        ...

    @abstractmethod
    def offers_for_producer(self, producer_id: str) -> list[ProductOffer]:
        """Return every offer owned by the producer (possibly empty)."""
        ...


class OrderingGateway(ABC):
    @abstractmethod
    def get_order_status(self, order_id: str) -> str:
        """Return the current status of the order or raise NotFound."""
        ...


class NotificationGateway(ABC):
    @abstractmethod
    def notify_producer(self, producer_id: str, subject: str, payload: dict) -> None:
        """Deliver a notification to a producer."""
        ...
