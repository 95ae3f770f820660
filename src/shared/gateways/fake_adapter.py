"""In-memory collaborator fakes for development and testing.

Each fake is seeded through plain methods (``add_user``, ``add_offer``,
``set_status``) and can be switched into an outage with ``configure``, which
makes every call raise ``ServiceUnavailable``. Calls are recorded in
``calls`` so tests can assert on the traffic a use case generated.
"""

from shared.exceptions import NotFound, ServiceUnavailable
from shared.gateways.port import (
    CatalogGateway,
    IdentityGateway,
    NotificationGateway,
    OrderingGateway,
    ProductOffer,
    User,
)


class _FakeCollaborator:
    service_name = "collaborator"

    def __init__(self) -> None:
        self.is_reachable: bool = True
        self.calls: list[dict] = []

    def configure(self, is_reachable: bool) -> None:
        """Configure collaborator reachability at runtime."""
        self.is_reachable = is_reachable

    def _record(self, method: str, **kwargs) -> None:
        self.calls.append({"method": method, **kwargs})
        if not self.is_reachable:
            raise ServiceUnavailable({"_service": [f"{self.service_name} service is unreachable"]})


class FakeIdentityGateway(_FakeCollaborator, IdentityGateway):
    service_name = "identity"

    def __init__(self) -> None:
        super().__init__()
        self.users: dict[str, User] = {}

    def add_user(self, user_id: str, full_name: str = "Test User", address: str | None = "Calle 1 #2-3", role: str = "CLIENT") -> User:
        user = User(id=str(user_id), full_name=full_name, address=address, role=role)
        self.users[user.id] = user
        return user

    def get_user(self, user_id: str) -> User:
        self._record("get_user", user_id=str(user_id))
        try:
            return self.users[str(user_id)]
        except KeyError:
            raise NotFound({"_entity": [f"User with id {user_id} does not exist"]}) from None


class FakeCatalogGateway(_FakeCollaborator, CatalogGateway):
    service_name = "catalog"

    def __init__(self) -> None:
        super().__init__()
        self.offers: dict[str, ProductOffer] = {}

    def add_offer(
        self,
        offer_id: str,
        producer_id: str = "producer-001",
        packaging_size: float = 1.0,
        unit: str = "Kg",
        price: float = 1000.0,
        is_available: bool = True,
    ) -> ProductOffer:
        offer = ProductOffer(
            id=str(offer_id),
            producer_id=str(producer_id),
            packaging_size=packaging_size,
            unit=unit,
            price=price,
            is_available=is_available,
        )
        self.offers[offer.id] = offer
        return offer

    def remove_offer(self, offer_id: str) -> None:
        self.offers.pop(str(offer_id), None)

    def get_product_offer(self, product_offer_id: str) -> ProductOffer:
        self._record("get_product_offer", product_offer_id=str(product_offer_id))
        try:
            return self.offers[str(product_offer_id)]
        except KeyError:
            raise NotFound({"_entity": [f"Product offer with id {product_offer_id} does not exist"]}) from None

    def offers_for_producer(self, producer_id: str) -> list[ProductOffer]:
        self._record("offers_for_producer", producer_id=str(producer_id))
        return [offer for offer in self.offers.values() if offer.producer_id == str(producer_id)]


class FakeOrderingGateway(_FakeCollaborator, OrderingGateway):
    service_name = "ordering"

    def __init__(self) -> None:
        super().__init__()
        self.statuses: dict[str, str] = {}

    def set_status(self, order_id: str, status: str) -> None:
        self.statuses[str(order_id)] = status

    def get_order_status(self, order_id: str) -> str:
        self._record("get_order_status", order_id=str(order_id))
        try:
            return self.statuses[str(order_id)]
        except KeyError:
            raise NotFound({"_entity": [f"Order with id {order_id} does not exist"]}) from None


class FakeNotificationGateway(_FakeCollaborator, NotificationGateway):
    service_name = "notification"

    def __init__(self) -> None:
        super().__init__()
        self.sent: list[dict] = []

    def notify_producer(self, producer_id: str, subject: str, payload: dict) -> None:
        self._record("notify_producer", producer_id=str(producer_id), subject=subject)
        self.sent.append({"producer_id": str(producer_id), "subject": subject, "payload": payload})
