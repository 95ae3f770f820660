"""Collaborator gateway factory.

Provides get_gateways() / set_gateways() / reset_gateways() to swap the set
of collaborator adapters as a whole:

- HTTP adapters when the collaborator's base URL is configured
- In-memory fakes otherwise (development and testing)

Environment variables:
    IDENTITY_SERVICE_URL, CATALOG_SERVICE_URL, ORDERING_SERVICE_URL,
    NOTIFICATION_SERVICE_URL   base URL per collaborator
    ORDERING_GATEWAY=local     query the in-process Ordering domain instead
    GATEWAY_TIMEOUT_SECONDS    per-call timeout (default 5)
"""

import os
from dataclasses import dataclass

from shared.gateways.fake_adapter import (
    FakeCatalogGateway,
    FakeIdentityGateway,
    FakeNotificationGateway,
    FakeOrderingGateway,
)
from shared.gateways.port import CatalogGateway, IdentityGateway, NotificationGateway, OrderingGateway


@dataclass
class Gateways:
    """The collaborator adapters a process talks to."""

    identity: IdentityGateway
    catalog: CatalogGateway
    ordering: OrderingGateway
    notification: NotificationGateway


_current_gateways: Gateways | None = None


def build_fake_gateways() -> Gateways:
    return Gateways(
        identity=FakeIdentityGateway(),
        catalog=FakeCatalogGateway(),
        ordering=FakeOrderingGateway(),
        notification=FakeNotificationGateway(),
    )


def build_gateways_from_env() -> Gateways:
    """Build adapters from environment configuration."""
    from shared.gateways.http_adapter import (
        DEFAULT_TIMEOUT_SECONDS,
        HttpCatalogGateway,
        HttpIdentityGateway,
        HttpNotificationGateway,
        HttpOrderingGateway,
    )

    timeout = float(os.environ.get("GATEWAY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS))
    gateways = build_fake_gateways()

    if os.environ.get("IDENTITY_SERVICE_URL"):
        gateways.identity = HttpIdentityGateway(os.environ["IDENTITY_SERVICE_URL"], timeout=timeout)
    if os.environ.get("CATALOG_SERVICE_URL"):
        gateways.catalog = HttpCatalogGateway(os.environ["CATALOG_SERVICE_URL"], timeout=timeout)
    if os.environ.get("NOTIFICATION_SERVICE_URL"):
        gateways.notification = HttpNotificationGateway(os.environ["NOTIFICATION_SERVICE_URL"], timeout=timeout)

    if os.environ.get("ORDERING_GATEWAY") == "local":
        from shared.gateways.local_adapter import LocalOrderingGateway

        gateways.ordering = LocalOrderingGateway()
    elif os.environ.get("ORDERING_SERVICE_URL"):
        gateways.ordering = HttpOrderingGateway(os.environ["ORDERING_SERVICE_URL"], timeout=timeout)

    return gateways


def get_gateways() -> Gateways:
    """Return the current collaborator gateways. Built from the environment on first use."""
    global _current_gateways
    if _current_gateways is None:
        _current_gateways = build_gateways_from_env()
    return _current_gateways


def set_gateways(gateways: Gateways) -> None:
    """Override the active gateways (useful for tests)."""
    global _current_gateways
    _current_gateways = gateways


def reset_gateways() -> None:
    """Reset to default gateways."""
    global _current_gateways
    _current_gateways = None
