"""Fixtures for the cross-domain fulfillment saga.

Ordering and Inventory run side by side, each in its own domain context.
Events raised by Ordering are read back from its event store and handed to
the Inventory handler as the shared contracts, the same way the Engine
delivers them from the ``ordering::order`` stream.
"""

import pytest
from protean import current_domain


def _reset(domain):
    with domain.domain_context():
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture()
def ordering_domain(ordering_bed):
    from ordering.domain import ordering

    yield ordering
    _reset(ordering)


@pytest.fixture()
def inventory_domain(inventory_bed):
    from inventory.domain import inventory

    yield inventory
    _reset(inventory)


@pytest.fixture()
def collaborators(gateways):
    gateways.identity.add_user("client-001", full_name="Ana Gómez", address="Carrera 7 #45-10")
    gateways.identity.add_user("producer-001", full_name="Finca La Esperanza", role="PRODUCER")
    gateways.catalog.add_offer("offer-001", producer_id="producer-001", packaging_size=1.0, unit="Kg", price=1000.0)
    return gateways
