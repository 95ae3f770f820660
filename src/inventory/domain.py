"""Inventory bounded context — the Inventory Reservation Engine.

Owns producers' stock records per product offer (CQRS) and the ledger of
holds applied per order line. Holds and releases are driven by Ordering's
per-line lifecycle events; low-stock and availability changes are published
for the Notification and Catalog services.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

inventory = Domain(name="inventory")
