"""Ordering bounded context — the Order Lifecycle Manager.

Owns orders and their detail lines (CQRS), validates placements against the
Identity and Catalog services, drives the order status state machine and
emits the per-line lifecycle events the Inventory domain consumes.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

ordering = Domain(name="ordering")
