"""In-process adapter for deployments that run both domains in one process.

The Ordering domain is imported lazily and read inside an Ordering domain
context pushed on top of whatever context is active. The caller is usually
an Inventory handler with its own unit of work open, and both domains name
their provider ``default``: the read goes outside that unit of work so it
never binds the caller's session to Ordering's provider.
"""

from shared.gateways.port import OrderingGateway


class LocalOrderingGateway(OrderingGateway):
    def get_order_status(self, order_id: str) -> str:
        from ordering.domain import ordering
        from ordering.order.order import Order

        with ordering.domain_context():
            return ordering.repository_for(Order)._dao.outside_uow().get(str(order_id)).status
