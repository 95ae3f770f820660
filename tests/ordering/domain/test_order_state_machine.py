"""Tests for Order status transitions, cancellation and payment."""

import pytest
from ordering.order.events import OrderCancelled, OrderConfirmed, OrderDelivered, OrderPaid
from ordering.order.order import Order, OrderStatus
from protean.exceptions import ValidationError
from shared.exceptions import Conflict, Forbidden


def _make_order():
    order = Order.create(
        client_id="client-001",
        address="Calle 1 #2-3",
        lines=[
            {"product_offer_id": "offer-001", "quantity": 2, "price": 1000.0},
            {"product_offer_id": "offer-002", "quantity": 1, "price": 500.0},
        ],
    )
    order._events.clear()
    return order


def _events_of(order, event_cls):
    return [e for e in order._events if isinstance(e, event_cls)]


class TestCancel:
    def test_client_cancels_pending_order(self):
        order = _make_order()
        order.cancel("client-001")
        assert order.status == OrderStatus.CANCELLED.value

    def test_cancel_raises_event_per_line(self):
        order = _make_order()
        order.cancel("client-001")
        cancelled = _events_of(order, OrderCancelled)
        assert len(cancelled) == 2
        assert {e.quantity for e in cancelled} == {2, 1}

    def test_cancel_by_another_client_is_forbidden(self):
        order = _make_order()
        with pytest.raises(Forbidden):
            order.cancel("client-999")
        assert order.status == OrderStatus.PENDING.value

    def test_cancel_paid_order_is_rejected(self):
        order = _make_order()
        order.confirm_payment("pay-001")
        order._events.clear()
        with pytest.raises(ValidationError):
            order.cancel("client-001")
        assert _events_of(order, OrderCancelled) == []

    def test_cancel_twice_is_rejected(self):
        order = _make_order()
        order.cancel("client-001")
        with pytest.raises(ValidationError):
            order.cancel("client-001")


class TestConfirmPayment:
    def test_payment_marks_order_paid(self):
        order = _make_order()
        assert order.confirm_payment("pay-001", receipt_ref="rcpt-001") is True
        assert order.status == OrderStatus.PAID.value
        assert order.paid is True
        assert order.paid_at is not None
        assert order.external_payment_ref == "pay-001"
        assert order.receipt_ref == "rcpt-001"

    def test_payment_raises_confirmed_per_line_and_paid(self):
        order = _make_order()
        order.confirm_payment("pay-001")
        assert len(_events_of(order, OrderConfirmed)) == 2
        paid = _events_of(order, OrderPaid)
        assert len(paid) == 1
        assert paid[0].total_amount == 2500.0

    def test_second_payment_is_a_no_op(self):
        order = _make_order()
        order.confirm_payment("pay-001")
        order._events.clear()

        assert order.confirm_payment("pay-002") is False
        assert order.external_payment_ref == "pay-001"
        assert order._events == []

    def test_payment_of_cancelled_order_is_a_conflict(self):
        order = _make_order()
        order.cancel("client-001")
        with pytest.raises(Conflict):
            order.confirm_payment("pay-001")


class TestUpdateStatus:
    def test_paid_to_delivered(self):
        order = _make_order()
        order.confirm_payment("pay-001")
        assert order.update_status("DELIVERED") is True
        assert order.status == OrderStatus.DELIVERED.value
        assert len(_events_of(order, OrderDelivered)) == 1

    def test_same_status_is_a_no_op(self):
        order = _make_order()
        assert order.update_status("PENDING") is False
        assert order._events == []

    def test_pending_to_cancelled_raises_line_events(self):
        order = _make_order()
        assert order.update_status("CANCELLED") is True
        assert len(_events_of(order, OrderCancelled)) == 2

    def test_pending_to_delivered_is_a_conflict(self):
        order = _make_order()
        with pytest.raises(Conflict):
            order.update_status("DELIVERED")

    def test_paid_cannot_be_cancelled(self):
        order = _make_order()
        order.confirm_payment("pay-001")
        with pytest.raises(Conflict):
            order.update_status("CANCELLED")

    def test_nothing_returns_to_pending(self):
        order = _make_order()
        order.confirm_payment("pay-001")
        with pytest.raises(Conflict):
            order.update_status("PENDING")

    def test_delivered_is_terminal(self):
        order = _make_order()
        order.confirm_payment("pay-001")
        order.update_status("DELIVERED")
        with pytest.raises(Conflict):
            order.update_status("CANCELLED")

    def test_paid_requires_payment_confirmation(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_status("PAID")

    def test_unknown_status_is_rejected(self):
        order = _make_order()
        with pytest.raises(ValidationError):
            order.update_status("SHIPPED")
