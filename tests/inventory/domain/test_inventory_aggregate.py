"""Tests for the Inventory aggregate: invariants, holds, releases and derived events."""

import pytest
from inventory.stock.events import (
    LowStockDetected,
    OfferAvailabilityChanged,
    StockHeld,
    StockLevelsUpdated,
    StockRegistered,
    StockReleased,
)
from inventory.stock.stock import Inventory
from protean.exceptions import ValidationError
from protean.utils.reflection import declared_fields
from shared.exceptions import InsufficientStock


def _make_inventory(**overrides):
    defaults = {
        "producer_id": "producer-001",
        "product_offer_id": "offer-001",
        "available_quantity": 10.0,
        "unit": "Kg",
        "minimum_threshold": 5.0,
        "maximum_capacity": 100.0,
    }
    defaults.update(overrides)
    return Inventory.register(**defaults)


def _events_of(item, event_cls):
    return [e for e in item._events if isinstance(e, event_cls)]


def test_inventory_aggregate_has_defined_fields():
    assert all(
        field_name in declared_fields(Inventory)
        for field_name in [
            "producer_id",
            "product_offer_id",
            "available_quantity",
            "unit",
            "minimum_threshold",
            "maximum_capacity",
        ]
    )


class TestRegistration:
    def test_register_sets_levels(self):
        item = _make_inventory()
        assert item.available_quantity == 10.0
        assert item.unit == "Kg"
        assert item.created_at is not None

    def test_register_raises_registered_and_availability_events(self):
        item = _make_inventory()
        assert len(_events_of(item, StockRegistered)) == 1
        availability = _events_of(item, OfferAvailabilityChanged)
        assert len(availability) == 1
        assert availability[0].available is True

    def test_register_empty_stock_is_unavailable(self):
        item = _make_inventory(available_quantity=0.0, minimum_threshold=0.0)
        assert _events_of(item, OfferAvailabilityChanged)[0].available is False


class TestInvariants:
    def test_available_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            _make_inventory(available_quantity=-1.0)

    def test_available_cannot_exceed_capacity(self):
        with pytest.raises(ValidationError) as exc:
            _make_inventory(available_quantity=150.0)
        assert "available_quantity" in exc.value.messages

    def test_threshold_cannot_exceed_capacity(self):
        with pytest.raises(ValidationError) as exc:
            _make_inventory(minimum_threshold=101.0)
        assert "minimum_threshold" in exc.value.messages

    def test_threshold_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            _make_inventory(minimum_threshold=-1.0)

    def test_capacity_must_be_at_least_one(self):
        with pytest.raises(ValidationError):
            _make_inventory(available_quantity=0.0, minimum_threshold=0.0, maximum_capacity=0.5)

    def test_patch_is_checked_against_resulting_state(self):
        """Raising available and threshold together is valid when the result is."""
        item = _make_inventory(maximum_capacity=20.0)
        item.update_levels(available_quantity=20.0, minimum_threshold=15.0)
        assert item.available_quantity == 20.0
        assert item.minimum_threshold == 15.0

    def test_patch_beyond_capacity_is_rejected(self):
        item = _make_inventory(maximum_capacity=20.0)
        with pytest.raises(ValidationError):
            item.update_levels(available_quantity=25.0)


class TestHold:
    def test_hold_decrements_available(self):
        item = _make_inventory(available_quantity=10.0)
        item.hold(2.0, order_id="ord-001", order_detail_id="det-001")
        assert item.available_quantity == 8.0

    def test_hold_raises_stock_held(self):
        item = _make_inventory(available_quantity=10.0)
        item.hold(2.0, order_id="ord-001", order_detail_id="det-001")
        held = _events_of(item, StockHeld)
        assert len(held) == 1
        assert held[0].previous_available == 10.0
        assert held[0].new_available == 8.0
        assert held[0].order_detail_id == "det-001"

    def test_insufficient_stock_leaves_quantity_unchanged(self):
        item = _make_inventory(available_quantity=5.0, minimum_threshold=0.0)
        with pytest.raises(InsufficientStock):
            item.hold(7.0, order_id="ord-001", order_detail_id="det-001")
        assert item.available_quantity == 5.0
        assert _events_of(item, StockHeld) == []

    def test_hold_of_exact_availability_empties_stock(self):
        item = _make_inventory(available_quantity=4.0, minimum_threshold=0.0)
        item.hold(4.0, order_id="ord-001", order_detail_id="det-001")
        assert item.available_quantity == 0.0
        assert _events_of(item, OfferAvailabilityChanged)[-1].available is False

    def test_non_positive_hold_is_rejected(self):
        item = _make_inventory()
        with pytest.raises(ValidationError):
            item.hold(0, order_id="ord-001", order_detail_id="det-001")


class TestLowStockDetection:
    def test_hold_to_below_threshold_raises_low_stock(self):
        item = _make_inventory(available_quantity=10.0, minimum_threshold=5.0)
        item.hold(7.0, order_id="ord-001", order_detail_id="det-001")
        low = _events_of(item, LowStockDetected)
        assert len(low) == 1
        assert low[0].available_quantity == 3.0
        assert low[0].minimum_threshold == 5.0

    def test_hold_to_exactly_threshold_raises_low_stock(self):
        item = _make_inventory(available_quantity=10.0, minimum_threshold=5.0)
        item.hold(5.0, order_id="ord-001", order_detail_id="det-001")
        assert len(_events_of(item, LowStockDetected)) == 1

    def test_hold_staying_above_threshold_does_not_raise_low_stock(self):
        item = _make_inventory(available_quantity=10.0, minimum_threshold=5.0)
        item.hold(4.0, order_id="ord-001", order_detail_id="det-001")
        assert item.available_quantity == 6.0
        assert _events_of(item, LowStockDetected) == []

    def test_producer_update_below_threshold_raises_low_stock(self):
        item = _make_inventory(available_quantity=10.0, minimum_threshold=5.0)
        item.update_levels(available_quantity=2.0)
        assert len(_events_of(item, StockLevelsUpdated)) == 1
        assert len(_events_of(item, LowStockDetected)) == 1

    def test_raising_threshold_above_available_raises_low_stock(self):
        item = _make_inventory(available_quantity=10.0, minimum_threshold=5.0)
        item.update_levels(minimum_threshold=12.0)
        assert item.available_quantity == 10.0
        assert len(_events_of(item, LowStockDetected)) == 1


class TestRelease:
    def test_release_increments_available(self):
        item = _make_inventory(available_quantity=10.0)
        item.hold(3.0, order_id="ord-001", order_detail_id="det-001")
        item.release(3.0, order_id="ord-001", order_detail_id="det-001")
        assert item.available_quantity == 10.0
        released = _events_of(item, StockReleased)
        assert len(released) == 1
        assert released[0].new_available == 10.0

    def test_release_beyond_capacity_is_rejected(self):
        item = _make_inventory(available_quantity=99.0, maximum_capacity=100.0)
        with pytest.raises(ValidationError):
            item.release(5.0, order_id="ord-001", order_detail_id="det-001")
