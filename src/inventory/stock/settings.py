"""Reservation engine settings.

``StockSettings`` bundles the unit converter and the hold policy. Handlers
read the active settings through get_settings(); tests and deployments swap
them whole with set_settings() / reset_settings().

Hold policies:
    on_confirmation  stock is held when payment is confirmed (default)
    on_pending       stock is held as soon as the order line is placed;
                     confirmation then finds the hold already applied

The default policy is read from INVENTORY_HOLD_POLICY.
"""

import os
from dataclasses import dataclass, field
from enum import Enum

from inventory.stock.units import DEFAULT_UNIT_TABLE, UnitConverter


class HoldPolicy(Enum):
    ON_CONFIRMATION = "on_confirmation"
    ON_PENDING = "on_pending"


@dataclass(frozen=True)
class StockSettings:
    converter: UnitConverter = field(default_factory=lambda: UnitConverter(DEFAULT_UNIT_TABLE))
    hold_policy: HoldPolicy = HoldPolicy.ON_CONFIRMATION


_current_settings: StockSettings | None = None


def get_settings() -> StockSettings:
    """Return the active settings, building defaults from the environment on first use."""
    global _current_settings
    if _current_settings is None:
        policy = HoldPolicy(os.environ.get("INVENTORY_HOLD_POLICY", HoldPolicy.ON_CONFIRMATION.value))
        _current_settings = StockSettings(hold_policy=policy)
    return _current_settings


def set_settings(settings: StockSettings) -> None:
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    global _current_settings
    _current_settings = None
