"""Unit conversion between a catalog packaging unit and an inventory stocking unit.

Units are grouped by measurement category (mass, volume, count). Each
category has a base unit and every unit carries a fixed linear factor to
that base, so any two units of one category convert through the base:

    value_in_base = value * factor(from_unit)
    result        = value_in_base / factor(to_unit)

Results are rounded to ``PRECISION`` decimal places so stock comparisons stay
stable. The factor table is configuration data: a ``UnitTable`` is built once
(from ``DEFAULT_UNITS`` or any mapping of the same shape) and handed to the
``UnitConverter`` constructor. The converter never mutates it.
"""

from dataclasses import dataclass
from types import MappingProxyType

from shared.exceptions import InvalidUnitConversion

PRECISION = 2

# category -> unit -> factor to the category's base unit (factor 1)
DEFAULT_UNITS = {
    "mass": {
        "Kg": 1,
        "g": 0.001,
        "t": 1000,
        "lb": 0.453592,
        "arroba": 12.5,
        "Carga": 125,
        "Bulto": 50,
        "Saco": 50,
    },
    "volume": {
        "L": 1,
        "mL": 0.001,
        "Botella": 0.75,
        "Cuartilla": 0.25,
    },
    "count": {
        "Unidad": 1,
        "Docena": 12,
        "Media_docena": 6,
        "Par": 2,
    },
}


@dataclass(frozen=True)
class UnitDefinition:
    name: str
    category: str
    factor: float


class UnitTable:
    """Immutable registry of unit definitions keyed by unit name."""

    def __init__(self, definitions):
        units = {}
        for definition in definitions:
            if definition.factor <= 0:
                raise ValueError(f"Unit {definition.name} must have a positive factor")
            if definition.name in units:
                raise ValueError(f"Unit {definition.name} is defined more than once")
            units[definition.name] = definition
        self._units = MappingProxyType(units)

    @classmethod
    def from_mapping(cls, mapping):
        """Build a table from ``{category: {unit: factor}}``."""
        return cls(
            UnitDefinition(name=name, category=category, factor=float(factor))
            for category, units in mapping.items()
            for name, factor in units.items()
        )

    def __contains__(self, unit):
        return unit in self._units

    def __iter__(self):
        return iter(self._units.values())

    def get(self, unit):
        return self._units.get(unit)


class UnitConverter:
    """Converts quantities between units of the same category."""

    def __init__(self, table: UnitTable, precision: int = PRECISION):
        self.table = table
        self.precision = precision

    def units(self) -> list[str]:
        return sorted(definition.name for definition in self.table)

    def category_of(self, unit: str) -> str:
        definition = self.table.get(unit)
        if definition is None:
            raise InvalidUnitConversion({"unit": [f"Unit {unit} is not registered"]})
        return definition.category

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        if from_unit == to_unit:
            return value

        source = self.table.get(from_unit)
        target = self.table.get(to_unit)
        if source is None or target is None:
            missing = from_unit if source is None else to_unit
            raise InvalidUnitConversion({"unit": [f"Unit {missing} is not registered"]})

        if source.category != target.category:
            raise InvalidUnitConversion(
                {
                    "unit": [
                        f"Cannot convert {from_unit} ({source.category}) to {to_unit} ({target.category})"
                    ]
                }
            )

        return round(value * source.factor / target.factor, self.precision)


DEFAULT_UNIT_TABLE = UnitTable.from_mapping(DEFAULT_UNITS)
