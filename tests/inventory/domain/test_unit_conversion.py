"""Tests for the unit table and converter."""

import pytest
from inventory.stock.units import (
    DEFAULT_UNIT_TABLE,
    DEFAULT_UNITS,
    UnitConverter,
    UnitDefinition,
    UnitTable,
)
from shared.exceptions import InvalidUnitConversion


@pytest.fixture()
def converter():
    return UnitConverter(DEFAULT_UNIT_TABLE)


class TestSameCategoryConversion:
    def test_same_unit_returns_value_unchanged(self, converter):
        assert converter.convert(3.0, "Kg", "Kg") == 3.0

    def test_kilograms_to_grams(self, converter):
        assert converter.convert(2, "Kg", "g") == 2000

    def test_arroba_to_kilograms(self, converter):
        assert converter.convert(2, "arroba", "Kg") == 25

    def test_carga_is_ten_arrobas(self, converter):
        assert converter.convert(1, "Carga", "arroba") == 10

    def test_dozen_to_units(self, converter):
        assert converter.convert(2, "Docena", "Unidad") == 24

    def test_bottles_to_litres(self, converter):
        assert converter.convert(4, "Botella", "L") == 3

    def test_result_is_rounded(self, converter):
        assert converter.convert(1, "lb", "Kg") == 0.45

    def test_round_trip_is_stable(self, converter):
        grams = converter.convert(1.5, "Kg", "g")
        assert converter.convert(grams, "g", "Kg") == 1.5

    def test_custom_precision(self):
        converter = UnitConverter(DEFAULT_UNIT_TABLE, precision=4)
        assert converter.convert(1, "lb", "Kg") == 0.4536


class TestInvalidConversion:
    def test_cross_category_is_rejected(self, converter):
        with pytest.raises(InvalidUnitConversion) as exc:
            converter.convert(1, "Kg", "L")
        assert "unit" in exc.value.messages

    def test_mass_to_count_is_rejected(self, converter):
        with pytest.raises(InvalidUnitConversion):
            converter.convert(1, "Docena", "Kg")

    def test_unknown_source_unit(self, converter):
        with pytest.raises(InvalidUnitConversion) as exc:
            converter.convert(1, "Fanega", "Kg")
        assert "Fanega" in exc.value.messages["unit"][0]

    def test_unknown_target_unit(self, converter):
        with pytest.raises(InvalidUnitConversion):
            converter.convert(1, "Kg", "Fanega")

    def test_category_of_unknown_unit(self, converter):
        with pytest.raises(InvalidUnitConversion):
            converter.category_of("Fanega")


class TestUnitTable:
    def test_default_table_lists_every_unit(self, converter):
        expected = sorted(name for units in DEFAULT_UNITS.values() for name in units)
        assert converter.units() == expected

    def test_category_of(self, converter):
        assert converter.category_of("Bulto") == "mass"
        assert converter.category_of("Cuartilla") == "volume"
        assert converter.category_of("Par") == "count"

    def test_custom_table(self):
        table = UnitTable.from_mapping({"mass": {"Kg": 1, "Quintal": 46}})
        converter = UnitConverter(table)
        assert converter.convert(1, "Quintal", "Kg") == 46
        assert "g" not in table

    def test_non_positive_factor_is_rejected(self):
        with pytest.raises(ValueError):
            UnitTable([UnitDefinition(name="Kg", category="mass", factor=0)])

    def test_duplicate_unit_is_rejected(self):
        with pytest.raises(ValueError):
            UnitTable(
                [
                    UnitDefinition(name="Kg", category="mass", factor=1),
                    UnitDefinition(name="Kg", category="volume", factor=1),
                ]
            )

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_UNIT_TABLE._units["Kg"] = UnitDefinition(name="Kg", category="mass", factor=2)
