"""Unit conversion chain: geometry units → core units (cm, g/cm³, g/cm²)."""

import pytest

from geomanalyzer.core.units import (
    density_unit_factor,
    density_units,
    length_unit_factor,
    length_units,
    to_cm,
    to_g_cm3,
    weighted_length,
)


class TestLengthConversion:
    def test_named_units(self):
        assert to_cm(1.0, "m") == pytest.approx(100.0)
        assert to_cm(25.0, "mm") == pytest.approx(2.5)
        assert to_cm(3.0, "cm") == pytest.approx(3.0)
        assert to_cm(1.0, "um") == pytest.approx(1e-4)

    def test_all_listed_units_resolve(self):
        for unit in length_units():
            assert to_cm(1.0, unit) == pytest.approx(length_unit_factor(unit))

    def test_unknown_unit(self):
        with pytest.raises(ValueError, match="furlong"):
            length_unit_factor("furlong")

    def test_unknown_unit_in_conversion(self):
        with pytest.raises(ValueError):
            to_cm(1.0, "inch")


class TestDensityConversion:
    def test_kg_m3(self):
        assert to_g_cm3(1000.0, "kg_m3") == pytest.approx(1.0)

    def test_g_cm3_identity(self):
        assert density_unit_factor("g_cm3") == 1.0

    def test_all_listed_units_resolve(self):
        for unit in density_units():
            assert density_unit_factor(unit) > 0.0

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            density_unit_factor("lb_ft3")


class TestWeightedLength:
    def test_product(self):
        assert weighted_length(2.0, 7.874) == pytest.approx(15.748)

    def test_zero_density(self):
        assert weighted_length(5.0, 0.0) == 0.0

    def test_mm_and_kg_m3_chain(self):
        assert weighted_length(to_cm(20.0, "mm"), to_g_cm3(7874.0, "kg_m3")) == pytest.approx(15.748)
