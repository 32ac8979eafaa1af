"""Unit conversion module — single conversion point between geometry and core units.

CRITICAL: All unit conversions MUST go through this module.

Internal (core) units:
    Length          : cm
    Density         : g/cm³
    Weighted length : g/cm² (length × density)

Geometry descriptor units are configurable per analyzer (``-L`` / ``-D``
on the command line) and default to cm and g/cm³.
"""

from typing import NewType

# Unit-annotated float aliases
Cm = NewType('Cm', float)
GramPerCm3 = NewType('GramPerCm3', float)
GramPerCm2 = NewType('GramPerCm2', float)


# ---------------------------------------------------------------------------
# Unit tables (factor to core units)
# ---------------------------------------------------------------------------

_LENGTH_UNITS: dict[str, float] = {
    "um": 1.0e-4,
    "mm": 0.1,
    "cm": 1.0,
    "dm": 10.0,
    "m": 100.0,
    "km": 1.0e5,
}

_DENSITY_UNITS: dict[str, float] = {
    "g_cm3": 1.0,
    "kg_cm3": 1000.0,
    "mg_cm3": 1.0e-3,
    "kg_m3": 1.0e-3,
    "g_m3": 1.0e-6,
}


def length_units() -> list[str]:
    """Names of supported length units."""
    return list(_LENGTH_UNITS)


def density_units() -> list[str]:
    """Names of supported density units."""
    return list(_DENSITY_UNITS)


def length_unit_factor(name: str) -> float:
    """Scale factor from length unit *name* to cm.

    Raises:
        ValueError: If *name* is not a known length unit.
    """
    try:
        return _LENGTH_UNITS[name]
    except KeyError:
        raise ValueError(f"Unknown length unit: {name!r}") from None


def density_unit_factor(name: str) -> float:
    """Scale factor from density unit *name* to g/cm³.

    Raises:
        ValueError: If *name* is not a known density unit.
    """
    try:
        return _DENSITY_UNITS[name]
    except KeyError:
        raise ValueError(f"Unknown density unit: {name!r}") from None


# ---------------------------------------------------------------------------
# Length conversions
# ---------------------------------------------------------------------------

def to_cm(length: float, unit: str) -> Cm:
    """Length in *unit* → core (cm)."""
    return Cm(length * length_unit_factor(unit))


# ---------------------------------------------------------------------------
# Density conversions
# ---------------------------------------------------------------------------

def to_g_cm3(density: float, unit: str) -> GramPerCm3:
    """Density in *unit* → core (g/cm³)."""
    return GramPerCm3(density * density_unit_factor(unit))


def weighted_length(length_cm: float, density_g_cm3: float) -> GramPerCm2:
    """Path length [cm] × density [g/cm³] → density-weighted length [g/cm²]."""
    return GramPerCm2(length_cm * density_g_cm3)
