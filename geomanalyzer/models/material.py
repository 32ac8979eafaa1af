"""Material data models.

A material is either a single element or a mixture of elements with weight
fractions.  Each element maps to one isotope code (see
``geomanalyzer.core.pdg``), which is the key used for path-length
bookkeeping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from geomanalyzer.core.pdg import ion_pdg_code


class MaterialCategory(Enum):
    ELEMENT = "element"
    MIXTURE = "mixture"


@dataclass(frozen=True)
class Element:
    """Chemical element as seen by the geometry.

    Attributes:
        symbol: Element symbol (e.g. "Fe", "O").
        z: Atomic number.
        a: Atomic mass [g/mol]; its integer part is the mass number.
    """
    symbol: str
    z: int
    a: float

    @property
    def pdg_code(self) -> int:
        """Isotope code for this element."""
        return ion_pdg_code(self.a, self.z)


@dataclass
class Composition:
    """Single element in a mixture.

    Attributes:
        element: The constituent element.
        weight_fraction: Weight fraction [0.0–1.0].
    """
    element: Element
    weight_fraction: float


@dataclass
class Material:
    """Material filling a geometry volume.

    Attributes:
        id: Unique identifier referenced by volumes ("Water", "Fe", ...).
        name: Display name.
        density: Density in the geometry's density units.
        category: Element or mixture.
        element: The element, for ``MaterialCategory.ELEMENT``.
        composition: Constituents, for ``MaterialCategory.MIXTURE``.
    """
    id: str
    name: str
    density: float
    category: MaterialCategory = MaterialCategory.ELEMENT
    element: Element | None = None
    composition: list[Composition] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.density < 0.0:
            raise ValueError(f"Negative density for material {self.id!r}")
        if self.category == MaterialCategory.ELEMENT and self.element is None:
            raise ValueError(f"Element material {self.id!r} has no element")
        if self.category == MaterialCategory.MIXTURE and not self.composition:
            raise ValueError(f"Mixture {self.id!r} has no composition")

    @property
    def is_mixture(self) -> bool:
        return self.category == MaterialCategory.MIXTURE

    def isotope_codes(self) -> list[int]:
        """Unique isotope codes of the constituents, in composition order."""
        if self.is_mixture:
            return list(dict.fromkeys(comp.element.pdg_code for comp in self.composition))
        return [self.element.pdg_code]

    def contains_isotope(self, code: int) -> bool:
        """True if *code* is one of this material's constituents."""
        return code in self.isotope_codes()
