"""Geometry template factories for standard test detectors.

Each factory creates a complete DetectorGeometry with dimensions in cm and
densities in g/cm³.  The world volume is filled with air so that every
point of the geometry has a medium.
"""

from geomanalyzer.models.geometry import (
    DetectorGeometry,
    Placement,
    Point3D,
    Shape,
    Volume,
)
from geomanalyzer.models.material import (
    Composition,
    Element,
    Material,
    MaterialCategory,
)

H = Element("H", 1, 1.008)
C = Element("C", 6, 12.011)
N = Element("N", 7, 14.007)
O = Element("O", 8, 15.999)
FE = Element("Fe", 26, 55.845)
PB = Element("Pb", 82, 207.2)


def _air() -> Material:
    return Material(
        id="Air", name="Air", density=1.205e-3,
        category=MaterialCategory.MIXTURE,
        composition=[Composition(N, 0.755), Composition(O, 0.245)],
    )


def _water() -> Material:
    return Material(
        id="Water", name="Water", density=1.0,
        category=MaterialCategory.MIXTURE,
        composition=[Composition(H, 0.112), Composition(O, 0.888)],
    )


def _iron() -> Material:
    return Material(id="Fe", name="Iron", density=7.874, element=FE)


def _lead() -> Material:
    return Material(id="Pb", name="Lead", density=11.35, element=PB)


def _carbon() -> Material:
    return Material(id="C", name="Graphite", density=2.0, element=C)


def create_sphere_template() -> DetectorGeometry:
    """Iron sphere at the centre of an air-filled world.

    Layout::

        World  box 50x50x50 cm (half)  Air
          Target  sphere r=10 cm  Fe  at (0, 0, 0)

    Returns:
        DetectorGeometry [cm, g/cm³].
    """
    return DetectorGeometry(
        name="Sphere",
        materials=[_air(), _iron()],
        volumes=[
            Volume("World", Shape.box(50.0, 50.0, 50.0), "Air",
                   [Placement("Target", Point3D(0.0, 0.0, 0.0))]),
            Volume("Target", Shape.sphere(10.0), "Fe"),
        ],
    )


def create_layered_template() -> DetectorGeometry:
    """Sampling calorimeter: iron / graphite / iron slabs along z.

    Layout::

        World  box 50x50x50 cm (half)  Air
          Absorber  box 40x40x5 cm  Fe  at z=-20
          Active    box 40x40x5 cm  C   at z=0
          Absorber  box 40x40x5 cm  Fe  at z=+20

    The absorber volume is placed twice.

    Returns:
        DetectorGeometry [cm, g/cm³].
    """
    return DetectorGeometry(
        name="Layered",
        materials=[_air(), _iron(), _carbon()],
        volumes=[
            Volume("World", Shape.box(50.0, 50.0, 50.0), "Air", [
                Placement("Absorber", Point3D(0.0, 0.0, -20.0)),
                Placement("Active", Point3D(0.0, 0.0, 0.0)),
                Placement("Absorber", Point3D(0.0, 0.0, 20.0)),
            ]),
            Volume("Absorber", Shape.box(40.0, 40.0, 5.0), "Fe"),
            Volume("Active", Shape.box(40.0, 40.0, 5.0), "C"),
        ],
    )


def create_water_tank_template() -> DetectorGeometry:
    """Water cylinder along z with an iron core.

    Layout::

        World  box 50x50x50 cm (half)  Air
          Tank  tube r=20 cm, dz=30 cm  Water  at (0, 0, 0)
            Core  sphere r=5 cm  Fe  at (0, 0, 10)

    Returns:
        DetectorGeometry [cm, g/cm³].
    """
    return DetectorGeometry(
        name="Water tank",
        materials=[_air(), _water(), _iron()],
        volumes=[
            Volume("World", Shape.box(50.0, 50.0, 50.0), "Air",
                   [Placement("Tank")]),
            Volume("Tank", Shape.tube(20.0, 30.0), "Water",
                   [Placement("Core", Point3D(0.0, 0.0, 10.0))]),
            Volume("Core", Shape.sphere(5.0), "Fe"),
        ],
    )


def create_shell_template() -> DetectorGeometry:
    """Hollow lead sphere.

    Layout::

        World  box 50x50x50 cm (half)  Air
          Shield  sphere shell r=8..10 cm  Pb  at (0, 0, 0)

    Returns:
        DetectorGeometry [cm, g/cm³].
    """
    return DetectorGeometry(
        name="Shell",
        materials=[_air(), _lead()],
        volumes=[
            Volume("World", Shape.box(50.0, 50.0, 50.0), "Air",
                   [Placement("Shield")]),
            Volume("Shield", Shape.sphere(10.0, rmin=8.0), "Pb"),
        ],
    )


_TEMPLATES: dict[str, callable] = {
    "sphere": create_sphere_template,
    "layered": create_layered_template,
    "water_tank": create_water_tank_template,
    "shell": create_shell_template,
}


def template_names() -> list[str]:
    return list(_TEMPLATES)


def create_template(name: str) -> DetectorGeometry:
    """Factory: create the named template geometry.

    Raises:
        KeyError: If *name* is not a known template.
    """
    try:
        return _TEMPLATES[name]()
    except KeyError:
        raise KeyError(f"Unknown template: {name!r}") from None
