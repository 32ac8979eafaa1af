"""Geometry data models — the boundary representation of a detector.

A detector is a tree of volumes.  Each volume has a shape centred on its
local origin, an optional material, and daughter volumes placed inside it
by translation.  The top volume (conventionally "World") encloses
everything; its bounding box is what the max path length scan samples.

All dimensions are in the geometry's length units (see
``geomanalyzer.core.units``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from geomanalyzer.constants import DEFAULT_TOP_VOLUME
from geomanalyzer.models.material import Material


class ShapeType(Enum):
    BOX = "box"
    SPHERE = "sphere"
    TUBE = "tube"


@dataclass
class Point3D:
    """3D point in geometry units."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass
class Shape:
    """Solid shape centred on the volume's local origin.

    Only the fields relevant to ``type`` are used:

    - BOX: half-widths ``dx``, ``dy``, ``dz``.
    - SPHERE: shell between ``rmin`` and ``rmax``.
    - TUBE: cylinder shell ``rmin``..``rmax`` along z, half-length ``dz``.
    """
    type: ShapeType = ShapeType.BOX
    dx: float = 0.0
    dy: float = 0.0
    dz: float = 0.0
    rmin: float = 0.0
    rmax: float = 0.0

    def __post_init__(self) -> None:
        if self.type == ShapeType.BOX:
            if min(self.dx, self.dy, self.dz) <= 0.0:
                raise ValueError("Box half-widths must be positive")
        elif self.type == ShapeType.SPHERE:
            if self.rmax <= 0.0 or not 0.0 <= self.rmin < self.rmax:
                raise ValueError("Sphere needs 0 <= rmin < rmax")
        elif self.type == ShapeType.TUBE:
            if self.rmax <= 0.0 or not 0.0 <= self.rmin < self.rmax or self.dz <= 0.0:
                raise ValueError("Tube needs 0 <= rmin < rmax and dz > 0")

    @classmethod
    def box(cls, dx: float, dy: float, dz: float) -> Shape:
        return cls(ShapeType.BOX, dx=dx, dy=dy, dz=dz)

    @classmethod
    def sphere(cls, rmax: float, rmin: float = 0.0) -> Shape:
        return cls(ShapeType.SPHERE, rmin=rmin, rmax=rmax)

    @classmethod
    def tube(cls, rmax: float, dz: float, rmin: float = 0.0) -> Shape:
        return cls(ShapeType.TUBE, dz=dz, rmin=rmin, rmax=rmax)


@dataclass
class Placement:
    """A daughter volume placed inside its mother.

    Attributes:
        volume: Name of the placed volume.
        position: Daughter origin in the mother's local frame.
    """
    volume: str
    position: Point3D = field(default_factory=Point3D)


@dataclass
class Volume:
    """Logical volume.

    Attributes:
        name: Unique volume name.
        shape: Solid shape.
        material_id: Filling material, or None for a volume with no medium.
        daughters: Volumes placed inside this one.
    """
    name: str
    shape: Shape
    material_id: str | None = None
    daughters: list[Placement] = field(default_factory=list)


@dataclass
class DetectorGeometry:
    """Complete detector geometry descriptor.

    Attributes:
        name: Descriptive name.
        top_volume: Name of the outermost volume.
        materials: Materials referenced by volumes.
        volumes: All logical volumes.
    """
    name: str = ""
    top_volume: str = DEFAULT_TOP_VOLUME
    materials: list[Material] = field(default_factory=list)
    volumes: list[Volume] = field(default_factory=list)

    def get_volume(self, name: str) -> Volume:
        """Return a volume by name.

        Raises:
            KeyError: If *name* is not found.
        """
        for vol in self.volumes:
            if vol.name == name:
                return vol
        raise KeyError(f"Unknown volume: {name!r}")

    def get_material(self, material_id: str) -> Material:
        """Return a material by ID.

        Raises:
            KeyError: If *material_id* is not found.
        """
        for mat in self.materials:
            if mat.id == material_id:
                return mat
        raise KeyError(f"Unknown material: {material_id!r}")


@dataclass
class BoundingBox:
    """Axis-aligned box: half-widths and centre, in geometry units."""
    dx: float
    dy: float
    dz: float
    ox: float = 0.0
    oy: float = 0.0
    oz: float = 0.0

    @property
    def half_widths(self) -> tuple[float, float, float]:
        return (self.dx, self.dy, self.dz)

    @property
    def origin(self) -> tuple[float, float, float]:
        return (self.ox, self.oy, self.oz)

    @property
    def largest_extent(self) -> float:
        """Largest full edge length of the box."""
        return 2.0 * max(self.dx, self.dy, self.dz)

    def faces(self) -> list[tuple[str, int, int]]:
        """The six faces as ``(name, axis, sign)``.

        ``axis`` indexes x/y/z and ``sign`` is +1 for the face on the
        positive side.  Order: top, bottom, left, right, back, front.
        """
        return [(name, axis, sign) for name, (axis, sign) in _FACES.items()]


_FACES: dict[str, tuple[int, int]] = {
    "top": (1, +1),
    "bottom": (1, -1),
    "left": (0, -1),
    "right": (0, +1),
    "back": (2, -1),
    "front": (2, +1),
}
