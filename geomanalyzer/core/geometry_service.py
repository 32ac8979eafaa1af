"""Geometry service — point location and boundary navigation.

``GeometryService`` is the contract the ray stepper and the analyzer rely
on.  ``GeometryNavigator`` implements it in memory over a
``DetectorGeometry``: every placement of a volume becomes one node of a
tree rooted at the top volume, carrying its global offset.

The navigator is stateful in the same way a boundary-representation
navigator usually is: ``find_next_boundary`` records the query point and
direction, ``step`` moves past the boundary from that recorded point, and
``is_entering`` reports whether the move reached a different node.
Re-issuing ``step`` with a larger push does not advance the recorded
point.
"""

from __future__ import annotations

import json
import logging
import math
import pathlib
from dataclasses import dataclass, field
from typing import Protocol

from geomanalyzer.core import shapes
from geomanalyzer.core.serializers import dict_to_geometry
from geomanalyzer.models.geometry import (
    BoundingBox,
    DetectorGeometry,
    Point3D,
    Volume,
)
from geomanalyzer.models.material import Material

logger = logging.getLogger(__name__)

Vec3 = tuple[float, float, float]


@dataclass(eq=False)
class GeometryNode:
    """One placed volume in the navigation tree.

    Attributes:
        path: Slash-separated placement path from the top volume.
        volume: The logical volume.
        material: Filling material, or None for a volume with no medium.
        offset: Global position of the volume's local origin.
        daughters: Child nodes.
        parent: Mother node (None for the top volume).
    """
    path: str
    volume: Volume
    material: Material | None
    offset: Vec3
    daughters: list[GeometryNode] = field(default_factory=list)
    parent: GeometryNode | None = None

    @property
    def name(self) -> str:
        return self.volume.name

    def to_local(self, point: Vec3) -> Vec3:
        return (
            point[0] - self.offset[0],
            point[1] - self.offset[1],
            point[2] - self.offset[2],
        )

    def contains(self, point: Vec3) -> bool:
        return shapes.contains(self.volume.shape, self.to_local(point))


class GeometryService(Protocol):
    """Contract between the analyzer and a geometry implementation."""

    @property
    def top_volume_name(self) -> str: ...

    def find_node(self, point: Vec3) -> GeometryNode | None: ...

    def material_of(self, node: GeometryNode | None) -> Material | None: ...

    def find_next_boundary(self, point: Vec3, direction: Vec3) -> float: ...

    def step(self, push: float) -> float: ...

    def is_entering(self) -> bool: ...

    def bounding_box(self, volume_name: str | None = None) -> BoundingBox: ...

    def materials(self) -> list[Material]: ...

    def volumes(self) -> list[Volume]: ...


class GeometryNavigator:
    """In-memory ``GeometryService`` over a ``DetectorGeometry``.

    Args:
        geometry: Detector description.  Volume and material references are
            checked eagerly.

    Raises:
        KeyError: If the top volume, a placed volume or a referenced
            material does not exist.
        ValueError: If the placement graph contains a cycle.
    """

    def __init__(self, geometry: DetectorGeometry) -> None:
        self._geometry = geometry
        self._materials = {m.id: m for m in geometry.materials}
        self._root = self._build_node(geometry.top_volume, Point3D(), None, ())

        # Navigation state
        self._point: Vec3 = (0.0, 0.0, 0.0)
        self._direction: Vec3 = (0.0, 0.0, 1.0)
        self._node: GeometryNode | None = None
        self._boundary = math.inf
        self._entering = False

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------

    def _build_node(
        self,
        volume_name: str,
        offset: Point3D,
        parent: GeometryNode | None,
        ancestors: tuple[str, ...],
    ) -> GeometryNode:
        if volume_name in ancestors:
            raise ValueError(f"Volume {volume_name!r} is placed inside itself")
        volume = self._geometry.get_volume(volume_name)
        material = None
        if volume.material_id is not None:
            if volume.material_id not in self._materials:
                raise KeyError(f"Unknown material: {volume.material_id!r}")
            material = self._materials[volume.material_id]

        path = f"{parent.path}/{volume_name}" if parent else volume_name
        node = GeometryNode(
            path=path,
            volume=volume,
            material=material,
            offset=offset.as_tuple(),
            parent=parent,
        )
        for placement in volume.daughters:
            child_offset = Point3D(
                offset.x + placement.position.x,
                offset.y + placement.position.y,
                offset.z + placement.position.z,
            )
            node.daughters.append(self._build_node(
                placement.volume, child_offset, node, ancestors + (volume_name,),
            ))
        return node

    # ------------------------------------------------------------------
    # Descriptor access
    # ------------------------------------------------------------------

    @property
    def geometry(self) -> DetectorGeometry:
        return self._geometry

    @property
    def top_volume_name(self) -> str:
        return self._root.name

    @property
    def root(self) -> GeometryNode:
        return self._root

    def materials(self) -> list[Material]:
        """Materials used by at least one placed volume, in first-seen order."""
        seen: dict[str, Material] = {}
        for node in self._iter_nodes(self._root):
            if node.material is not None:
                seen.setdefault(node.material.id, node.material)
        return list(seen.values())

    def volumes(self) -> list[Volume]:
        """Logical volumes reachable from the top volume."""
        seen: dict[str, Volume] = {}
        for node in self._iter_nodes(self._root):
            seen.setdefault(node.name, node.volume)
        return list(seen.values())

    def _iter_nodes(self, node: GeometryNode):
        yield node
        for child in node.daughters:
            yield from self._iter_nodes(child)

    def bounding_box(self, volume_name: str | None = None) -> BoundingBox:
        """Bounding box of the first placement of *volume_name* (global frame).

        Raises:
            KeyError: If no placed volume has that name.
        """
        name = volume_name or self._root.name
        for node in self._iter_nodes(self._root):
            if node.name == name:
                return shapes.bounding_box(node.volume.shape, Point3D(*node.offset))
        raise KeyError(f"Unknown volume: {name!r}")

    # ------------------------------------------------------------------
    # Point location
    # ------------------------------------------------------------------

    def find_node(self, point: Vec3) -> GeometryNode | None:
        """Deepest node containing *point*, or None when outside the top volume.

        Overlapping daughters resolve to the first one placed.
        """
        point = tuple(float(c) for c in point)
        if not self._root.contains(point):
            return None
        node = self._root
        while True:
            for child in node.daughters:
                if child.contains(point):
                    node = child
                    break
            else:
                return node

    def material_of(self, node: GeometryNode | None) -> Material | None:
        return node.material if node is not None else None

    # ------------------------------------------------------------------
    # Boundary navigation
    # ------------------------------------------------------------------

    def find_next_boundary(self, point: Vec3, direction: Vec3) -> float:
        """Distance from *point* to the next boundary along *direction*.

        Records the query so that ``step`` can cross that boundary.
        Returns ``math.inf`` when the ray never meets the geometry.
        """
        point = tuple(float(c) for c in point)
        direction = _unit(direction)
        node = self.find_node(point)

        if node is None:
            dist = shapes.distance_to_in(
                self._root.volume.shape, self._root.to_local(point), direction,
            )
        else:
            dist = shapes.distance_to_out(
                node.volume.shape, node.to_local(point), direction,
            )
            for child in node.daughters:
                dist = min(dist, shapes.distance_to_in(
                    child.volume.shape, child.to_local(point), direction,
                ))

        self._point = point
        self._direction = direction
        self._node = node
        self._boundary = dist
        self._entering = False
        logger.debug(
            "Next boundary from %s in %s: %.6g",
            point, node.path if node else "<outside>", dist,
        )
        return dist

    def step(self, push: float) -> float:
        """Cross the last found boundary, *push* beyond it.

        Returns the step length from the recorded point, or ``math.inf``
        when there is no boundary ahead.
        """
        if math.isinf(self._boundary):
            self._entering = False
            return math.inf
        step = self._boundary + push
        p, d = self._point, self._direction
        after = (p[0] + step * d[0], p[1] + step * d[1], p[2] + step * d[2])
        self._entering = self.find_node(after) is not self._node
        return step

    def is_entering(self) -> bool:
        """True if the last ``step`` ended in a different node."""
        return self._entering


def _unit(direction: Vec3) -> Vec3:
    dx, dy, dz = (float(c) for c in direction)
    norm = math.sqrt(dx * dx + dy * dy + dz * dz)
    if norm == 0.0 or not math.isfinite(norm):
        raise ValueError(f"Invalid direction: {direction!r}")
    if abs(norm - 1.0) > 1.0e-12:
        return (dx / norm, dy / norm, dz / norm)
    return (dx, dy, dz)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_geometry(
    descriptor: DetectorGeometry | dict | str | pathlib.Path | GeometryService,
) -> GeometryService:
    """Build a geometry service from a descriptor.

    Args:
        descriptor: A ``DetectorGeometry``, a descriptor dict, a path to a
            JSON descriptor, or an existing service (returned unchanged).

    Raises:
        ValueError: Malformed descriptor.
        KeyError: Dangling volume or material reference.
        FileNotFoundError: Missing descriptor file.
    """
    if isinstance(descriptor, DetectorGeometry):
        geometry = descriptor
    elif isinstance(descriptor, dict):
        geometry = dict_to_geometry(descriptor)
    elif isinstance(descriptor, (str, pathlib.Path)):
        path = pathlib.Path(descriptor)
        with open(path, "r", encoding="utf-8") as f:
            geometry = dict_to_geometry(json.load(f))
        logger.info("Loaded geometry %r from %s", geometry.name, path)
    elif hasattr(descriptor, "find_next_boundary"):
        return descriptor
    else:
        raise ValueError(f"Unsupported geometry descriptor: {type(descriptor).__name__}")
    return GeometryNavigator(geometry)


def build_list_of_target_nuclei(service: GeometryService) -> list[int]:
    """Unique, sorted isotope codes of every material used in the geometry."""
    codes: set[int] = set()
    for material in service.materials():
        codes.update(material.isotope_codes())
    return sorted(codes)
