"""Ray stepper — walks a ray through volume boundaries.

The stepper turns a ray into the ordered list of segments it traverses,
one per volume crossed, each with its length and material.  All lengths
and points are in geometry units; callers convert.

Walk rules:

- A ray starting outside the geometry is advanced to its entry point
  without recording anything.
- Once inside, every volume traversed produces one ``Segment``.
- The walk ends when the ray leaves the geometry after having entered it,
  or never enters it.
- A crossing that does not reach a new volume is re-issued with a push ten
  times larger, at most ``max_boundary_retries`` times.
- ``max_steps`` bounds the number of boundary crossings per walk.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

from geomanalyzer.constants import BOUNDARY_PUSH, MAX_BOUNDARY_RETRIES, MAX_WALK_STEPS
from geomanalyzer.core.geometry_service import GeometryService
from geomanalyzer.models.material import Material

logger = logging.getLogger(__name__)

Vec3 = tuple[float, float, float]


class WalkStatus(Enum):
    COMPLETED = "completed"
    STEP_LIMIT = "step_limit"
    BOUNDARY_JITTER = "boundary_jitter"
    NO_MEDIUM = "no_medium"


@dataclass
class Segment:
    """Part of a ray inside a single volume.

    Attributes:
        start: Point where the segment begins.
        distance: Distance from the ray origin to ``start``.
        length: Segment length.
        volume: Name of the traversed volume.
        material: Material filling the volume.
    """
    start: Vec3
    distance: float
    length: float
    volume: str
    material: Material

    @property
    def end_distance(self) -> float:
        return self.distance + self.length


@dataclass
class RayWalk:
    """Result of one ray walk.

    Attributes:
        segments: Traversed segments in order.
        status: How the walk ended.
        origin: Ray origin.
        direction: Normalized direction.
        entry_distance: Distance at which the geometry was entered
            (None if it never was).
        exit_distance: Distance at which the walk ended inside or left
            the geometry (None if it never entered).
    """
    segments: list[Segment] = field(default_factory=list)
    status: WalkStatus = WalkStatus.COMPLETED
    origin: Vec3 = (0.0, 0.0, 0.0)
    direction: Vec3 = (0.0, 0.0, 1.0)
    entry_distance: float | None = None
    exit_distance: float | None = None
    steps: int = 0

    @property
    def entered(self) -> bool:
        return self.entry_distance is not None

    def point_at(self, distance: float) -> Vec3:
        return _advance(self.origin, self.direction, distance)


def normalize_direction(direction) -> Vec3:
    """Return *direction* as a unit 3-tuple.

    Raises:
        ValueError: If the vector has zero length or non-finite components.
    """
    dx, dy, dz = (float(c) for c in direction)
    norm = math.sqrt(dx * dx + dy * dy + dz * dz)
    if norm == 0.0 or not math.isfinite(norm):
        raise ValueError(f"Direction must be a non-zero finite vector, got {tuple(direction)!r}")
    return (dx / norm, dy / norm, dz / norm)


def _advance(origin: Vec3, u: Vec3, s: float) -> Vec3:
    return (origin[0] + s * u[0], origin[1] + s * u[1], origin[2] + s * u[2])


class RayStepper:
    """Boundary-to-boundary ray walker.

    Args:
        service: Geometry service used for point location and navigation.
        max_boundary_retries: Re-issued crossings allowed per boundary.
        boundary_push: Initial distance pushed past each boundary.
    """

    def __init__(
        self,
        service: GeometryService,
        max_boundary_retries: int = MAX_BOUNDARY_RETRIES,
        boundary_push: float = BOUNDARY_PUSH,
    ) -> None:
        self._service = service
        self.max_boundary_retries = max_boundary_retries
        self.boundary_push = boundary_push

    @property
    def service(self) -> GeometryService:
        return self._service

    def walk(self, origin, direction, max_steps: int = MAX_WALK_STEPS) -> RayWalk:
        """Walk the ray ``origin + s * direction`` (s >= 0) through the geometry.

        Args:
            origin: Ray origin, geometry units.
            direction: Direction vector; normalized here.
            max_steps: Boundary crossings allowed before giving up.

        Raises:
            ValueError: If *direction* is a zero vector.
        """
        u = normalize_direction(direction)
        origin = tuple(float(c) for c in origin)
        walk = RayWalk(origin=origin, direction=u)
        s = 0.0

        for _ in range(max_steps):
            # Positions are recomputed from the origin each step, so no drift accumulates
            point = _advance(origin, u, s)
            node = self._service.find_node(point)

            if node is None:
                if walk.entered:
                    walk.exit_distance = s
                    walk.status = WalkStatus.COMPLETED
                    break
                step = self._cross_boundary(point, u)
                if step is None:
                    walk.status = WalkStatus.BOUNDARY_JITTER
                    break
                if math.isinf(step):
                    logger.debug("Ray %s -> %s misses the geometry", origin, u)
                    walk.status = WalkStatus.COMPLETED
                    break
                s += step
                walk.steps += 1
                continue

            if not walk.entered:
                walk.entry_distance = s

            material = self._service.material_of(node)
            if material is None:
                logger.warning("Volume %r has no medium; ending walk at s=%.6g", node.name, s)
                walk.exit_distance = s
                walk.status = WalkStatus.NO_MEDIUM
                break

            step = self._cross_boundary(point, u)
            if step is None:
                walk.exit_distance = s
                walk.status = WalkStatus.BOUNDARY_JITTER
                break
            if math.isinf(step):
                walk.exit_distance = s
                walk.status = WalkStatus.COMPLETED
                break

            logger.debug(
                "Step %d: s=%.6g volume=%s material=%s step=%.6g",
                walk.steps, s, node.name, material.id, step,
            )
            walk.segments.append(Segment(
                start=point, distance=s, length=step,
                volume=node.name, material=material,
            ))
            s += step
            walk.steps += 1
        else:
            logger.warning("Ray %s -> %s hit the step limit (%d)", origin, u, max_steps)
            walk.exit_distance = s if walk.entered else None
            walk.status = WalkStatus.STEP_LIMIT

        return walk

    def _cross_boundary(self, point: Vec3, u: Vec3) -> float | None:
        """Step length that crosses the next boundary, re-issuing on jitter.

        Returns ``math.inf`` when no boundary lies ahead and None when
        every retry failed to reach a new volume.
        """
        if math.isinf(self._service.find_next_boundary(point, u)):
            return math.inf
        push = self.boundary_push
        for attempt in range(self.max_boundary_retries + 1):
            step = self._service.step(push)
            if self._service.is_entering():
                return step
            logger.debug("Boundary not crossed at %s (attempt %d); push -> %.3g", point, attempt, push * 10)
            push *= 10.0
        logger.error(
            "Boundary jitter at %s: no volume change after %d retries",
            point, self.max_boundary_retries,
        )
        return None
