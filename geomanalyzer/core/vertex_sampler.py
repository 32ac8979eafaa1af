"""Vertex sampler — picks an interaction point along a ray.

The point is drawn with probability proportional to the density-weighted
length of target material along the ray, in two passes:

1. Walk the ray boundary to boundary and sum ``length × density`` over
   segments whose material contains the target isotope.
2. Draw a threshold in ``[0, total)`` and re-walk the ray on a fixed grid
   of small increments anchored at the origin.  Each increment is
   attributed to the material at its start point.  The vertex is the start
   of the increment whose contribution reaches the threshold, so it always
   lies inside target material.

The second pass resolves to the increment, by default a thousandth of the
geometry's largest extent.  When no grid point lands in the target, the
vertex is the midpoint of the pass-1 segment where the threshold falls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from geomanalyzer.constants import MAX_WALK_STEPS
from geomanalyzer.core.ray_stepper import RayStepper, RayWalk, Segment, WalkStatus
from geomanalyzer.core.units import to_cm, to_g_cm3, weighted_length

logger = logging.getLogger(__name__)


def _segment_at(segments: list[Segment], threshold: float) -> Segment:
    """Segment where the cumulative ``length × density`` reaches *threshold*."""
    acc = 0.0
    for seg in segments:
        acc += seg.length * seg.material.density
        if acc >= threshold:
            return seg
    return segments[-1]


@dataclass
class VertexSample:
    """Outcome of one vertex draw.

    Attributes:
        vertex: Sampled point [geometry units]; zeros when not found.
        found: True if a vertex was placed.
        weighted_length: Density-weighted target length along the ray [g/cm²].
        status: How the pass-1 walk ended.
        volume: Name of the volume holding the vertex.
    """
    vertex: np.ndarray = field(default_factory=lambda: np.zeros(3))
    found: bool = False
    weighted_length: float = 0.0
    status: WalkStatus = WalkStatus.COMPLETED
    volume: str | None = None


class VertexSampler:
    """Samples interaction vertices along rays.

    Args:
        stepper: Ray stepper bound to the geometry.
        step: Pass-2 increment [geometry units].
        rng: numpy random Generator (for reproducibility in tests).
             If None, creates a default unseeded generator.
        length_units: Length unit name of the geometry.
        density_units: Density unit name of the geometry.
        max_steps: Boundary steps allowed in pass 1.
    """

    def __init__(
        self,
        stepper: RayStepper,
        step: float,
        rng: np.random.Generator | None = None,
        length_units: str = "cm",
        density_units: str = "g_cm3",
        max_steps: int = MAX_WALK_STEPS,
    ) -> None:
        if not step > 0.0:
            raise ValueError(f"Vertex step must be positive, got {step!r}")
        self._stepper = stepper
        self._rng = rng or np.random.default_rng()
        self.step = step
        self.length_units = length_units
        self.density_units = density_units
        self.max_steps = max_steps

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    def sample(self, origin, direction, code: int) -> VertexSample:
        """Draw a vertex in material containing isotope *code*.

        Raises:
            ValueError: If *direction* is a zero vector.
        """
        walk = self._stepper.walk(origin, direction, max_steps=self.max_steps)
        result = VertexSample(status=walk.status)
        if walk.status == WalkStatus.BOUNDARY_JITTER:
            return result

        matching = [s for s in walk.segments if s.material.contains_isotope(code)]
        total = sum(s.length * s.material.density for s in matching)
        result.weighted_length = sum(
            weighted_length(to_cm(s.length, self.length_units), to_g_cm3(s.material.density, self.density_units))
            for s in matching
        )
        if total <= 0.0:
            logger.error("No material with isotope %d along ray %s -> %s", code, walk.origin, walk.direction)
            return result

        threshold = self._rng.random() * total
        logger.info(
            "Target weighted length %.6g; threshold %.6g", total, threshold,
        )
        point, volume = self._locate(walk, code, threshold)
        if point is None:
            # Target thinner than the increment grid
            seg = _segment_at(matching, threshold)
            point = walk.point_at(seg.distance + 0.5 * seg.length)
            volume = seg.volume
            logger.debug("Vertex grid missed the target; using segment midpoint")

        result.vertex = np.array(point, dtype=float)
        result.found = True
        result.volume = volume
        logger.info("Vertex at %s in %s", point, volume)
        return result

    def _locate(self, walk: RayWalk, code: int, threshold: float):
        """Pass 2: fixed-increment walk to the threshold crossing."""
        service = self._stepper.service
        inc = self.step
        first = walk.segments[0].distance
        last = walk.exit_distance
        if last is None:
            last = walk.segments[-1].end_distance

        acc = 0.0
        inside = (None, None)
        for k in range(math.floor(first / inc), math.ceil(last / inc) + 1):
            point = walk.point_at(k * inc)
            node = service.find_node(point)
            material = service.material_of(node)
            if material is None or not material.contains_isotope(code):
                continue
            inside = (point, node.name)
            acc += inc * material.density
            if acc >= threshold:
                return inside
        return inside
