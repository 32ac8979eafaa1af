"""Geometry analyzer — the public entry point of the engine.

``GeomAnalyzer`` owns a geometry service, the per-isotope path-length
accumulator and the last generated vertex, and answers three queries:

- ``compute_path_lengths(origin, direction)``: per-isotope lengths along a ray.
- ``estimate_max_path_length(code)``: Monte-Carlo bound for one isotope.
- ``generate_vertex(origin, direction, code)``: density-weighted vertex draw.

Queries never raise on configuration problems (no geometry, unknown
isotope, missing top volume, no target along the ray, runaway walk).
They log the problem, return a sentinel (zeroed lengths, ``0.0``, the zero
vector) and set ``last_status``.  A zero direction vector is a caller
error and raises ``ValueError``.

The analyzer is not reentrant: every query resets and refills the same
accumulator.  Use one instance per thread, or serialize calls.

Lengths are reported in cm and density-weighted lengths in g/cm²,
whatever the geometry units.  Points (origins, vertices) are in geometry
length units.
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from geomanalyzer.constants import VERTEX_STEP_FRACTION
from geomanalyzer.core.geometry_service import (
    GeometryService,
    build_list_of_target_nuclei,
    load_geometry,
)
from geomanalyzer.core.max_path_estimator import MaxPathLengthEstimator
from geomanalyzer.core.path_length_list import PathLengthList
from geomanalyzer.core.ray_stepper import RayStepper, WalkStatus
from geomanalyzer.core.units import density_unit_factor, length_unit_factor, to_cm, to_g_cm3
from geomanalyzer.core.vertex_sampler import VertexSampler
from geomanalyzer.models.config import AnalyzerConfig
from geomanalyzer.models.geometry import BoundingBox

logger = logging.getLogger(__name__)


class AnalyzerStatus(Enum):
    OK = "ok"
    NO_GEOMETRY = "no_geometry"
    NO_TOP_VOLUME = "no_top_volume"
    UNKNOWN_MATERIAL = "unknown_material"
    NO_MATERIAL_ALONG_RAY = "no_material_along_ray"
    LOOP_GUARD_EXCEEDED = "loop_guard_exceeded"


_RUNAWAY = (WalkStatus.BOUNDARY_JITTER, WalkStatus.STEP_LIMIT)


class GeomAnalyzer:
    """Path lengths, max path lengths and vertices for a detector geometry.

    Args:
        geometry: Anything ``load_geometry`` accepts, or None to load later.
        config: Analyzer settings; defaults to ``AnalyzerConfig()``.
        rng: numpy random Generator shared by the max path scan and the
             vertex sampler.  If None, creates a default unseeded generator.

    Raises:
        ValueError: Unknown units in *config* or malformed descriptor.
    """

    def __init__(
        self,
        geometry=None,
        config: AnalyzerConfig | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config or AnalyzerConfig()
        self._rng = rng or np.random.default_rng()
        # Unknown unit names raise here rather than on the first query
        length_unit_factor(self.config.length_units)
        density_unit_factor(self.config.density_units)

        self._service: GeometryService | None = None
        self._stepper: RayStepper | None = None
        self._nuclei: list[int] = []
        self._path_lengths = PathLengthList([])
        self._vertex = np.zeros(3)
        self._vtx_code: int | None = None
        self._status = AnalyzerStatus.OK
        self.max_path_lengths: PathLengthList | None = None

        if geometry is not None:
            self.load(geometry)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def load(self, geometry) -> None:
        """Load a geometry and register its isotopes."""
        self._service = load_geometry(geometry)
        self._stepper = RayStepper(
            self._service,
            max_boundary_retries=self.config.max_boundary_retries,
            boundary_push=self.config.boundary_push,
        )
        self._nuclei = build_list_of_target_nuclei(self._service)
        self._path_lengths = PathLengthList(self._nuclei)
        self._vertex = np.zeros(3)
        self._vtx_code = None
        self.max_path_lengths = None
        logger.info(
            "Geometry loaded: top volume %r, %d isotopes",
            self._service.top_volume_name, len(self._nuclei),
        )

    @property
    def service(self) -> GeometryService | None:
        return self._service

    @property
    def rng(self) -> np.random.Generator:
        return self._rng

    @property
    def last_status(self) -> AnalyzerStatus:
        """Outcome of the most recent query."""
        return self._status

    @property
    def current_vertex(self) -> np.ndarray:
        """Copy of the last generated vertex (zeros if none)."""
        return self._vertex.copy()

    @property
    def path_lengths(self) -> PathLengthList:
        """Accumulator filled by the last ``compute_path_lengths`` call."""
        return self._path_lengths

    def list_of_target_nuclei(self) -> list[int]:
        """Isotope codes present in the geometry."""
        return list(self._nuclei)

    def _fail(self, status: AnalyzerStatus, msg: str, *args) -> None:
        self._status = status
        logger.error(msg, *args)

    def _require_geometry(self) -> bool:
        if self._service is None:
            self._fail(AnalyzerStatus.NO_GEOMETRY, "No geometry has been loaded")
            return False
        return True

    def bounding_box(self) -> BoundingBox | None:
        """Bounding box of the scanned top volume, or None if unavailable."""
        if not self._require_geometry():
            return None
        name = self.config.top_volume or self._service.top_volume_name
        try:
            return self._service.bounding_box(name)
        except KeyError:
            self._fail(AnalyzerStatus.NO_TOP_VOLUME, "Top volume %r not found", name)
            return None

    # ------------------------------------------------------------------
    # Path lengths
    # ------------------------------------------------------------------

    def compute_path_lengths(self, origin, direction) -> PathLengthList:
        """Per-isotope path lengths along the ray ``origin + s * direction``.

        The returned accumulator is owned by the analyzer and is reset by
        the next call; copy it to keep it.

        Raises:
            ValueError: If *direction* is a zero vector.
        """
        self._path_lengths.set_all_to_zero()
        self._status = AnalyzerStatus.OK
        if not self._require_geometry():
            return self._path_lengths

        logger.info("Computing path lengths from %s along %s", tuple(origin), tuple(direction))
        walk = self._stepper.walk(origin, direction, max_steps=self.config.max_walk_steps)
        if walk.status in _RUNAWAY:
            self._fail(
                AnalyzerStatus.LOOP_GUARD_EXCEEDED,
                "Ray walk aborted (%s); path lengths reset", walk.status.value,
            )
            return self._path_lengths

        try:
            for seg in walk.segments:
                length = to_cm(seg.length, self.config.length_units)
                density = to_g_cm3(seg.material.density, self.config.density_units)
                for code in seg.material.isotope_codes():
                    self._path_lengths.add_path_length(code, length, density)
        except KeyError as exc:
            self._path_lengths.set_all_to_zero()
            self._fail(AnalyzerStatus.UNKNOWN_MATERIAL, "Path length bookkeeping failed: %s", exc)
            return self._path_lengths

        if logger.isEnabledFor(logging.DEBUG):
            self._path_lengths.log_contents(logging.DEBUG)
        return self._path_lengths

    # ------------------------------------------------------------------
    # Max path lengths
    # ------------------------------------------------------------------

    def set_vtx_material(self, code: int) -> bool:
        """Select the target isotope for max path length and vertex queries."""
        if not self._require_geometry():
            return False
        if code not in self._nuclei:
            self._fail(AnalyzerStatus.UNKNOWN_MATERIAL, "Isotope %r is not in the geometry", code)
            return False
        self._vtx_code = code
        self._status = AnalyzerStatus.OK
        logger.info("Target isotope set to %d", code)
        return True

    def _estimator(self) -> MaxPathLengthEstimator | None:
        bbox = self.bounding_box()
        if bbox is None:
            return None
        return MaxPathLengthEstimator(
            self._stepper,
            bbox,
            rng=self._rng,
            points_per_face=self.config.points_per_face,
            rays_per_point=self.config.rays_per_point,
            loop_guard=self.config.sampling_loop_guard,
            length_units=self.config.length_units,
            density_units=self.config.density_units,
        )

    def estimate_max_path_length(
        self, code: int | None = None, density_weighted: bool = False,
    ) -> float:
        """Maximum path length [cm] (or [g/cm²]) for one isotope.

        Args:
            code: Isotope code; if given, it becomes the target isotope.
                Defaults to the isotope set by ``set_vtx_material``.
            density_weighted: Return the density-weighted bound.
        """
        if code is not None and not self.set_vtx_material(code):
            return 0.0
        if not self._require_geometry():
            return 0.0
        if self._vtx_code is None:
            self._fail(AnalyzerStatus.UNKNOWN_MATERIAL, "No target isotope selected")
            return 0.0

        estimator = self._estimator()
        if estimator is None:
            return 0.0
        self._status = AnalyzerStatus.OK
        value = estimator.estimate(self._vtx_code, density_weighted)
        logger.info("Max path length for %d: %.6g", self._vtx_code, value)
        return value

    def compute_max_path_lengths(self, density_weighted: bool = False) -> dict[int, float]:
        """Maximum path lengths for every isotope from one scan.

        The full table (lengths and density-weighted lengths) is kept in
        ``max_path_lengths``.
        """
        if not self._require_geometry():
            return {}
        estimator = self._estimator()
        if estimator is None:
            return {}
        self._status = AnalyzerStatus.OK
        self.max_path_lengths = estimator.scan(self._nuclei)
        self.max_path_lengths.log_contents()
        return self.max_path_lengths.as_dict(density_weighted)

    # ------------------------------------------------------------------
    # Vertex generation
    # ------------------------------------------------------------------

    def _vertex_step(self) -> float | None:
        if self.config.vertex_step is not None:
            return self.config.vertex_step
        bbox = self.bounding_box()
        if bbox is None:
            return None
        return bbox.largest_extent * VERTEX_STEP_FRACTION

    def generate_vertex(self, origin, direction, code: int | None = None) -> np.ndarray:
        """Random vertex in material containing the target isotope.

        The draw is weighted by density × length along the ray.  Returns a
        copy of the vertex, or the zero vector when the ray does not cross
        the target.

        Raises:
            ValueError: If *direction* is a zero vector.
        """
        self._vertex = np.zeros(3)
        if code is not None and not self.set_vtx_material(code):
            return self._vertex.copy()
        if not self._require_geometry():
            return self._vertex.copy()
        if self._vtx_code is None:
            self._fail(AnalyzerStatus.UNKNOWN_MATERIAL, "No target isotope selected")
            return self._vertex.copy()

        step = self._vertex_step()
        if step is None:
            return self._vertex.copy()
        self._status = AnalyzerStatus.OK
        sampler = VertexSampler(
            self._stepper, step, rng=self._rng,
            length_units=self.config.length_units,
            density_units=self.config.density_units,
            max_steps=self.config.max_walk_steps,
        )
        sample = sampler.sample(origin, direction, self._vtx_code)
        if sample.status == WalkStatus.BOUNDARY_JITTER:
            self._fail(AnalyzerStatus.LOOP_GUARD_EXCEEDED, "Vertex walk aborted on boundary jitter")
        elif not sample.found:
            self._status = AnalyzerStatus.NO_MATERIAL_ALONG_RAY
        else:
            self._vertex = sample.vertex
        return self._vertex.copy()
