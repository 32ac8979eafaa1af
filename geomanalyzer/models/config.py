"""Analyzer configuration data model."""

from __future__ import annotations

from dataclasses import dataclass

from geomanalyzer.constants import (
    BOUNDARY_PUSH,
    DEFAULT_DENSITY_UNITS,
    DEFAULT_LENGTH_UNITS,
    MAX_BOUNDARY_RETRIES,
    MAX_PL_LOOP_GUARD,
    MAX_PL_POINTS_PER_FACE,
    MAX_PL_RAYS_PER_POINT,
    MAX_WALK_STEPS,
)


@dataclass
class AnalyzerConfig:
    """Per-analyzer settings.

    Attributes:
        length_units: Length units of the geometry descriptor ("mm", "cm", "m", ...).
        density_units: Density units of the geometry descriptor ("g_cm3", "kg_m3", ...).
        top_volume: Volume whose bounding box is scanned for max path
            lengths (None = the geometry's top volume).
        max_walk_steps: Boundary steps allowed per ray walk.
        max_boundary_retries: Re-issued crossings allowed per boundary.
        boundary_push: Distance pushed past a boundary [geometry units].
        vertex_step: Vertex micro-walk increment [geometry units]
            (None = 1/1000 of the largest bounding-box extent).
        points_per_face: Entry points per bounding-box face (max path scan).
        rays_per_point: Rays cast from each entry point (max path scan).
        sampling_loop_guard: Boundary steps allowed per sampling ray.
    """
    length_units: str = DEFAULT_LENGTH_UNITS
    density_units: str = DEFAULT_DENSITY_UNITS
    top_volume: str | None = None
    max_walk_steps: int = MAX_WALK_STEPS
    max_boundary_retries: int = MAX_BOUNDARY_RETRIES
    boundary_push: float = BOUNDARY_PUSH
    vertex_step: float | None = None
    points_per_face: int = MAX_PL_POINTS_PER_FACE
    rays_per_point: int = MAX_PL_RAYS_PER_POINT
    sampling_loop_guard: int = MAX_PL_LOOP_GUARD
