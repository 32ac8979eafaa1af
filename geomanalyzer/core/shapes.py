"""Analytic distance functions for the supported solid shapes.

Every function works in the shape's local frame (shape centred on the
origin).  Points and directions are plain ``(x, y, z)`` tuples; directions
must be unit vectors.

Distances are found by collecting every analytic surface crossing along
the ray and classifying the segments between consecutive crossings with
an interior test at the segment midpoint.  This handles shells (hollow
spheres and tubes) without special cases.
"""

from __future__ import annotations

import math

from geomanalyzer.models.geometry import BoundingBox, Point3D, Shape, ShapeType

Vec3 = tuple[float, float, float]

# Crossings closer than this to the start point are ignored
_EPS = 1.0e-12


def contains(shape: Shape, p: Vec3) -> bool:
    """True if *p* is inside or on the surface of *shape*."""
    x, y, z = p
    if shape.type == ShapeType.BOX:
        return abs(x) <= shape.dx and abs(y) <= shape.dy and abs(z) <= shape.dz
    if shape.type == ShapeType.SPHERE:
        r2 = x * x + y * y + z * z
        return shape.rmin * shape.rmin <= r2 <= shape.rmax * shape.rmax
    if shape.type == ShapeType.TUBE:
        if abs(z) > shape.dz:
            return False
        r2 = x * x + y * y
        return shape.rmin * shape.rmin <= r2 <= shape.rmax * shape.rmax
    raise ValueError(f"Unsupported shape type: {shape.type!r}")


def _plane_roots(p: float, d: float, half: float) -> list[float]:
    if d == 0.0:
        return []
    return [(half - p) / d, (-half - p) / d]


def _quadratic_roots(a: float, b: float, c: float) -> list[float]:
    """Real roots of a·t² + 2b·t + c = 0."""
    if a == 0.0:
        return []
    disc = b * b - a * c
    if disc < 0.0:
        return []
    sq = math.sqrt(disc)
    return [(-b - sq) / a, (-b + sq) / a]


def _crossings(shape: Shape, p: Vec3, d: Vec3) -> list[float]:
    """Sorted surface crossing distances strictly ahead of *p*."""
    x, y, z = p
    ux, uy, uz = d
    roots: list[float] = []

    if shape.type == ShapeType.BOX:
        roots += _plane_roots(x, ux, shape.dx)
        roots += _plane_roots(y, uy, shape.dy)
        roots += _plane_roots(z, uz, shape.dz)
    elif shape.type == ShapeType.SPHERE:
        a = ux * ux + uy * uy + uz * uz
        b = x * ux + y * uy + z * uz
        r2 = x * x + y * y + z * z
        for radius in (shape.rmax, shape.rmin):
            if radius > 0.0:
                roots += _quadratic_roots(a, b, r2 - radius * radius)
    elif shape.type == ShapeType.TUBE:
        roots += _plane_roots(z, uz, shape.dz)
        a = ux * ux + uy * uy
        b = x * ux + y * uy
        r2 = x * x + y * y
        for radius in (shape.rmax, shape.rmin):
            if radius > 0.0:
                roots += _quadratic_roots(a, b, r2 - radius * radius)
    else:
        raise ValueError(f"Unsupported shape type: {shape.type!r}")

    return sorted(t for t in roots if t > _EPS)


def _along(p: Vec3, d: Vec3, t: float) -> Vec3:
    return (p[0] + t * d[0], p[1] + t * d[1], p[2] + t * d[2])


def distance_to_in(shape: Shape, p: Vec3, d: Vec3) -> float:
    """Distance from *p* (outside) to where the ray enters *shape*.

    Returns ``math.inf`` if the ray misses.  A point already inside
    returns 0.
    """
    prev = 0.0
    for t in _crossings(shape, p, d):
        if t - prev > _EPS and contains(shape, _along(p, d, 0.5 * (prev + t))):
            return prev
        prev = t
    return math.inf


def distance_to_out(shape: Shape, p: Vec3, d: Vec3) -> float:
    """Distance from *p* (inside) to where the ray leaves *shape*."""
    ts = _crossings(shape, p, d)
    prev = 0.0
    for t in ts:
        if t - prev > _EPS and not contains(shape, _along(p, d, 0.5 * (prev + t))):
            return prev
        prev = t
    return ts[-1] if ts else 0.0


def bounding_box(shape: Shape, position: Point3D | None = None) -> BoundingBox:
    """Axis-aligned bounding box of *shape* placed at *position*."""
    pos = position or Point3D()
    if shape.type == ShapeType.BOX:
        half = (shape.dx, shape.dy, shape.dz)
    elif shape.type == ShapeType.SPHERE:
        half = (shape.rmax, shape.rmax, shape.rmax)
    elif shape.type == ShapeType.TUBE:
        half = (shape.rmax, shape.rmax, shape.dz)
    else:
        raise ValueError(f"Unsupported shape type: {shape.type!r}")
    return BoundingBox(*half, ox=pos.x, oy=pos.y, oz=pos.z)
