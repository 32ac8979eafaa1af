"""Serialization utilities — dataclass ↔ JSON-safe dict conversion.

Handles Enum fields, nested dataclasses and schema versions for geometry
descriptors and path-length tables.  Used by ``load_geometry`` and the
export modules.
"""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from geomanalyzer.constants import (
    DEFAULT_TOP_VOLUME,
    GEOMETRY_SCHEMA_VERSION,
    PATH_LENGTHS_SCHEMA_VERSION,
)
from geomanalyzer.core.path_length_list import PathLengthList
from geomanalyzer.core.pdg import ion_a, ion_z
from geomanalyzer.models.geometry import (
    DetectorGeometry,
    Placement,
    Point3D,
    Shape,
    ShapeType,
    Volume,
)
from geomanalyzer.models.material import (
    Composition,
    Element,
    Material,
    MaterialCategory,
)


# =====================================================================
# Generic helpers
# =====================================================================


def _serialize_value(val: Any) -> Any:
    """Convert a value to a JSON-safe type."""
    if val is None:
        return None
    if isinstance(val, Enum):
        return val.value
    if dataclasses.is_dataclass(val) and not isinstance(val, type):
        return _dataclass_to_dict(val)
    if isinstance(val, list):
        return [_serialize_value(v) for v in val]
    if isinstance(val, (int, float, str, bool)):
        return val
    return str(val)


def _dataclass_to_dict(obj: Any) -> dict:
    """Recursively convert a dataclass to a JSON-safe dict."""
    return {f.name: _serialize_value(getattr(obj, f.name)) for f in dataclasses.fields(obj)}


def _require(d: dict, key: str, where: str) -> Any:
    try:
        return d[key]
    except (KeyError, TypeError):
        raise ValueError(f"Missing {key!r} in {where}") from None


# =====================================================================
# Geometry serialization
# =====================================================================


def geometry_to_dict(geometry: DetectorGeometry) -> dict:
    """Serialize DetectorGeometry to a JSON-safe dict with ``schema_version``."""
    d = _dataclass_to_dict(geometry)
    d["schema_version"] = GEOMETRY_SCHEMA_VERSION
    return d


def dict_to_geometry(data: dict) -> DetectorGeometry:
    """Deserialize a descriptor dict to DetectorGeometry.

    Raises:
        ValueError: Missing fields, unknown enum values, invalid shapes or
            an unsupported schema version.
    """
    if not isinstance(data, dict):
        raise ValueError("Geometry descriptor must be a JSON object")
    version = str(data.get("schema_version", GEOMETRY_SCHEMA_VERSION))
    if version.split(".")[0] != GEOMETRY_SCHEMA_VERSION.split(".")[0]:
        raise ValueError(f"Unsupported geometry schema version: {version!r}")

    return DetectorGeometry(
        name=data.get("name", ""),
        top_volume=data.get("top_volume", DEFAULT_TOP_VOLUME),
        materials=[_dict_to_material(m) for m in data.get("materials", [])],
        volumes=[_dict_to_volume(v) for v in _require(data, "volumes", "geometry")],
    )


def _dict_to_element(d: dict) -> Element:
    return Element(
        symbol=d.get("symbol", ""),
        z=int(_require(d, "z", "element")),
        a=float(_require(d, "a", "element")),
    )


def _dict_to_material(d: dict) -> Material:
    mat_id = _require(d, "id", "material")
    category = MaterialCategory(d.get("category", MaterialCategory.ELEMENT.value))
    element = _dict_to_element(d["element"]) if d.get("element") else None
    composition = [
        Composition(
            element=_dict_to_element(_require(c, "element", f"composition of {mat_id!r}")),
            weight_fraction=float(c.get("weight_fraction", 0.0)),
        )
        for c in d.get("composition", [])
    ]
    return Material(
        id=mat_id,
        name=d.get("name", mat_id),
        density=float(_require(d, "density", f"material {mat_id!r}")),
        category=category,
        element=element,
        composition=composition,
    )


def _dict_to_shape(d: dict) -> Shape:
    return Shape(
        type=ShapeType(_require(d, "type", "shape")),
        dx=float(d.get("dx", 0.0)),
        dy=float(d.get("dy", 0.0)),
        dz=float(d.get("dz", 0.0)),
        rmin=float(d.get("rmin", 0.0)),
        rmax=float(d.get("rmax", 0.0)),
    )


def _dict_to_volume(d: dict) -> Volume:
    name = _require(d, "name", "volume")
    return Volume(
        name=name,
        shape=_dict_to_shape(_require(d, "shape", f"volume {name!r}")),
        material_id=d.get("material_id"),
        daughters=[
            Placement(
                volume=_require(p, "volume", f"placement in {name!r}"),
                position=Point3D(**p["position"]) if "position" in p else Point3D(),
            )
            for p in d.get("daughters", [])
        ],
    )


# =====================================================================
# Path-length tables
# =====================================================================


def path_lengths_to_dict(
    path_lengths: PathLengthList,
    geometry_name: str = "",
    length_units: str = "cm",
    density_units: str = "g_cm3",
) -> dict:
    """Serialize a (max) path-length table.

    Lengths are always stored in cm and g/cm²; the unit fields record
    the units of the geometry the table was computed from.
    """
    return {
        "schema_version": PATH_LENGTHS_SCHEMA_VERSION,
        "geometry": geometry_name,
        "length_units": length_units,
        "density_units": density_units,
        "entries": [
            {
                "pdg": code,
                "a": ion_a(code),
                "z": ion_z(code),
                "path_length_cm": path_lengths.path_length(code),
                "weighted_path_length_g_cm2": path_lengths.density_weighted_path_length(code),
            }
            for code in path_lengths
        ],
    }


def dict_to_path_lengths(data: dict) -> PathLengthList:
    """Deserialize a path-length table.

    Raises:
        ValueError: Missing fields.
    """
    entries = _require(data, "entries", "path-length table")
    codes = [int(_require(e, "pdg", "path-length entry")) for e in entries]
    table = PathLengthList(codes)
    for code, e in zip(codes, entries):
        table.set_path_length(
            code,
            float(e.get("path_length_cm", 0.0)),
            float(e.get("weighted_path_length_g_cm2", 0.0)),
        )
    return table
