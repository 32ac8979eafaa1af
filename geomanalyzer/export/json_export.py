"""JSON export/import of geometry descriptors and max path length tables.

A max path length table computed once can be saved and reused by later
runs on the same geometry instead of repeating the scan.
"""

from __future__ import annotations

import json

from geomanalyzer.core.path_length_list import PathLengthList
from geomanalyzer.core.serializers import (
    dict_to_geometry,
    dict_to_path_lengths,
    geometry_to_dict,
    path_lengths_to_dict,
)
from geomanalyzer.models.geometry import DetectorGeometry


class JsonExporter:
    """JSON file operations."""

    def export_geometry(self, geometry: DetectorGeometry, output_path: str) -> None:
        """Write geometry as formatted JSON file.

        Args:
            geometry: The geometry to export.
            output_path: Destination file path (.json).
        """
        data = geometry_to_dict(geometry)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def import_geometry(self, input_path: str) -> DetectorGeometry:
        """Read geometry from JSON file."""
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return dict_to_geometry(data)

    def export_path_lengths(
        self,
        path_lengths: PathLengthList,
        output_path: str,
        geometry_name: str = "",
        length_units: str = "cm",
        density_units: str = "g_cm3",
    ) -> None:
        """Write a path-length table (typically max path lengths).

        Args:
            path_lengths: Table to write; lengths in cm and g/cm².
            output_path: Destination file path (.json).
            geometry_name: Name of the geometry the table belongs to.
            length_units: Length units of that geometry.
            density_units: Density units of that geometry.
        """
        data = path_lengths_to_dict(path_lengths, geometry_name, length_units, density_units)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def import_path_lengths(self, input_path: str) -> PathLengthList:
        with open(input_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return dict_to_path_lengths(data)
