"""CSV export — path-length tables.

BOM UTF-8 encoding for Excel compatibility.
"""

from __future__ import annotations

import csv

from geomanalyzer.core.path_length_list import PathLengthList
from geomanalyzer.core.pdg import ion_a, ion_z


class CsvExporter:
    """CSV file export operations."""

    def export_path_lengths(self, path_lengths: PathLengthList, output_path: str) -> None:
        """Export a path-length table as CSV.

        Columns: PDG code, A, Z, Path length (cm), Weighted path length (g/cm2).

        Args:
            path_lengths: Table to export.
            output_path: Destination file path (.csv).
        """
        with open(output_path, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f)
            writer.writerow([
                "PDG code", "A", "Z",
                "Path length (cm)", "Weighted path length (g/cm2)",
            ])
            for code in path_lengths:
                writer.writerow([
                    code,
                    ion_a(code),
                    ion_z(code),
                    f"{path_lengths.path_length(code):.6g}",
                    f"{path_lengths.density_weighted_path_length(code):.6g}",
                ])
