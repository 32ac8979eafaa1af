"""Export — geometry descriptors and path-length tables (JSON, CSV)."""

from geomanalyzer.export.csv_export import CsvExporter
from geomanalyzer.export.json_export import JsonExporter

__all__ = [
    "CsvExporter",
    "JsonExporter",
]
