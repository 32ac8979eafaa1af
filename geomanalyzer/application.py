"""Application factory — analyzer creation and logging setup for the CLI."""

from __future__ import annotations

import logging
import os
import pathlib

import numpy as np

from geomanalyzer.core.geom_analyzer import GeomAnalyzer
from geomanalyzer.core.geometry_templates import create_template
from geomanalyzer.core.point_analyzer import PointGeomAnalyzer
from geomanalyzer.models.config import AnalyzerConfig

TEMPLATE_PREFIX = "template:"

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(verbosity: int = 0) -> None:
    """Root logging setup: WARNING by default, INFO with -v, DEBUG with -vv."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def create_analyzer(
    geometry: str,
    config: AnalyzerConfig | None = None,
    seed: int | None = None,
) -> GeomAnalyzer | PointGeomAnalyzer:
    """Create the analyzer for a geometry argument.

    Args:
        geometry: Path to a JSON descriptor, ``template:<name>`` for a built-in
            template, or a target mix such as ``1000080160[0.95],1000010010[0.05]``.
        config: Analyzer settings (ignored for target mixes).
        seed: Random seed; None for an unseeded generator.

    Raises:
        ValueError: Malformed descriptor or target mix.
        FileNotFoundError: *geometry* looks like a file path but does not exist.
        KeyError: Unknown template or dangling reference in the descriptor.
    """
    if geometry.startswith(TEMPLATE_PREFIX):
        descriptor = create_template(geometry[len(TEMPLATE_PREFIX):])
    elif pathlib.Path(geometry).is_file():
        descriptor = pathlib.Path(geometry)
    elif geometry.endswith(".json") or "/" in geometry or os.sep in geometry:
        raise FileNotFoundError(f"Geometry file not found: {geometry}")
    else:
        return PointGeomAnalyzer(geometry)
    return GeomAnalyzer(descriptor, config=config, rng=np.random.default_rng(seed))
