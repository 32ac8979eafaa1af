"""Point geometry — a target mix with no spatial extent.

When no detector geometry is available, the interaction target can be
given as a weighted list of isotopes::

    1000080160[0.95],1000010010[0.05]

Every ray then "crosses" each isotope with a path length equal to its
weight, the maximum path length of each isotope is its weight, and every
vertex is the origin.
"""

from __future__ import annotations

import logging
import re

import numpy as np

from geomanalyzer.core.geom_analyzer import AnalyzerStatus
from geomanalyzer.core.path_length_list import PathLengthList
from geomanalyzer.core.pdg import is_ion
from geomanalyzer.core.ray_stepper import normalize_direction

logger = logging.getLogger(__name__)

_ENTRY_RE = re.compile(r"^\s*(-?\d+)\s*(?:\[\s*([^\]]*)\s*\])?\s*$")


def parse_target_mix(text: str) -> dict[int, float]:
    """Parse ``code1[w1],code2[w2],...`` into ``{code: weight}``.

    A single code may omit its weight (defaults to 1.0).  Weights are kept
    as given, not normalized.

    Raises:
        ValueError: Malformed entry, missing weight in a multi-isotope mix,
            non-nuclear code, duplicate code or negative weight.
    """
    entries = [e for e in text.split(",") if e.strip()]
    if not entries:
        raise ValueError("Empty target mix")

    mix: dict[int, float] = {}
    for entry in entries:
        m = _ENTRY_RE.match(entry)
        if m is None:
            raise ValueError(f"Malformed target mix entry: {entry!r}")
        code = int(m.group(1))
        if m.group(2) is None:
            if len(entries) > 1:
                raise ValueError(f"Missing weight in target mix entry: {entry!r}")
            weight = 1.0
        else:
            try:
                weight = float(m.group(2))
            except ValueError:
                raise ValueError(f"Invalid weight in target mix entry: {entry!r}") from None
        if not is_ion(code):
            raise ValueError(f"Not a nuclear PDG code: {code!r}")
        if weight < 0.0:
            raise ValueError(f"Negative weight in target mix entry: {entry!r}")
        if code in mix:
            raise ValueError(f"Duplicate isotope in target mix: {code!r}")
        logger.debug("Adding to target mix: code = %d, weight = %g", code, weight)
        mix[code] = weight
    return mix


class PointGeomAnalyzer:
    """Analyzer over a target mix, with the ``GeomAnalyzer`` query surface.

    Args:
        mix: ``{code: weight}`` or a ``code[weight],...`` string.
    """

    def __init__(self, mix: dict[int, float] | str) -> None:
        if isinstance(mix, str):
            mix = parse_target_mix(mix)
        if not mix:
            raise ValueError("Empty target mix")
        self._mix = {int(code): float(w) for code, w in mix.items()}
        self._path_lengths = PathLengthList(self._mix)
        self._vertex = np.zeros(3)
        self._vtx_code: int | None = None
        self._status = AnalyzerStatus.OK
        self.max_path_lengths: PathLengthList | None = None

    @property
    def last_status(self) -> AnalyzerStatus:
        return self._status

    @property
    def current_vertex(self) -> np.ndarray:
        return self._vertex.copy()

    @property
    def mix(self) -> dict[int, float]:
        return dict(self._mix)

    def list_of_target_nuclei(self) -> list[int]:
        return sorted(self._mix)

    def compute_path_lengths(self, origin, direction) -> PathLengthList:
        """Path length of each isotope is its weight (density-weighted too)."""
        normalize_direction(direction)
        self._status = AnalyzerStatus.OK
        for code, weight in self._mix.items():
            self._path_lengths.set_path_length(code, weight, weight)
        return self._path_lengths

    def set_vtx_material(self, code: int) -> bool:
        if code not in self._mix:
            self._status = AnalyzerStatus.UNKNOWN_MATERIAL
            logger.error("Isotope %r is not in the target mix", code)
            return False
        self._vtx_code = code
        self._status = AnalyzerStatus.OK
        return True

    def estimate_max_path_length(self, code: int | None = None, density_weighted: bool = False) -> float:
        if code is not None and not self.set_vtx_material(code):
            return 0.0
        if self._vtx_code is None:
            self._status = AnalyzerStatus.UNKNOWN_MATERIAL
            logger.error("No target isotope selected")
            return 0.0
        return self._mix[self._vtx_code]

    def compute_max_path_lengths(self, density_weighted: bool = False) -> dict[int, float]:
        self._status = AnalyzerStatus.OK
        self.max_path_lengths = PathLengthList(self._mix)
        for code, weight in self._mix.items():
            self.max_path_lengths.set_path_length(code, weight, weight)
        return dict(self._mix)

    def generate_vertex(self, origin, direction, code: int | None = None) -> np.ndarray:
        """Always the origin of the coordinate system."""
        normalize_direction(direction)
        self._vertex = np.zeros(3)
        if code is not None:
            self.set_vtx_material(code)
        else:
            self._status = AnalyzerStatus.OK
        return self._vertex.copy()
