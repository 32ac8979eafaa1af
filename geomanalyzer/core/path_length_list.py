"""Path length accumulator keyed by isotope code.

Keys are fixed at construction (the isotope list of the geometry).  Each
entry holds a geometric length [cm] and a density-weighted length
[g/cm²].  Adding to a code that was never registered is a programming
error and raises ``KeyError``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from geomanalyzer.core.pdg import ion_label
from geomanalyzer.core.units import weighted_length

logger = logging.getLogger(__name__)


class PathLengthList:
    """Per-isotope path lengths for one query.

    Mixtures are accounted by adding the full geometric step to every
    constituent isotope, not a share split by weight fraction.  Each
    entry is therefore the distance travelled through material containing
    that isotope, and entries must not be summed into a total traversal.

    Args:
        codes: Isotope codes to register.  Duplicates are ignored.
    """

    def __init__(self, codes: Iterable[int]) -> None:
        self._lengths: dict[int, float] = {}
        self._weighted: dict[int, float] = {}
        for code in codes:
            self._lengths[int(code)] = 0.0
            self._weighted[int(code)] = 0.0

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_all_to_zero(self) -> None:
        for code in self._lengths:
            self._lengths[code] = 0.0
            self._weighted[code] = 0.0

    def _check(self, code: int) -> None:
        if code not in self._lengths:
            raise KeyError(f"Unknown isotope: {code!r}")

    def add_path_length(self, code: int, length: float, density: float | None = None) -> None:
        """Add *length* [cm] to *code*; with *density* [g/cm³] also add length × density.

        Raises:
            KeyError: If *code* is not registered.
        """
        self._check(code)
        self._lengths[code] += length
        if density is not None:
            self._weighted[code] += weighted_length(length, density)

    def set_path_length(self, code: int, length: float, weighted: float = 0.0) -> None:
        self._check(code)
        self._lengths[code] = length
        self._weighted[code] = weighted

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def path_length(self, code: int) -> float:
        """Geometric length [cm] for *code*."""
        self._check(code)
        return self._lengths[code]

    def density_weighted_path_length(self, code: int) -> float:
        """Density-weighted length [g/cm²] for *code*."""
        self._check(code)
        return self._weighted[code]

    def are_all_zero(self) -> bool:
        return all(v == 0.0 for v in self._lengths.values())

    def codes(self) -> list[int]:
        return list(self._lengths)

    def items(self) -> list[tuple[int, float]]:
        return list(self._lengths.items())

    def as_dict(self, density_weighted: bool = False) -> dict[int, float]:
        src = self._weighted if density_weighted else self._lengths
        return dict(src)

    def copy(self) -> PathLengthList:
        other = PathLengthList(self._lengths)
        other._lengths.update(self._lengths)
        other._weighted.update(self._weighted)
        return other

    def __iter__(self) -> Iterator[int]:
        return iter(self._lengths)

    def __len__(self) -> int:
        return len(self._lengths)

    def __contains__(self, code: object) -> bool:
        return code in self._lengths

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathLengthList):
            return NotImplemented
        return self._lengths == other._lengths and self._weighted == other._weighted

    def __repr__(self) -> str:
        body = ", ".join(f"{c}: {v:.6g}" for c, v in self._lengths.items())
        return f"PathLengthList({body})"

    def log_contents(self, level: int = logging.INFO) -> None:
        for code, length in self._lengths.items():
            logger.log(
                level, "%d (%s): %.6g cm, %.6g g/cm2",
                code, ion_label(code), length, self._weighted[code],
            )
