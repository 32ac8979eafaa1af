"""Nuclear PDG codes — isotope identifiers used as path-length keys.

PDG 2006 convention for nuclei: ``10LZZZAAAI`` with L (strangeness) and
I (isomer level) both zero here, so::

    code = 1000000000 + Z * 10000 + A * 10

``A`` is the integer part of the atomic mass as reported by the geometry,
which keeps the keys identical to what the geometry service reports.
"""

from __future__ import annotations

_ION_BASE = 1_000_000_000


def ion_pdg_code(a: int | float, z: int) -> int:
    """Isotope code for mass number *a* and atomic number *z*.

    Args:
        a: Mass number; a fractional atomic mass is truncated.
        z: Atomic number.

    Raises:
        ValueError: If ``z`` is outside 1..999 or ``a`` outside z..999.
    """
    a_int = int(a)
    z_int = int(z)
    if not 1 <= z_int <= 999:
        raise ValueError(f"Invalid atomic number: {z!r}")
    if not z_int <= a_int <= 999:
        raise ValueError(f"Invalid mass number {a!r} for Z={z_int}")
    return _ION_BASE + z_int * 10_000 + a_int * 10


def is_ion(code: int) -> bool:
    """True if *code* is a nuclear PDG code."""
    return _ION_BASE < code < 2 * _ION_BASE


def ion_z(code: int) -> int:
    """Atomic number Z encoded in *code*."""
    if not is_ion(code):
        raise ValueError(f"Not a nuclear PDG code: {code!r}")
    return (code // 10_000) % 1_000


def ion_a(code: int) -> int:
    """Mass number A encoded in *code*."""
    if not is_ion(code):
        raise ValueError(f"Not a nuclear PDG code: {code!r}")
    return (code // 10) % 1_000


def ion_label(code: int) -> str:
    """Short ``A,Z`` label for logs and CSV output."""
    return f"A={ion_a(code)},Z={ion_z(code)}"
