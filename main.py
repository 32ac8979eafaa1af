"""Geometry analyzer — command-line entry point.

Usage::

    python main.py maxpl GEOM [-o maxpl.json] [--csv maxpl.csv]
    python main.py pathlengths GEOM --origin X Y Z --direction DX DY DZ
    python main.py vertex GEOM --origin X Y Z --direction DX DY DZ --target CODE
    python main.py template NAME -o geometry.json

GEOM is a JSON geometry descriptor, ``template:<name>``, or a target mix
``code1[w1],code2[w2],...``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from geomanalyzer.application import configure_logging, create_analyzer
from geomanalyzer.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_DENSITY_UNITS,
    DEFAULT_LENGTH_UNITS,
)
from geomanalyzer.core.geom_analyzer import AnalyzerStatus
from geomanalyzer.core.geometry_templates import create_template, template_names
from geomanalyzer.core.units import density_units, length_units
from geomanalyzer.export import CsvExporter, JsonExporter
from geomanalyzer.models.config import AnalyzerConfig

logger = logging.getLogger(APP_NAME)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Path lengths, max path lengths and interaction vertices in a detector geometry.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("geometry", help="JSON descriptor, template:<name>, or target mix")
    common.add_argument("-L", "--length-units", default=DEFAULT_LENGTH_UNITS,
                        choices=length_units(), help="length units of the geometry")
    common.add_argument("-D", "--density-units", default=DEFAULT_DENSITY_UNITS,
                        choices=density_units(), help="density units of the geometry")
    common.add_argument("-t", "--top-volume", default=None,
                        help="volume whose bounding box is scanned")
    common.add_argument("--seed", type=int, default=None, help="random seed")
    common.add_argument("-v", "--verbose", action="count", default=0)

    ray = argparse.ArgumentParser(add_help=False)
    ray.add_argument("--origin", type=float, nargs=3, required=True, metavar=("X", "Y", "Z"))
    ray.add_argument("--direction", type=float, nargs=3, required=True, metavar=("DX", "DY", "DZ"))

    p = sub.add_parser("maxpl", parents=[common], help="estimate max path lengths")
    p.add_argument("--points", type=int, default=None, help="entry points per face")
    p.add_argument("--rays", type=int, default=None, help="rays per entry point")
    p.add_argument("-o", "--output", help="write the table as JSON")
    p.add_argument("--csv", help="write the table as CSV")

    p = sub.add_parser("pathlengths", parents=[common, ray], help="path lengths along a ray")
    p.add_argument("--csv", help="write the table as CSV")

    p = sub.add_parser("vertex", parents=[common, ray], help="generate interaction vertices")
    p.add_argument("--target", type=int, required=True, help="target isotope PDG code")
    p.add_argument("-n", "--count", type=int, default=1, help="number of vertices")
    p.add_argument("--step", type=float, default=None, help="vertex walk increment")

    p = sub.add_parser("template", help="write a built-in geometry as JSON")
    p.add_argument("name", choices=template_names())
    p.add_argument("-o", "--output", required=True)

    return parser


def _config_from_args(args: argparse.Namespace) -> AnalyzerConfig:
    config = AnalyzerConfig(
        length_units=args.length_units,
        density_units=args.density_units,
        top_volume=args.top_volume,
    )
    if getattr(args, "points", None) is not None:
        config.points_per_face = args.points
    if getattr(args, "rays", None) is not None:
        config.rays_per_point = args.rays
    if getattr(args, "step", None) is not None:
        config.vertex_step = args.step
    return config


def _print_table(table: dict[int, float], unit: str) -> None:
    for code, value in table.items():
        print(f"{code:>12d}  {value:.6g} {unit}")


def _cmd_maxpl(analyzer, args) -> int:
    analyzer.compute_max_path_lengths()
    if analyzer.last_status != AnalyzerStatus.OK:
        return 1
    table = analyzer.max_path_lengths
    for code in table:
        print(
            f"{code:>12d}  {table.path_length(code):.6g} cm"
            f"  {table.density_weighted_path_length(code):.6g} g/cm2"
        )
    if args.output:
        JsonExporter().export_path_lengths(
            table, args.output, args.geometry, args.length_units, args.density_units,
        )
    if args.csv:
        CsvExporter().export_path_lengths(table, args.csv)
    return 0


def _cmd_pathlengths(analyzer, args) -> int:
    pl = analyzer.compute_path_lengths(args.origin, args.direction)
    if analyzer.last_status != AnalyzerStatus.OK:
        return 1
    _print_table(pl.as_dict(), "cm")
    if args.csv:
        CsvExporter().export_path_lengths(pl, args.csv)
    return 0


def _cmd_vertex(analyzer, args) -> int:
    if not analyzer.set_vtx_material(args.target):
        return 1
    for _ in range(args.count):
        vtx = analyzer.generate_vertex(args.origin, args.direction)
        if analyzer.last_status != AnalyzerStatus.OK:
            return 1
        print(f"{vtx[0]:.6g} {vtx[1]:.6g} {vtx[2]:.6g}")
    return 0


_COMMANDS = {
    "maxpl": _cmd_maxpl,
    "pathlengths": _cmd_pathlengths,
    "vertex": _cmd_vertex,
}


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.command == "template":
        JsonExporter().export_geometry(create_template(args.name), args.output)
        return 0

    configure_logging(args.verbose)
    try:
        analyzer = create_analyzer(args.geometry, _config_from_args(args), args.seed)
        return _COMMANDS[args.command](analyzer, args)
    except (ValueError, KeyError, OSError) as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
