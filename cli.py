"""
Headless CLI entry point for Cube Volume Studio.

Loads a Gaussian cube file (or the synthetic sample), converts it to renderer
layout and prints a histogram summary, without any display server or Qt
event loop.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time


def _configure_headless_vtk() -> None:
    """Force VTK / PyVista into offscreen mode when no display is available."""
    display = os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY")
    if not display:
        os.environ.setdefault("PYVISTA_OFF_SCREEN", "true")
        os.environ.setdefault("VTK_DEFAULT_RENDER_WINDOW_OFFSCREEN", "1")


_configure_headless_vtk()


from config import HISTOGRAM_BINS, LOG_DATE_FORMAT, LOG_FORMAT
from core import Histogram, ScalarField, build_histogram, field_to_volume_image
from exporters.vtk import VTKExporter
from loaders import DummyFieldLoader, GaussianCubeLoader


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python cli.py",
        description="Headless cube volume inspector",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input", metavar="PATH", nargs="?", default="", help="Gaussian cube file.")
    parser.add_argument("--dummy", action="store_true", help="Use the synthetic 2p-like field instead of a file.")
    parser.add_argument("--field", metavar="N", type=int, default=0, help="Field index for multi-orbital cubes.")
    parser.add_argument("--bins", metavar="N", type=int, default=HISTOGRAM_BINS, help="Histogram bin count.")
    parser.add_argument("--top", metavar="N", type=int, default=5, help="Most populated bins to print.")
    parser.add_argument("--export", metavar="FILE", default=None, help="Write the converted volume as .vti.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def load_field(args: argparse.Namespace, parser: argparse.ArgumentParser) -> ScalarField:
    if args.dummy:
        return DummyFieldLoader().load()
    if not args.input:
        parser.error("Provide a cube PATH or --dummy")

    cube = GaussianCubeLoader().load(args.input)
    if not 0 <= args.field < len(cube.fields):
        raise ValueError(f"Field {args.field} out of range; file holds {len(cube.fields)} field(s)")
    return cube.fields[args.field]


def summarize(field: ScalarField, histogram: Histogram, top: int) -> str:
    lo, hi = field.value_range()
    lines = [
        f"Field:      {field.name or 'unnamed'}",
        f"Dimensions: {field.dimensions[0]} x {field.dimensions[1]} x {field.dimensions[2]}",
        f"Origin:     {tuple(round(v, 6) for v in field.origin)}",
        f"Spacing:    {tuple(round(v, 6) for v in field.spacing)}",
        f"Range:      [{lo:.6g}, {hi:.6g}]",
        f"Histogram:  {len(histogram)} bins, {histogram.total} samples"
        + (f", {histogram.excluded} non-finite excluded" if histogram.excluded else ""),
    ]
    if not histogram.is_empty and top > 0:
        order = sorted(range(len(histogram)), key=lambda i: histogram.populations[i], reverse=True)[:top]
        lines.append("Most populated bins:")
        for i in sorted(order):
            lines.append(f"  {histogram.values[i]:>14.6g}  {int(histogram.populations[i])}")
    return "\n".join(lines)


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

    try:
        t_start = time.perf_counter()
        field = load_field(args, parser)
        image = field_to_volume_image(field)
        histogram = build_histogram(image, bins=args.bins)
        elapsed = time.perf_counter() - t_start

        print(summarize(field, histogram, args.top))
        print(f"\nConverted in {elapsed:.3f}s")

        if args.export:
            VTKExporter.export(image, args.export)
            print(f"Exported: {args.export}")
    except KeyboardInterrupt:
        print("\nAborted by user.")
        return 1
    except (ValueError, OSError) as exc:
        print(f"\nFailed: {type(exc).__name__}: {exc}")
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
