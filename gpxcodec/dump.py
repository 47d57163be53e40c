"""gpxdump: print the decoded document tree of GPX files.

Usage:
    gpxdump track.gpx route.gpx
    gpxdump < track.gpx
    gpxdump --time-layout "%Y-%m-%d %H:%M:%S" legacy.gpx
"""

from __future__ import annotations

import argparse
import sys
from pprint import pprint

from .codec import read
from .config import ReadOptions
from .errors import GPXError


def dump(stream, out=None, options: ReadOptions | None = None):
    """Decode one GPX document from ``stream`` and pretty-print it."""
    gpx = read(stream, options)
    pprint(gpx, stream=out or sys.stdout, sort_dicts=False)


def dump_file(path, out=None, options: ReadOptions | None = None):
    with open(path, "rb") as f:
        dump(f, out, options)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="gpxdump",
        description="Decode GPX files and print the resulting document tree.",
    )
    parser.add_argument(
        "files", nargs="*",
        help="GPX files to dump (default: read standard input)",
    )
    parser.add_argument(
        "--time-layout", action="append", dest="time_layouts", metavar="LAYOUT",
        help="strptime layout for <time> values; repeat to try several in order",
    )
    args = parser.parse_args(argv)

    options = ReadOptions()
    if args.time_layouts:
        options = options.with_time_layouts(*args.time_layouts)

    if not args.files:
        try:
            dump(sys.stdin.buffer, options=options)
        except GPXError as e:
            print(f"gpxdump: <stdin>: {e}", file=sys.stderr)
            return 1
        return 0

    for path in args.files:
        try:
            dump_file(path, options=options)
        except (GPXError, OSError) as e:
            print(f"gpxdump: {path}: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
