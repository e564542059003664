"""Command-line entry point: ``shp2geojson -i roads.shp -o roads.geojson``."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from .config import STDOUT, ConversionOptions
from .exceptions import ConversionError
from .pipeline import convert

logger = logging.getLogger("shp2geojson")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="shp2geojson", description="Convert an ESRI shapefile to GeoJSON.")
    parser.add_argument("-i", "--input", required=True, help="input shapefile (.shp)")
    parser.add_argument("-o", "--output", default=STDOUT, help="output GeoJSON file (default: stdout)")
    parser.add_argument("-e", "--encoding", help="text encoding of the .dbf (default: from .cpg, else utf-8)")
    parser.add_argument("--ndjson", action="store_true", help="write one feature per line")
    parser.add_argument("--pretty", action="store_true", help="indent the output, no effect with --ndjson")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    args = parser.parse_args(argv)

    try:
        args.options = ConversionOptions(
            input=args.input,
            output=args.output,
            encoding=args.encoding,
            ndjson=args.ndjson,
            pretty=args.pretty,
        )
    except ValidationError as exc:
        parser.error("; ".join(err["msg"] for err in exc.errors()))
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        convert(args.options)
    except ConversionError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
