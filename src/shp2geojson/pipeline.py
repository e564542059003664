"""End-to-end shapefile to GeoJSON conversion."""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator
from typing import TextIO

from .config import ConversionOptions
from .converter import shape_to_feature
from .exceptions import OutputError
from .models import Feature
from .reader import ShapefileSource, open_shapefile
from .writer import write_collection, write_ndjson

logger = logging.getLogger(__name__)


def iter_features(source: ShapefileSource) -> Iterator[Feature]:
    """Lazily convert every record of ``source`` to a Feature, in file order."""
    for record_id, shape in source.shapes():
        yield shape_to_feature(shape, source.read_attributes(record_id))


def write_features(features: Iterator[Feature], out: TextIO, options: ConversionOptions) -> int:
    if options.ndjson:
        return write_ndjson(features, out)
    return write_collection(features, out, indent=options.indent)


def convert(options: ConversionOptions) -> int:
    """Convert ``options.input`` and write the result. Returns the feature count.

    The input is opened before the output, so an unreadable shapefile never
    truncates an existing output file.
    """
    with open_shapefile(options.input, encoding=options.encoding) as source:
        logger.info(
            "Reading %s: %s, %d records, fields=%s",
            options.input,
            source.shape_type_name,
            len(source),
            source.fields,
        )
        with _open_output(options) as out:
            count = write_features(iter_features(source), out, options)

    logger.info("Wrote %d features to %s", count, "stdout" if options.to_stdout else options.output)
    return count


def _open_output(options: ConversionOptions) -> contextlib.AbstractContextManager[TextIO]:
    if options.to_stdout:
        return contextlib.nullcontext(sys.stdout)
    try:
        return open(options.output, "w", encoding="utf-8", newline="\n")
    except OSError as exc:
        raise OutputError(f"Cannot open output {options.output}: {exc}") from exc
