"""GeoJSON output: one FeatureCollection document or newline-delimited features."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TextIO

from .exceptions import OutputError
from .models import Feature, FeatureCollection


def write_collection(features: Iterable[Feature], out: TextIO, *, indent: int | None = None) -> int:
    """Collect all features and write them as one FeatureCollection.

    Returns the number of features written.
    """
    collection = FeatureCollection(features=list(features))
    _write(out, collection.model_dump_json(indent=indent))
    return len(collection.features)


def write_ndjson(features: Iterable[Feature], out: TextIO) -> int:
    """Write each feature as one compact JSON line as soon as it is produced.

    Returns the number of features written.
    """
    count = 0
    for feature in features:
        _write(out, feature.model_dump_json())
        count += 1
    return count


def _write(out: TextIO, document: str) -> None:
    try:
        out.write(document)
        out.write("\n")
    except OSError as exc:
        raise OutputError(f"Cannot write output: {exc}") from exc
