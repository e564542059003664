"""Shapefile record source backed by pyshp."""

from __future__ import annotations

import codecs
import logging
import struct
from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import BinaryIO

import shapefile

from .exceptions import SourceError, UnsupportedShapeError
from .models import (
    AttributeValue,
    LegacyShape,
    MultiPointShape,
    PointShape,
    PolygonShape,
    PolyLineShape,
    PolyLineZShape,
)

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"


def detect_encoding(cpg_source: str | Path | None) -> str | None:
    """Parse the text encoding declared by a .cpg string or file path.

    Numeric code pages (``1252``) map to ``cp1252``. Returns None when
    nothing usable is declared.
    """
    if cpg_source is None:
        return None

    text = cpg_source if isinstance(cpg_source, str) else ""
    if isinstance(cpg_source, Path):
        if not cpg_source.exists():
            return None
        text = cpg_source.read_text(encoding="ascii", errors="replace")

    name = text.strip()
    if not name:
        return None
    if name.isdigit():
        name = f"cp{name}"

    try:
        return codecs.lookup(name).name
    except LookupError:
        logger.warning("Ignoring unknown code page %r declared by .cpg", text.strip())
        return None


def open_shapefile(
    shp_path: str | Path | None = None,
    *,
    shp_file: BinaryIO | None = None,
    shx_file: BinaryIO | None = None,
    dbf_file: BinaryIO | None = None,
    encoding: str | None = None,
    cpg: str | None = None,
) -> ShapefileSource:
    """Open a shapefile as a record source.

    Supports two modes:
    - File path: pass ``shp_path`` (the .cpg is auto-discovered)
    - File objects: pass ``shp_file`` and optionally ``shx_file``, ``dbf_file`` and ``cpg``

    An explicit ``encoding`` overrides the one the source declares.

    Raises:
        SourceError: If the shapefile cannot be opened or its headers are corrupt.
    """
    if shp_path is not None:
        shp_path = Path(shp_path)
        if not shp_path.suffix:
            # pyshp convention: path given without extension
            shp_path = shp_path.with_suffix(".shp")
        declared = detect_encoding(shp_path.with_suffix(".cpg"))
        source_args: dict[str, object] = {}
        target = str(shp_path)
    elif shp_file is not None:
        declared = detect_encoding(cpg)
        source_args = {"shp": shp_file, "shx": shx_file, "dbf": dbf_file}
        target = None
    else:
        raise ValueError("Provide either shp_path or shp_file")

    chosen = encoding or declared or DEFAULT_ENCODING
    try:
        # Undecodable text stays readable as lone surrogates and is
        # dropped per field by ShapefileSource.
        if target is not None:
            sf = shapefile.Reader(target, encoding=chosen, encodingErrors="surrogateescape")
        else:
            sf = shapefile.Reader(encoding=chosen, encodingErrors="surrogateescape", **source_args)
    except (shapefile.ShapefileException, OSError, ValueError, struct.error) as exc:
        raise SourceError(f"Cannot open shapefile {shp_path or '<upload>'}: {exc}") from exc

    logger.debug("Opened %s (%s, encoding=%s)", shp_path or "<upload>", sf.shapeTypeName, chosen)
    return ShapefileSource(sf, encoding=chosen)


class ShapefileSource:
    """Record-by-record access to a shapefile's shapes and attributes."""

    def __init__(self, reader: shapefile.Reader, *, encoding: str = DEFAULT_ENCODING) -> None:
        self._reader = reader
        self.encoding = encoding
        # pyshp 3 refuses to list fields when there is no .dbf
        descriptors = reader.fields[1:] if reader.dbf is not None else []  # skip DeletionFlag
        self.fields: list[str] = [f[0] for f in descriptors]
        self._field_types: list[str] = [str(f[1]) for f in descriptors]

    def __enter__(self) -> ShapefileSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._reader)

    def close(self) -> None:
        self._reader.close()

    @property
    def shape_type_name(self) -> str:
        return self._reader.shapeTypeName

    @property
    def has_attributes(self) -> bool:
        return self._reader.dbf is not None

    def shapes(self) -> Iterator[tuple[int, LegacyShape]]:
        """Yield ``(record_id, shape)`` pairs in file order.

        Raises:
            UnsupportedShapeError: On the first record whose type has no mapping.
            SourceError: If a record cannot be parsed.
        """
        try:
            for record_id, shape in enumerate(self._reader.iterShapes()):
                yield record_id, to_legacy_shape(shape)
        except (shapefile.ShapefileException, OSError, struct.error) as exc:
            raise SourceError(f"Cannot read shape records: {exc}") from exc

    def read_attribute(self, record_id: int, field_index: int) -> AttributeValue | None:
        """Return one attribute of a record, or None when it has no decodable value."""
        if not self.has_attributes:
            return None
        name = self.fields[field_index]
        if not _is_decodable(name):
            return None
        record = self._read_record(record_id, fields=[name])
        if record is None:
            return None
        return _attribute_value(record[0], self._field_types[field_index])

    def read_attributes(self, record_id: int) -> dict[str, AttributeValue]:
        """Return every present attribute of a record, keyed by field name.

        Absent values are left out. Repeated field names keep the last value.
        """
        if not self.has_attributes:
            return {}
        record = self._read_record(record_id)
        if record is None:
            # deleted row
            return {}
        attributes: dict[str, AttributeValue] = {}
        for name, field_type, raw in zip(self.fields, self._field_types, record):
            if not _is_decodable(name):
                continue
            value = _attribute_value(raw, field_type)
            if value is not None:
                attributes[name] = value
        return attributes

    def _read_record(self, record_id: int, fields: list[str] | None = None):
        try:
            return self._reader.record(record_id, fields=fields)
        except (shapefile.ShapefileException, OSError, IndexError, struct.error) as exc:
            # IndexError: the .dbf has fewer rows than the .shp has shapes
            raise SourceError(f"Cannot read attributes of record {record_id}: {exc}") from exc


def _is_decodable(text: str) -> bool:
    """False for text holding lone surrogates left by a failed decode."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _attribute_value(raw: object, field_type: str) -> AttributeValue | None:
    """Map a pyshp field value to an attribute value, None meaning absent."""
    if field_type == "D" and not isinstance(raw, date):
        # pyshp hands back the raw text of dates it cannot parse
        return None
    if isinstance(raw, str) and not _is_decodable(raw):
        return None
    return raw


def to_legacy_shape(shape: shapefile.Shape) -> LegacyShape:
    """Convert a pyshp shape into one of the five supported shapes.

    Raises:
        UnsupportedShapeError: For NULL, M, MULTIPATCH and Z types other than POLYLINEZ.
    """
    shape_type = shape.shapeType
    if shape_type == shapefile.POINT:
        x, y = shape.points[0][:2]
        return PointShape(x=x, y=y)
    if shape_type == shapefile.MULTIPOINT:
        return MultiPointShape(points=_xy(shape.points))
    if shape_type == shapefile.POLYLINE:
        return PolyLineShape(parts=list(shape.parts), points=_xy(shape.points))
    if shape_type == shapefile.POLYLINEZ:
        return PolyLineZShape(
            parts=list(shape.parts),
            points=_xy(shape.points),
            z=list(getattr(shape, "z", [])),
        )
    if shape_type == shapefile.POLYGON:
        return PolygonShape(parts=list(shape.parts), points=_xy(shape.points))
    raise UnsupportedShapeError(shapefile.SHAPETYPE_LOOKUP.get(shape_type, str(shape_type)))


def _xy(points) -> list[tuple[float, float]]:
    return [(p[0], p[1]) for p in points]
