"""Shapefile shape to GeoJSON geometry conversion.

Every function here is pure: one shape in, one geometry out, no state kept
between records. Only X/Y survive; elevations are dropped.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .exceptions import UnsupportedShapeError
from .models import (
    AttributeValue,
    Feature,
    Geometry,
    LegacyShape,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPointShape,
    MultiPolygon,
    Point,
    PointShape,
    PolygonShape,
    PolyLineShape,
    PolyLineZShape,
    Position,
)


def convert_point(x: float, y: float) -> Point:
    """Copy a coordinate pair into a GeoJSON point, without validation."""
    return Point(coordinates=(x, y))


def _position(point: Sequence[float]) -> Position:
    return (point[0], point[1])


def split_parts(parts: Sequence[int], points: Sequence[Sequence[float]]) -> list[list[Position]]:
    """Split a shared point buffer into one coordinate list per part.

    Part ``i`` runs from ``parts[i]`` up to ``parts[i + 1]``; the last part
    runs to the end of ``points``.
    """
    paths: list[list[Position]] = []
    for i, start in enumerate(parts):
        end = parts[i + 1] if i + 1 < len(parts) else len(points)
        paths.append([_position(p) for p in points[start:end]])
    return paths


def convert_multipoint(shape: MultiPointShape) -> MultiPoint:
    return MultiPoint(coordinates=[_position(p) for p in shape.points])


def convert_line_string(shape: PolyLineShape | PolyLineZShape) -> LineString:
    """Convert a single-part line. Any elevation values are discarded."""
    return LineString(coordinates=[_position(p) for p in shape.points])


def convert_multi_line_string(shape: PolyLineShape | PolyLineZShape) -> MultiLineString:
    return MultiLineString(coordinates=split_parts(shape.parts, shape.points))


def ring_is_clockwise(ring: Sequence[Position]) -> bool:
    """Return True if the shoelace sum of the ring is negative.

    The sum wraps from the last vertex back to the first, so open and
    closed rings give the same answer. A zero-area ring is not clockwise.
    """
    total = 0.0
    n = len(ring)
    for i in range(n):
        x1, y1 = ring[i]
        x2, y2 = ring[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return total < 0


def convert_multi_polygon(shape: PolygonShape) -> MultiPolygon:
    """Group a flat list of polygon rings into polygons with holes.

    Rings are scanned in file order. The first ring opens a polygon. Each
    later clockwise ring closes the polygon in progress and opens a new one;
    each counter-clockwise ring is a hole of the polygon in progress.

    A first ring wound counter-clockwise is still used as the outer ring.
    A shape with no rings gives an empty MultiPolygon.
    """
    polygons: list[list[list[Position]]] = []
    current: list[list[Position]] = []

    for i, ring in enumerate(split_parts(shape.parts, shape.points)):
        if i > 0 and ring_is_clockwise(ring):
            polygons.append(current)
            current = []
        current.append(ring)

    if current:
        polygons.append(current)

    return MultiPolygon(coordinates=polygons)


def shape_to_geometry(shape: LegacyShape) -> Geometry | None:
    """Dispatch a shape to its converter.

    PolyLine and PolyLineZ shapes with no parts have no geometry and give
    ``None``.

    Raises:
        UnsupportedShapeError: If ``shape`` is not one of the supported shapes.
    """
    match shape:
        case PointShape():
            return convert_point(shape.x, shape.y)
        case MultiPointShape():
            return convert_multipoint(shape)
        case PolyLineShape() | PolyLineZShape():
            if shape.num_parts == 1:
                return convert_line_string(shape)
            if shape.num_parts > 1:
                return convert_multi_line_string(shape)
            return None
        case PolygonShape():
            return convert_multi_polygon(shape)
        case _:
            raise UnsupportedShapeError(type(shape).__name__)


def shape_to_feature(shape: LegacyShape, attributes: Mapping[str, AttributeValue]) -> Feature:
    """Pair a converted shape with the attributes read for its record."""
    return Feature(geometry=shape_to_geometry(shape), properties=dict(attributes))
