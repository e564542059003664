"""Pydantic data models for shapefile shapes and GeoJSON output."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

Position = tuple[float, float]
AttributeValue = Union[str, bool, int, float, date]


# ---------------------------------------------------------------------------
# Shapefile shapes
# ---------------------------------------------------------------------------


class PointShape(BaseModel):
    """A shapefile POINT record."""

    kind: Literal["point"] = "point"
    x: float
    y: float


class MultiPointShape(BaseModel):
    """A shapefile MULTIPOINT record."""

    kind: Literal["multipoint"] = "multipoint"
    points: list[Position] = []


class _PartedShape(BaseModel):
    """Shared layout of POLYLINE, POLYLINEZ and POLYGON records.

    ``parts[i]`` is the index into ``points`` where part ``i`` starts. The
    part ends where the next one starts, the last part at ``num_points``.
    """

    parts: list[int] = []
    points: list[Position] = []

    @property
    def num_parts(self) -> int:
        return len(self.parts)

    @property
    def num_points(self) -> int:
        return len(self.points)


class PolyLineShape(_PartedShape):
    kind: Literal["polyline"] = "polyline"


class PolyLineZShape(_PartedShape):
    """A POLYLINEZ record. Elevations are carried but never converted."""

    kind: Literal["polylinez"] = "polylinez"
    z: list[float] = []


class PolygonShape(_PartedShape):
    """A POLYGON record. Rings carry no outer/hole tagging."""

    kind: Literal["polygon"] = "polygon"


LegacyShape = Annotated[
    Union[PointShape, MultiPointShape, PolyLineShape, PolyLineZShape, PolygonShape],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# GeoJSON
# ---------------------------------------------------------------------------


class GeoJSONModel(BaseModel):
    # Coordinates are copied verbatim, non-finite values included.
    model_config = ConfigDict(ser_json_inf_nan="constants")


class Point(GeoJSONModel):
    type: Literal["Point"] = "Point"
    coordinates: Position


class MultiPoint(GeoJSONModel):
    type: Literal["MultiPoint"] = "MultiPoint"
    coordinates: list[Position] = []


class LineString(GeoJSONModel):
    type: Literal["LineString"] = "LineString"
    coordinates: list[Position] = []


class MultiLineString(GeoJSONModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: list[list[Position]] = []


class Polygon(GeoJSONModel):
    """Rings of one polygon; the first is the outer boundary, the rest holes."""

    type: Literal["Polygon"] = "Polygon"
    coordinates: list[list[Position]] = []


class MultiPolygon(GeoJSONModel):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: list[list[list[Position]]] = []


Geometry = Annotated[
    Union[Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon],
    Field(discriminator="type"),
]


class Feature(GeoJSONModel):
    """One converted record: its geometry and its present attributes."""

    type: Literal["Feature"] = "Feature"
    geometry: Geometry | None = None
    properties: dict[str, AttributeValue] = {}


class FeatureCollection(GeoJSONModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = []
