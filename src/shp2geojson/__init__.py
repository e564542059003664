"""ESRI shapefile to GeoJSON conversion library."""

from .config import ConversionOptions
from .converter import shape_to_feature, shape_to_geometry
from .exceptions import ConversionError, OutputError, SourceError, UnsupportedShapeError
from .models import Feature, FeatureCollection
from .pipeline import convert, iter_features
from .reader import ShapefileSource, open_shapefile
from .writer import write_collection, write_ndjson

__all__ = [
    "ConversionError",
    "ConversionOptions",
    "Feature",
    "FeatureCollection",
    "OutputError",
    "ShapefileSource",
    "SourceError",
    "UnsupportedShapeError",
    "convert",
    "iter_features",
    "open_shapefile",
    "shape_to_feature",
    "shape_to_geometry",
    "write_collection",
    "write_ndjson",
]
