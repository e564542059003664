"""Fatal error taxonomy for shapefile conversion.

Every error raised here aborts the whole run. Attributes that fail to
decode for a single record are not errors and never reach this module.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all fatal conversion errors."""


class SourceError(ConversionError):
    """The input shapefile cannot be opened or parsed."""


class UnsupportedShapeError(ConversionError, ValueError):
    """A record holds a shape type that has no GeoJSON mapping."""

    def __init__(self, shape_type_name: str) -> None:
        self.shape_type_name = shape_type_name
        super().__init__(f"Unsupported shape type: {shape_type_name}")


class OutputError(ConversionError):
    """The output sink cannot be written."""
