"""Conversion options shared by the CLI and the pipeline."""

from __future__ import annotations

import codecs
from pathlib import Path

from pydantic import BaseModel, field_validator

STDOUT = "-"


class ConversionOptions(BaseModel):
    """Validated settings for one conversion run."""

    input: Path
    output: str = STDOUT
    encoding: str | None = None
    ndjson: bool = False
    pretty: bool = False

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            return codecs.lookup(value).name
        except LookupError:
            raise ValueError(f"unknown text encoding: {value}") from None

    @property
    def to_stdout(self) -> bool:
        return self.output in ("", STDOUT)

    @property
    def indent(self) -> int | None:
        """Indentation for collection output. Newline-delimited output is never indented."""
        if self.pretty and not self.ndjson:
            return 2
        return None
