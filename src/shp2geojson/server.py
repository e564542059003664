"""FastAPI server for shapefile to GeoJSON conversion."""

from __future__ import annotations

import codecs
import io
import logging
import tempfile
import zipfile
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query, UploadFile
from fastapi.responses import Response, StreamingResponse

from .exceptions import SourceError, UnsupportedShapeError
from .models import Feature, FeatureCollection
from .pipeline import iter_features
from .reader import open_shapefile

logger = logging.getLogger(__name__)

app = FastAPI(title="Shapefile to GeoJSON", version="0.1.0")

COMPANION_EXTS = {".shp", ".shx", ".dbf", ".cpg"}


@app.post("/convert")
async def convert_shapefile(
    files: list[UploadFile],
    format: str = Query("geojson", pattern="^(geojson|ndjson)$"),
    encoding: str | None = Query(None),
):
    """Convert uploaded shapefile(s) to GeoJSON.

    Accepts:
    - A single .zip containing shapefile components
    - Multiple files (.shp, and optionally .shx, .dbf, .cpg)
    """
    if encoding is not None:
        try:
            codecs.lookup(encoding)
        except LookupError:
            raise HTTPException(status_code=400, detail=f"Unknown encoding: {encoding}") from None

    filename = (files[0].filename or "").lower() if len(files) == 1 else ""

    try:
        if filename.endswith(".zip"):
            features = await _handle_zip(files[0], encoding)
        else:
            features = await _handle_multi_file(files, encoding)
    except SourceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UnsupportedShapeError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    logger.info("Converted %d features", len(features))

    if format == "ndjson":
        return _features_to_ndjson_response(features)

    collection = FeatureCollection(features=features)
    return Response(content=collection.model_dump_json(), media_type="application/geo+json")


async def _handle_zip(upload: UploadFile, encoding: str | None) -> list[Feature]:
    """Extract a shapefile from a zip archive and convert it."""
    content = await upload.read()
    try:
        archive = zipfile.ZipFile(io.BytesIO(content))
    except zipfile.BadZipFile as exc:
        raise HTTPException(status_code=400, detail="Not a valid zip archive") from exc

    with archive, tempfile.TemporaryDirectory() as extract_dir:
        archive.extractall(extract_dir)

        shp_files = sorted(
            p
            for p in Path(extract_dir).rglob("*")
            if p.suffix.lower() == ".shp" and p.is_file() and "__MACOSX" not in p.parts
        )
        if not shp_files:
            raise HTTPException(status_code=400, detail="No .shp file found in zip archive")

        with open_shapefile(shp_files[0], encoding=encoding) as source:
            return list(iter_features(source))


async def _handle_multi_file(files: list[UploadFile], encoding: str | None) -> list[Feature]:
    """Convert a shapefile from multiple uploaded component files."""
    file_map: dict[str, bytes] = {}
    for f in files:
        ext = Path(f.filename or "").suffix.lower()
        if ext in COMPANION_EXTS:
            file_map[ext] = await f.read()

    if ".shp" not in file_map:
        raise HTTPException(status_code=400, detail="Missing required .shp file")

    shp_file = io.BytesIO(file_map[".shp"])
    shx_file = io.BytesIO(file_map[".shx"]) if ".shx" in file_map else None
    dbf_file = io.BytesIO(file_map[".dbf"]) if ".dbf" in file_map else None

    cpg = None
    if ".cpg" in file_map:
        cpg = file_map[".cpg"].decode("ascii", errors="replace")

    with open_shapefile(
        shp_file=shp_file,
        shx_file=shx_file,
        dbf_file=dbf_file,
        encoding=encoding,
        cpg=cpg,
    ) as source:
        return list(iter_features(source))


def _features_to_ndjson_response(features: list[Feature]) -> StreamingResponse:
    """Stream features as newline-delimited JSON."""

    def generate():
        for feature in features:
            yield feature.model_dump_json() + "\n"

    return StreamingResponse(
        generate(),
        media_type="application/x-ndjson",
        headers={"Content-Disposition": "attachment; filename=features.ndjson"},
    )
