"""Parsing of spatial filters into bounding boxes."""

import math
from typing import Any, Dict, Optional, Sequence, Union

import orjson
from pydantic import ValidationError
from shapely.geometry import shape

from pgcache_geohash.exceptions import InvalidGeometryError
from pgcache_geohash.models import BoundingBox
from pgcache_geohash.utilities import mercator_to_lonlat

WEB_MERCATOR_WKIDS = {102100, 102113, 3857, 900913}

GeometryExpr = Union[str, Dict[str, Any], Sequence[float]]


def parse_geometry(geometry: Optional[GeometryExpr]) -> Optional[BoundingBox]:
    """Parse a spatial filter into a WGS84 bounding box.

    Accepted forms are an `xmin,ymin,xmax,ymax` string, a four number
    sequence, an Esri envelope (with an optional Web Mercator
    `spatialReference`) and a GeoJSON geometry or feature. Envelopes and
    geometries may be given as mappings or JSON strings.

    Args:
        geometry: The spatial filter, or a falsy value for no filter.

    Returns:
        Optional[BoundingBox]: The bounding box, or None when no filter was given.

    Raises:
        InvalidGeometryError: If the filter cannot be read as a bounding box.
    """
    if not geometry:
        return None

    if isinstance(geometry, str):
        text = geometry.strip()
        if text.startswith(("{", "[")):
            try:
                geometry = orjson.loads(text)
            except orjson.JSONDecodeError as e:
                raise InvalidGeometryError(f"Invalid geometry JSON: {e}") from e
        else:
            geometry = text.split(",")

    if isinstance(geometry, dict):
        if "xmin" in geometry:
            return _envelope_to_bbox(geometry)
        if "type" in geometry:
            return _geojson_to_bbox(geometry)
        raise InvalidGeometryError(f"Unrecognized geometry: {geometry!r}")

    try:
        coords = [float(c) for c in geometry]
    except (TypeError, ValueError) as e:
        raise InvalidGeometryError(f"Invalid bounding box: {e}") from e
    if len(coords) != 4:
        raise InvalidGeometryError(
            f"A bounding box needs 4 coordinates, got {len(coords)}"
        )
    return _to_bbox(*coords)


def _envelope_to_bbox(envelope: Dict[str, Any]) -> BoundingBox:
    try:
        xmin, ymin, xmax, ymax = (
            float(envelope[k]) for k in ("xmin", "ymin", "xmax", "ymax")
        )
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidGeometryError(f"Invalid envelope: {e}") from e

    reference = envelope.get("spatialReference") or {}
    wkid = reference.get("latestWkid") or reference.get("wkid")
    if wkid is not None and int(wkid) in WEB_MERCATOR_WKIDS:
        xmin, ymin = mercator_to_lonlat(xmin, ymin)
        xmax, ymax = mercator_to_lonlat(xmax, ymax)
    return _to_bbox(xmin, ymin, xmax, ymax)


def _geojson_to_bbox(geometry: Dict[str, Any]) -> BoundingBox:
    if geometry["type"] == "Feature":
        geometry = geometry.get("geometry") or {}
    try:
        bounds = shape(geometry).bounds
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise InvalidGeometryError(f"Invalid GeoJSON geometry: {e}") from e
    if any(math.isnan(b) for b in bounds):
        raise InvalidGeometryError("Cannot take the bounds of an empty geometry")
    return _to_bbox(*bounds)


def _to_bbox(xmin: float, ymin: float, xmax: float, ymax: float) -> BoundingBox:
    try:
        return BoundingBox(xmin=xmin, ymin=ymin, xmax=xmax, ymax=ymax)
    except ValidationError as e:
        raise InvalidGeometryError(str(e)) from e
