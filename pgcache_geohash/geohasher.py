"""Geohash creation for GeoJSON features.

Ingestion code uses `create` to fill the `geohash` column that the
aggregation queries bucket on.
"""

from typing import Any, Dict, Optional

import pygeohash as pgh
from shapely.geometry import mapping, shape

from pgcache_geohash.config import DEFAULT_GEOHASH_PRECISION


def centroid(feature: Dict[str, Any]) -> Dict[str, Any]:
    """Return a new point feature located at the centroid of `feature`.

    Args:
        feature (Dict[str, Any]): A GeoJSON feature with a non empty geometry.

    Returns:
        Dict[str, Any]: A point feature carrying a copy of the input properties.
    """
    point = shape(feature["geometry"]).centroid
    return {
        "type": "Feature",
        "properties": dict(feature.get("properties") or {}),
        "geometry": mapping(point),
    }


def create(
    feature: Dict[str, Any], precision: int = DEFAULT_GEOHASH_PRECISION
) -> Optional[str]:
    """Create a geohash for a feature.

    Lines and polygons are reduced to their centroid first.

    Args:
        feature (Dict[str, Any]): A GeoJSON feature.
        precision (int): The number of geohash characters to produce.

    Returns:
        Optional[str]: The geohash, or None when the feature has no geometry
            or no coordinates.
    """
    geometry = feature.get("geometry")
    if not geometry or not geometry.get("coordinates"):
        return None
    if geometry.get("type") != "Point":
        feature = centroid(feature)
    # GeoJSON stores [lon, lat]
    lon, lat = feature["geometry"]["coordinates"][:2]
    return pgh.encode(lat, lon, precision=precision)
