"""pgcache_geohash: geohash aggregations for a PostGIS feature cache."""

from pgcache_geohash.aggregation import GeohashAggregationClient
from pgcache_geohash.geohasher import centroid, create
from pgcache_geohash.version import __version__

__all__ = [
    "GeohashAggregationClient",
    "centroid",
    "create",
    "__version__",
]
