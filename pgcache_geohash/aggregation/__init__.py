"""Geohash aggregation over the PostGIS feature cache.

The aggregation package is organized as follows:
- client.py: Aggregation client with the precision reduction search
- format.py: Response formatting functions
"""

from .client import GeohashAggregationClient
from .format import geohash_agg

__all__ = [
    "GeohashAggregationClient",
    "geohash_agg",
]
