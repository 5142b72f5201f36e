"""Filter parsing for geohash aggregations.

This module turns the caller supplied `where` and `geometry` options into SQL
predicates. It includes:

1. Parsers for ecql, cql2-text and cql2-json attribute filters
2. The LIKE normalization that narrows pattern matches to exact values
3. A spatial filter parser producing WGS84 bounding boxes

The filter package is organized as follows:
- parser.py: Filter language dispatch and the where clause entry point
- like.py: LIKE pattern translation and normalization
- transform.py: AST to SQL transformation
- geometry.py: Spatial filter parsing
"""

from .geometry import parse_geometry
from .like import like_to_sql, like_to_value, normalize_like, strip_like_wildcards
from .parser import ALWAYS_TRUE, parse_filter, parse_where
from .transform import property_field, to_sql, to_sql_field

__all__ = [
    "ALWAYS_TRUE",
    "like_to_sql",
    "like_to_value",
    "normalize_like",
    "parse_filter",
    "parse_geometry",
    "parse_where",
    "property_field",
    "strip_like_wildcards",
    "to_sql",
    "to_sql_field",
]
