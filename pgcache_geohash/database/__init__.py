"""SQL composition for the PostGIS feature cache.

The database package is organized as follows:
- query.py: Query building functions for the distinct count probe, the grouped
  aggregation and the spatial filter
"""

from .query import (
    aggregation_query,
    apply_filters,
    bbox_filter,
    bucket_expression,
    count_distinct_query,
    table_identifier,
)

__all__ = [
    "aggregation_query",
    "apply_filters",
    "bbox_filter",
    "bucket_expression",
    "count_distinct_query",
    "table_identifier",
]
