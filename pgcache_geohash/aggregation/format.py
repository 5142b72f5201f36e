"""Formatting functions for aggregation responses."""

from typing import Any, Dict, Iterable


def geohash_agg(rows: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Fold grouped aggregation rows into a geohash to count mapping.

    Args:
        rows: Rows with `geohash` and `count` columns

    Returns:
        Dict[str, int]: Count per geohash bucket. A repeated bucket keeps the
            last count seen.
    """
    buckets: Dict[str, int] = {}
    for row in rows:
        buckets[row["geohash"]] = int(row["count"])
    return buckets
