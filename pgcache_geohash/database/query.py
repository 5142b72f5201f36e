"""Query building functions for the PostGIS feature cache.

This module composes the count-distinct probe, the grouped aggregation and the
filter fragments with `psycopg.sql`, so identifiers and literal values are
always quoted by the driver.
"""

from psycopg import sql

from pgcache_geohash.models import BoundingBox, PreparedFilters
from pgcache_geohash.utilities import format_coordinate

GEOHASH_COLUMN = sql.Identifier("geohash")
FEATURE_COLUMN = sql.Identifier("feature")
ID_COLUMN = sql.Identifier("id")


def table_identifier(table: str) -> sql.Identifier:
    """Quote a table name, splitting an optional `schema.table` qualifier.

    Args:
        table (str): The table name, optionally schema qualified.

    Returns:
        sql.Identifier: The quoted identifier.

    Raises:
        ValueError: If the name is empty or has more than one qualifier.
    """
    parts = table.split(".") if table else []
    if not parts or len(parts) > 2 or not all(parts):
        raise ValueError(f"Invalid table name: {table!r}")
    return sql.Identifier(*parts)


def apply_filters(filters: PreparedFilters) -> sql.Composable:
    """Render the WHERE clause for the prepared filters.

    The attribute filter comes first; a geometry filter is ANDed onto it, or
    becomes the only condition when there is no attribute filter.
    """
    clause = sql.SQL("")
    if filters.where_filter is not None:
        clause = sql.SQL(" WHERE {}").format(filters.where_filter)
    if filters.geom_filter is not None:
        joiner = " AND " if filters.where_filter is not None else " WHERE "
        clause = sql.Composed([clause, sql.SQL(joiner), filters.geom_filter])
    return clause


def bbox_filter(box: BoundingBox, srid: int = 4326) -> sql.Composable:
    """Create an envelope intersection predicate against a box literal.

    Args:
        box (BoundingBox): The box to intersect with.
        srid (int): The spatial reference of the box literal.

    Returns:
        sql.Composable: `ST_GeomFromGeoJSON(feature->>'geometry') && ST_SetSRID('BOX3D(...)'::box3d, srid)`
    """
    box3d = "BOX3D({} {},{} {})".format(
        format_coordinate(box.xmin),
        format_coordinate(box.ymin),
        format_coordinate(box.xmax),
        format_coordinate(box.ymax),
    )
    return sql.SQL(
        "ST_GeomFromGeoJSON({}->>'geometry') && ST_SetSRID({}::box3d, {})"
    ).format(FEATURE_COLUMN, sql.Literal(box3d), sql.Literal(srid))


def count_distinct_query(
    table: str, precision: int, filters: PreparedFilters
) -> sql.Composable:
    """Count the distinct geohash prefixes of `precision` characters."""
    return sql.SQL(
        "SELECT count(DISTINCT left({}, {})) AS count FROM {}{}"
    ).format(
        GEOHASH_COLUMN,
        sql.Literal(precision),
        table_identifier(table),
        apply_filters(filters),
    )


def bucket_expression(
    reduced_precision: int, requested_precision: int
) -> sql.Composable:
    """Choose the expression rows are grouped on.

    `substring(geohash, 0, n)` starts before the first character, so Postgres
    returns `n - 1` characters. Buckets are therefore one character shorter
    than the precision the probe accepted.
    """
    if reduced_precision <= requested_precision:
        return sql.SQL("substring({}, 0, {})").format(
            GEOHASH_COLUMN, sql.Literal(reduced_precision)
        )
    return GEOHASH_COLUMN


def aggregation_query(
    table: str, bucket: sql.Composable, filters: PreparedFilters
) -> sql.Composable:
    """Count rows per geohash bucket."""
    return sql.SQL(
        "SELECT count({}) AS count, {} AS geohash FROM {}{} GROUP BY {}"
    ).format(
        ID_COLUMN,
        bucket,
        table_identifier(table),
        apply_filters(filters),
        bucket,
    )
