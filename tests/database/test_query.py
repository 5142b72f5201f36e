"""Tests for SQL composition."""

import pytest
from psycopg import sql

from pgcache_geohash.database import (
    aggregation_query,
    apply_filters,
    bbox_filter,
    bucket_expression,
    count_distinct_query,
    table_identifier,
)
from pgcache_geohash.models import BoundingBox, PreparedFilters

WHERE = sql.SQL("1=1")
GEOM = sql.SQL("geom_predicate")


def test_bbox_filter():
    box = BoundingBox(xmin=0, ymin=0, xmax=10, ymax=10)
    assert bbox_filter(box).as_string() == (
        "ST_GeomFromGeoJSON(\"feature\"->>'geometry') && "
        "ST_SetSRID('BOX3D(0 0,10 10)'::box3d, 4326)"
    )


def test_bbox_filter_keeps_fractional_coordinates():
    box = BoundingBox(xmin=-122.5, ymin=37.25, xmax=-122.0, ymax=38)
    assert "'BOX3D(-122.5 37.25,-122 38)'::box3d, 3857" in bbox_filter(box, 3857).as_string()


@pytest.mark.parametrize(
    "filters, expected",
    (
        (PreparedFilters(), ""),
        (PreparedFilters(where_filter=WHERE), " WHERE 1=1"),
        (PreparedFilters(geom_filter=GEOM), " WHERE geom_predicate"),
        (
            PreparedFilters(where_filter=WHERE, geom_filter=GEOM),
            " WHERE 1=1 AND geom_predicate",
        ),
    ),
)
def test_apply_filters(filters, expected):
    assert apply_filters(filters).as_string() == expected


def test_count_distinct_query():
    query = count_distinct_query("features", 5, PreparedFilters(where_filter=WHERE))
    assert query.as_string() == (
        'SELECT count(DISTINCT left("geohash", 5)) AS count FROM "features" WHERE 1=1'
    )


def test_bucket_expression_truncates():
    assert bucket_expression(4, 6).as_string() == 'substring("geohash", 0, 4)'
    assert bucket_expression(6, 6).as_string() == 'substring("geohash", 0, 6)'


def test_bucket_expression_full_geohash_above_request():
    assert bucket_expression(7, 6).as_string() == '"geohash"'


def test_aggregation_query():
    bucket = bucket_expression(3, 6)
    query = aggregation_query("features", bucket, PreparedFilters(geom_filter=GEOM))
    assert query.as_string() == (
        'SELECT count("id") AS count, substring("geohash", 0, 3) AS geohash '
        'FROM "features" WHERE geom_predicate GROUP BY substring("geohash", 0, 3)'
    )


def test_table_identifier():
    assert table_identifier("features").as_string() == '"features"'
    assert table_identifier("cache.features").as_string() == '"cache"."features"'
    assert table_identifier('bad"name').as_string() == '"bad""name"'


@pytest.mark.parametrize("table", ("", "a.b.c", ".features", "cache."))
def test_table_identifier_invalid(table):
    with pytest.raises(ValueError):
        table_identifier(table)
