import re
from typing import List, Optional

import pytest

from pgcache_geohash.aggregation import GeohashAggregationClient
from pgcache_geohash.base_database_logic import BaseDatabaseLogic
from pgcache_geohash.config import PgCacheSettings
from pgcache_geohash.models import QueryResult

GEOHASH_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"

PROBE_RE = re.compile(r'count\(DISTINCT left\("geohash", (\d+)\)\)')
BUCKET_RE = re.compile(r'substring\("geohash", 0, (\d+)\)')


class FakeDatabase(BaseDatabaseLogic):
    """In-memory stand-in for the feature cache table.

    Evaluates the distinct count probe and the grouped aggregation over a list
    of stored geohashes. Filters are recorded but not applied.
    """

    def __init__(self, geohashes: List[str], error: Optional[Exception] = None):
        self.geohashes = geohashes
        self.error = error
        self.queries: List[str] = []
        self.opened = False
        self.closed = False

    async def open(self):
        self.opened = True

    async def close(self):
        self.closed = True

    async def execute(self, query):
        text = query.as_string()
        self.queries.append(text)
        if self.error is not None:
            raise self.error

        probe = PROBE_RE.search(text)
        if probe:
            length = int(probe.group(1))
            return QueryResult(
                rows=[{"count": len({g[:length] for g in self.geohashes})}]
            )

        bucket = BUCKET_RE.search(text)
        counts = {}
        for g in self.geohashes:
            # substring(g, 0, n) yields n - 1 characters
            key = g[: int(bucket.group(1)) - 1] if bucket else g
            counts[key] = counts.get(key, 0) + 1
        return QueryResult(
            rows=[{"count": c, "geohash": k} for k, c in counts.items()]
        )


def make_geohashes_9q8(total: int = 1000) -> List[str]:
    """Geohashes sharing the `9q8` prefix with 8 distinct 4th characters."""
    return [
        "9q8"
        + GEOHASH_ALPHABET[i % 8]
        + GEOHASH_ALPHABET[(i // 8) % 32]
        + GEOHASH_ALPHABET[(i // 256) % 32]
        for i in range(total)
    ]


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.delenv("GEOHASH_CLAMP_TO_FLOOR", raising=False)
    monkeypatch.delenv("GEOHASH_DEFAULT_PRECISION", raising=False)
    return PgCacheSettings()


@pytest.fixture
def database():
    return FakeDatabase(make_geohashes_9q8())


@pytest.fixture
def client(database, settings):
    return GeohashAggregationClient(database=database, settings=settings)


@pytest.fixture
def point_feature():
    return {
        "type": "Feature",
        "properties": {"name": "Ferry Building"},
        "geometry": {"type": "Point", "coordinates": [-122.3937, 37.7955]},
    }


@pytest.fixture
def polygon_feature():
    return {
        "type": "Feature",
        "properties": {"name": "block"},
        "geometry": {
            "type": "Polygon",
            "coordinates": [
                [[-122.42, 37.77], [-122.40, 37.77], [-122.40, 37.79], [-122.42, 37.79], [-122.42, 37.77]]
            ],
        },
    }


@pytest.fixture
def fake_database():
    """Factory for FakeDatabase instances with custom contents."""
    return FakeDatabase
