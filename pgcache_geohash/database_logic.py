"""Database logic backed by a psycopg async connection pool."""

import logging
from typing import Any, Optional

import attr
from psycopg import sql
from psycopg.rows import dict_row

from pgcache_geohash.base_database_logic import BaseDatabaseLogic
from pgcache_geohash.config import PgCacheSettings
from pgcache_geohash.models import QueryResult

logger = logging.getLogger(__name__)


@attr.s
class DatabaseLogic(BaseDatabaseLogic):
    """Run aggregation queries against PostgreSQL/PostGIS.

    The pool is created from the settings unless one is passed in, and must be
    opened with `open` before the first query.
    """

    settings: PgCacheSettings = attr.ib(factory=PgCacheSettings)
    client: Optional[Any] = attr.ib(default=None)

    def __attrs_post_init__(self):
        """Create the connection pool from the settings if none was given."""
        if self.client is None:
            self.client = self.settings.create_client

    async def open(self) -> None:
        """Open the connection pool and wait for its minimum size."""
        await self.client.open(wait=True)

    async def close(self) -> None:
        """Close the connection pool."""
        await self.client.close()

    async def execute(self, query: sql.Composable) -> QueryResult:
        """Execute a composed query on a pooled connection.

        Errors raised by the driver propagate unchanged.
        """
        async with self.client.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cursor:
                await cursor.execute(query)
                rows = await cursor.fetchall()
        logger.debug(f"Query returned {len(rows)} rows")
        return QueryResult(rows=list(rows))
