"""Base database logic."""

import abc

from psycopg import sql

from pgcache_geohash.models import QueryResult


class BaseDatabaseLogic(abc.ABC):
    """
    Abstract base class for database logic.

    The aggregation client only needs to run composed SQL and read back rows,
    so this is the single capability a backend has to provide.
    """

    @abc.abstractmethod
    async def execute(self, query: sql.Composable) -> QueryResult:
        """Execute a composed query and return its rows.

        Args:
            query (sql.Composable): The query to run. All values are already
                composed as literals, no parameters are passed separately.

        Returns:
            QueryResult: The rows produced by the query, in order.
        """
        pass
