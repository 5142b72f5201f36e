"""Client implementation for geohash aggregations over the feature cache."""

import logging
from typing import Any, Dict, Optional, Union

import attr

from pgcache_geohash.base_database_logic import BaseDatabaseLogic
from pgcache_geohash.config import PgCacheSettings
from pgcache_geohash.database import (
    aggregation_query,
    bbox_filter,
    bucket_expression,
    count_distinct_query,
)
from pgcache_geohash.exceptions import InvalidPrecisionError, LimitUnsatisfiableError
from pgcache_geohash.filter import parse_geometry, parse_where
from pgcache_geohash.filter.transform import FieldMapping
from pgcache_geohash.models import (
    AggregationOptions,
    PreparedFilters,
    QueryResult,
    ReducedPrecision,
)

from .format import geohash_agg

logger = logging.getLogger(__name__)


@attr.s
class GeohashAggregationClient:
    """Aggregate feature counts by geohash, coarsening precision to fit a limit."""

    database: BaseDatabaseLogic = attr.ib()
    settings: PgCacheSettings = attr.ib(factory=PgCacheSettings)
    field_mapping: Optional[FieldMapping] = attr.ib(default=None)

    MIN_GEOHASH_PRECISION = 1
    MAX_GEOHASH_PRECISION = 12

    def extract_precision(self, precision: Optional[int]) -> int:
        """Ensure that the requested precision is within the geohash range.

        Args:
            precision: The precision value to validate, or None for the default

        Returns:
            int: A validated precision value

        Raises:
            InvalidPrecisionError: If the precision is outside the valid range
        """
        if precision is None:
            precision = self.settings.geohash_default_precision
        if (
            precision < self.MIN_GEOHASH_PRECISION
            or precision > self.MAX_GEOHASH_PRECISION
        ):
            raise InvalidPrecisionError(
                precision, self.MIN_GEOHASH_PRECISION, self.MAX_GEOHASH_PRECISION
            )
        return precision

    def prepare_filters(self, options: AggregationOptions) -> PreparedFilters:
        """Build the request scoped where and geometry predicates.

        Args:
            options: The caller supplied filter options

        Returns:
            PreparedFilters: Fresh predicates; nothing is kept between calls
        """
        where_filter = None
        if options.where:
            where_filter = parse_where(
                options.where, options.filter_lang, self.field_mapping
            )

        geom_filter = None
        box = parse_geometry(options.geometry)
        if box:
            geom_filter = bbox_filter(box, self.settings.geohash_srid)

        return PreparedFilters(where_filter=where_filter, geom_filter=geom_filter)

    async def count_distinct_geohash(
        self, table: str, precision: int, filters: PreparedFilters
    ) -> int:
        """Get the count of distinct geohash prefixes for a query.

        Args:
            table: The table to query
            precision: The prefix length to count distinct values of
            filters: The prepared where and geometry predicates

        Returns:
            int: The number of distinct prefixes among matching rows
        """
        result = await self.database.execute(
            count_distinct_query(table, precision, filters)
        )
        return int(result.rows[0]["count"])

    async def reduce_precision(
        self, table: str, precision: int, filters: PreparedFilters, limit: int
    ) -> ReducedPrecision:
        """Find the highest precision whose distinct geohash count fits the limit.

        Starting at `precision`, the distinct count is probed one precision at
        a time, coarsening by one character while the count exceeds `limit`.
        Coarsening merges buckets, so the first fitting precision is the
        highest one. The search stops at precision 1.

        Args:
            table: The table to query
            precision: The requested precision
            filters: The prepared where and geometry predicates
            limit: The maximum number of buckets

        Returns:
            ReducedPrecision: The chosen precision with its distinct count

        Raises:
            LimitUnsatisfiableError: If even precision 1 exceeds the limit and
                the settings do not clamp to the floor
            Exception: Errors from the database propagate unchanged, with the
                precision being probed set as `geohash_precision`
        """
        current = precision
        probes = 0
        while True:
            try:
                count = await self.count_distinct_geohash(table, current, filters)
            except Exception as e:
                logger.error(
                    f"Distinct geohash count failed on '{table}' at precision {current}"
                )
                e.geohash_precision = current
                if hasattr(e, "add_note"):
                    e.add_note(f"geohash precision: {current}")
                raise
            probes += 1
            logger.debug(f"'{table}' has {count} distinct geohashes at precision {current}")

            if count <= limit:
                return ReducedPrecision(precision=current, count=count, probes=probes)

            if current <= self.MIN_GEOHASH_PRECISION:
                if self.settings.clamp_to_floor:
                    logger.warning(
                        f"Limit {limit} cannot be met on '{table}', "
                        f"returning {count} buckets at precision {current}"
                    )
                    return ReducedPrecision(
                        precision=current, count=count, probes=probes
                    )
                raise LimitUnsatisfiableError(limit=limit, precision=current, count=count)

            current -= 1

    async def aggregate(
        self,
        table: str,
        limit: int,
        precision: Optional[int] = None,
        options: Optional[Union[AggregationOptions, Dict[str, Any]]] = None,
    ) -> Union[Dict[str, int], QueryResult]:
        """Get a geohash aggregation for the features of a table.

        The precision is reduced until the number of geohash buckets does not
        exceed `limit`.

        Args:
            table: The table to query, optionally schema qualified
            limit: The maximum number of geohash buckets to return
            precision: The precision at which to extract geohashes
            options: Optional `where` and `geometry` filters

        Returns:
            A mapping of geohash bucket to feature count, or the raw query
            result when the aggregation returns no rows.
        """
        precision = self.extract_precision(precision)
        if limit < 1:
            raise ValueError(f"Invalid limit {limit}. Must be at least 1")

        if options is None:
            options = AggregationOptions()
        elif isinstance(options, dict):
            options = AggregationOptions(**options)

        filters = self.prepare_filters(options)
        reduced = await self.reduce_precision(table, precision, filters, limit)
        logger.info(
            f"Aggregating '{table}' at precision {reduced.precision} "
            f"(requested {precision}, {reduced.probes} probes)"
        )

        bucket = bucket_expression(reduced.precision, precision)
        result = await self.database.execute(aggregation_query(table, bucket, filters))

        if result.rows:
            return geohash_agg(result.rows)
        return result
