"""Data models for geohash aggregation requests and results."""

from typing import Any, Dict, List, Literal, Optional, Union

import attr
from psycopg import sql
from pydantic import BaseModel, ConfigDict, model_validator

FilterLang = Literal["ecql", "cql2-text", "cql2-json"]


class BoundingBox(BaseModel):
    """An axis aligned bounding box in WGS84 degrees."""

    model_config = ConfigDict(frozen=True)

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @model_validator(mode="after")
    def check_order(self) -> "BoundingBox":
        """Reject boxes whose minimum exceeds their maximum."""
        if self.xmin > self.xmax or self.ymin > self.ymax:
            raise ValueError(
                f"Invalid bounding box {self.xmin},{self.ymin},{self.xmax},{self.ymax}"
            )
        return self


class AggregationOptions(BaseModel):
    """Caller supplied filters for a geohash aggregation.

    `where` is a filter expression in `filter_lang`, or the always true
    sentinel `1=1`. `geometry` is any spatial filter accepted by
    `pgcache_geohash.filter.parse_geometry`.
    """

    where: Optional[Union[str, Dict[str, Any]]] = None
    geometry: Optional[Union[str, Dict[str, Any], List[float]]] = None
    filter_lang: FilterLang = "ecql"


@attr.s(frozen=True)
class PreparedFilters:
    """Request scoped SQL predicates derived from `AggregationOptions`."""

    where_filter: Optional[sql.Composable] = attr.ib(default=None)
    geom_filter: Optional[sql.Composable] = attr.ib(default=None)


@attr.s
class QueryResult:
    """Rows returned by a query, as an ordered list of mappings."""

    rows: List[Dict[str, Any]] = attr.ib(factory=list)


@attr.s(frozen=True)
class ReducedPrecision:
    """Outcome of a successful precision reduction.

    Attributes:
        precision: The highest precision whose distinct count fits the limit
        count: The distinct geohash count observed at that precision
        probes: How many count queries the search issued
    """

    precision: int = attr.ib()
    count: int = attr.ib()
    probes: int = attr.ib(default=1)
