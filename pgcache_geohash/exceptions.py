"""Exceptions raised by the geohash aggregation package.

Errors coming from collaborators (the filter parsers and the database driver)
are never wrapped; only conditions this package detects itself get a class here.
"""


class GeohashAggregationError(Exception):
    """Base class for geohash aggregation errors."""


class LimitUnsatisfiableError(GeohashAggregationError):
    """Exception raised when no geohash precision satisfies the bucket limit.

    Attributes:
        limit (int): The maximum number of buckets requested by the caller
        precision (int): The coarsest precision that was probed
        count (int): The distinct geohash count observed at that precision
    """

    def __init__(self, limit: int, precision: int, count: int):
        """Initialize LimitUnsatisfiableError with the failing probe details.

        Args:
            limit (int): The requested bucket limit
            precision (int): The precision at which the search bottomed out
            count (int): The distinct bucket count at that precision
        """
        super().__init__(
            f"No geohash precision satisfies a limit of {limit} buckets"
        )
        self.limit = limit
        self.precision = precision
        self.count = count

    def __str__(self) -> str:
        """Return the message with the count observed at the floor precision."""
        return f"{super().__str__()} ({self.count} buckets at precision {self.precision})"


class InvalidPrecisionError(GeohashAggregationError, ValueError):
    """Exception raised when a requested precision is outside the valid range."""

    def __init__(self, precision: int, min_value: int, max_value: int):
        super().__init__(
            f"Invalid precision value {precision}. Must be between {min_value} and {max_value}"
        )
        self.precision = precision
        self.min_value = min_value
        self.max_value = max_value


class InvalidGeometryError(GeohashAggregationError, ValueError):
    """Exception raised when a spatial filter cannot be turned into a bounding box."""
