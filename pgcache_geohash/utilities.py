"""Module for small helpers shared across the package.

This module contains the coordinate helpers used by the query builders and
the spatial filter parser.
"""

import math
from typing import Tuple

EARTH_RADIUS = 6378137.0
"""Radius of the sphere used by Web Mercator, in meters."""


def mercator_to_lonlat(x: float, y: float) -> Tuple[float, float]:
    """Convert a Web Mercator coordinate to longitude/latitude degrees.

    Args:
        x (float): Easting in meters.
        y (float): Northing in meters.

    Returns:
        Tuple[float, float]: The (longitude, latitude) pair in degrees.
    """
    lon = math.degrees(x / EARTH_RADIUS)
    lat = math.degrees(2 * math.atan(math.exp(y / EARTH_RADIUS)) - math.pi / 2)
    return lon, lat


def format_coordinate(value: float) -> str:
    """Render a coordinate without a trailing `.0` for whole numbers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)
