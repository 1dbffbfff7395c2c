from __future__ import annotations
from dataclasses import dataclass
from math import asin, cos, radians, sin, sqrt

"""
Geospatial helpers.

The road network only spans a single campus, so a plain haversine on a spherical
Earth is accurate enough. No antimeridian or polar special-casing is done: this is
not a general-purpose geodesy routine.
"""

EARTH_RADIUS_M = 6_371_000
COORDINATE_PRECISION = 6


@dataclass(frozen=True)
class GeoPoint:
    """A longitude/latitude pair in decimal degrees (WGS84)."""

    lon: float
    lat: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lon, self.lat)


def haversine_m(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * asin(min(1.0, sqrt(h)))


def vertex_key(lon: float, lat: float, *, precision: int = COORDINATE_PRECISION) -> str:
    """Return the graph identity for a coordinate.

    Two coordinates that format to the same fixed-precision decimal string share one
    vertex. Points that sit just either side of a rounding boundary do not merge.
    """
    return f"{lon:.{precision}f},{lat:.{precision}f}"
