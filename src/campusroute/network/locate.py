"""
Nearest-vertex lookup ("snapping" a picked coordinate onto the road graph).

Two interchangeable locators share one contract, `locate(point) -> Vertex | None`:
- `ScanLocator`: exhaustive haversine scan, O(V) per call. Fine for campus-sized graphs
  because routing snaps at most two points per request.
- `GridLocator`: grid-bucket index for larger networks.

Ties go to whichever vertex is met first. Vertex iteration order follows the order
geometry was loaded in, so ties are not stable across differently-ordered inputs.
"""

from __future__ import annotations

import math
from typing import Protocol

from campusroute.core.geo import GeoPoint, haversine_m
from campusroute.core.spatial_index import SpatialGridIndex
from campusroute.network.graph import RoadGraph, Vertex


class Locator(Protocol):
    def locate(self, point: GeoPoint) -> Vertex | None: ...


def nearest_vertex(graph: RoadGraph, point: GeoPoint) -> Vertex | None:
    """Return the graph vertex closest to `point`, or None for an empty graph."""
    best: Vertex | None = None
    best_d = math.inf
    for v in graph:
        d = haversine_m(point, v.point)
        if d < best_d:
            best_d = d
            best = v
    return best


class ScanLocator:
    def __init__(self, graph: RoadGraph):
        self._graph = graph

    def locate(self, point: GeoPoint) -> Vertex | None:
        return nearest_vertex(self._graph, point)


class GridLocator:
    def __init__(self, graph: RoadGraph, *, cell_size_m: float = 100.0):
        self._index: SpatialGridIndex[Vertex] = SpatialGridIndex(
            list(graph),
            get_lonlat=lambda v: v.point.as_tuple(),
            cell_size_m=cell_size_m,
        )

    def locate(self, point: GeoPoint) -> Vertex | None:
        hit = self._index.nearest(lon=point.lon, lat=point.lat)
        return hit[0] if hit is not None else None


def make_locator(graph: RoadGraph, *, kind: str = "scan", cell_size_m: float = 100.0) -> Locator:
    if kind == "scan":
        return ScanLocator(graph)
    if kind == "grid":
        return GridLocator(graph, cell_size_m=cell_size_m)
    raise ValueError(f"Unknown locator kind: {kind!r}")
