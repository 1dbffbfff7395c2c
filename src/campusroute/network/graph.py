"""
Road graph construction.

Turns road polylines into an undirected weighted graph:
- vertices are distinct geometry vertices, keyed by their rounded coordinate
  (`campusroute.core.geo.vertex_key`), so separate lines sharing an endpoint connect;
- edges are consecutive-coordinate segments weighted by haversine distance in meters.

The graph is built once and treated as read-only afterwards. A reload builds a new
graph from scratch (see `campusroute.network.store`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

from campusroute.core.geo import COORDINATE_PRECISION, GeoPoint, haversine_m, vertex_key
from campusroute.domain.models import LineFeature, Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    """Directed half of an undirected road segment."""

    to: str
    weight_m: float
    road_id: str


@dataclass
class Vertex:
    id: str
    point: GeoPoint
    edges: list[Edge] = field(default_factory=list)

    def has_edge_to(self, other_id: str) -> bool:
        return any(e.to == other_id for e in self.edges)


class RoadGraph:
    """Vertices keyed by identity, in first-seen order."""

    def __init__(self, vertices: dict[str, Vertex], *, feature_count: int = 0):
        self._vertices = vertices
        self.feature_count = feature_count

    @property
    def vertices(self) -> Mapping[str, Vertex]:
        return MappingProxyType(self._vertices)

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self._vertices

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices.values())

    def get(self, vertex_id: str) -> Vertex | None:
        return self._vertices.get(vertex_id)

    def neighbors(self, vertex_id: str) -> list[Edge]:
        v = self._vertices.get(vertex_id)
        return list(v.edges) if v is not None else []

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        """Number of undirected edges (each is stored once per direction)."""
        return sum(len(v.edges) for v in self._vertices.values()) // 2

    def road_ids(self) -> set[str]:
        return {e.road_id for v in self._vertices.values() for e in v.edges}

    def weighted_edges(self) -> set[tuple[str, str, float]]:
        """Undirected `(a, b, weight)` triples with `a < b`; handy for comparing builds."""
        out: set[tuple[str, str, float]] = set()
        for v in self._vertices.values():
            for e in v.edges:
                a, b = sorted((v.id, e.to))
                out.add((a, b, e.weight_m))
        return out


class GraphBuilder:
    """Accumulates line geometry into a `RoadGraph`.

    A builder is single-use: `build()` hands its vertices over to the graph and the
    builder must not be fed afterwards.
    """

    def __init__(self, *, precision: int = COORDINATE_PRECISION):
        self._precision = precision
        self._vertices: dict[str, Vertex] = {}
        self._feature_count = 0
        self._skipped_lines = 0
        self._built = False

    def _ensure_vertex(self, key: str, lon: float, lat: float) -> Vertex:
        v = self._vertices.get(key)
        if v is None:
            v = Vertex(id=key, point=GeoPoint(lon=lon, lat=lat))
            self._vertices[key] = v
        return v

    def _add_edge(self, a: Vertex, b: Vertex, weight_m: float, road_id: str) -> None:
        if not a.has_edge_to(b.id):
            a.edges.append(Edge(to=b.id, weight_m=weight_m, road_id=road_id))
        if not b.has_edge_to(a.id):
            b.edges.append(Edge(to=a.id, weight_m=weight_m, road_id=road_id))

    def add_line(self, coords: Sequence[Position], *, road_id: str = "unknown") -> int:
        """Add one polyline; returns the number of segments that produced an edge."""
        if self._built:
            raise RuntimeError("GraphBuilder.build() was already called")
        if len(coords) < 2:
            self._skipped_lines += 1
            logger.debug("Skipping line with %d coordinate(s) on road %s", len(coords), road_id)
            return 0

        added = 0
        for (lon1, lat1), (lon2, lat2) in zip(coords, coords[1:]):
            k1 = vertex_key(lon1, lat1, precision=self._precision)
            k2 = vertex_key(lon2, lat2, precision=self._precision)
            if k1 == k2:
                # Zero-length after rounding: no vertex, no self-loop.
                continue
            a = self._ensure_vertex(k1, lon1, lat1)
            b = self._ensure_vertex(k2, lon2, lat2)
            weight = haversine_m(GeoPoint(lon=lon1, lat=lat1), GeoPoint(lon=lon2, lat=lat2))
            self._add_edge(a, b, weight, road_id)
            added += 1
        return added

    def add_feature(self, feature: LineFeature) -> int:
        """Add every part of a (multi-)line feature; parts join only at shared vertices."""
        self._feature_count += 1
        return sum(self.add_line(part, road_id=feature.id) for part in feature.parts())

    def build(self) -> RoadGraph:
        self._built = True
        graph = RoadGraph(self._vertices, feature_count=self._feature_count)
        logger.info(
            "Built road graph: features=%d vertices=%d edges=%d skipped_lines=%d",
            self._feature_count,
            graph.vertex_count,
            graph.edge_count,
            self._skipped_lines,
        )
        return graph


def build_graph(features: Iterable[LineFeature], *, precision: int = COORDINATE_PRECISION) -> RoadGraph:
    """Build a road graph from line features. Empty input yields an empty graph."""
    builder = GraphBuilder(precision=precision)
    for feature in features:
        builder.add_feature(feature)
    return builder.build()
