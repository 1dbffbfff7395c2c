"""
Shortest-path routing over the road graph.

`shortest_path` is a label-setting (Dijkstra) search for non-negative weights using a
binary heap with lazy deletion. Among vertices with equal tentative distance the one
with the lowest identity is settled first, so results are deterministic for a given
graph; only the choice between equal-cost alternatives depends on that rule, never the
cost itself.

`plan_route` composes the locator and the solver: snap both picks onto the graph, then
search. Both return None when there is no answer (empty graph, unreachable target);
callers are expected to branch on that rather than catch anything.
"""

from __future__ import annotations

import heapq
import logging
import math
import time
from typing import Callable

from campusroute.core.geo import GeoPoint
from campusroute.domain.models import RouteResult
from campusroute.network.graph import RoadGraph
from campusroute.network.locate import Locator, ScanLocator

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class RouteCancelledError(RuntimeError):
    """Raised when a caller-supplied cancel check fires mid-search."""


def deadline_after(seconds: float | None) -> CancelCheck | None:
    """Build a cancel check that fires once `seconds` have elapsed (None = no limit)."""
    if seconds is None:
        return None
    deadline = time.monotonic() + float(seconds)
    return lambda: time.monotonic() >= deadline


def shortest_path(
    graph: RoadGraph,
    start_id: str,
    end_id: str,
    *,
    should_cancel: CancelCheck | None = None,
) -> RouteResult | None:
    """Minimum-total-weight path between two vertex ids, or None if unreachable."""
    if start_id not in graph or end_id not in graph:
        return None

    dist: dict[str, float] = {start_id: 0.0}
    prev: dict[str, str] = {}
    settled: set[str] = set()
    heap: list[tuple[float, str]] = [(0.0, start_id)]

    while heap:
        if should_cancel is not None and should_cancel():
            raise RouteCancelledError(f"route search cancelled after settling {len(settled)} vertices")

        d, current = heapq.heappop(heap)
        if current in settled or d > dist.get(current, math.inf):
            continue
        if current == end_id:
            break
        settled.add(current)

        for edge in graph.neighbors(current):
            if edge.to in settled:
                continue
            candidate = d + edge.weight_m
            if candidate < dist.get(edge.to, math.inf):
                dist[edge.to] = candidate
                prev[edge.to] = current
                heapq.heappush(heap, (candidate, edge.to))

    if end_id not in prev and start_id != end_id:
        logger.debug("No route %s -> %s (settled=%d)", start_id, end_id, len(settled))
        return None

    node_ids = [end_id]
    while node_ids[-1] != start_id:
        node_ids.append(prev[node_ids[-1]])
    node_ids.reverse()

    path = [graph.vertices[nid].point.as_tuple() for nid in node_ids]
    logger.debug(
        "Route %s -> %s: %d vertices, %.1f m (settled=%d)",
        start_id,
        end_id,
        len(node_ids),
        dist[end_id],
        len(settled),
    )
    return RouteResult(path=path, node_ids=node_ids, distance_m=dist[end_id])


def plan_route(
    graph: RoadGraph,
    start: GeoPoint,
    end: GeoPoint,
    *,
    locator: Locator | None = None,
    should_cancel: CancelCheck | None = None,
) -> RouteResult | None:
    """Snap two arbitrary coordinates onto the graph and route between them."""
    locator = locator or ScanLocator(graph)
    start_v = locator.locate(start)
    end_v = locator.locate(end)
    if start_v is None or end_v is None:
        return None
    return shortest_path(graph, start_v.id, end_v.id, should_cancel=should_cancel)
