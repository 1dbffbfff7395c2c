"""
Ownership of the live road graph.

`NetworkStore` keeps exactly one graph in use. Reloading builds a complete new graph
(and its locator) off to the side and only then swaps the reference under a lock, so
queries already in flight keep routing against the snapshot they started with. Queries
never take the lock for longer than it takes to read that reference.

`NavigationSession` holds one user's start/end picks and the route between them. The
route is recomputed whenever an endpoint changes and dropped on `clear()`.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from campusroute.config.settings import Settings
from campusroute.core.geo import GeoPoint
from campusroute.domain.models import LineFeature, NetworkStatus, RouteResult
from campusroute.network.graph import RoadGraph, build_graph
from campusroute.network.loader import load_line_features
from campusroute.network.locate import Locator, make_locator
from campusroute.network.routing import deadline_after, plan_route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkSnapshot:
    graph: RoadGraph
    locator: Locator
    source: str | None
    loaded_at: datetime | None

    @property
    def ready(self) -> bool:
        return len(self.graph) > 0


class NetworkStore:
    def __init__(self, settings: Settings):
        self._settings = settings
        self._lock = threading.Lock()
        self._snapshot = self._make_snapshot(RoadGraph({}), source=None, loaded_at=None)

    def _make_snapshot(self, graph: RoadGraph, *, source: str | None, loaded_at: datetime | None) -> NetworkSnapshot:
        routing = self._settings.routing
        locator = make_locator(graph, kind=routing.locator, cell_size_m=routing.grid_cell_size_m)
        return NetworkSnapshot(graph=graph, locator=locator, source=source, loaded_at=loaded_at)

    def snapshot(self) -> NetworkSnapshot:
        with self._lock:
            return self._snapshot

    def load_features(self, features: Iterable[LineFeature], *, source: str | None = None) -> NetworkSnapshot:
        """Build a new graph from features and swap it in."""
        graph = build_graph(features, precision=self._settings.network.coordinate_precision)
        snap = self._make_snapshot(graph, source=source, loaded_at=datetime.now(timezone.utc))
        with self._lock:
            self._snapshot = snap
        logger.info("Road network swapped in: vertices=%d source=%s", graph.vertex_count, source)
        return snap

    def load(self, path: str | Path | None = None) -> NetworkSnapshot:
        """Load roads from GeoJSON (defaults to `network.roads_path`) and swap them in."""
        path = path or self._settings.network.roads_path
        return self.load_features(load_line_features(path), source=str(path))

    def status(self) -> NetworkStatus:
        snap = self.snapshot()
        return NetworkStatus(
            ready=snap.ready,
            vertex_count=snap.graph.vertex_count,
            edge_count=snap.graph.edge_count,
            feature_count=snap.graph.feature_count,
            source=snap.source,
            loaded_at=snap.loaded_at,
        )

    def route(self, start: GeoPoint, end: GeoPoint) -> RouteResult | None:
        """Route between two picks on the current graph. Raises RouteCancelledError on timeout."""
        snap = self.snapshot()
        return plan_route(
            snap.graph,
            start,
            end,
            locator=snap.locator,
            should_cancel=deadline_after(self._settings.routing.timeout_seconds),
        )


class NavigationSession:
    def __init__(self, store: NetworkStore):
        self._store = store
        self.start: GeoPoint | None = None
        self.end: GeoPoint | None = None
        self.route: RouteResult | None = None

    def _refresh(self) -> RouteResult | None:
        self.route = None
        if self.start is not None and self.end is not None:
            self.route = self._store.route(self.start, self.end)
        return self.route

    def set_start(self, point: GeoPoint | None) -> RouteResult | None:
        self.start = point
        return self._refresh()

    def set_end(self, point: GeoPoint | None) -> RouteResult | None:
        self.end = point
        return self._refresh()

    def clear(self) -> None:
        self.start = None
        self.end = None
        self.route = None
