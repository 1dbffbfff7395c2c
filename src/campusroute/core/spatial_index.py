"""
Lightweight spatial indexing (grid bucket) for lon/lat points.

Used to avoid O(N) scans for nearest-vertex lookups when a road network grows past
campus scale. Candidates are bucketed in an equirectangular projection; the final
comparison always uses haversine distance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from campusroute.core.geo import GeoPoint, haversine_m

T = TypeVar("T")

# Upper bound on the projected/haversine ratio at lat0; shrunk further by cos(lat) away from it.
_PROJECTION_SLACK = 0.95


def _to_xy_m(lon: float, lat: float, *, lat0_deg: float) -> tuple[float, float]:
    lat0 = math.radians(float(lat0_deg))
    x = float(lon) * 111_320.0 * math.cos(lat0)
    y = float(lat) * 110_540.0
    return x, y


@dataclass(frozen=True)
class _Entry(Generic[T]):
    item: T
    point: GeoPoint
    x_m: float
    y_m: float


class SpatialGridIndex(Generic[T]):
    def __init__(
        self,
        items: list[T],
        *,
        get_lonlat: Callable[[T], tuple[float, float]],
        cell_size_m: float = 100.0,
        lat0_deg: float | None = None,
    ):
        if float(cell_size_m) <= 0:
            raise ValueError("cell_size_m must be > 0")
        self._cell_size_m = float(cell_size_m)
        self._cells: dict[tuple[int, int], list[_Entry[T]]] = {}

        points = [(it, get_lonlat(it)) for it in items]
        if lat0_deg is None:
            # Project around the mean latitude of the indexed points.
            lat0_deg = sum(lat for _, (_, lat) in points) / len(points) if points else 0.0
        self._lat0_deg = float(lat0_deg)
        # Smallest east-west scale factor among indexed points (widest latitude).
        self._cos_min = min((math.cos(math.radians(lat)) for _, (_, lat) in points), default=1.0)

        for it, (lon, lat) in points:
            x_m, y_m = _to_xy_m(lon, lat, lat0_deg=self._lat0_deg)
            e = _Entry(item=it, point=GeoPoint(lon=float(lon), lat=float(lat)), x_m=x_m, y_m=y_m)
            self._cells.setdefault(self._cell_key_xy(x_m, y_m), []).append(e)

    def __len__(self) -> int:
        return sum(len(c) for c in self._cells.values())

    def _cell_key_xy(self, x_m: float, y_m: float) -> tuple[int, int]:
        return (int(math.floor(x_m / self._cell_size_m)), int(math.floor(y_m / self._cell_size_m)))

    def _max_ring(self, cx: int, cy: int) -> int:
        return max(max(abs(kx - cx), abs(ky - cy)) for kx, ky in self._cells)

    def _ring(self, cx: int, cy: int, k: int):
        if k == 0:
            yield (cx, cy)
            return
        for dx in range(-k, k + 1):
            yield (cx + dx, cy - k)
            yield (cx + dx, cy + k)
        for dy in range(-k + 1, k):
            yield (cx - k, cy + dy)
            yield (cx + k, cy + dy)

    def _slack(self, lat: float) -> float:
        # Projected x distances use cos(lat0); near the widest latitude (or the query's)
        # a degree of longitude is shorter, so the stop bound must shrink with it.
        cos_lat0 = math.cos(math.radians(self._lat0_deg))
        cos_min = min(self._cos_min, math.cos(math.radians(lat)))
        if cos_lat0 <= 0:
            return 0.0
        return _PROJECTION_SLACK * min(1.0, max(0.0, cos_min) / cos_lat0)

    def nearest(self, *, lon: float, lat: float) -> tuple[T, float] | None:
        """Return `(item, distance_m)` for the closest indexed point, or None if empty.

        Rings of cells are scanned outward from the query cell. Once the best
        haversine distance is smaller than anything an unvisited ring could hold,
        the search stops. When the remaining rings would cost more lookups than there
        are occupied cells (queries far off the network), the occupied cells are
        scanned directly instead.
        """
        if not self._cells:
            return None
        x0, y0 = _to_xy_m(float(lon), float(lat), lat0_deg=self._lat0_deg)
        cx, cy = self._cell_key_xy(x0, y0)
        origin = GeoPoint(lon=float(lon), lat=float(lat))
        reach_m = self._cell_size_m * self._slack(float(lat))

        best: _Entry[T] | None = None
        best_d = math.inf

        def consider(entries: list[_Entry[T]]) -> None:
            nonlocal best, best_d
            for e in entries:
                d = haversine_m(origin, e.point)
                if d < best_d:
                    best_d = d
                    best = e

        visited = 0
        for k in range(self._max_ring(cx, cy) + 1):
            # Points in ring k are at least (k - 1) cells away from the query.
            if best is not None and best_d < (k - 1) * reach_m:
                break
            ring_size = 1 if k == 0 else 8 * k
            if visited + ring_size > len(self._cells):
                for (kx, ky), entries in self._cells.items():
                    if max(abs(kx - cx), abs(ky - cy)) >= k:
                        consider(entries)
                break
            visited += ring_size
            for key in self._ring(cx, cy, k):
                consider(self._cells.get(key, []))
        if best is None:
            return None
        return best.item, best_d
