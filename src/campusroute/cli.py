"""
CampusRoute CLI entrypoint.

This CLI is intended for quick local checks of a road dataset without the map viewer.
It delegates graph building and routing to `campusroute.network`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from campusroute.config.settings import get_settings
from campusroute.core.geo import GeoPoint
from campusroute.core.logging import configure_logging
from campusroute.network.routing import RouteCancelledError
from campusroute.network.store import NetworkStore


def _parse_lonlat(value: str) -> GeoPoint:
    """Parse a `LON,LAT` argument."""
    parts = value.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Invalid coordinate '{value}', expected LON,LAT")
    try:
        lon, lat = float(parts[0]), float(parts[1])
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid coordinate '{value}', expected LON,LAT") from e
    if not (-180 <= lon <= 180 and -90 <= lat <= 90):
        raise argparse.ArgumentTypeError(f"Coordinate out of range: '{value}'")
    return GeoPoint(lon=lon, lat=lat)


def _load_store(args: argparse.Namespace) -> NetworkStore:
    store = NetworkStore(get_settings())
    store.load(args.roads)
    return store


def _cmd_route(args: argparse.Namespace) -> int:
    """Handle the `route` subcommand."""
    store = _load_store(args)
    if not store.snapshot().ready:
        print("Road network is empty; nothing to route on.")
        return 1

    try:
        route = store.route(args.start, args.end)
    except RouteCancelledError as e:
        print(f"Route search timed out: {e}")
        return 1
    if route is None:
        print("No route found between the selected points.")
        return 1

    if args.json:
        print(json.dumps(route.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Distance: {route.distance_km:.2f} km ({route.distance_m:.1f} m)")
    print(f"Vertices: {len(route.path)}")
    print(f"From: {route.node_ids[0]}")
    print(f"To:   {route.node_ids[-1]}")
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    store = _load_store(args)
    status = store.status()
    print(f"features={status.feature_count} vertices={status.vertex_count} edges={status.edge_count}")
    print(f"  source: {status.source}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CampusRoute CLI."""
    parser = argparse.ArgumentParser(prog="campusroute")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Overrides app.log_level from settings.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    rt = sub.add_parser("route", help="Shortest route between two LON,LAT picks.")
    rt.add_argument("--start", required=True, type=_parse_lonlat, help="LON,LAT (e.g. 116.3451,39.9912)")
    rt.add_argument("--end", required=True, type=_parse_lonlat, help="LON,LAT")
    rt.add_argument("--roads", type=str, default=None, help="GeoJSON roads file (defaults to settings)")
    rt.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rt.set_defaults(func=_cmd_route)

    st = sub.add_parser("stats", help="Build the road graph and print its size.")
    st.add_argument("--roads", type=str, default=None)
    st.set_defaults(func=_cmd_stats)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m campusroute.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    try:
        return int(func(args))
    except (OSError, ValueError) as e:
        print(f"Could not load road network: {e}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
