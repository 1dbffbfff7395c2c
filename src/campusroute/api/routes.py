"""
API routes.

Endpoints:
- GET  `/api/network`: status of the road graph in use.
- POST `/api/network/reload`: rebuild the graph from the configured GeoJSON and swap it in.
- POST `/api/route`: shortest route between two picked coordinates.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, HTTPException

from campusroute.config.settings import get_settings
from campusroute.domain.models import NetworkStatus, RouteQuery, RouteResponse
from campusroute.network.routing import RouteCancelledError
from campusroute.network.store import NetworkStore

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def _store() -> NetworkStore:
    store = NetworkStore(get_settings())
    try:
        store.load()
    except (OSError, ValueError) as e:
        # Keep serving; routes report `network_not_ready` until a reload succeeds.
        logger.warning("Road network not loaded: %s", e)
    return store


@router.get("/api/network", response_model=NetworkStatus)
def get_network() -> NetworkStatus:
    """Return vertex/edge counts and load metadata for the current graph."""
    return _store().status()


@router.post("/api/network/reload", response_model=NetworkStatus)
def post_network_reload() -> NetworkStatus:
    store = _store()
    try:
        store.load()
    except (OSError, ValueError) as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "NETWORK_LOAD_ERROR", "message": str(e)},
        ) from e
    return store.status()


@router.post("/api/route", response_model=RouteResponse)
def post_route(query: RouteQuery) -> RouteResponse:
    """Snap both picks onto the road graph and return the shortest route between them."""
    store = _store()
    if not store.snapshot().ready:
        return RouteResponse(found=False, reason="network_not_ready")
    try:
        route = store.route(query.start.to_point(), query.end.to_point())
    except RouteCancelledError as e:
        raise HTTPException(
            status_code=504,
            detail={"code": "ROUTE_TIMEOUT", "message": str(e)},
        ) from e
    if route is None:
        return RouteResponse(found=False, reason="no_route")
    return RouteResponse(found=True, route=route)
