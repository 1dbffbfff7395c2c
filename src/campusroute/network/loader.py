"""
Road geometry loader.

Reads a GeoJSON FeatureCollection (default: `data/roads/campus_roads.geojson`) and
validates each line feature into a typed `LineFeature`. Only `LineString` and
`MultiLineString` geometries are kept; anything else (points, polygons, null
geometry) is ignored. A feature that fails validation is logged and skipped so one
bad road does not abort the whole load.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from campusroute.core.env import resolve_project_path
from campusroute.domain.models import LineFeature

logger = logging.getLogger(__name__)

LINE_TYPES = {"LineString", "MultiLineString"}

_FEATURE_ADAPTER = TypeAdapter(LineFeature)


def _feature_id(raw: dict[str, Any]) -> str:
    props = raw.get("properties") or {}
    for candidate in (props.get("id") if isinstance(props, dict) else None, raw.get("id")):
        if candidate is not None and str(candidate).strip():
            return str(candidate)
    return "unknown"


def parse_line_features(payload: Any) -> list[LineFeature]:
    """Extract line features from an already-parsed GeoJSON FeatureCollection."""
    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise ValueError("Road data must be a GeoJSON FeatureCollection")
    raw_features = payload.get("features") or []
    if not isinstance(raw_features, list):
        raise ValueError("FeatureCollection.features must be a list")

    out: list[LineFeature] = []
    for i, raw in enumerate(raw_features):
        if not isinstance(raw, dict):
            continue
        geometry = raw.get("geometry")
        if not isinstance(geometry, dict) or geometry.get("type") not in LINE_TYPES:
            continue
        props = raw.get("properties")
        try:
            feature = _FEATURE_ADAPTER.validate_python(
                {
                    "id": _feature_id(raw),
                    "geometry": geometry,
                    "properties": props if isinstance(props, dict) else {},
                }
            )
        except ValidationError as e:
            logger.warning("Skipping malformed road feature #%d: %s", i, e.errors()[0].get("msg"))
            continue
        out.append(feature)
    return out


def load_line_features(path: str | Path) -> list[LineFeature]:
    """Load and validate line features from a GeoJSON file."""
    resolved = resolve_project_path(path)
    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid GeoJSON in {resolved}: {e}") from e
    features = parse_line_features(payload)
    logger.info("Loaded %d road features from %s", len(features), resolved)
    return features
